from __future__ import annotations

from typing import Optional

from ..core.exceptions import AuthenticationError


def require_user(user_id: Optional[str]) -> str:
    """Fail fast for user-scoped calls made without an authenticated user."""
    if not user_id or not str(user_id).strip():
        raise AuthenticationError("User not authenticated")
    return str(user_id)
