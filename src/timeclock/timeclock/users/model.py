from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object; database access lives in the repository.
    """

    user_id: str
    full_name: str
    username: str
    password_hash: str
    role: Role = Role.EMPLOYEE
    is_active: bool = True
