from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.store_guard import store_call
from ..common.validators import require_min_length, require_non_empty, require_username
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .repository import UserRepository

logger = logging.getLogger(__name__)

_INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        username = require_non_empty(username, "Username")
        require_non_empty(password, "Password")

        user = self._users.get_by_username(username)
        if not user or not user.is_active:
            raise AuthenticationError(_INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # unknown hash method, e.g. a placeholder value
            ok = False

        if not ok:
            raise AuthenticationError(_INVALID_CREDENTIALS)

        return SessionUser(user_id=user.user_id, full_name=user.full_name, role=user.role)


class UserService:
    """Use case: self-registration of employee accounts."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, full_name: str, username: str, password: str) -> str:
        full_name = require_non_empty(full_name, "Full name")
        username = require_username(username)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        with store_call("create the account"):
            user_id = self._users.create_user(
                full_name=full_name,
                username=username,
                password_hash=generate_password_hash(password),
                role=Role.EMPLOYEE,
            )
        logger.info("Registered user %s (%s)", username, user_id)
        return user_id
