from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must have at least {min_len} characters")
    return value


def require_username(value: str) -> str:
    username = require_non_empty(value, "Username")
    if not _USERNAME_RE.match(username):
        raise ValidationError("Username may only contain letters, digits, '.', '_' and '-'")
    return username


def require_non_negative(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number
