from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    EarlyClockOutConfirmationRequired,
    StoreError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

# Most specific first: the early clock-out confirmation is also a ValidationError.
_STATUS_BY_ERROR = (
    (EarlyClockOutConfirmationRequired, 409),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (StoreError, 503),
)


def error_response(exc: DomainError):
    status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(exc, kind)), 400)
    body = {"success": False, "message": str(exc)}
    if isinstance(exc, EarlyClockOutConfirmationRequired):
        body["deficit_ms"] = exc.deficit_ms
        body["requires_confirmation"] = True
    return jsonify(body), status


def json_endpoint(view):
    """Map domain errors to JSON responses; anything else is logged and hidden."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error in %s", view.__name__)
            return jsonify({"success": False, "message": "Unexpected server error"}), 500

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "User not authenticated"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> str:
    return str(session.get("user_id") or "")


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        return Role.EMPLOYEE


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def date_arg(name: str, default: Optional[date] = None) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return default
    return parse_iso_date(value)
