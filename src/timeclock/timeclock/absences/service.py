from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.auth import require_user
from ..common.datetime_utils import now_local
from ..common.store_guard import store_call
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_ABSENCE_LIST_LIMIT
from ..core.enums import AbsenceStatus, AbsenceType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..settings.service import SettingsService
from .model import AbsenceRequest
from .repository import AbsenceRepository

logger = logging.getLogger(__name__)

_DELETABLE = {AbsenceStatus.PENDING, AbsenceStatus.CANCELLED}


def calculate_hours_affected(start_date: date, end_date: date, hours_per_day: float) -> float:
    """Inclusive day count times the per-day hours."""
    days = abs((end_date - start_date).days) + 1
    return round(days * float(hours_per_day), 2)


def parse_absence_type(value) -> AbsenceType:
    if isinstance(value, AbsenceType):
        return value
    raw = require_non_empty(value if isinstance(value, str) else "", "Absence type")
    try:
        return AbsenceType(raw)
    except ValueError:
        raise ValidationError("Unknown absence type")


class AbsenceService:
    """Absence requests: pending -> approved | rejected (approver) or cancelled (requester)."""

    def __init__(
        self,
        absences: AbsenceRepository,
        settings: SettingsService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._absences = absences
        self._settings = settings
        self._clock = clock

    def create(
        self,
        user_id: str,
        *,
        absence_type,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> AbsenceRequest:
        user_id = require_user(user_id)
        kind = parse_absence_type(absence_type)
        reason = require_non_empty(reason, "Reason")
        if end_date < start_date:
            raise ValidationError("End date must be on or after the start date")

        hours_per_day = self._settings.get_settings(user_id).work_hours_per_day
        hours = calculate_hours_affected(start_date, end_date, hours_per_day)

        with store_call("create the absence request"):
            created = self._absences.create(
                user_id,
                absence_type=kind,
                start_date=start_date,
                end_date=end_date,
                reason=reason,
                hours_affected=hours,
                created_at=self._clock(),
            )
        logger.info("User %s requested %s from %s to %s", user_id, kind.value, start_date, end_date)
        return created

    def list_for_user(self, user_id: str, *, limit: int = DEFAULT_ABSENCE_LIST_LIMIT) -> Sequence[AbsenceRequest]:
        user_id = require_user(user_id)
        with store_call("load absence requests"):
            return list(self._absences.list_for_user(user_id, limit=limit))

    def get(self, user_id: str, request_id: str) -> AbsenceRequest:
        user_id = require_user(user_id)
        with store_call("load the absence request"):
            req = self._absences.get(user_id, request_id)
        if not req:
            raise ValidationError("Absence request not found")
        return req

    def list_pending(self, *, current_role: Role, limit: int = DEFAULT_ABSENCE_LIST_LIMIT) -> Sequence[AbsenceRequest]:
        if not current_role.can_approve:
            raise AuthorizationError("You are not allowed to review absence requests")
        with store_call("load pending absence requests"):
            return list(self._absences.list_by_status(AbsenceStatus.PENDING, limit=limit))

    def _pending_for_decision(self, current_role: Role, approver_id: str, user_id: str, request_id: str) -> AbsenceRequest:
        require_user(approver_id)
        if not current_role.can_approve:
            raise AuthorizationError("You are not allowed to review absence requests")
        req = self.get(user_id, request_id)
        if not req.is_pending:
            raise ValidationError("The request has already been processed")
        return req

    def approve(
        self,
        *,
        current_role: Role,
        approver_id: str,
        user_id: str,
        request_id: str,
        comments: str = "",
    ) -> None:
        self._pending_for_decision(current_role, approver_id, user_id, request_id)

        with store_call("approve the absence request"):
            ok = self._absences.decide(
                user_id,
                request_id,
                status=AbsenceStatus.APPROVED,
                approved_by=approver_id,
                decided_at=self._clock(),
                comments=(comments or "").strip() or None,
            )
        if not ok:
            raise ValidationError("The request has already been processed")
        logger.info("Absence request %s of user %s approved by %s", request_id, user_id, approver_id)

    def reject(
        self,
        *,
        current_role: Role,
        approver_id: str,
        user_id: str,
        request_id: str,
        rejection_reason: str,
    ) -> None:
        self._pending_for_decision(current_role, approver_id, user_id, request_id)
        reason = require_non_empty(rejection_reason, "Rejection reason")

        with store_call("reject the absence request"):
            ok = self._absences.decide(
                user_id,
                request_id,
                status=AbsenceStatus.REJECTED,
                approved_by=approver_id,
                decided_at=self._clock(),
                rejection_reason=reason,
            )
        if not ok:
            raise ValidationError("The request has already been processed")
        logger.info("Absence request %s of user %s rejected by %s", request_id, user_id, approver_id)

    def cancel(self, user_id: str, request_id: str) -> None:
        req = self.get(user_id, request_id)
        if not req.is_pending:
            raise ValidationError("Only pending requests can be cancelled")

        with store_call("cancel the absence request"):
            ok = self._absences.cancel(req.user_id, request_id, cancelled_at=self._clock())
        if not ok:
            raise ValidationError("Only pending requests can be cancelled")

    def update(
        self,
        user_id: str,
        request_id: str,
        *,
        absence_type=None,
        reason: Optional[str] = None,
    ) -> AbsenceRequest:
        """Change type and/or reason of a pending request. Dates and hours stay frozen."""
        req = self.get(user_id, request_id)
        if not req.is_pending:
            raise ValidationError("Only pending requests can be edited")

        kind = parse_absence_type(absence_type) if absence_type is not None else req.absence_type
        new_reason = require_non_empty(reason, "Reason") if reason is not None else req.reason
        updated_at = self._clock()

        with store_call("update the absence request"):
            self._absences.update(req.user_id, request_id, absence_type=kind, reason=new_reason, updated_at=updated_at)

        return replace(req, absence_type=kind, reason=new_reason, updated_at=updated_at)

    def delete(self, user_id: str, request_id: str) -> None:
        req = self.get(user_id, request_id)
        if req.status not in _DELETABLE:
            raise ValidationError("Only pending or cancelled requests can be deleted")

        with store_call("delete the absence request"):
            self._absences.delete(req.user_id, request_id)
