from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AbsenceStatus, AbsenceType
from .model import AbsenceRequest


class AbsenceRepository(Protocol):
    """Absence store keyed by user and request id."""

    def create(
        self,
        user_id: str,
        *,
        absence_type: AbsenceType,
        start_date: date,
        end_date: date,
        reason: str,
        hours_affected: float,
        created_at: datetime,
    ) -> AbsenceRequest:
        raise NotImplementedError

    def get(self, user_id: str, request_id: str) -> Optional[AbsenceRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, limit: int = 200) -> Sequence[AbsenceRequest]:
        """Newest first."""

        raise NotImplementedError

    def list_by_status(self, status: AbsenceStatus, *, limit: int = 200) -> Sequence[AbsenceRequest]:
        raise NotImplementedError

    def decide(
        self,
        user_id: str,
        request_id: str,
        *,
        status: AbsenceStatus,
        approved_by: str,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
        comments: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``; False when it was no longer pending."""

        raise NotImplementedError

    def cancel(self, user_id: str, request_id: str, *, cancelled_at: datetime) -> bool:
        raise NotImplementedError

    def update(
        self,
        user_id: str,
        request_id: str,
        *,
        absence_type: AbsenceType,
        reason: str,
        updated_at: datetime,
    ) -> None:
        raise NotImplementedError

    def delete(self, user_id: str, request_id: str) -> None:
        raise NotImplementedError
