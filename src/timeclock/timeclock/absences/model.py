from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceStatus, AbsenceType


@dataclass(frozen=True)
class AbsenceRequest:
    """Request to be away for whole calendar days.

    ``hours_affected`` is computed once at creation and never recomputed.
    """

    request_id: str
    user_id: str
    absence_type: AbsenceType
    start_date: date
    end_date: date
    reason: str
    status: AbsenceStatus
    hours_affected: float
    created_at: datetime
    updated_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    comments: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == AbsenceStatus.PENDING

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def to_dict(self) -> dict:
        def iso(value):
            return value.isoformat() if value else None

        return {
            "id": self.request_id,
            "user_id": self.user_id,
            "type": self.absence_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "reason": self.reason,
            "status": self.status.value,
            "hours_affected": self.hours_affected,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "approved_by": self.approved_by,
            "approved_at": iso(self.approved_at),
            "rejection_reason": self.rejection_reason,
            "comments": self.comments,
        }
