from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR = "hr"
    ADMIN = "admin"

    @property
    def can_approve(self) -> bool:
        return self in {Role.MANAGER, Role.HR, Role.ADMIN}


class WorkdayStatus(str, Enum):
    """Where the user is in today's clock-in / break / clock-out cycle."""

    NOT_STARTED = "NOT_STARTED"
    WORKING_BEFORE_BREAK = "WORKING_BEFORE_BREAK"
    ON_BREAK = "ON_BREAK"
    WORKING_AFTER_BREAK = "WORKING_AFTER_BREAK"
    FINISHED = "FINISHED"

    @property
    def is_working(self) -> bool:
        return self in {WorkdayStatus.WORKING_BEFORE_BREAK, WorkdayStatus.WORKING_AFTER_BREAK}


class AbsenceStatus(str, Enum):
    """Approval flow of an absence request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class AbsenceType(str, Enum):
    SICK_LEAVE = "sick_leave"
    VACATION = "vacation"
    PERSONAL = "personal"
    MEDICAL_CERTIFICATE = "medical_certificate"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class BurnoutRisk(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Trend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
