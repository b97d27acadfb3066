from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.auth import require_user
from ..core.enums import AbsenceStatus, AbsenceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AbsenceRequest
from .repository import AbsenceRepository

_COLUMNS = """
    request_id, user_id, absence_type, start_date, end_date, reason, status,
    hours_affected, created_at, updated_at, approved_by, approved_at,
    rejection_reason, comments
"""


def _to_request(r: dict) -> AbsenceRequest:
    return AbsenceRequest(
        request_id=str(r["request_id"]),
        user_id=str(r["user_id"]),
        absence_type=AbsenceType(r["absence_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=AbsenceStatus(r["status"]),
        hours_affected=float(r["hours_affected"]),
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
        comments=r.get("comments"),
    )


class MySQLAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        user_id = require_user(user_id)
        request_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absence_requests(
                    request_id, user_id, absence_type, start_date, end_date, reason,
                    status, hours_affected, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request_id,
                    user_id,
                    absence_type.value,
                    start_date,
                    end_date,
                    reason,
                    AbsenceStatus.PENDING.value,
                    hours_affected,
                    created_at,
                    created_at,
                ),
            )
        return AbsenceRequest(
            request_id=request_id,
            user_id=user_id,
            absence_type=absence_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=AbsenceStatus.PENDING,
            hours_affected=hours_affected,
            created_at=created_at,
            updated_at=created_at,
        )

    def get(self, user_id: str, request_id: str) -> Optional[AbsenceRequest]:
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM absence_requests WHERE user_id=%s AND request_id=%s",
                (user_id, str(request_id)),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_user(self, user_id: str, *, limit: int = 200) -> Sequence[AbsenceRequest]:
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM absence_requests
                WHERE user_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_by_status(self, status: AbsenceStatus, *, limit: int = 200) -> Sequence[AbsenceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM absence_requests
                WHERE status=%s
                ORDER BY created_at ASC
                LIMIT %s
                """,
                (status.value, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

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
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE absence_requests
                SET status=%s, approved_by=%s, approved_at=%s, updated_at=%s,
                    rejection_reason=%s, comments=%s
                WHERE user_id=%s AND request_id=%s AND status=%s
                """,
                (
                    status.value,
                    approved_by,
                    decided_at,
                    decided_at,
                    rejection_reason,
                    comments,
                    user_id,
                    str(request_id),
                    AbsenceStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def cancel(self, user_id: str, request_id: str, *, cancelled_at: datetime) -> bool:
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE absence_requests
                SET status=%s, updated_at=%s
                WHERE user_id=%s AND request_id=%s AND status=%s
                """,
                (
                    AbsenceStatus.CANCELLED.value,
                    cancelled_at,
                    user_id,
                    str(request_id),
                    AbsenceStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def update(
        self,
        user_id: str,
        request_id: str,
        *,
        absence_type: AbsenceType,
        reason: str,
        updated_at: datetime,
    ) -> None:
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE absence_requests
                SET absence_type=%s, reason=%s, updated_at=%s
                WHERE user_id=%s AND request_id=%s AND status=%s
                """,
                (
                    absence_type.value,
                    reason,
                    updated_at,
                    user_id,
                    str(request_id),
                    AbsenceStatus.PENDING.value,
                ),
            )

    def delete(self, user_id: str, request_id: str) -> None:
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM absence_requests WHERE user_id=%s AND request_id=%s",
                (user_id, str(request_id)),
            )
