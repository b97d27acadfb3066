from __future__ import annotations

import uuid
from datetime import datetime
from typing import Sequence

from ..common.auth import require_user
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, placeholders
from .model import TimeEntry
from .repository import TimeEntryRepository


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str) -> Sequence[TimeEntry]:
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_id, start_time, end_time
                FROM time_entries
                WHERE user_id=%s
                ORDER BY start_time ASC
                """,
                (user_id,),
            )
            rows = fetchall(cur)
            return [
                TimeEntry(
                    entry_id=str(r["entry_id"]),
                    start_time=r["start_time"],
                    end_time=r.get("end_time"),
                )
                for r in rows
            ]

    def create(self, user_id: str, *, start_time: datetime) -> TimeEntry:
        user_id = require_user(user_id)
        entry_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(entry_id, user_id, start_time)
                VALUES(%s,%s,%s)
                """,
                (entry_id, user_id, start_time),
            )
        return TimeEntry(entry_id=entry_id, start_time=start_time)

    def update(self, user_id: str, entry: TimeEntry) -> None:
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET start_time=%s, end_time=%s
                WHERE entry_id=%s AND user_id=%s
                """,
                (entry.start_time, entry.end_time, entry.entry_id, user_id),
            )

    def delete_many(self, user_id: str, entry_ids: Sequence[str]) -> None:
        user_id = require_user(user_id)
        ids = [str(i) for i in entry_ids]
        if not ids:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM time_entries WHERE user_id=%s AND entry_id IN ({placeholders(len(ids))})",
                tuple([user_id] + ids),
            )
