from __future__ import annotations

from typing import Optional

from ..common.auth import require_user
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AppSettings, Workdays
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: str) -> Optional[AppSettings]:
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT weekly_hours, workdays, time_bank_adjustment_ms, is_24h_format,
                       enable_reminders, work_start_time, break_duration_minutes
                FROM user_settings
                WHERE user_id=%s
                """,
                (user_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AppSettings(
                weekly_hours=float(r["weekly_hours"]),
                workdays=Workdays.from_csv(r["workdays"]),
                time_bank_adjustment_ms=int(r["time_bank_adjustment_ms"] or 0),
                is_24h_format=bool(r["is_24h_format"]),
                enable_reminders=bool(r["enable_reminders"]),
                work_start_time=str(r["work_start_time"]),
                break_duration_minutes=int(r["break_duration_minutes"] or 0),
            )

    def save(self, user_id: str, settings: AppSettings) -> None:
        user_id = require_user(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_settings(
                    user_id, weekly_hours, workdays, time_bank_adjustment_ms, is_24h_format,
                    enable_reminders, work_start_time, break_duration_minutes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    weekly_hours=VALUES(weekly_hours),
                    workdays=VALUES(workdays),
                    time_bank_adjustment_ms=VALUES(time_bank_adjustment_ms),
                    is_24h_format=VALUES(is_24h_format),
                    enable_reminders=VALUES(enable_reminders),
                    work_start_time=VALUES(work_start_time),
                    break_duration_minutes=VALUES(break_duration_minutes)
                """,
                (
                    user_id,
                    settings.weekly_hours,
                    settings.workdays.to_csv(),
                    int(settings.time_bank_adjustment_ms),
                    int(settings.is_24h_format),
                    int(settings.enable_reminders),
                    settings.work_start_time,
                    int(settings.break_duration_minutes),
                ),
            )
