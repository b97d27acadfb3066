from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.auth import require_user
from ..common.store_guard import store_call
from ..core.exceptions import ValidationError
from ..entries.model import TimeEntry, sort_by_start
from ..entries.repository import TimeEntryRepository
from ..settings.service import SettingsService
from ..workday.aggregator import daily_totals, sum_worked
from .analytics import AnalyticsReport, AnalyticsService, Period, TimePattern, WellnessMetric
from .csv_export import csv_filename, export_entries_csv


@dataclass(frozen=True)
class CsvExport:
    filename: str
    content: str


@dataclass(frozen=True)
class DayDetails:
    day: date
    entries: list[TimeEntry]
    total_ms: int

    def to_dict(self) -> dict:
        return {
            "day": self.day.isoformat(),
            "entries": [
                {
                    "id": e.entry_id,
                    "start_time": e.start_time.isoformat(),
                    "end_time": e.end_time.isoformat() if e.end_time else None,
                    "duration_ms": e.duration_ms(),
                }
                for e in self.entries
            ],
            "total_ms": self.total_ms,
        }


def _period(start: Optional[date], end: Optional[date], now: datetime) -> Period:
    if start is None and end is None:
        return Period.month_of(now.date())
    if start is None or end is None:
        raise ValidationError("Both start and end dates are required")
    if end < start:
        raise ValidationError("End date must be on or after the start date")
    return Period(start, end)


class ReportService:
    def __init__(
        self,
        entries: TimeEntryRepository,
        settings: SettingsService,
        *,
        analytics: Optional[AnalyticsService] = None,
    ):
        self._entries = entries
        self._settings = settings
        self._analytics = analytics or AnalyticsService()

    def _load(self, user_id: str) -> list[TimeEntry]:
        with store_call("load time entries"):
            return list(self._entries.list_for_user(user_id))

    def analytics_for_user(
        self,
        user_id: str,
        *,
        now: datetime,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> AnalyticsReport:
        user_id = require_user(user_id)
        period = _period(start, end, now)
        settings = self._settings.get_settings(user_id)
        return self._analytics.full_analytics(self._load(user_id), settings, now, period)

    def time_pattern_for_user(
        self,
        user_id: str,
        *,
        now: datetime,
        period_kind: str = "monthly",
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> TimePattern:
        user_id = require_user(user_id)
        period = _period(start, end, now)
        settings = self._settings.get_settings(user_id)
        return self._analytics.time_pattern(
            user_id,
            self._load(user_id),
            period_kind,
            period,
            expected_start=settings.work_start_time,
            target_hours_per_day=settings.work_hours_per_day,
            today=now.date(),
        )

    def wellness_for_user(self, user_id: str, *, day: date) -> WellnessMetric:
        user_id = require_user(user_id)
        return self._analytics.wellness(user_id, self._load(user_id), day)

    def daily_totals_for_user(self, user_id: str) -> dict[str, int]:
        """Calendar view: worked milliseconds per 'YYYY-MM-DD'."""
        user_id = require_user(user_id)
        return daily_totals(self._load(user_id))

    def day_details(self, user_id: str, *, day: date) -> DayDetails:
        user_id = require_user(user_id)
        day_entries = sort_by_start(e for e in self._load(user_id) if e.work_date == day)
        return DayDetails(day=day, entries=day_entries, total_ms=sum_worked(day_entries))

    def export_csv(self, user_id: str, *, start: date, end: date) -> CsvExport:
        user_id = require_user(user_id)
        if end < start:
            raise ValidationError("End date must be on or after the start date")
        content = export_entries_csv(self._load(user_id), start, end)
        return CsvExport(filename=csv_filename(start, end), content=content)
