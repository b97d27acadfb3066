"""Reminder trigger times.

The core only computes when a reminder should fire; delivering it (push,
e-mail, timers) belongs to an external scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from ..common.datetime_utils import parse_hhmm
from ..core.enums import WorkdayStatus
from ..entries.model import TimeEntry
from ..settings.model import AppSettings
from .prediction import predicted_end_time
from .state_machine import derive_state


@dataclass(frozen=True)
class Reminder:
    kind: str
    fire_at: datetime
    message: str

    def to_dict(self) -> dict:
        return {"kind": self.kind, "fire_at": self.fire_at.isoformat(), "message": self.message}


def upcoming_reminders(entries: Iterable[TimeEntry], settings: AppSettings, now: datetime) -> list[Reminder]:
    if not settings.enable_reminders:
        return []

    state = derive_state(entries, now)
    reminders: list[Reminder] = []

    if state.status == WorkdayStatus.NOT_STARTED and settings.workdays.is_workday(now.date()):
        start_at = datetime.combine(now.date(), parse_hhmm(settings.work_start_time))
        if now < start_at:
            reminders.append(Reminder("clock_in", start_at, "Time to clock in"))

    if state.status == WorkdayStatus.ON_BREAK and settings.break_duration_minutes:
        break_start = state.today_entries[0].end_time
        break_end = break_start + timedelta(milliseconds=settings.break_duration_ms)
        if now < break_end:
            reminders.append(Reminder("break_end", break_end, "Your break is over"))

    end_at = predicted_end_time(state, settings)
    if end_at is not None and now < end_at:
        reminders.append(Reminder("clock_out", end_at, "Daily target reached, time to clock out"))

    return sorted(reminders, key=lambda r: r.fire_at)
