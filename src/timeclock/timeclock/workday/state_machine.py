"""Workday state derivation.

The status is a pure function of today's entries (sorted by start time):
it is recomputed on every tick, never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import WorkdayStatus
from ..entries.model import TimeEntry, sort_by_start


@dataclass(frozen=True)
class WorkdayState:
    status: WorkdayStatus
    current_entry: Optional[TimeEntry]
    today_entries: tuple[TimeEntry, ...]

    @property
    def first_entry(self) -> Optional[TimeEntry]:
        return self.today_entries[0] if self.today_entries else None


def entries_for_day(entries: Iterable[TimeEntry], day: date) -> list[TimeEntry]:
    return sort_by_start(e for e in entries if e.start_time.date() == day)


def status_for(day_entries: list[TimeEntry]) -> WorkdayStatus:
    count = len(day_entries)
    has_open = any(e.is_open for e in day_entries)

    if count == 0:
        return WorkdayStatus.NOT_STARTED
    if count == 1:
        return WorkdayStatus.WORKING_BEFORE_BREAK if has_open else WorkdayStatus.ON_BREAK
    if count == 2 and day_entries[1].is_open:
        return WorkdayStatus.WORKING_AFTER_BREAK
    # >= 2 closed entries, or anything beyond one work/break/work cycle
    return WorkdayStatus.FINISHED


def derive_state(entries: Iterable[TimeEntry], now: datetime) -> WorkdayState:
    today_entries = entries_for_day(entries, now.date())
    current = next((e for e in today_entries if e.is_open), None)
    return WorkdayState(
        status=status_for(today_entries),
        current_entry=current,
        today_entries=tuple(today_entries),
    )


def is_day_finished(day_entries: list[TimeEntry]) -> bool:
    """A day counts against the target once it has entries and none is open."""
    return bool(day_entries) and all(not e.is_open for e in day_entries)
