"""Worked-time sums over entry lists.

Sums are raw milliseconds of closed entries; clamping of negative values
(clock skew) is left to formatting.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Iterable

from ..common.datetime_utils import diff_ms, start_of_week
from ..entries.model import TimeEntry
from .state_machine import derive_state

EntryPredicate = Callable[[TimeEntry], bool]


def sum_worked(entries: Iterable[TimeEntry], predicate: EntryPredicate = lambda e: True) -> int:
    return sum(e.duration_ms() for e in entries if not e.is_open and predicate(e))


def same_day(day: date) -> EntryPredicate:
    return lambda e: e.start_time.date() == day


def in_range(start: date, end: date) -> EntryPredicate:
    return lambda e: start <= e.start_time.date() <= end


def live_addend(entries: Iterable[TimeEntry], now: datetime) -> int:
    """Elapsed time of today's open entry, 0 when there is none."""
    current = derive_state(entries, now).current_entry
    if current is None:
        return 0
    return diff_ms(now, current.start_time)


def daily_hours(entries: Iterable[TimeEntry], now: datetime) -> int:
    entries = list(entries)
    return sum_worked(entries, same_day(now.date())) + live_addend(entries, now)


def weekly_hours(entries: Iterable[TimeEntry], now: datetime) -> int:
    """Monday-based week of ``now`` up to today, including the live segment."""
    entries = list(entries)
    monday = start_of_week(now.date())
    return sum_worked(entries, in_range(monday, now.date())) + live_addend(entries, now)


def range_hours(entries: Iterable[TimeEntry], start: date, end: date) -> int:
    return sum_worked(entries, in_range(start, end))


def worked_by_day(entries: Iterable[TimeEntry]) -> dict[date, int]:
    """Closed worked milliseconds per start day (raw, used by the bank walk)."""
    totals: dict[date, int] = defaultdict(int)
    for e in entries:
        if not e.is_open:
            totals[e.work_date] += e.duration_ms()
    return dict(totals)


def daily_totals(entries: Iterable[TimeEntry]) -> dict[str, int]:
    """Positive closed durations per day keyed 'YYYY-MM-DD' (reports calendar)."""
    totals: dict[str, int] = defaultdict(int)
    for e in entries:
        duration = e.duration_ms()
        if not e.is_open and duration > 0:
            totals[e.work_date.strftime("%Y-%m-%d")] += duration
    return dict(totals)


def progress_percent(worked_ms: int, target_ms: int) -> float:
    if target_ms <= 0:
        return 0.0
    return min(100.0, worked_ms / target_ms * 100)
