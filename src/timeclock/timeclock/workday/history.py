"""Per-day event history for the edit/delete views.

Only one work / break / work cycle is modelled: entries after the second
one of a day are not turned into events.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..entries.model import TimeEntry, sort_by_start

CLOCK_IN = "Clock in"
BREAK_START = "Break start"
BREAK_END = "Break end"
CLOCK_OUT = "Clock out"
NO_RECORDS_TODAY = "No records today"


@dataclass(frozen=True)
class DayEvent:
    event_id: str
    entry_id: str
    field: str
    label: str
    time: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "entry_id": self.entry_id,
            "field": self.field,
            "label": self.label,
            "time": self.time.isoformat(),
        }


@dataclass(frozen=True)
class DayHistory:
    day: date
    events: tuple[DayEvent, ...]
    total_ms: int

    def to_dict(self) -> dict:
        return {
            "day": self.day.strftime("%Y-%m-%d"),
            "events": [e.to_dict() for e in self.events],
            "total_ms": self.total_ms,
        }


def day_events(day_entries: Iterable[TimeEntry]) -> list[DayEvent]:
    events: list[DayEvent] = []
    for index, entry in enumerate(sort_by_start(day_entries)[:2]):
        start_label, end_label = (CLOCK_IN, BREAK_START) if index == 0 else (BREAK_END, CLOCK_OUT)
        events.append(DayEvent(f"{entry.entry_id}-start", entry.entry_id, "start_time", start_label, entry.start_time))
        if entry.end_time is not None:
            events.append(DayEvent(f"{entry.entry_id}-end", entry.entry_id, "end_time", end_label, entry.end_time))
    return sorted(events, key=lambda ev: ev.time)


def grouped_history(entries: Iterable[TimeEntry]) -> list[DayHistory]:
    """Days newest first, events oldest first within a day."""
    by_day: dict[date, list[TimeEntry]] = defaultdict(list)
    for e in entries:
        by_day[e.work_date].append(e)

    out = []
    for day, day_entries in by_day.items():
        kept = sort_by_start(day_entries)[:2]
        out.append(
            DayHistory(
                day=day,
                events=tuple(day_events(kept)),
                total_ms=sum(e.duration_ms() for e in kept if not e.is_open),
            )
        )
    out.sort(key=lambda h: h.day, reverse=True)
    return out


def last_event(today_entries: Iterable[TimeEntry]) -> tuple[str, Optional[datetime]]:
    events = day_events(today_entries)
    if not events:
        return NO_RECORDS_TODAY, None
    latest = events[-1]
    return latest.label, latest.time
