from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator

from ..core.constants import MS_PER_MINUTE
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date (YYYY-MM-DD)")


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError("Invalid time (HH:MM)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def diff_ms(end: datetime, start: datetime) -> int:
    return (end - start) // timedelta(milliseconds=1)


def minutes_to_ms(minutes: float) -> int:
    return int(minutes * MS_PER_MINUTE)


def each_day(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def start_of_week(day: date) -> date:
    """Monday of the week containing day (reporting convention)."""
    return day - timedelta(days=day.weekday())


def month_bounds(day: date) -> tuple[date, date]:
    first = day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def is_weekday(day: date) -> bool:
    return day.weekday() < 5
