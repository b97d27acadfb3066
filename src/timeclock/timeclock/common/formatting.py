"""Duration and clock display helpers.

All durations are integer milliseconds. Negative values (clock skew) are
floored to zero here, never when summing.
"""

from __future__ import annotations

from datetime import datetime

from ..core.constants import MS_PER_HOUR, MS_PER_MINUTE
from ..core.exceptions import ValidationError


def _split(milliseconds: int) -> tuple[int, int]:
    ms = max(int(milliseconds), 0)
    return ms // MS_PER_HOUR, (ms % MS_PER_HOUR) // MS_PER_MINUTE


def format_duration(milliseconds: int) -> str:
    """3600000 -> '01h00m'; anything below zero -> '00h00m'."""
    hours, minutes = _split(milliseconds)
    return f"{hours:02d}h{minutes:02d}m"


def format_signed_duration(milliseconds: int) -> str:
    sign = "+" if milliseconds >= 0 else "-"
    return f"{sign}{format_duration(abs(milliseconds))}"


def format_total_duration(milliseconds: int) -> str:
    hours, minutes = _split(milliseconds)
    return f"{hours:02d}h {minutes:02d}m"


def format_hhmm(milliseconds: int) -> str:
    hours, minutes = _split(milliseconds)
    return f"{hours:02d}:{minutes:02d}"


def format_clock(value: datetime, is_24h: bool = True) -> str:
    if is_24h:
        return value.strftime("%H:%M")
    return value.strftime("%I:%M %p")


def parse_signed_hhmm(sign: str, value: str) -> int:
    """('+', '01:30') -> 5400000, ('-', '00:15') -> -900000."""
    if sign not in {"+", "-"}:
        raise ValidationError("Sign must be '+' or '-'")
    parts = (value or "").strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValidationError("Use the HH:MM format")
    hours, minutes = int(parts[0]), int(parts[1])
    if minutes >= 60:
        raise ValidationError("Use the HH:MM format")
    delta = hours * MS_PER_HOUR + minutes * MS_PER_MINUTE
    return delta if sign == "+" else -delta
