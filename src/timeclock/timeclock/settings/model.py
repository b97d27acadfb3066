from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Optional

from ..core.constants import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_WEEKLY_HOURS,
    DEFAULT_WORK_START_TIME,
    MS_PER_HOUR,
    MS_PER_MINUTE,
)

# date.weekday(): Monday == 0
_WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass(frozen=True)
class Workdays:
    """Which weekdays count toward the weekly target."""

    sun: bool = False
    mon: bool = True
    tue: bool = True
    wed: bool = True
    thu: bool = True
    fri: bool = True
    sat: bool = False

    def is_workday(self, day: date) -> bool:
        return bool(getattr(self, _WEEKDAY_KEYS[day.weekday()]))

    def count(self) -> int:
        return sum(1 for f in fields(self) if getattr(self, f.name))

    def to_dict(self) -> dict:
        return {f.name: bool(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Workdays":
        if not data:
            return cls()
        return cls(**{f.name: bool(data.get(f.name, False)) for f in fields(cls)})

    def to_csv(self) -> str:
        return ",".join(k for k in _WEEKDAY_KEYS if getattr(self, k))

    @classmethod
    def from_csv(cls, value: str) -> "Workdays":
        keys = {k.strip() for k in (value or "").split(",") if k.strip()}
        return cls(**{f.name: f.name in keys for f in fields(cls)})


@dataclass(frozen=True)
class AppSettings:
    """Per-user settings value object, passed explicitly into every computation."""

    weekly_hours: float = DEFAULT_WEEKLY_HOURS
    workdays: Workdays = field(default_factory=Workdays)
    time_bank_adjustment_ms: int = 0
    is_24h_format: bool = True
    enable_reminders: bool = True
    work_start_time: str = DEFAULT_WORK_START_TIME
    break_duration_minutes: int = DEFAULT_BREAK_MINUTES

    @property
    def work_hours_per_day(self) -> float:
        workday_count = self.workdays.count()
        if workday_count == 0:
            return 0.0
        return float(self.weekly_hours) / workday_count

    @property
    def daily_target_ms(self) -> int:
        return int(round(self.work_hours_per_day * MS_PER_HOUR))

    @property
    def break_duration_ms(self) -> int:
        return int(self.break_duration_minutes or 0) * MS_PER_MINUTE

    def with_adjustment(self, adjustment_ms: int) -> "AppSettings":
        return replace(self, time_bank_adjustment_ms=int(adjustment_ms))

    def to_dict(self) -> dict:
        return {
            "weekly_hours": self.weekly_hours,
            "workdays": self.workdays.to_dict(),
            "time_bank_adjustment_ms": self.time_bank_adjustment_ms,
            "is_24h_format": self.is_24h_format,
            "enable_reminders": self.enable_reminders,
            "work_start_time": self.work_start_time,
            "break_duration_minutes": self.break_duration_minutes,
            "work_hours_per_day": round(self.work_hours_per_day, 2),
        }
