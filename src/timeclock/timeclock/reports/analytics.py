from __future__ import annotations

import math
from collections import Counter, defaultdict
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import diff_ms, each_day, is_weekday, month_bounds, parse_hhmm
from ..core.constants import (
    BANK_FORECAST_DAYS,
    BURNOUT_HIGH_HOURS,
    BURNOUT_MEDIUM_HOURS,
    BURNOUT_WINDOW,
    DEFAULT_TARGET_HOURS_PER_DAY,
    DEFAULT_WORK_START_TIME,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    PREDICTION_WINDOW,
    PUNCTUALITY_TOLERANCE_MINUTES,
    TOP_PATTERNS,
)
from ..core.enums import BurnoutRisk, Trend
from ..entries.model import TimeEntry, sort_by_start
from ..settings.model import AppSettings
from ..workday.aggregator import sum_worked
from ..workday.state_machine import derive_state

# Sunday first, matching the 0..6 day index used in reports.
DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def round_half_up(value: float, digits: int = 0) -> float:
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _hours(milliseconds: float) -> float:
    return milliseconds / MS_PER_HOUR


def _day_index(day: date) -> int:
    return (day.weekday() + 1) % 7


def _top(counter: dict, limit: int = TOP_PATTERNS) -> list:
    """Keys by descending value; ties keep ascending key order."""
    return [k for k, _ in sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]]


def _completed(entries: Iterable[TimeEntry]) -> list[TimeEntry]:
    return [e for e in entries if not e.is_open]


@dataclass(frozen=True)
class Period:
    """Inclusive calendar-day range."""

    start: date
    end: date

    @classmethod
    def month_of(cls, day: date) -> "Period":
        first, last = month_bounds(day)
        return cls(first, last)

    def contains(self, entry: TimeEntry) -> bool:
        return self.start <= entry.work_date <= self.end

    def filter(self, entries: Iterable[TimeEntry]) -> list[TimeEntry]:
        return [e for e in entries if self.contains(e)]

    def weekdays(self) -> list[date]:
        return [d for d in each_day(self.start, self.end) if is_weekday(d)]


@dataclass(frozen=True)
class Productivity:
    hours_worked: float
    hours_target: float
    efficiency: float


@dataclass(frozen=True)
class Punctuality:
    on_time_arrivals: int
    late_arrivals: int
    average_delay: int


@dataclass(frozen=True)
class Patterns:
    peak_hours: list[str]
    preferred_break_times: list[str]
    most_productive_days: list[str]


@dataclass(frozen=True)
class Predictions:
    expected_end_time: Optional[str]
    bank_hours_forecast: float
    burnout_risk: BurnoutRisk


@dataclass(frozen=True)
class AnalyticsReport:
    period: Period
    productivity: Productivity
    punctuality: Punctuality
    patterns: Patterns
    predictions: Predictions

    def to_dict(self) -> dict:
        data = asdict(self)
        data["period"] = {"start": self.period.start.isoformat(), "end": self.period.end.isoformat()}
        data["predictions"]["burnout_risk"] = self.predictions.burnout_risk.value
        return data


@dataclass(frozen=True)
class TimePattern:
    user_id: str
    period: str
    period_start: date
    period_end: date
    average_start_time: str
    average_end_time: str
    punctuality_score: int
    total_hours_worked: float
    overtime_hours: float
    absence_days: int
    punctuality_trend: Trend
    hours_trend: Trend

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "period": self.period,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "average_start_time": self.average_start_time,
            "average_end_time": self.average_end_time,
            "punctuality_score": self.punctuality_score,
            "total_hours_worked": self.total_hours_worked,
            "overtime_hours": self.overtime_hours,
            "absence_days": self.absence_days,
            "trends": {"punctuality": self.punctuality_trend.value, "hours": self.hours_trend.value},
        }


@dataclass(frozen=True)
class WellnessMetric:
    user_id: str
    day: date
    hours_worked: float
    breaks_taken: int
    average_break_duration: int
    consecutive_work_days: int
    burnout_risk: BurnoutRisk

    def to_dict(self) -> dict:
        data = asdict(self)
        data["day"] = self.day.isoformat()
        data["burnout_risk"] = self.burnout_risk.value
        return data


class AnalyticsService:
    """Productivity, punctuality, pattern and wellness figures over entry lists.

    Every method is a pure function of its arguments; loading entries is the
    job of ``ReportService``.
    """

    def productivity(self, entries: Sequence[TimeEntry], target_hours_per_day: float, period: Period) -> Productivity:
        hours_worked = _hours(sum_worked(period.filter(entries)))
        hours_target = len(period.weekdays()) * float(target_hours_per_day)
        efficiency = hours_worked / hours_target * 100 if hours_target > 0 else 0.0
        return Productivity(
            hours_worked=round_half_up(hours_worked, 2),
            hours_target=round_half_up(hours_target, 2),
            efficiency=round_half_up(efficiency, 2),
        )

    def punctuality(self, entries: Sequence[TimeEntry], expected_start: str = DEFAULT_WORK_START_TIME) -> Punctuality:
        """Every entry start is compared with the expected start of its own day."""
        expected = parse_hhmm(expected_start)
        on_time = late = 0
        total_delay_ms = 0

        for e in entries:
            expected_at = e.start_time.replace(hour=expected.hour, minute=expected.minute, second=0, microsecond=0)
            if e.start_time <= expected_at:
                on_time += 1
            else:
                late += 1
                total_delay_ms += diff_ms(e.start_time, expected_at)

        average_delay = int(round_half_up(total_delay_ms / late / MS_PER_MINUTE)) if late else 0
        return Punctuality(on_time_arrivals=on_time, late_arrivals=late, average_delay=average_delay)

    def patterns(self, entries: Sequence[TimeEntry]) -> Patterns:
        hour_counts: Counter = Counter()
        break_counts: Counter = Counter()
        day_hours: dict[int, float] = defaultdict(float)
        by_day: dict[date, list[TimeEntry]] = defaultdict(list)

        for e in entries:
            hour_counts[e.start_time.hour] += 1
            by_day[e.work_date].append(e)
            if not e.is_open:
                day_hours[_day_index(e.work_date)] += _hours(e.duration_ms())

        for day_entries in by_day.values():
            ordered = sort_by_start(day_entries)
            for current, following in zip(ordered, ordered[1:]):
                if current.end_time is not None and following.start_time >= current.end_time:
                    break_counts[current.end_time.hour] += 1

        return Patterns(
            peak_hours=[f"{h:02d}:00" for h in _top(hour_counts)],
            preferred_break_times=[f"{h:02d}:00" for h in _top(break_counts)],
            most_productive_days=[DAY_NAMES[i] for i in _top(day_hours)],
        )

    def predictions(
        self,
        entries: Sequence[TimeEntry],
        current_entry: Optional[TimeEntry] = None,
        *,
        target_hours_per_day: float = DEFAULT_TARGET_HOURS_PER_DAY,
    ) -> Predictions:
        recent = sort_by_start(entries)[-PREDICTION_WINDOW:]
        completed = _completed(recent)
        worked_ms = sum(e.duration_ms() for e in completed)

        avg_duration_ms = worked_ms / len(completed) if completed else DEFAULT_TARGET_HOURS_PER_DAY * MS_PER_HOUR

        expected_end_time = None
        if current_entry is not None and current_entry.is_open:
            expected_end_time = (current_entry.start_time + timedelta(milliseconds=avg_duration_ms)).strftime("%H:%M")

        # two entries (before and after the break) per worked day
        work_days = math.ceil(len(completed) / 2)
        avg_hours_per_day = _hours(worked_ms) / work_days if work_days else float(target_hours_per_day)
        forecast = (avg_hours_per_day - float(target_hours_per_day)) * BANK_FORECAST_DAYS

        return Predictions(
            expected_end_time=expected_end_time,
            bank_hours_forecast=round_half_up(forecast, 2),
            burnout_risk=self.burnout_risk(recent),
        )

    @staticmethod
    def burnout_risk(recent: Sequence[TimeEntry]) -> BurnoutRisk:
        """Average over a fixed window of the latest entries; open or missing ones count as 0h."""
        window = list(recent)[-BURNOUT_WINDOW:]
        avg_hours = _hours(sum_worked(window)) / BURNOUT_WINDOW
        if avg_hours > BURNOUT_HIGH_HOURS:
            return BurnoutRisk.HIGH
        if avg_hours > BURNOUT_MEDIUM_HOURS:
            return BurnoutRisk.MEDIUM
        return BurnoutRisk.LOW

    def full_analytics(
        self,
        entries: Sequence[TimeEntry],
        settings: AppSettings,
        now: datetime,
        period: Optional[Period] = None,
    ) -> AnalyticsReport:
        """Period figures (default: the month of ``now``) plus history-wide predictions."""
        period = period or Period.month_of(now.date())
        period_entries = period.filter(entries)
        current = derive_state(entries, now).current_entry

        return AnalyticsReport(
            period=period,
            productivity=self.productivity(period_entries, settings.work_hours_per_day, period),
            punctuality=self.punctuality(period_entries, settings.work_start_time),
            patterns=self.patterns(period_entries),
            predictions=self.predictions(entries, current, target_hours_per_day=settings.work_hours_per_day),
        )

    def time_pattern(
        self,
        user_id: str,
        entries: Sequence[TimeEntry],
        period_kind: str,
        period: Period,
        *,
        expected_start: str = DEFAULT_WORK_START_TIME,
        target_hours_per_day: float = DEFAULT_TARGET_HOURS_PER_DAY,
        today: Optional[date] = None,
    ) -> TimePattern:
        """Averages, punctuality, overtime and trends over ``period``.

        Absence days only count weekdays up to ``today``, so a running month
        does not report its future days as missed.
        """
        period_entries = period.filter(entries)
        completed = _completed(sort_by_start(period_entries))

        start_minutes = [e.start_time.hour * 60 + e.start_time.minute for e in completed]
        end_minutes = [e.end_time.hour * 60 + e.end_time.minute for e in completed]

        expected = parse_hhmm(expected_start)
        limit = expected.hour * 60 + expected.minute + PUNCTUALITY_TOLERANCE_MINUTES

        def punctual_share(items: list[TimeEntry]) -> Optional[float]:
            if not items:
                return None
            hits = sum(1 for e in items if e.start_time.hour * 60 + e.start_time.minute <= limit)
            return hits / len(items)

        def avg_hours(items: list[TimeEntry]) -> Optional[float]:
            if not items:
                return None
            return _hours(sum(e.duration_ms() for e in items)) / len(items)

        score = punctual_share(completed)
        total_hours = _hours(sum(e.duration_ms() for e in completed))

        worked_days = {e.work_date for e in period_entries}
        weekdays = period.weekdays()
        expected_hours = sum(1 for d in weekdays if d in worked_days) * float(target_hours_per_day)
        elapsed_weekdays = [d for d in weekdays if today is None or d <= today]

        half = len(completed) // 2
        first, second = completed[:half], completed[half:]

        return TimePattern(
            user_id=user_id,
            period=period_kind,
            period_start=period.start,
            period_end=period.end,
            average_start_time=_average_clock(start_minutes),
            average_end_time=_average_clock(end_minutes),
            punctuality_score=int(round_half_up(score * 100)) if score is not None else 0,
            total_hours_worked=round_half_up(total_hours, 2),
            overtime_hours=round_half_up(max(0.0, total_hours - expected_hours), 2),
            absence_days=max(0, len(elapsed_weekdays) - len(worked_days)),
            punctuality_trend=_trend(punctual_share(first), punctual_share(second), 0.1, Trend.IMPROVING, Trend.DECLINING),
            hours_trend=_trend(avg_hours(first), avg_hours(second), 0.5, Trend.INCREASING, Trend.DECREASING),
        )

    def wellness(self, user_id: str, entries: Sequence[TimeEntry], day: date) -> WellnessMetric:
        day_entries = sort_by_start(e for e in entries if e.work_date == day)
        hours_worked = _hours(sum_worked(day_entries))

        gaps = [
            diff_ms(following.start_time, current.end_time)
            for current, following in zip(day_entries, day_entries[1:])
            if current.end_time is not None and following.start_time >= current.end_time
        ]
        average_break = int(round_half_up(sum(gaps) / len(gaps) / MS_PER_MINUTE)) if gaps else 0

        worked_days = {e.work_date for e in entries}
        streak = 0
        cursor = day
        while cursor in worked_days:
            streak += 1
            cursor -= timedelta(days=1)

        if hours_worked > 12 or streak > 10:
            risk = BurnoutRisk.HIGH
        elif hours_worked > 10 or streak > 7:
            risk = BurnoutRisk.MEDIUM
        else:
            risk = BurnoutRisk.LOW

        return WellnessMetric(
            user_id=user_id,
            day=day,
            hours_worked=round_half_up(hours_worked, 2),
            breaks_taken=len(gaps),
            average_break_duration=average_break,
            consecutive_work_days=streak,
            burnout_risk=risk,
        )


def _average_clock(minutes: list[int]) -> str:
    if not minutes:
        return "00:00"
    avg = sum(minutes) / len(minutes)
    return f"{int(avg // 60):02d}:{int(avg % 60):02d}"


def _trend(before: Optional[float], after: Optional[float], threshold: float, up: Trend, down: Trend) -> Trend:
    if before is None or after is None:
        return Trend.STABLE
    if after > before + threshold:
        return up
    if after < before - threshold:
        return down
    return Trend.STABLE
