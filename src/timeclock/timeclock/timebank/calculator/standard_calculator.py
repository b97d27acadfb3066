from __future__ import annotations

from datetime import date
from typing import Sequence

from ...common.datetime_utils import each_day
from ...entries.model import TimeEntry
from ...settings.model import AppSettings
from ...workday.aggregator import worked_by_day
from ...workday.state_machine import entries_for_day, is_day_finished
from .base import BankBreakdown, TimeBankCalculator


class StandardTimeBankCalculator(TimeBankCalculator):
    """Standard rule: walk every day since the first entry.

    Worked time counts closed entries only. The per-workday target counts
    for configured workdays, except today while today is still in progress.
    """

    def breakdown(self, entries: Sequence[TimeEntry], settings: AppSettings, today: date) -> BankBreakdown:
        adjustment = int(settings.time_bank_adjustment_ms or 0)
        if not entries:
            return BankBreakdown(worked_ms=0, target_ms=0, adjustment_ms=adjustment)

        first_day = min(min(e.start_time for e in entries).date(), today)
        worked = worked_by_day(entries)
        per_day_target = settings.daily_target_ms
        today_finished = is_day_finished(entries_for_day(entries, today))

        worked_ms = 0
        target_ms = 0
        for day in each_day(first_day, today):
            worked_ms += worked.get(day, 0)
            if settings.workdays.is_workday(day) and (day != today or today_finished):
                target_ms += per_day_target

        return BankBreakdown(worked_ms=worked_ms, target_ms=target_ms, adjustment_ms=adjustment)
