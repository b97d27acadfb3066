from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import diff_ms
from ..core.enums import WorkdayStatus
from ..settings.model import AppSettings
from .state_machine import WorkdayState


def break_duration_ms(state: WorkdayState, settings: AppSettings) -> int:
    """Actual break once it has concluded, otherwise the configured one."""
    entries = state.today_entries
    if (
        state.status == WorkdayStatus.WORKING_AFTER_BREAK
        and len(entries) > 1
        and entries[0].end_time is not None
    ):
        return diff_ms(entries[1].start_time, entries[0].end_time)
    return settings.break_duration_ms


def predicted_end_time(state: WorkdayState, settings: Optional[AppSettings]) -> Optional[datetime]:
    if settings is None or not state.status.is_working:
        return None
    first = state.first_entry
    if first is None:
        return None

    total_ms = settings.daily_target_ms + break_duration_ms(state, settings)
    return first.start_time + timedelta(milliseconds=total_ms)
