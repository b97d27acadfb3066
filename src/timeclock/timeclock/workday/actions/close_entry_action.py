from __future__ import annotations

from datetime import datetime

from ...core.exceptions import ValidationError
from ...entries.repository import TimeEntryRepository
from ..state_machine import WorkdayState
from .base import ActionOutcome, ClockAction


class CloseEntryAction(ClockAction):
    """Leave for the break, or clock out: close the current segment."""

    def __init__(self, label: str):
        self.label = label

    def execute(self, *, user_id: str, state: WorkdayState, now: datetime, entries: TimeEntryRepository) -> ActionOutcome:
        current = state.current_entry
        if current is None:
            raise ValidationError("There is no open entry to close")
        if now < current.start_time:
            raise ValidationError("Clock-out time cannot be before the clock-in time")

        closed = current.closed_at(now)
        entries.update(user_id, closed)
        return ActionOutcome(entry=closed, created=False, label=self.label)
