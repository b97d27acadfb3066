from __future__ import annotations

from datetime import datetime

from ...entries.repository import TimeEntryRepository
from ..state_machine import WorkdayState
from .base import ActionOutcome, ClockAction


class OpenEntryAction(ClockAction):
    """Clock in, or come back from the break: start a new open segment."""

    def __init__(self, label: str):
        self.label = label

    def execute(self, *, user_id: str, state: WorkdayState, now: datetime, entries: TimeEntryRepository) -> ActionOutcome:
        created = entries.create(user_id, start_time=now)
        return ActionOutcome(entry=created, created=True, label=self.label)
