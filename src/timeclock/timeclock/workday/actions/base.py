from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from ...entries.model import TimeEntry
from ...entries.repository import TimeEntryRepository
from ..state_machine import WorkdayState


@dataclass(frozen=True)
class ActionOutcome:
    entry: TimeEntry
    created: bool
    label: str


class ClockAction(ABC):
    """Strategy Pattern: the single user-facing action of a workday status.

    Each action issues exactly one create-or-update call to the entry store.
    """

    label: str = ""

    @abstractmethod
    def execute(
        self,
        *,
        user_id: str,
        state: WorkdayState,
        now: datetime,
        entries: TimeEntryRepository,
    ) -> ActionOutcome:
        raise NotImplementedError
