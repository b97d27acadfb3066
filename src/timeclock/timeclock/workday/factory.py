from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import WorkdayStatus
from ..core.exceptions import ValidationError
from .actions.base import ClockAction
from .actions.close_entry_action import CloseEntryAction
from .actions.open_entry_action import OpenEntryAction
from .history import BREAK_END, BREAK_START, CLOCK_IN, CLOCK_OUT

BUTTON_LABELS = {
    WorkdayStatus.NOT_STARTED: "Clock in",
    WorkdayStatus.WORKING_BEFORE_BREAK: "Start break",
    WorkdayStatus.ON_BREAK: "End break",
    WorkdayStatus.WORKING_AFTER_BREAK: "Clock out",
    WorkdayStatus.FINISHED: "Workday finished",
}

STATUS_LABELS = {
    WorkdayStatus.NOT_STARTED: "Not started",
    WorkdayStatus.WORKING_BEFORE_BREAK: "Working",
    WorkdayStatus.ON_BREAK: "On break",
    WorkdayStatus.WORKING_AFTER_BREAK: "Working",
    WorkdayStatus.FINISHED: "Finished",
}


@dataclass
class ClockActionFactory:
    """Factory Pattern: choose the clock action allowed in a status."""

    def for_status(self, status: WorkdayStatus) -> ClockAction:
        if status == WorkdayStatus.NOT_STARTED:
            return OpenEntryAction(CLOCK_IN)
        if status == WorkdayStatus.WORKING_BEFORE_BREAK:
            return CloseEntryAction(BREAK_START)
        if status == WorkdayStatus.ON_BREAK:
            return OpenEntryAction(BREAK_END)
        if status == WorkdayStatus.WORKING_AFTER_BREAK:
            return CloseEntryAction(CLOCK_OUT)
        raise ValidationError("The workday is already finished")

    @staticmethod
    def is_enabled(status: WorkdayStatus) -> bool:
        return status != WorkdayStatus.FINISHED
