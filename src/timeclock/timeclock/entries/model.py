from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import diff_ms


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one continuous interval of presence.

    An entry without ``end_time`` is the user's open (ongoing) segment.
    """

    entry_id: str
    start_time: datetime
    end_time: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    @property
    def work_date(self) -> date:
        return self.start_time.date()

    def duration_ms(self) -> int:
        """Closed duration, unclamped; open entries count as 0."""
        if self.end_time is None:
            return 0
        return diff_ms(self.end_time, self.start_time)

    def closed_at(self, end_time: datetime) -> "TimeEntry":
        return replace(self, end_time=end_time)

    def with_times(self, *, start_time: datetime, end_time: Optional[datetime]) -> "TimeEntry":
        return replace(self, start_time=start_time, end_time=end_time)


def sort_by_start(entries) -> list[TimeEntry]:
    return sorted(entries, key=lambda e: e.start_time)
