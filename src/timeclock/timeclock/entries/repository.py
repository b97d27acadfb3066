from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import TimeEntry


class TimeEntryRepository(Protocol):
    """Entry store keyed by user and entry id.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def list_for_user(self, user_id: str) -> Sequence[TimeEntry]:
        """All entries of the user, ascending by start_time."""

        raise NotImplementedError

    def create(self, user_id: str, *, start_time: datetime) -> TimeEntry:
        raise NotImplementedError

    def update(self, user_id: str, entry: TimeEntry) -> None:
        raise NotImplementedError

    def delete_many(self, user_id: str, entry_ids: Sequence[str]) -> None:
        raise NotImplementedError
