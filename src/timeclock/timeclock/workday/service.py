from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.auth import require_user
from ..common.datetime_utils import diff_ms, now_local, parse_hhmm
from ..common.formatting import format_clock, format_duration, format_signed_duration
from ..common.store_guard import store_call
from ..core.enums import WorkdayStatus
from ..core.exceptions import EarlyClockOutConfirmationRequired, ValidationError
from ..entries.model import TimeEntry, sort_by_start
from ..entries.repository import TimeEntryRepository
from ..settings.model import AppSettings
from ..settings.service import SettingsService
from ..timebank.calculator.base import TimeBankCalculator
from ..timebank.calculator.standard_calculator import StandardTimeBankCalculator
from ..timebank.service import EMPTY_BANK
from .actions.base import ActionOutcome
from .aggregator import daily_hours, progress_percent, weekly_hours
from .factory import BUTTON_LABELS, STATUS_LABELS, ClockActionFactory
from .history import DayHistory, grouped_history, last_event
from .prediction import predicted_end_time
from .reminders import Reminder, upcoming_reminders
from .state_machine import WorkdayState, derive_state

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"start_time", "end_time"}


@dataclass(frozen=True)
class DashboardView:
    """Everything presentation shows for one tick."""

    status: WorkdayStatus
    status_label: str
    button_label: str
    action_enabled: bool
    current_entry: Optional[TimeEntry]
    daily_hours_ms: int
    weekly_hours_ms: int
    elapsed_ms: int
    daily_target_ms: int
    progress: float
    time_bank: str
    predicted_end_time: Optional[datetime]
    last_event_label: str
    last_event_time: Optional[datetime]

    def to_dict(self, *, is_24h: bool = True) -> dict:
        def clock(value: Optional[datetime]) -> Optional[str]:
            return format_clock(value, is_24h) if value else None

        return {
            "status": self.status.value,
            "status_label": self.status_label,
            "button_label": self.button_label,
            "action_enabled": self.action_enabled,
            "current_entry_id": self.current_entry.entry_id if self.current_entry else None,
            "daily_hours": format_duration(self.daily_hours_ms),
            "daily_hours_ms": self.daily_hours_ms,
            "weekly_hours": format_duration(self.weekly_hours_ms),
            "elapsed": format_duration(self.elapsed_ms),
            "daily_target": format_duration(self.daily_target_ms),
            "progress": round(self.progress, 2),
            "time_bank": self.time_bank,
            "predicted_end_time": clock(self.predicted_end_time),
            "last_event": {"label": self.last_event_label, "time": clock(self.last_event_time)},
        }


def format_bank(entries: Sequence[TimeEntry], settings: AppSettings, today: date, calculator: TimeBankCalculator) -> str:
    if not entries and not settings.time_bank_adjustment_ms:
        return EMPTY_BANK
    return format_signed_duration(calculator.balance_ms(entries, settings, today))


def snapshot(
    entries: Sequence[TimeEntry],
    settings: AppSettings,
    now: datetime,
    *,
    calculator: Optional[TimeBankCalculator] = None,
) -> DashboardView:
    """Pure tick function of (entries, settings, now)."""
    calculator = calculator or StandardTimeBankCalculator()
    state = derive_state(entries, now)
    worked_today = daily_hours(entries, now)
    label, at = last_event(state.today_entries)

    elapsed = 0
    if state.current_entry is not None:
        elapsed = diff_ms(now, state.current_entry.start_time)

    return DashboardView(
        status=state.status,
        status_label=STATUS_LABELS[state.status],
        button_label=BUTTON_LABELS[state.status],
        action_enabled=ClockActionFactory.is_enabled(state.status),
        current_entry=state.current_entry,
        daily_hours_ms=worked_today,
        weekly_hours_ms=weekly_hours(entries, now),
        elapsed_ms=elapsed,
        daily_target_ms=settings.daily_target_ms,
        progress=progress_percent(worked_today, settings.daily_target_ms),
        time_bank=format_bank(entries, settings, now.date(), calculator),
        predicted_end_time=predicted_end_time(state, settings),
        last_event_label=label,
        last_event_time=at,
    )


class WorkdaySession:
    """One user's loaded entries plus the actions that mutate them.

    Every action makes a single store call; the local entry list is only
    replaced after that call succeeds. The session lock only refuses
    overlapping actions on this object; ``WorkdayService.writing`` guards
    the user across sessions.
    """

    def __init__(
        self,
        user_id: str,
        entries_repo: TimeEntryRepository,
        settings: AppSettings,
        entries: Sequence[TimeEntry],
        *,
        factory: Optional[ClockActionFactory] = None,
        calculator: Optional[TimeBankCalculator] = None,
    ):
        self._user_id = require_user(user_id)
        self._repo = entries_repo
        self._settings = settings
        self._entries: tuple[TimeEntry, ...] = tuple(sort_by_start(entries))
        self._factory = factory or ClockActionFactory()
        self._calculator = calculator or StandardTimeBankCalculator()
        self._lock = threading.Lock()

    @property
    def entries(self) -> tuple[TimeEntry, ...]:
        return self._entries

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @contextmanager
    def _in_flight(self):
        if not self._lock.acquire(blocking=False):
            raise ValidationError("Another action is still being processed")
        try:
            yield
        finally:
            self._lock.release()

    def state(self, now: datetime) -> WorkdayState:
        return derive_state(self._entries, now)

    def snapshot(self, now: datetime) -> DashboardView:
        return snapshot(self._entries, self._settings, now, calculator=self._calculator)

    def history(self) -> list[DayHistory]:
        return grouped_history(self._entries)

    def reminders(self, now: datetime) -> list[Reminder]:
        return upcoming_reminders(self._entries, self._settings, now)

    def clock(self, now: datetime, *, confirm_early_leave: bool = False) -> ActionOutcome:
        with self._in_flight():
            state = self.state(now)
            action = self._factory.for_status(state.status)

            if state.status == WorkdayStatus.WORKING_AFTER_BREAK and not confirm_early_leave:
                target = self._settings.daily_target_ms
                worked = daily_hours(self._entries, now)
                if target > 0 and worked < target:
                    raise EarlyClockOutConfirmationRequired(target - worked)

            with store_call("save the time entry"):
                outcome = action.execute(user_id=self._user_id, state=state, now=now, entries=self._repo)

            self._apply(outcome.entry, created=outcome.created)
            logger.info("User %s: %s at %s", self._user_id, outcome.label, now.isoformat())
            return outcome

    def update_entry_time(self, entry_id: str, field: str, value: str) -> TimeEntry:
        """Move one event to HH:MM on the same calendar day."""
        if field not in _EDITABLE_FIELDS:
            raise ValidationError("Only start_time or end_time can be edited")
        new_time = parse_hhmm(value)

        with self._in_flight():
            entry = self._find(entry_id)
            original = getattr(entry, field) or entry.start_time
            moved = original.replace(hour=new_time.hour, minute=new_time.minute)

            start = moved if field == "start_time" else entry.start_time
            end = moved if field == "end_time" else entry.end_time
            if end is not None and end < start:
                raise ValidationError("End time cannot be before start time")

            updated = entry.with_times(start_time=start, end_time=end)
            with store_call("update the time entry"):
                self._repo.update(self._user_id, updated)

            self._apply(updated, created=False)
            return updated

    def delete_day(self, day: date) -> int:
        """Delete every entry that starts on ``day``."""
        with self._in_flight():
            ids = [e.entry_id for e in self._entries if e.work_date == day]
            if not ids:
                raise ValidationError("There are no entries on this day")

            with store_call("delete the day's entries"):
                self._repo.delete_many(self._user_id, ids)

            self._entries = tuple(e for e in self._entries if e.work_date != day)
            logger.info("User %s: deleted %d entries of %s", self._user_id, len(ids), day.isoformat())
            return len(ids)

    def _find(self, entry_id: str) -> TimeEntry:
        for e in self._entries:
            if e.entry_id == str(entry_id):
                return e
        raise ValidationError("Time entry not found")

    def _apply(self, entry: TimeEntry, *, created: bool) -> None:
        if created:
            self._entries = tuple(sort_by_start(self._entries + (entry,)))
        else:
            self._entries = tuple(sort_by_start(entry if e.entry_id == entry.entry_id else e for e in self._entries))


class WorkdayService:
    """Use cases of the dashboard: load a session, act, and read the tick view.

    Writes for one user run one at a time in this process: the per-user lock
    is taken before the entries are loaded, so a second request cannot act
    on a stale list. Other processes are held off by the store's
    one-open-entry key.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        settings: SettingsService,
        *,
        factory: Optional[ClockActionFactory] = None,
        calculator: Optional[TimeBankCalculator] = None,
    ):
        self._entries = entries
        self._settings = settings
        self._factory = factory or ClockActionFactory()
        self._calculator = calculator or StandardTimeBankCalculator()
        self._user_locks: dict[str, threading.Lock] = {}
        self._user_locks_guard = threading.Lock()

    def open_session(self, user_id: str) -> WorkdaySession:
        user_id = require_user(user_id)
        settings = self._settings.get_settings(user_id)
        with store_call("load time entries"):
            entries = list(self._entries.list_for_user(user_id))
        return WorkdaySession(
            user_id,
            self._entries,
            settings,
            entries,
            factory=self._factory,
            calculator=self._calculator,
        )

    def _user_lock(self, user_id: str) -> threading.Lock:
        with self._user_locks_guard:
            return self._user_locks.setdefault(user_id, threading.Lock())

    @contextmanager
    def writing(self, user_id: str):
        """Yield a freshly loaded session while holding the user's write lock."""
        user_id = require_user(user_id)
        lock = self._user_lock(user_id)
        if not lock.acquire(blocking=False):
            raise ValidationError("Another action is still being processed")
        try:
            yield self.open_session(user_id)
        finally:
            lock.release()

    def dashboard(self, user_id: str, *, now: datetime | None = None) -> DashboardView:
        return self.open_session(user_id).snapshot(now or now_local())

    def clock(
        self,
        user_id: str,
        *,
        now: datetime | None = None,
        confirm_early_leave: bool = False,
    ) -> tuple[ActionOutcome, DashboardView]:
        now = now or now_local()
        with self.writing(user_id) as session:
            outcome = session.clock(now, confirm_early_leave=confirm_early_leave)
            return outcome, session.snapshot(now)

    def update_entry_time(self, user_id: str, *, entry_id: str, field: str, value: str) -> TimeEntry:
        with self.writing(user_id) as session:
            return session.update_entry_time(entry_id, field, value)

    def delete_day(self, user_id: str, *, day: date) -> int:
        with self.writing(user_id) as session:
            return session.delete_day(day)

    def history(self, user_id: str, *, limit: int | None = None) -> list[DayHistory]:
        days = self.open_session(user_id).history()
        return days[:limit] if limit else days

    def reminders(self, user_id: str, *, now: datetime | None = None) -> list[Reminder]:
        return self.open_session(user_id).reminders(now or now_local())
