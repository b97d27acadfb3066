from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

import pytest

from src.timeclock.timeclock.absences.model import AbsenceRequest
from src.timeclock.timeclock.container import build_services
from src.timeclock.timeclock.core.enums import AbsenceStatus
from src.timeclock.timeclock.entries.model import TimeEntry, sort_by_start
from src.timeclock.timeclock.settings.service import SettingsService
from src.timeclock.timeclock.users.model import User


class FakeEntryRepo:
    """In-memory entry store; ``fail`` makes every write raise."""

    def __init__(self, entries=()):
        self.entries: dict[str, TimeEntry] = {e.entry_id: e for e in entries}
        self.calls: list[str] = []
        self.fail = False
        self.on_write: Optional[Callable[[], None]] = None
        self._next_id = 1

    def seed(self, *entries: TimeEntry) -> "FakeEntryRepo":
        for e in entries:
            self.entries[e.entry_id] = e
        return self

    def _write(self, op: str) -> None:
        self.calls.append(op)
        if self.on_write:
            hook, self.on_write = self.on_write, None
            hook()
        if self.fail:
            raise ConnectionError("store offline")

    def list_for_user(self, user_id):
        return sort_by_start(self.entries.values())

    def create(self, user_id, *, start_time):
        self._write("create")
        entry = TimeEntry(entry_id=f"new{self._next_id}", start_time=start_time)
        self._next_id += 1
        self.entries[entry.entry_id] = entry
        return entry

    def update(self, user_id, entry):
        self._write("update")
        self.entries[entry.entry_id] = entry

    def delete_many(self, user_id, entry_ids):
        self._write("delete_many")
        for entry_id in entry_ids:
            self.entries.pop(entry_id, None)


class FakeSettingsRepo:
    def __init__(self, settings=None):
        self.stored = {}
        if settings is not None:
            self.stored["u1"] = settings
        self.saves = 0

    def get(self, user_id):
        return self.stored.get(user_id)

    def save(self, user_id, settings):
        self.saves += 1
        self.stored[user_id] = settings


class FakeAbsenceRepo:
    def __init__(self):
        self.items: dict[tuple[str, str], AbsenceRequest] = {}
        self.calls: list[str] = []
        self._next_id = 1

    def create(self, user_id, *, absence_type, start_date, end_date, reason, hours_affected, created_at):
        self.calls.append("create")
        request_id = f"a{self._next_id}"
        self._next_id += 1
        req = AbsenceRequest(
            request_id=request_id,
            user_id=user_id,
            absence_type=absence_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=AbsenceStatus.PENDING,
            hours_affected=hours_affected,
            created_at=created_at,
            updated_at=created_at,
        )
        self.items[(user_id, request_id)] = req
        return req

    def get(self, user_id, request_id):
        return self.items.get((user_id, request_id))

    def list_for_user(self, user_id, *, limit=200):
        own = [r for (uid, _), r in self.items.items() if uid == user_id]
        return sorted(own, key=lambda r: r.created_at, reverse=True)[:limit]

    def list_by_status(self, status, *, limit=200):
        return [r for r in self.items.values() if r.status == status][:limit]

    def decide(self, user_id, request_id, *, status, approved_by, decided_at, rejection_reason=None, comments=None):
        self.calls.append("decide")
        req = self.items.get((user_id, request_id))
        if not req or req.status != AbsenceStatus.PENDING:
            return False
        self.items[(user_id, request_id)] = replace(
            req,
            status=status,
            approved_by=approved_by,
            approved_at=decided_at,
            updated_at=decided_at,
            rejection_reason=rejection_reason,
            comments=comments,
        )
        return True

    def cancel(self, user_id, request_id, *, cancelled_at):
        self.calls.append("cancel")
        req = self.items.get((user_id, request_id))
        if not req or req.status != AbsenceStatus.PENDING:
            return False
        self.items[(user_id, request_id)] = replace(req, status=AbsenceStatus.CANCELLED, updated_at=cancelled_at)
        return True

    def update(self, user_id, request_id, *, absence_type, reason, updated_at):
        self.calls.append("update")
        req = self.items[(user_id, request_id)]
        self.items[(user_id, request_id)] = replace(req, absence_type=absence_type, reason=reason, updated_at=updated_at)

    def delete(self, user_id, request_id):
        self.calls.append("delete")
        self.items.pop((user_id, request_id), None)


class FakeUserRepo:
    def __init__(self):
        self.users: dict[str, User] = {}

    def add(self, user: User) -> User:
        self.users[user.user_id] = user
        return user

    def get_by_id(self, user_id):
        return self.users.get(user_id)

    def get_by_username(self, username):
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, *, full_name, username, password_hash, role):
        user_id = f"u{len(self.users) + 1}"
        self.add(User(user_id=user_id, full_name=full_name, username=username, password_hash=password_hash, role=role))
        return user_id


@pytest.fixture
def fixed_now() -> datetime:
    # Tuesday, after a full work/break/work cycle
    return datetime(2024, 1, 16, 18, 0)


@pytest.fixture
def entry_repo() -> FakeEntryRepo:
    return FakeEntryRepo()


@pytest.fixture
def settings_repo() -> FakeSettingsRepo:
    return FakeSettingsRepo()


@pytest.fixture
def absence_repo() -> FakeAbsenceRepo:
    return FakeAbsenceRepo()


@pytest.fixture
def user_repo() -> FakeUserRepo:
    return FakeUserRepo()


@pytest.fixture
def settings_service(settings_repo) -> SettingsService:
    return SettingsService(settings_repo)


@pytest.fixture
def container(user_repo, entry_repo, settings_repo, absence_repo):
    return build_services(users=user_repo, entries=entry_repo, settings=settings_repo, absences=absence_repo)
