from datetime import datetime

import pytest

from src.timeclock.timeclock.core.enums import WorkdayStatus
from src.timeclock.timeclock.entries.model import TimeEntry
from src.timeclock.timeclock.workday.state_machine import derive_state

NOW = datetime(2024, 1, 15, 15, 30)


def _e(entry_id, start, end=None, day=15):
    h1, m1 = start
    end_time = datetime(2024, 1, day, end[0], end[1]) if end else None
    return TimeEntry(entry_id=entry_id, start_time=datetime(2024, 1, day, h1, m1), end_time=end_time)


@pytest.mark.parametrize(
    "entries,expected",
    [
        ([], WorkdayStatus.NOT_STARTED),
        ([_e("a", (9, 0))], WorkdayStatus.WORKING_BEFORE_BREAK),
        ([_e("a", (9, 0), (12, 0))], WorkdayStatus.ON_BREAK),
        ([_e("a", (9, 0), (12, 0)), _e("b", (13, 0))], WorkdayStatus.WORKING_AFTER_BREAK),
        ([_e("a", (9, 0), (12, 0)), _e("b", (13, 0), (15, 0))], WorkdayStatus.FINISHED),
        (
            [_e("a", (9, 0), (10, 0)), _e("b", (10, 30), (12, 0)), _e("c", (13, 0))],
            WorkdayStatus.FINISHED,
        ),
    ],
)
def test_status_table(entries, expected):
    assert derive_state(entries, NOW).status == expected


def test_single_open_entry_is_current():
    entry = _e("a", (9, 0))
    state = derive_state([entry], NOW)
    assert state.status == WorkdayStatus.WORKING_BEFORE_BREAK
    assert state.current_entry == entry


def test_derivation_is_pure_and_order_independent():
    entries = [_e("b", (13, 0)), _e("a", (9, 0), (12, 0))]
    first = derive_state(entries, NOW)
    second = derive_state(list(reversed(entries)), NOW)
    assert first == second
    assert [e.entry_id for e in first.today_entries] == ["a", "b"]


def test_other_days_are_ignored():
    yesterday = _e("y", (9, 0), (17, 0), day=14)
    state = derive_state([yesterday], NOW)
    assert state.status == WorkdayStatus.NOT_STARTED
    assert state.current_entry is None


def test_open_entry_beyond_one_cycle_stays_current():
    entries = [_e("a", (9, 0), (10, 0)), _e("b", (10, 30), (12, 0)), _e("c", (13, 0))]
    state = derive_state(entries, NOW)
    assert state.status == WorkdayStatus.FINISHED
    assert state.current_entry.entry_id == "c"
