from datetime import datetime

from src.timeclock.timeclock.entries.model import TimeEntry
from src.timeclock.timeclock.settings.model import AppSettings, Workdays
from src.timeclock.timeclock.workday.reminders import upcoming_reminders


def _at(hour, minute=0, day=15):
    return datetime(2024, 1, day, hour, minute)


def test_clock_in_reminder_on_a_workday_morning():
    reminders = upcoming_reminders([], AppSettings(work_start_time="09:00"), _at(8))
    assert [(r.kind, r.fire_at) for r in reminders] == [("clock_in", _at(9))]


def test_no_clock_in_reminder_on_days_off():
    # 2024-01-14 is a Sunday
    assert upcoming_reminders([], AppSettings(), _at(8, day=14)) == []
    assert upcoming_reminders([], AppSettings(workdays=Workdays(mon=False)), _at(8)) == []


def test_break_end_reminder_while_on_break():
    entries = [TimeEntry("a", _at(9), _at(12))]
    reminders = upcoming_reminders(entries, AppSettings(break_duration_minutes=45), _at(12, 10))
    assert [(r.kind, r.fire_at) for r in reminders] == [("break_end", _at(12, 45))]


def test_clock_out_reminder_at_predicted_end():
    entries = [TimeEntry("a", _at(9), _at(12)), TimeEntry("b", _at(13))]
    reminders = upcoming_reminders(entries, AppSettings(), _at(15))
    assert [(r.kind, r.fire_at) for r in reminders] == [("clock_out", _at(18))]


def test_reminders_can_be_disabled():
    assert upcoming_reminders([], AppSettings(enable_reminders=False), _at(8)) == []
