from __future__ import annotations

from datetime import datetime

import pytest

from src.timeclock.timeclock.core.exceptions import AuthenticationError, ValidationError
from src.timeclock.timeclock.entries.model import TimeEntry
from src.timeclock.timeclock.settings.model import AppSettings, Workdays
from src.timeclock.timeclock.timebank.calculator.standard_calculator import StandardTimeBankCalculator
from src.timeclock.timeclock.timebank.service import TimeBankService


def _at(day, hour, minute=0):
    return datetime(2024, 1, day, hour, minute)


# Monday 2024-01-15 meets the 8h target, Tuesday 2024-01-16 works 7h.
MONDAY = [TimeEntry("m1", _at(15, 9), _at(15, 12)), TimeEntry("m2", _at(15, 13), _at(15, 18))]
TUESDAY = [TimeEntry("t1", _at(16, 9), _at(16, 12)), TimeEntry("t2", _at(16, 13), _at(16, 17))]


@pytest.fixture
def service(entry_repo, settings_service):
    return TimeBankService(entry_repo, settings_service)


def test_empty_history_is_exactly_zero(service, fixed_now):
    assert service.formatted_balance([], AppSettings(), fixed_now) == "+00h00m"


def test_two_day_history_one_hour_short(service, fixed_now):
    assert service.formatted_balance(MONDAY + TUESDAY, AppSettings(), fixed_now) == "-01h00m"


def test_bank_is_additive_over_consecutive_days():
    calc = StandardTimeBankCalculator()
    settings = AppSettings()

    monday_alone = calc.balance_ms(MONDAY, settings, _at(15, 20).date())
    tuesday_alone = calc.balance_ms(TUESDAY, settings, _at(16, 20).date())
    combined = calc.balance_ms(MONDAY + TUESDAY, settings, _at(16, 20).date())

    assert monday_alone + tuesday_alone == combined == -3_600_000


def test_day_in_progress_does_not_count_against_target(service):
    entries = MONDAY + [TimeEntry("t1", _at(16, 9))]
    assert service.formatted_balance(entries, AppSettings(), _at(16, 10)) == "+00h00m"


def test_days_without_entries_still_accrue_target():
    calc = StandardTimeBankCalculator()
    # Monday worked, Tuesday missing; Wednesday (today) has no entries yet so it is not finished
    breakdown = calc.breakdown(MONDAY, AppSettings(), _at(17, 20).date())
    assert breakdown.worked_ms == 8 * 3_600_000
    assert breakdown.target_ms == 2 * 8 * 3_600_000


def test_weekend_is_not_a_target_day():
    calc = StandardTimeBankCalculator()
    saturday = [TimeEntry("s", datetime(2024, 1, 20, 9, 0), datetime(2024, 1, 20, 11, 0))]
    assert calc.balance_ms(saturday, AppSettings(), datetime(2024, 1, 21, 12, 0).date()) == 2 * 3_600_000


def test_zero_workdays_bank_pure_surplus(service, fixed_now):
    no_days = AppSettings(workdays=Workdays(mon=False, tue=False, wed=False, thu=False, fri=False))
    assert service.formatted_balance(MONDAY + TUESDAY, no_days, fixed_now) == "+15h00m"


def test_manual_adjustment_is_added_flat(service, fixed_now):
    settings = AppSettings(time_bank_adjustment_ms=90 * 60_000)
    assert service.formatted_balance(MONDAY + TUESDAY, settings, fixed_now) == "+00h30m"
    assert service.formatted_balance([], settings, fixed_now) == "+01h30m"


def test_adjust_adds_signed_delta_to_stored_value(service, settings_repo):
    service.adjust("u1", sign="+", value="01:30")
    saved = service.adjust("u1", sign="-", value="00:15")

    assert saved.time_bank_adjustment_ms == 75 * 60_000
    assert settings_repo.stored["u1"].time_bank_adjustment_ms == 75 * 60_000
    assert settings_repo.saves == 2


def test_adjust_validates_before_saving(service, settings_repo):
    with pytest.raises(ValidationError):
        service.adjust("u1", sign="+", value="1:2:3")
    with pytest.raises(AuthenticationError):
        service.adjust("", sign="+", value="01:00")
    assert settings_repo.saves == 0


def test_summary_for_user(service, entry_repo, fixed_now):
    entry_repo.seed(*(MONDAY + TUESDAY))
    summary = service.summary_for_user("u1", now=fixed_now)

    assert summary["balance"] == "-01h00m"
    assert summary["worked_ms"] == 15 * 3_600_000
    assert summary["target_ms"] == 16 * 3_600_000
