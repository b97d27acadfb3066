import pytest

from src.timeclock.timeclock.core.exceptions import StoreError, ValidationError
from src.timeclock.timeclock.settings.model import AppSettings, Workdays


def test_defaults_when_nothing_saved(settings_service, settings_repo):
    settings = settings_service.get_settings("u1")

    assert settings == AppSettings()
    assert settings.work_hours_per_day == 8
    assert settings_repo.saves == 0


def test_save_merges_partial_payload(settings_service, settings_repo):
    saved = settings_service.save_settings(
        "u1",
        {"weekly_hours": "36", "workdays": {"mon": True, "tue": True, "wed": True, "thu": True}, "is_24h_format": False},
    )

    assert saved.weekly_hours == 36
    assert saved.workdays.count() == 4
    assert saved.work_hours_per_day == 9
    assert saved.is_24h_format is False
    assert saved.break_duration_minutes == 60
    assert settings_repo.stored["u1"] == saved


def test_no_workdays_means_no_daily_target():
    settings = AppSettings(workdays=Workdays(mon=False, tue=False, wed=False, thu=False, fri=False))
    assert settings.work_hours_per_day == 0
    assert settings.daily_target_ms == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"weekly_hours": -1},
        {"weekly_hours": "abc"},
        {"weekly_hours": 200},
        {"workdays": ["mon"]},
        {"work_start_time": "25:00"},
        {"break_duration_minutes": -5},
    ],
)
def test_invalid_payloads_are_rejected(settings_service, settings_repo, payload):
    with pytest.raises(ValidationError):
        settings_service.save_settings("u1", payload)
    assert settings_repo.saves == 0


def test_save_failure_is_a_store_error(settings_service, settings_repo):
    def broken(user_id, settings):
        raise ConnectionError("down")

    settings_repo.save = broken
    with pytest.raises(StoreError):
        settings_service.save_settings("u1", {"weekly_hours": 30})
