from datetime import datetime

import pytest

from src.timeclock.timeclock.common.formatting import (
    format_clock,
    format_duration,
    format_hhmm,
    format_signed_duration,
    format_total_duration,
    parse_signed_hhmm,
)
from src.timeclock.timeclock.core.exceptions import ValidationError


def test_format_duration_zero_floors_negative_values():
    assert format_duration(-1000) == format_duration(0) == "00h00m"


def test_format_duration_is_monotonic():
    samples = [-5_000, 0, 59_999, 60_000, 3_599_999, 3_600_000, 25_200_000, 90_000_000]
    rendered = [format_duration(ms) for ms in samples]
    assert rendered == sorted(rendered)
    assert format_duration(3_600_000) == "01h00m"
    assert format_duration(90_000_000) == "25h00m"


def test_signed_duration_uses_plus_for_zero_and_minus_for_deficit():
    assert format_signed_duration(0) == "+00h00m"
    assert format_signed_duration(5_400_000) == "+01h30m"
    assert format_signed_duration(-3_600_000) == "-01h00m"


def test_total_and_hhmm_formats():
    assert format_total_duration(36_900_000) == "10h 15m"
    assert format_hhmm(9_900_000) == "02:45"
    assert format_hhmm(-1) == "00:00"


def test_format_clock_respects_12h_preference():
    at = datetime(2024, 1, 15, 13, 5)
    assert format_clock(at, True) == "13:05"
    assert format_clock(at, False) == "01:05 PM"


def test_parse_signed_hhmm():
    assert parse_signed_hhmm("+", "01:30") == 5_400_000
    assert parse_signed_hhmm("-", "00:15") == -900_000


@pytest.mark.parametrize("sign,value", [("*", "01:00"), ("+", "1h"), ("+", "01:75"), ("-", "")])
def test_parse_signed_hhmm_rejects_bad_input(sign, value):
    with pytest.raises(ValidationError):
        parse_signed_hhmm(sign, value)
