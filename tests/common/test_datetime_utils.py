from datetime import date, datetime, time

import pytest

from src.timeclock.timeclock.common.datetime_utils import (
    days_in_month,
    end_of_day,
    format_minutes,
    is_weekend,
    minute_of_day,
    minutes_between,
    parse_hhmm,
    start_of_day,
)
from src.timeclock.timeclock.core.exceptions import ValidationError


def test_minutes_between_floors_partial_minutes():
    start = datetime(2026, 3, 2, 9, 0, 0)
    assert minutes_between(datetime(2026, 3, 2, 9, 30, 59), start) == 30
    assert minutes_between(datetime(2026, 3, 2, 8, 59, 30), start) == -1


def test_parse_hhmm():
    assert parse_hhmm("07:45") == time(7, 45)
    assert minute_of_day(parse_hhmm("22:00")) == 22 * 60


@pytest.mark.parametrize("bad", ["25:00", "7", "", None])
def test_parse_hhmm_rejects_garbage(bad):
    with pytest.raises(ValidationError):
        parse_hhmm(bad)


def test_day_bounds():
    assert start_of_day(datetime(2026, 3, 2, 15, 4)) == datetime(2026, 3, 2, 0, 0)
    assert end_of_day(date(2026, 3, 2)).time() == time.max


def test_calendar_helpers():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2026, 4) == 30
    assert is_weekend(date(2026, 3, 7))
    assert not is_weekend(date(2026, 3, 6))


def test_format_minutes():
    assert format_minutes(510) == "8h 30m"
    assert format_minutes(120) == "2h"
    assert format_minutes(-45) == "-45m"
