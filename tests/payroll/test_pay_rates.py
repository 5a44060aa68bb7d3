from datetime import time
from decimal import Decimal

import pytest

from src.timeclock.timeclock.core.exceptions import ValidationError
from src.timeclock.timeclock.payroll.rates import PayRates


def test_defaults():
    rates = PayRates.from_settings(None)
    assert rates == PayRates()
    assert rates.overtime_tier1_multiplier == Decimal("1.34")
    assert rates.overtime_tier2_multiplier == Decimal("1.67")
    assert rates.holiday_multiplier == Decimal("2.0")
    assert rates.default_hourly_rate == Decimal("183")


def test_overrides_are_coerced():
    rates = PayRates.from_settings(
        {"holiday_multiplier": "3", "night_start": "21:00", "overtime_tier1_minutes": "60"}
    )
    assert rates.holiday_multiplier == Decimal("3")
    assert rates.night_start == time(21, 0)
    assert rates.overtime_tier1_minutes == 60
    assert rates.night_end == time(6, 0)


def test_unknown_key_is_rejected():
    with pytest.raises(ValidationError):
        PayRates.from_settings({"weekend_bonus": "1"})


def test_bad_time_is_rejected():
    with pytest.raises(ValidationError):
        PayRates.from_settings({"night_end": "6am"})
