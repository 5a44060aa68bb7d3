from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import time
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_hhmm
from ..core.constants import DEFAULT_HOURLY_RATE, DEFAULT_SCHEDULED_MINUTES
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PayRates:
    """Rate table handed to the payroll calculator.

    Defaults follow the weekday overtime tiers (1.34 for the first two hours
    of a day, 1.67 after), a flat 2.0 for weekend work and a per-hour night
    allowance for 22:00-06:00.
    """

    overtime_tier1_multiplier: Decimal = Decimal("1.34")
    overtime_tier2_multiplier: Decimal = Decimal("1.67")
    overtime_tier1_minutes: int = 120
    holiday_multiplier: Decimal = Decimal("2.0")
    night_allowance_per_hour: Decimal = Decimal("50")
    night_start: time = time(22, 0)
    night_end: time = time(6, 0)
    salary_days_per_month: int = 30
    salary_hours_per_day: int = 8
    default_hourly_rate: Decimal = Decimal(DEFAULT_HOURLY_RATE)
    default_scheduled_minutes: int = DEFAULT_SCHEDULED_MINUTES

    @classmethod
    def from_settings(cls, overrides: Optional[Mapping[str, Any]] = None) -> "PayRates":
        """Build from a settings mapping; unknown keys are rejected."""

        base = cls()
        if not overrides:
            return base

        known = {f.name: f for f in fields(cls)}
        changes: dict[str, Any] = {}
        for key, raw in overrides.items():
            if key not in known:
                raise ValidationError(f"unknown pay rate setting: {key}")
            current = getattr(base, key)
            if isinstance(current, Decimal):
                changes[key] = Decimal(str(raw))
            elif isinstance(current, time):
                changes[key] = raw if isinstance(raw, time) else parse_hhmm(str(raw))
            else:
                changes[key] = int(raw)
        return replace(base, **changes)
