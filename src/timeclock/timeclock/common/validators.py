from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ..core.exceptions import ValidationError

Number = Union[int, float, Decimal]


def require_non_negative(value: Optional[Number], field_name: str) -> Optional[Number]:
    if value is not None and value < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return value


def require_date_range(start: date, end: date) -> tuple[date, date]:
    if end < start:
        raise ValidationError(f"period end {end:%Y-%m-%d} is before start {start:%Y-%m-%d}")
    return start, end
