from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse an HH:MM shift clock time."""
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError) as e:
        raise ValidationError(f"invalid time of day: {value!r}") from e


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def minutes_between(end: datetime, start: datetime) -> int:
    """Whole minutes from start to end, floored (negative when end < start)."""
    return int((end - start).total_seconds() // 60)


def minute_of_day(value: Union[time, datetime]) -> int:
    return value.hour * 60 + value.minute


def start_of_day(day: Union[date, datetime]) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min)


def end_of_day(day: Union[date, datetime]) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.max)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def format_minutes(minutes: int) -> str:
    """Render minutes for display, e.g. 510 -> '8h 30m', -45 -> '-45m'."""
    sign = "-" if minutes < 0 else ""
    hours, mins = divmod(abs(int(minutes)), 60)
    if hours == 0:
        return f"{sign}{mins}m"
    if mins == 0:
        return f"{sign}{hours}h"
    return f"{sign}{hours}h {mins}m"
