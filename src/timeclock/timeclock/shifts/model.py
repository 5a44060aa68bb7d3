from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import minute_of_day
from ..core.constants import DEFAULT_MAX_BREAK_COUNT
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Shift:
    """Domain entity: a shift type as assigned to an employee for one day.

    Times are store-local clock times. A split shift has a fixed unpaid gap
    (split_break_start..split_break_end) between its two segments.
    """

    shift_id: int
    shift_name: str
    start_time: time
    end_time: time
    break_minutes: int = 0
    max_break_count: int = DEFAULT_MAX_BREAK_COUNT
    is_split: bool = False
    split_break_start: Optional[time] = None
    split_break_end: Optional[time] = None

    def __post_init__(self) -> None:
        if self.break_minutes < 0:
            raise ValidationError("break_minutes must not be negative")
        if self.max_break_count < 0:
            raise ValidationError("max_break_count must not be negative")
        if self.is_split:
            if self.split_break_start is None or self.split_break_end is None:
                raise ValidationError(f"split shift {self.shift_name!r} needs both split break bounds")
            # Split breaks never cross midnight.
            if self.split_break_end <= self.split_break_start:
                raise ValidationError(f"split shift {self.shift_name!r} break must end after it starts")

    @property
    def split_break_minutes(self) -> int:
        if not self.is_split:
            return 0
        return minute_of_day(self.split_break_end) - minute_of_day(self.split_break_start)

    def scheduled_minutes(self) -> int:
        """Paid minutes the shift expects.

        Span from start to end (overnight shifts wrap past midnight), minus the
        split window, minus the expected break.
        """

        span = minute_of_day(self.end_time) - minute_of_day(self.start_time)
        if span < 0:
            span += 24 * 60
        return span - self.split_break_minutes - self.break_minutes
