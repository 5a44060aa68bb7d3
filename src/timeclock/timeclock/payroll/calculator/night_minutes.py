from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Iterator, Optional, Tuple

from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import minutes_between, start_of_day
from ..rates import PayRates


def _segments(record: AttendanceRecord) -> Iterator[Tuple[datetime, datetime]]:
    if record.clock_in and record.clock_out:
        yield record.clock_in, record.clock_out
    if record.clock_in_2 and record.clock_out_2:
        yield record.clock_in_2, record.clock_out_2


def _in_window(hour: int, rates: PayRates) -> bool:
    start, end = rates.night_start.hour, rates.night_end.hour
    if start <= end:
        return start <= hour < end
    return hour >= start or hour < end


class NightMinutesStrategy(ABC):
    """How many worked minutes of a day fall in the night window."""

    @abstractmethod
    def night_minutes(self, record: AttendanceRecord, rates: PayRates) -> int:
        raise NotImplementedError


class IntervalNightMinutes(NightMinutesStrategy):
    """Exact overlap of each worked segment with every night window it touches."""

    def night_minutes(self, record: AttendanceRecord, rates: PayRates) -> int:
        total = 0
        for seg_start, seg_end in _segments(record):
            day = start_of_day(seg_start) - timedelta(days=1)
            while day <= seg_end:
                window_start = datetime.combine(day.date(), rates.night_start)
                window_end = datetime.combine(day.date(), rates.night_end)
                if window_end <= window_start:
                    window_end += timedelta(days=1)
                overlap_start = max(seg_start, window_start)
                overlap_end = min(seg_end, window_end)
                if overlap_end > overlap_start:
                    total += minutes_between(overlap_end, overlap_start)
                day += timedelta(days=1)
        return total


class ClockHourNightMinutes(NightMinutesStrategy):
    """Approximation that only looks at the clock-in and clock-out hours.

    Counts the remainder of the clock-in hour when it starts inside the
    window, plus the minutes past the hour of a clock-out inside the window.
    Kept for parity with payrolls produced before interval counting.
    """

    def night_minutes(self, record: AttendanceRecord, rates: PayRates) -> int:
        start: Optional[datetime] = record.clock_in
        end: Optional[datetime] = record.clock_out
        if not start or not end:
            return 0

        minutes = 0
        if _in_window(start.hour, rates):
            minutes += min(60 - start.minute, minutes_between(end, start))
        if _in_window(end.hour, rates):
            minutes += end.minute
        return max(0, minutes)
