from __future__ import annotations

from ...core.constants import LATE_CLOCK_IN_REVIEW_MINUTES
from ...core.enums import AttendanceStatus
from ..work_hours import WorkHoursResult
from .base import ClockOutStrategy, StatusDecision


class SplitSegmentStrategy(ClockOutStrategy):
    """End of the first segment of a split shift.

    The day stays CLOCKED_OUT so segment 2 can start; review is decided when
    the second segment closes. Anomalies that segment 2 cannot change are
    written to the note, so they stay visible if segment 2 never happens.
    """

    def decide_clock_out(self, work_hours: WorkHoursResult) -> StatusDecision:
        parts = ["segment 1 closed"]
        if work_hours.late_clock_in > LATE_CLOCK_IN_REVIEW_MINUTES:
            parts.append(f"late clock-in {work_hours.late_clock_in}m")
        if work_hours.exceeds_max_break_time:
            parts.append(f"break time {work_hours.break_minutes}m over limit")
        return StatusDecision(status=AttendanceStatus.CLOCKED_OUT, note="; ".join(parts))
