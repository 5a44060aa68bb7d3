from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..work_hours import WorkHoursResult
from .base import ClockOutStrategy, StatusDecision


class NormalStrategy(ClockOutStrategy):
    """Clean clock-out."""

    def decide_clock_out(self, work_hours: WorkHoursResult) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.CLOCKED_OUT)
