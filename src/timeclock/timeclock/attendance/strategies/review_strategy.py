from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..work_hours import WorkHoursResult
from .base import ClockOutStrategy, StatusDecision


class ReviewStrategy(ClockOutStrategy):
    """Anomalous day: hand the record to a manager for approval."""

    def decide_clock_out(self, work_hours: WorkHoursResult) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.PENDING_REVIEW,
            note="; ".join(work_hours.review_reasons) or None,
        )
