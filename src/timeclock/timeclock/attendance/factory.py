from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..shifts.model import Shift
from .strategies.base import ClockOutStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.review_strategy import ReviewStrategy
from .strategies.split_segment_strategy import SplitSegmentStrategy
from .work_hours import WorkHoursResult


@dataclass
class ClockOutStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_out(
        self,
        *,
        work_hours: WorkHoursResult,
        shift: Optional[Shift],
        final_segment: bool,
    ) -> ClockOutStrategy:
        if shift and shift.is_split and not final_segment:
            return SplitSegmentStrategy()
        if work_hours.requires_review:
            return ReviewStrategy()
        return NormalStrategy()
