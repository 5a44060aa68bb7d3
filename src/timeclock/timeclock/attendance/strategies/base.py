from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus
from ..work_hours import WorkHoursResult


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class ClockOutStrategy(ABC):
    """Strategy Pattern: encapsulate which status a clock-out persists."""

    @abstractmethod
    def decide_clock_out(self, work_hours: WorkHoursResult) -> StatusDecision:
        raise NotImplementedError
