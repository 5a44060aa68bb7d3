from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple, Union

from ..common.datetime_utils import minutes_between
from ..core.enums import AttendanceStatus, BreakType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class OpenBreak:
    """A break in progress: it has no end time yet."""

    break_id: int
    attendance_id: int
    start_time: datetime
    break_type: BreakType = BreakType.REST

    end_time = None
    duration_minutes = None
    is_open = True

    def close(self, end_time: datetime) -> "ClosedBreak":
        return ClosedBreak(
            break_id=self.break_id,
            attendance_id=self.attendance_id,
            start_time=self.start_time,
            break_type=self.break_type,
            end_time=end_time,
            duration_minutes=minutes_between(end_time, self.start_time),
        )


@dataclass(frozen=True)
class ClosedBreak:
    break_id: int
    attendance_id: int
    start_time: datetime
    break_type: BreakType
    end_time: datetime
    duration_minutes: int

    is_open = False


BreakRecord = Union[OpenBreak, ClosedBreak]


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day.

    Only facts are stored here (timestamps, breaks, computed minutes); the
    clock state is always re-derived from them.
    """

    attendance_id: int
    user_id: int
    store_id: int
    work_date: date
    status: AttendanceStatus
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    clock_in_2: Optional[datetime] = None
    clock_out_2: Optional[datetime] = None
    schedule_id: Optional[int] = None
    total_minutes: Optional[int] = None
    break_minutes: Optional[int] = None
    net_work_minutes: Optional[int] = None
    overtime_minutes: Optional[int] = None
    breaks: Tuple[BreakRecord, ...] = field(default_factory=tuple)
    note: Optional[str] = None
    version: int = 1

    def __post_init__(self) -> None:
        open_count = sum(1 for b in self.breaks if b.is_open)
        if open_count > 1:
            raise ValidationError(f"attendance {self.attendance_id} has {open_count} open breaks")
        if (
            self.total_minutes is not None
            and self.break_minutes is not None
            and self.net_work_minutes is not None
            and self.net_work_minutes != self.total_minutes - self.break_minutes
        ):
            raise ValidationError(f"attendance {self.attendance_id} net minutes do not match total - break")

    @property
    def open_break(self) -> Optional[OpenBreak]:
        return next((b for b in self.breaks if b.is_open), None)

    @property
    def has_open_break(self) -> bool:
        return self.open_break is not None
