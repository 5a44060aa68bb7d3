from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional, Protocol, Sequence, Tuple

from ..common.datetime_utils import minute_of_day, minutes_between, now_local
from ..core.constants import (
    DEFAULT_BREAK_MINUTES,
    LATE_CLOCK_IN_REVIEW_MINUTES,
    MAX_BREAK_FACTOR,
    OVERTIME_REVIEW_MINUTES,
)
from ..core.enums import BreakType
from ..shifts.model import Shift


class BreakLike(Protocol):
    start_time: datetime
    end_time: Optional[datetime]
    break_type: BreakType


@dataclass(frozen=True)
class BreakDetail:
    start_time: datetime
    end_time: Optional[datetime]
    duration_minutes: int
    break_type: BreakType


@dataclass(frozen=True)
class WorkHoursResult:
    total_minutes: int
    break_minutes: int
    net_work_minutes: int
    regular_minutes: int
    overtime_minutes: int
    segment1_minutes: int
    segment2_minutes: int
    split_break_minutes: int
    early_clock_in: int
    late_clock_in: int
    early_clock_out: int
    late_clock_out: int
    has_unended_break: bool
    exceeds_max_break_time: bool
    requires_review: bool
    break_details: Tuple[BreakDetail, ...] = ()
    scheduled_minutes: Optional[int] = None
    review_reasons: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TimingAnomalies:
    early_clock_in: int = 0
    late_clock_in: int = 0
    early_clock_out: int = 0
    late_clock_out: int = 0


def _clock_offset(actual: datetime, scheduled: time) -> int:
    """Signed minutes from the scheduled clock time to the actual one.

    Wrapped into [-12h, +12h) so a clock-in just after midnight for a late
    evening shift reads as late, not as nearly a day early.
    """

    delta = minute_of_day(actual) - minute_of_day(scheduled)
    return (delta + 720) % 1440 - 720


def timing_anomalies(clock_in: datetime, clock_out: datetime, shift: Optional[Shift]) -> TimingAnomalies:
    if shift is None:
        return TimingAnomalies()
    start_offset = _clock_offset(clock_in, shift.start_time)
    end_offset = _clock_offset(clock_out, shift.end_time)
    return TimingAnomalies(
        early_clock_in=max(0, -start_offset),
        late_clock_in=max(0, start_offset),
        early_clock_out=max(0, -end_offset),
        late_clock_out=max(0, end_offset),
    )


def compute_work_hours(
    clock_in: datetime,
    clock_out: datetime,
    clock_in_2: Optional[datetime] = None,
    clock_out_2: Optional[datetime] = None,
    breaks: Sequence[BreakLike] = (),
    shift: Optional[Shift] = None,
    *,
    now: Optional[datetime] = None,
) -> WorkHoursResult:
    """Turn one day's clock events into a minute breakdown.

    Pure: the wall clock is read only when a break is still open, and callers
    can pin it with ``now``.
    """

    segment1 = minutes_between(clock_out, clock_in)
    segment2 = 0
    if clock_in_2 and clock_out_2:
        segment2 = minutes_between(clock_out_2, clock_in_2)

    break_minutes = 0
    has_unended_break = False
    details = []
    for brk in breaks:
        if brk.end_time is not None:
            duration = minutes_between(brk.end_time, brk.start_time)
        else:
            has_unended_break = True
            duration = minutes_between(now or now_local(), brk.start_time)
        break_minutes += duration
        details.append(
            BreakDetail(
                start_time=brk.start_time,
                end_time=brk.end_time,
                duration_minutes=duration,
                break_type=brk.break_type,
            )
        )

    # Informational only; the gap is already outside both segments.
    split_break = 0
    if shift and shift.is_split and clock_out and clock_in_2:
        split_break = minutes_between(clock_in_2, clock_out)

    total = segment1 + segment2
    net = total - break_minutes

    scheduled: Optional[int] = None
    regular, overtime = net, 0
    if shift:
        scheduled = shift.scheduled_minutes()
        regular = min(net, scheduled)
        overtime = max(0, net - scheduled)

    anomalies = timing_anomalies(clock_in, clock_out_2 or clock_out, shift)

    expected_break = shift.break_minutes if shift else DEFAULT_BREAK_MINUTES
    exceeds_max_break = break_minutes > expected_break * MAX_BREAK_FACTOR

    reasons = []
    if has_unended_break:
        reasons.append("break not ended")
    if exceeds_max_break:
        reasons.append(f"break time {break_minutes}m over limit")
    if anomalies.late_clock_in > LATE_CLOCK_IN_REVIEW_MINUTES:
        reasons.append(f"late clock-in {anomalies.late_clock_in}m")
    if anomalies.early_clock_out > 0:
        reasons.append(f"early clock-out {anomalies.early_clock_out}m")
    if overtime > OVERTIME_REVIEW_MINUTES:
        reasons.append(f"overtime {overtime}m")

    return WorkHoursResult(
        total_minutes=total,
        break_minutes=break_minutes,
        net_work_minutes=net,
        regular_minutes=regular,
        overtime_minutes=overtime,
        segment1_minutes=segment1,
        segment2_minutes=segment2,
        split_break_minutes=split_break,
        early_clock_in=anomalies.early_clock_in,
        late_clock_in=anomalies.late_clock_in,
        early_clock_out=anomalies.early_clock_out,
        late_clock_out=anomalies.late_clock_out,
        has_unended_break=has_unended_break,
        exceeds_max_break_time=exceeds_max_break,
        requires_review=bool(reasons),
        break_details=tuple(details),
        scheduled_minutes=scheduled,
        review_reasons=tuple(reasons),
    )
