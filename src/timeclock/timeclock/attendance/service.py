from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..audit.model import AuditEntry
from ..audit.repository import AuditLogRepository
from ..common.datetime_utils import now_local
from ..core.enums import OPEN_STATUSES, BreakType, ClockAction, ClockState
from ..core.exceptions import ConflictError
from ..schedules.model import Schedule
from ..schedules.repository import ScheduleRepository
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from .factory import ClockOutStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .state_machine import AvailableAction, ClockStateMachine
from .work_hours import compute_work_hours

logger = logging.getLogger(__name__)

RETRY_MESSAGE = "please retry"


@dataclass(frozen=True)
class ClockResult:
    success: bool
    message: str
    attendance: Optional[AttendanceRecord] = None
    new_state: Optional[ClockState] = None


@dataclass(frozen=True)
class CurrentState:
    state: ClockState
    available_actions: list[AvailableAction]
    attendance: Optional[AttendanceRecord] = None
    schedule: Optional[Schedule] = None
    shift: Optional[Shift] = None


@dataclass(frozen=True)
class AttendanceSummary:
    total_work_minutes: int = 0
    total_break_minutes: int = 0
    total_overtime_minutes: int = 0
    days_worked: int = 0
    average_work_minutes_per_day: int = 0
    status_counts: dict = field(default_factory=dict)


@dataclass(frozen=True)
class _DaySnapshot:
    attendance: Optional[AttendanceRecord]
    schedule: Optional[Schedule]
    shift: Optional[Shift]
    machine: ClockStateMachine


class AttendanceService:
    """Thin orchestrator: load today's facts, ask the state machine, persist, audit.

    Each state-changing call is read-decide-write against one (employee, day)
    record. Races are settled by the repository (unique day key, record
    version) and surface here as a "please retry" failure.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        shifts: ShiftRepository,
        audit: AuditLogRepository,
        *,
        strategy_factory: ClockOutStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._shifts = shifts
        self._audit = audit
        self._factory = strategy_factory or ClockOutStrategyFactory()

    def _load_day(self, user_id: int, today: date) -> _DaySnapshot:
        work_date = today
        attendance = self._attendance.get_for_user_and_date(user_id, today)
        if attendance is None:
            # An overnight shift keeps its record on the day it started.
            previous = self._attendance.get_for_user_and_date(user_id, today - timedelta(days=1))
            if previous is not None and previous.status in OPEN_STATUSES:
                attendance, work_date = previous, previous.work_date

        schedule = self._schedules.get_for_user_and_date(user_id=user_id, work_date=work_date)
        shift = self._shifts.get_by_id(schedule.shift_id) if schedule else None
        return _DaySnapshot(
            attendance=attendance,
            schedule=schedule,
            shift=shift,
            machine=ClockStateMachine.from_attendance(attendance, shift),
        )

    def _audit_action(self, user_id: int, action: ClockAction, attendance_id: int, now: datetime) -> None:
        self._audit.record(
            AuditEntry(
                user_id=user_id,
                action=action.value,
                entity_type="Attendance",
                entity_id=str(attendance_id),
                created_at=now,
            )
        )
        logger.info("user=%s %s attendance=%s", user_id, action.value, attendance_id)

    def _denied(self, user_id: int, action: ClockAction, message: str) -> ClockResult:
        logger.info("user=%s %s denied: %s", user_id, action.value, message)
        return ClockResult(success=False, message=message)

    def _conflict(self, user_id: int, action: ClockAction, err: ConflictError) -> ClockResult:
        logger.warning("user=%s %s lost a concurrent write: %s", user_id, action.value, err)
        return ClockResult(success=False, message=RETRY_MESSAGE)

    def get_current_state(self, user_id: int, store_id: int, *, now: datetime | None = None) -> CurrentState:
        now = now or now_local()
        day = self._load_day(user_id, now.date())
        return CurrentState(
            state=day.machine.state,
            available_actions=day.machine.available_actions(),
            attendance=day.attendance,
            schedule=day.schedule,
            shift=day.shift,
        )

    def clock_in(self, user_id: int, store_id: int, *, now: datetime | None = None) -> ClockResult:
        now = now or now_local()
        today = now.date()
        day = self._load_day(user_id, today)

        if day.machine.state == ClockState.SPLIT_BREAK:
            return self._clock_in_segment_2(user_id, day, now)

        verdict = day.machine.can_transition(ClockAction.CLOCK_IN)
        if not verdict.allowed:
            message = "already clocked in" if day.attendance else verdict.reason
            return self._denied(user_id, ClockAction.CLOCK_IN, message or "cannot clock in")

        try:
            attendance_id = self._attendance.create_clock_in(
                user_id=user_id,
                store_id=store_id,
                work_date=today,
                clock_in=now,
                schedule_id=day.schedule.schedule_id if day.schedule else None,
            )
        except ConflictError as e:
            return self._conflict(user_id, ClockAction.CLOCK_IN, e)

        self._audit_action(user_id, ClockAction.CLOCK_IN, attendance_id, now)
        return ClockResult(
            success=True,
            message="clock-in succeeded",
            attendance=self._attendance.get_by_id(attendance_id),
            new_state=day.machine.next_state(ClockAction.CLOCK_IN),
        )

    def _clock_in_segment_2(self, user_id: int, day: _DaySnapshot, now: datetime) -> ClockResult:
        action = ClockAction.CLOCK_IN_SEGMENT_2
        verdict = day.machine.can_transition(action)
        if not verdict.allowed:
            return self._denied(user_id, action, verdict.reason or "cannot start segment 2")

        try:
            self._attendance.record_clock_in_2(
                attendance_id=day.attendance.attendance_id,
                expected_version=day.attendance.version,
                clock_in_2=now,
            )
        except ConflictError as e:
            return self._conflict(user_id, action, e)

        self._audit_action(user_id, action, day.attendance.attendance_id, now)
        return ClockResult(
            success=True,
            message="segment 2 clock-in succeeded",
            attendance=self._attendance.get_by_id(day.attendance.attendance_id),
            new_state=day.machine.next_state(action),
        )

    def clock_out(self, user_id: int, store_id: int, *, now: datetime | None = None) -> ClockResult:
        now = now or now_local()
        day = self._load_day(user_id, now.date())
        attendance = day.attendance

        if attendance is None:
            return self._denied(user_id, ClockAction.CLOCK_OUT, "not clocked in yet")

        second_segment = attendance.clock_in_2 is not None
        action = ClockAction.CLOCK_OUT_SEGMENT_2 if second_segment else ClockAction.CLOCK_OUT
        verdict = day.machine.can_transition(action)
        if not verdict.allowed:
            return self._denied(user_id, action, verdict.reason or "cannot clock out")

        work_hours = compute_work_hours(
            clock_in=attendance.clock_in,
            clock_out=attendance.clock_out if second_segment else now,
            clock_in_2=attendance.clock_in_2,
            clock_out_2=now if second_segment else None,
            breaks=attendance.breaks,
            shift=day.shift,
            now=now,
        )
        final_segment = second_segment or not (day.shift and day.shift.is_split)
        strategy = self._factory.for_clock_out(work_hours=work_hours, shift=day.shift, final_segment=final_segment)
        decision = strategy.decide_clock_out(work_hours)

        try:
            self._attendance.record_clock_out(
                attendance_id=attendance.attendance_id,
                expected_version=attendance.version,
                clock_out_time=now,
                segment=2 if second_segment else 1,
                status=decision.status,
                total_minutes=work_hours.total_minutes,
                break_minutes=work_hours.break_minutes,
                net_work_minutes=work_hours.net_work_minutes,
                overtime_minutes=work_hours.overtime_minutes,
                note=decision.note,
            )
        except ConflictError as e:
            return self._conflict(user_id, action, e)

        self._audit_action(user_id, action, attendance.attendance_id, now)

        refreshed = self._attendance.get_by_id(attendance.attendance_id)
        if work_hours.requires_review and final_segment:
            message = "clock-out succeeded, pending manager review"
        else:
            message = "clock-out succeeded"
        return ClockResult(
            success=True,
            message=message,
            attendance=refreshed,
            new_state=ClockStateMachine.from_attendance(refreshed, day.shift).state if refreshed else ClockState.CLOCKED_OUT,
        )

    def start_break(
        self,
        user_id: int,
        store_id: int,
        break_type: BreakType = BreakType.REST,
        *,
        now: datetime | None = None,
    ) -> ClockResult:
        now = now or now_local()
        day = self._load_day(user_id, now.date())
        attendance = day.attendance

        if attendance is None:
            return self._denied(user_id, ClockAction.START_BREAK, "not clocked in yet")

        verdict = day.machine.can_transition(ClockAction.START_BREAK)
        if not verdict.allowed:
            return self._denied(user_id, ClockAction.START_BREAK, verdict.reason or "cannot start break")

        try:
            self._attendance.create_break(
                attendance_id=attendance.attendance_id,
                expected_version=attendance.version,
                start_time=now,
                break_type=break_type,
            )
        except ConflictError as e:
            return self._conflict(user_id, ClockAction.START_BREAK, e)

        self._audit_action(user_id, ClockAction.START_BREAK, attendance.attendance_id, now)
        return ClockResult(
            success=True,
            message=f"{break_type.value.lower()} break started",
            attendance=self._attendance.get_by_id(attendance.attendance_id),
            new_state=day.machine.next_state(ClockAction.START_BREAK),
        )

    def end_break(self, user_id: int, store_id: int, *, now: datetime | None = None) -> ClockResult:
        now = now or now_local()
        day = self._load_day(user_id, now.date())
        attendance = day.attendance

        if attendance is None:
            return self._denied(user_id, ClockAction.END_BREAK, "not clocked in yet")

        verdict = day.machine.can_transition(ClockAction.END_BREAK)
        if not verdict.allowed:
            return self._denied(user_id, ClockAction.END_BREAK, verdict.reason or "cannot end break")

        current = attendance.open_break
        if current is None:
            return self._denied(user_id, ClockAction.END_BREAK, "no break in progress")

        closed = current.close(now)
        try:
            self._attendance.close_break(
                break_id=closed.break_id,
                attendance_id=attendance.attendance_id,
                expected_version=attendance.version,
                end_time=closed.end_time,
                duration_minutes=closed.duration_minutes,
            )
        except ConflictError as e:
            return self._conflict(user_id, ClockAction.END_BREAK, e)

        self._audit_action(user_id, ClockAction.END_BREAK, attendance.attendance_id, now)
        return ClockResult(
            success=True,
            message=f"break ended ({closed.duration_minutes} minutes)",
            attendance=self._attendance.get_by_id(attendance.attendance_id),
            new_state=day.machine.next_state(ClockAction.END_BREAK),
        )

    def get_history(self, user_id: int, *, start: date, end: date, store_id: int | None = None) -> Sequence[AttendanceRecord]:
        rows = self._attendance.list_for_period(start_date=start, end_date=end, store_id=store_id, user_ids=[user_id])
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def get_summary(self, user_id: int, *, start: date, end: date) -> AttendanceSummary:
        rows = self._attendance.list_for_period(start_date=start, end_date=end, user_ids=[user_id])

        work = brk = overtime = days = 0
        status_counts: dict[str, int] = {}
        for r in rows:
            status_counts[r.status.value] = status_counts.get(r.status.value, 0) + 1
            if r.net_work_minutes:
                work += r.net_work_minutes
                days += 1
            brk += r.break_minutes or 0
            overtime += r.overtime_minutes or 0

        return AttendanceSummary(
            total_work_minutes=work,
            total_break_minutes=brk,
            total_overtime_minutes=overtime,
            days_worked=days,
            average_work_minutes_per_day=round(work / days) if days else 0,
            status_counts=status_counts,
        )
