from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import pytest

from src.timeclock.timeclock.attendance.model import AttendanceRecord, OpenBreak
from src.timeclock.timeclock.attendance.service import AttendanceService
from src.timeclock.timeclock.core.enums import AttendanceStatus, EmploymentType
from src.timeclock.timeclock.core.exceptions import ConflictError
from src.timeclock.timeclock.employees.model import Employee
from src.timeclock.timeclock.payroll.model import PayrollLineItem
from src.timeclock.timeclock.payroll.service import PayrollService
from src.timeclock.timeclock.schedules.model import Schedule
from src.timeclock.timeclock.shifts.model import Shift


class InMemoryAttendance:
    """Mimics the MySQL repository: unique (user, day), versioned updates."""

    def __init__(self):
        self._by_id: dict[int, AttendanceRecord] = {}
        self._next_id = 1
        self._next_break_id = 1

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._by_id[record.attendance_id] = record
        self._next_id = max(self._next_id, record.attendance_id + 1)
        return record

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self._by_id.values() if r.user_id == user_id and r.work_date == work_date),
            None,
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def _bump(self, attendance_id: int, expected_version: int, **changes) -> None:
        current = self._by_id[attendance_id]
        if current.version != expected_version:
            raise ConflictError(f"attendance {attendance_id} was modified concurrently")
        self._by_id[attendance_id] = replace(current, version=current.version + 1, **changes)

    def create_clock_in(self, *, user_id, store_id, work_date, clock_in, schedule_id=None) -> int:
        if self.get_for_user_and_date(user_id, work_date):
            raise ConflictError("duplicate attendance")
        rid = self._next_id
        self._next_id += 1
        self._by_id[rid] = AttendanceRecord(
            attendance_id=rid,
            user_id=user_id,
            store_id=store_id,
            work_date=work_date,
            status=AttendanceStatus.CLOCKED_IN,
            clock_in=clock_in,
            schedule_id=schedule_id,
        )
        return rid

    def record_clock_in_2(self, *, attendance_id, expected_version, clock_in_2) -> None:
        self._bump(attendance_id, expected_version, clock_in_2=clock_in_2, status=AttendanceStatus.CLOCKED_IN)

    def record_clock_out(
        self,
        *,
        attendance_id,
        expected_version,
        clock_out_time,
        segment,
        status,
        total_minutes,
        break_minutes,
        net_work_minutes,
        overtime_minutes,
        note=None,
    ) -> None:
        column = "clock_out_2" if segment == 2 else "clock_out"
        self._bump(
            attendance_id,
            expected_version,
            status=status,
            total_minutes=total_minutes,
            break_minutes=break_minutes,
            net_work_minutes=net_work_minutes,
            overtime_minutes=overtime_minutes,
            note=note,
            **{column: clock_out_time},
        )

    def create_break(self, *, attendance_id, expected_version, start_time, break_type) -> int:
        bid = self._next_break_id
        self._next_break_id += 1
        current = self._by_id[attendance_id]
        brk = OpenBreak(break_id=bid, attendance_id=attendance_id, start_time=start_time, break_type=break_type)
        self._bump(attendance_id, expected_version, status=AttendanceStatus.ON_BREAK, breaks=current.breaks + (brk,))
        return bid

    def close_break(self, *, break_id, attendance_id, expected_version, end_time, duration_minutes) -> None:
        current = self._by_id[attendance_id]
        breaks = tuple(b.close(end_time) if b.break_id == break_id and b.is_open else b for b in current.breaks)
        self._bump(attendance_id, expected_version, status=AttendanceStatus.CLOCKED_IN, breaks=breaks)

    def list_for_period(self, *, start_date, end_date, statuses=(), store_id=None, user_ids=()):
        rows = [
            r
            for r in self._by_id.values()
            if start_date <= r.work_date <= end_date
            and (not statuses or r.status in statuses)
            and (store_id is None or r.store_id == store_id)
            and (not user_ids or r.user_id in user_ids)
        ]
        return sorted(rows, key=lambda r: (r.user_id, r.work_date))


class InMemorySchedules:
    def __init__(self):
        self.by_user_date: dict[tuple[int, date], Schedule] = {}

    def assign(self, user_id: int, work_date: date, shift_id: int, store_id: int = 1) -> Schedule:
        sc = Schedule(
            schedule_id=len(self.by_user_date) + 1,
            user_id=user_id,
            store_id=store_id,
            work_date=work_date,
            shift_id=shift_id,
        )
        self.by_user_date[(user_id, work_date)] = sc
        return sc

    def get_for_user_and_date(self, *, user_id: int, work_date: date) -> Optional[Schedule]:
        return self.by_user_date.get((user_id, work_date))


class InMemoryShifts:
    def __init__(self, *shifts: Shift):
        self.shifts = {s.shift_id: s for s in shifts}

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        return self.shifts.get(shift_id)


class InMemoryAudit:
    def __init__(self):
        self.entries = []

    def record(self, entry) -> None:
        self.entries.append(entry)


DAY_SHIFT = Shift(
    shift_id=1,
    shift_name="Day",
    start_time=time(9, 0),
    end_time=time(18, 0),
    break_minutes=60,
    max_break_count=3,
)

SPLIT_SHIFT = Shift(
    shift_id=2,
    shift_name="Split",
    start_time=time(10, 0),
    end_time=time(21, 0),
    break_minutes=0,
    max_break_count=2,
    is_split=True,
    split_break_start=time(14, 0),
    split_break_end=time(17, 0),
)

NIGHT_SHIFT = Shift(
    shift_id=3,
    shift_name="Night",
    start_time=time(22, 0),
    end_time=time(6, 0),
    break_minutes=30,
    max_break_count=2,
)

WORK_DAY = date(2026, 3, 2)  # Monday


def at(hour: int, minute: int = 0, day: date = WORK_DAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def schedules_repo():
    return InMemorySchedules()


@pytest.fixture
def shifts_repo():
    return InMemoryShifts(DAY_SHIFT, SPLIT_SHIFT, NIGHT_SHIFT)


@pytest.fixture
def audit_repo():
    return InMemoryAudit()


@pytest.fixture
def attendance_service(attendance_repo, schedules_repo, shifts_repo, audit_repo):
    return AttendanceService(attendance_repo, schedules_repo, shifts_repo, audit_repo)


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self.by_id = {e.user_id: e for e in employees}

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        return self.by_id.get(user_id)

    def get_many(self, user_ids):
        return [self.by_id[u] for u in user_ids if u in self.by_id]


class InMemoryPayroll:
    """Keyed like the payroll_records unique index."""

    def __init__(self):
        self.rows: dict[tuple[int, date, date], PayrollLineItem] = {}
        self._ids: dict[tuple[int, date, date], int] = {}

    def upsert(self, item: PayrollLineItem) -> int:
        key = (item.user_id, item.period_start, item.period_end)
        self.rows[key] = item
        return self._ids.setdefault(key, len(self._ids) + 1)


HOURLY = Employee(
    user_id=1,
    full_name="Lan Pham",
    employee_code="E001",
    employment_type=EmploymentType.HOURLY,
    hourly_rate=Decimal("200"),
)

SALARIED = Employee(
    user_id=3,
    full_name="Minh Tran",
    employee_code="E003",
    employment_type=EmploymentType.SALARIED,
    monthly_salary=Decimal("30000"),
)


def worked(
    start: datetime,
    end: datetime,
    *,
    user_id: int = 1,
    attendance_id: int = 1,
    store_id: int = 1,
    break_minutes: int = 0,
    status: AttendanceStatus = AttendanceStatus.CLOCKED_OUT,
) -> AttendanceRecord:
    """A closed single-segment day with totals filled in."""
    total = int((end - start).total_seconds() // 60)
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=user_id,
        store_id=store_id,
        work_date=start.date(),
        status=status,
        clock_in=start,
        clock_out=end,
        total_minutes=total,
        break_minutes=break_minutes,
        net_work_minutes=total - break_minutes,
        overtime_minutes=0,
    )


@pytest.fixture
def employees_repo():
    return InMemoryEmployees(HOURLY, SALARIED)


@pytest.fixture
def payroll_repo():
    return InMemoryPayroll()


@pytest.fixture
def payroll_service(attendance_repo, employees_repo, schedules_repo, shifts_repo, payroll_repo, audit_repo):
    return PayrollService(attendance_repo, employees_repo, schedules_repo, shifts_repo, payroll_repo, audit_repo)
