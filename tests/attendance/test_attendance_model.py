from datetime import time

import pytest

from conftest import WORK_DAY, at

from src.timeclock.timeclock.attendance.model import AttendanceRecord, OpenBreak
from src.timeclock.timeclock.core.enums import AttendanceStatus, BreakType
from src.timeclock.timeclock.core.exceptions import ValidationError
from src.timeclock.timeclock.shifts.model import Shift


def test_open_break_closes_with_floor_minutes():
    brk = OpenBreak(break_id=1, attendance_id=1, start_time=at(12), break_type=BreakType.MEAL)
    closed = brk.close(at(12, 29).replace(second=59))
    assert closed.is_open is False
    assert closed.duration_minutes == 29
    assert closed.break_type == BreakType.MEAL


def test_record_rejects_two_open_breaks():
    breaks = (
        OpenBreak(break_id=1, attendance_id=1, start_time=at(11)),
        OpenBreak(break_id=2, attendance_id=1, start_time=at(12)),
    )
    with pytest.raises(ValidationError):
        AttendanceRecord(
            attendance_id=1, user_id=1, store_id=1, work_date=WORK_DAY,
            status=AttendanceStatus.ON_BREAK, clock_in=at(9), breaks=breaks,
        )


def test_record_rejects_inconsistent_minutes():
    with pytest.raises(ValidationError):
        AttendanceRecord(
            attendance_id=1, user_id=1, store_id=1, work_date=WORK_DAY,
            status=AttendanceStatus.CLOCKED_OUT, clock_in=at(9), clock_out=at(18),
            total_minutes=540, break_minutes=30, net_work_minutes=500,
        )


def test_split_shift_needs_ordered_bounds():
    with pytest.raises(ValidationError):
        Shift(shift_id=1, shift_name="Bad", start_time=time(10), end_time=time(21), is_split=True)
    with pytest.raises(ValidationError):
        Shift(
            shift_id=1, shift_name="Bad", start_time=time(10), end_time=time(21),
            is_split=True, split_break_start=time(17), split_break_end=time(14),
        )
