from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from ..attendance.model import AttendanceRecord
from ..core.enums import EmploymentType
from ..shifts.model import Shift


@dataclass(frozen=True)
class WorkedDay:
    """A finalized attendance record with the shift it was scheduled on."""

    record: AttendanceRecord
    shift: Optional[Shift] = None


@dataclass(frozen=True)
class DayBreakdown:
    work_date: date
    regular_minutes: int
    overtime_minutes: int
    holiday_minutes: int
    night_minutes: int
    is_holiday: bool


@dataclass(frozen=True)
class PayrollLineItem:
    user_id: int
    employee_code: str
    full_name: str
    employment_type: EmploymentType
    period_start: date
    period_end: date
    regular_hours: Decimal
    overtime_hours: Decimal
    holiday_hours: Decimal
    night_shift_hours: Decimal
    effective_hourly_rate: Decimal
    base_pay: Decimal
    overtime_pay: Decimal
    holiday_pay: Decimal
    night_shift_pay: Decimal
    gross_pay: Decimal
    work_days: int
    hourly_rate: Optional[Decimal] = None
    monthly_salary: Optional[Decimal] = None
    details: Tuple[DayBreakdown, ...] = ()


@dataclass(frozen=True)
class PayrollRunSummary:
    period_start: date
    period_end: date
    total_employees: int
    total_gross_pay: Decimal
    items: Tuple[PayrollLineItem, ...] = ()
