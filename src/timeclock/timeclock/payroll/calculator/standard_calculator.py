from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ...common.datetime_utils import days_in_month, is_weekend
from ...employees.model import Employee
from ...shifts.model import Shift
from ..model import DayBreakdown, PayrollLineItem, WorkedDay
from ..rates import PayRates
from .base import PayrollCalculator
from .night_minutes import IntervalNightMinutes, NightMinutesStrategy

WHOLE = Decimal("1")
CENTS = Decimal("0.01")
SIXTY = Decimal(60)


def round_currency(amount: Decimal) -> Decimal:
    return amount.quantize(WHOLE, rounding=ROUND_HALF_UP)


def to_hours(minutes: int) -> Decimal:
    return (Decimal(minutes) / SIXTY).quantize(CENTS, rounding=ROUND_HALF_UP)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rules.

    Weekend days are paid entirely at the holiday multiplier. Weekdays split
    into regular and overtime minutes against the shift's scheduled minutes,
    with each day's overtime tiered separately. Night minutes on weekdays
    earn a flat hourly allowance on top.

    Amounts stay unrounded until each component is rounded once, and gross is
    the sum of the rounded components.
    """

    def __init__(self, rates: Optional[PayRates] = None, *, night_strategy: Optional[NightMinutesStrategy] = None):
        self._rates = rates or PayRates()
        self._night = night_strategy or IntervalNightMinutes()

    @property
    def rates(self) -> PayRates:
        return self._rates

    def scheduled_minutes(self, shift: Optional[Shift]) -> int:
        if shift is None:
            return self._rates.default_scheduled_minutes
        return shift.scheduled_minutes()

    def effective_hourly_rate(self, employee: Employee) -> Decimal:
        if employee.is_salaried:
            r = self._rates
            return employee.monthly_salary / r.salary_days_per_month / r.salary_hours_per_day
        return self.hourly_rate(employee)

    def hourly_rate(self, employee: Employee) -> Decimal:
        if employee.hourly_rate is not None:
            return employee.hourly_rate
        return self._rates.default_hourly_rate

    def overtime_pay_for_day(self, overtime_minutes: int, hourly_rate: Decimal) -> Decimal:
        if overtime_minutes <= 0:
            return Decimal(0)
        r = self._rates
        first = min(overtime_minutes, r.overtime_tier1_minutes)
        after = overtime_minutes - first
        return (
            Decimal(first) / SIXTY * hourly_rate * r.overtime_tier1_multiplier
            + Decimal(after) / SIXTY * hourly_rate * r.overtime_tier2_multiplier
        )

    def prorated_salary(self, monthly_salary: Decimal, *, period_start: date, period_end: date) -> Decimal:
        period_days = (period_end - period_start).days + 1
        month_days = days_in_month(period_start.year, period_start.month)
        return monthly_salary / month_days * min(period_days, month_days)

    def classify_day(self, day: WorkedDay) -> DayBreakdown:
        record = day.record
        net = record.net_work_minutes or 0
        night = self._night.night_minutes(record, self._rates)

        if is_weekend(record.work_date):
            return DayBreakdown(
                work_date=record.work_date,
                regular_minutes=0,
                overtime_minutes=0,
                holiday_minutes=net,
                night_minutes=night,
                is_holiday=True,
            )

        scheduled = self.scheduled_minutes(day.shift)
        return DayBreakdown(
            work_date=record.work_date,
            regular_minutes=min(net, scheduled),
            overtime_minutes=max(0, net - scheduled),
            holiday_minutes=0,
            night_minutes=night,
            is_holiday=False,
        )

    def calculate(
        self,
        employee: Employee,
        days: Sequence[WorkedDay],
        *,
        period_start: date,
        period_end: date,
    ) -> PayrollLineItem:
        rate = self.effective_hourly_rate(employee)

        details = []
        regular = holiday = night = overtime = 0
        overtime_pay = Decimal(0)
        for day in sorted(days, key=lambda d: d.record.work_date):
            if day.record.clock_in is None or not day.record.net_work_minutes:
                continue
            breakdown = self.classify_day(day)
            details.append(breakdown)

            regular += breakdown.regular_minutes
            overtime += breakdown.overtime_minutes
            holiday += breakdown.holiday_minutes
            if not breakdown.is_holiday:
                night += breakdown.night_minutes
            overtime_pay += self.overtime_pay_for_day(breakdown.overtime_minutes, rate)

        r = self._rates
        if employee.is_salaried:
            base_pay = self.prorated_salary(employee.monthly_salary, period_start=period_start, period_end=period_end)
        else:
            base_pay = Decimal(regular) / SIXTY * self.hourly_rate(employee)
        holiday_pay = Decimal(holiday) / SIXTY * rate * r.holiday_multiplier
        night_pay = Decimal(night) / SIXTY * r.night_allowance_per_hour

        base_pay = round_currency(base_pay)
        overtime_pay = round_currency(overtime_pay)
        holiday_pay = round_currency(holiday_pay)
        night_pay = round_currency(night_pay)

        return PayrollLineItem(
            user_id=employee.user_id,
            employee_code=employee.employee_code,
            full_name=employee.full_name,
            employment_type=employee.employment_type,
            period_start=period_start,
            period_end=period_end,
            regular_hours=to_hours(regular),
            overtime_hours=to_hours(overtime),
            holiday_hours=to_hours(holiday),
            night_shift_hours=to_hours(night),
            effective_hourly_rate=rate.quantize(CENTS, rounding=ROUND_HALF_UP),
            base_pay=base_pay,
            overtime_pay=overtime_pay,
            holiday_pay=holiday_pay,
            night_shift_pay=night_pay,
            gross_pay=base_pay + overtime_pay + holiday_pay + night_pay,
            work_days=len(details),
            hourly_rate=None if employee.is_salaried else self.hourly_rate(employee),
            monthly_salary=employee.monthly_salary if employee.is_salaried else None,
            details=tuple(details),
        )
