from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..audit.model import AuditEntry
from ..audit.repository import AuditLogRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_date_range
from ..core.enums import FINALIZED_STATUSES
from ..employees.repository import EmployeeRepository
from ..schedules.repository import ScheduleRepository
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollLineItem, PayrollRunSummary, WorkedDay
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        shifts: ShiftRepository,
        payroll: PayrollRepository,
        audit: AuditLogRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._schedules = schedules
        self._shifts = shifts
        self._payroll = payroll
        self._audit = audit
        self._calculator = calculator or StandardPayrollCalculator()

    def _worked_days(self, records: Sequence[AttendanceRecord]) -> List[WorkedDay]:
        shift_cache: Dict[int, Optional[Shift]] = {}
        out = []
        for r in records:
            shift = None
            schedule = self._schedules.get_for_user_and_date(user_id=r.user_id, work_date=r.work_date)
            if schedule:
                if schedule.shift_id not in shift_cache:
                    shift_cache[schedule.shift_id] = self._shifts.get_by_id(schedule.shift_id)
                shift = shift_cache[schedule.shift_id]
            out.append(WorkedDay(record=r, shift=shift))
        return out

    def calculate(
        self,
        *,
        period_start: date,
        period_end: date,
        store_id: Optional[int] = None,
        user_ids: Sequence[int] = (),
    ) -> List[PayrollLineItem]:
        """Line items for every employee with finalized attendance in the period."""

        require_date_range(period_start, period_end)
        records = self._attendance.list_for_period(
            start_date=period_start,
            end_date=period_end,
            statuses=FINALIZED_STATUSES,
            store_id=store_id,
            user_ids=user_ids,
        )

        by_user: "OrderedDict[int, List[AttendanceRecord]]" = OrderedDict()
        for r in sorted(records, key=lambda x: (x.user_id, x.work_date)):
            by_user.setdefault(r.user_id, []).append(r)

        employees = {e.user_id: e for e in self._employees.get_many(list(by_user))}

        items = []
        for user_id, user_records in by_user.items():
            employee = employees.get(user_id)
            if employee is None:
                logger.warning("payroll skipped attendance for unknown user=%s", user_id)
                continue
            items.append(
                self._calculator.calculate(
                    employee,
                    self._worked_days(user_records),
                    period_start=period_start,
                    period_end=period_end,
                )
            )
        return items

    def generate(
        self,
        *,
        period_start: date,
        period_end: date,
        generated_by: int,
        store_id: Optional[int] = None,
        user_ids: Sequence[int] = (),
        now: datetime | None = None,
    ) -> PayrollRunSummary:
        """Calculate and upsert the period's payroll; re-running replaces the same rows."""

        items = self.calculate(period_start=period_start, period_end=period_end, store_id=store_id, user_ids=user_ids)
        for item in items:
            self._payroll.upsert(item)

        self._audit.record(
            AuditEntry(
                user_id=generated_by,
                action="GENERATE_PAYROLL",
                entity_type="PayrollRecord",
                entity_id=f"{store_id or '*'}:{period_start:%Y-%m-%d}:{period_end:%Y-%m-%d}",
                created_at=now or now_local(),
            )
        )

        total = sum((i.gross_pay for i in items), Decimal(0))
        logger.info(
            "payroll %s..%s generated for %d employees (gross=%s)",
            period_start,
            period_end,
            len(items),
            total,
        )
        return PayrollRunSummary(
            period_start=period_start,
            period_end=period_end,
            total_employees=len(items),
            total_gross_pay=total,
            items=tuple(items),
        )
