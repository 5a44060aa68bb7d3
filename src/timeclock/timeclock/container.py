from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.factory import ClockOutStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .payroll.calculator.night_minutes import ClockHourNightMinutes, IntervalNightMinutes
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.rates import PayRates
from .payroll.service import PayrollService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .shifts.mysql_shift_repository import MySQLShiftRepository

NIGHT_STRATEGIES = {
    "interval": IntervalNightMinutes,
    "clock_hour": ClockHourNightMinutes,
}


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_repo: MySQLAttendanceRepository
    schedules_repo: MySQLScheduleRepository
    shifts_repo: MySQLShiftRepository
    employees_repo: MySQLEmployeeRepository
    payroll_repo: MySQLPayrollRepository
    audit_repo: MySQLAuditLogRepository

    attendance_service: AttendanceService
    payroll_service: PayrollService


def build_container(
    *,
    db_config: dict,
    pay_rates: Optional[Mapping[str, Any]] = None,
    night_minutes: str = "interval",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    attendance_repo = MySQLAttendanceRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    audit_repo = MySQLAuditLogRepository(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        schedules_repo,
        shifts_repo,
        audit_repo,
        strategy_factory=ClockOutStrategyFactory(),
    )
    calculator = StandardPayrollCalculator(
        PayRates.from_settings(pay_rates),
        night_strategy=NIGHT_STRATEGIES[night_minutes](),
    )
    payroll_service = PayrollService(
        attendance_repo,
        employees_repo,
        schedules_repo,
        shifts_repo,
        payroll_repo,
        audit_repo,
        calculator=calculator,
    )

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        shifts_repo=shifts_repo,
        employees_repo=employees_repo,
        payroll_repo=payroll_repo,
        audit_repo=audit_repo,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
    )
