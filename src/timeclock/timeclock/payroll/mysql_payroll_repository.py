from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import PayrollLineItem
from .repository import PayrollRepository


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, item: PayrollLineItem) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_records(
                    user_id, period_start, period_end, employment_type,
                    regular_hours, overtime_hours, holiday_hours, night_shift_hours,
                    effective_hourly_rate, base_pay, overtime_pay, holiday_pay,
                    night_shift_pay, gross_pay, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,'DRAFT')
                ON DUPLICATE KEY UPDATE
                    employment_type=VALUES(employment_type),
                    regular_hours=VALUES(regular_hours),
                    overtime_hours=VALUES(overtime_hours),
                    holiday_hours=VALUES(holiday_hours),
                    night_shift_hours=VALUES(night_shift_hours),
                    effective_hourly_rate=VALUES(effective_hourly_rate),
                    base_pay=VALUES(base_pay),
                    overtime_pay=VALUES(overtime_pay),
                    holiday_pay=VALUES(holiday_pay),
                    night_shift_pay=VALUES(night_shift_pay),
                    gross_pay=VALUES(gross_pay),
                    status='DRAFT'
                """,
                (
                    item.user_id,
                    item.period_start,
                    item.period_end,
                    item.employment_type.value,
                    item.regular_hours,
                    item.overtime_hours,
                    item.holiday_hours,
                    item.night_shift_hours,
                    item.effective_hourly_rate,
                    item.base_pay,
                    item.overtime_pay,
                    item.holiday_pay,
                    item.night_shift_pay,
                    item.gross_pay,
                ),
            )

            # If it was an update, lastrowid can be 0; fetch payroll_id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT payroll_id FROM payroll_records WHERE user_id=%s AND period_start=%s AND period_end=%s",
                (item.user_id, item.period_start, item.period_end),
            )
            r = fetchone(cur)
            return int(r["payroll_id"]) if r else 0
