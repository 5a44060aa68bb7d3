from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import EmploymentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


def _to_decimal(value: Any) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _row_to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        employee_code=r["employee_code"],
        employment_type=EmploymentType(r["employment_type"]),
        hourly_rate=_to_decimal(r.get("hourly_rate")),
        monthly_salary=_to_decimal(r.get("monthly_salary")),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, employee_code, employment_type, hourly_rate, monthly_salary
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_many(self, user_ids: Sequence[int]) -> Sequence[Employee]:
        if not user_ids:
            return []
        placeholders = ",".join(["%s"] * len(user_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, full_name, employee_code, employment_type, hourly_rate, monthly_salary
                FROM users
                WHERE user_id IN ({placeholders})
                ORDER BY user_id
                """,
                tuple(int(u) for u in user_ids),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]
