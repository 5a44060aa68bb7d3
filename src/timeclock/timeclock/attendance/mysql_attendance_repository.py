from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.enums import AttendanceStatus, BreakType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, require_row_updated
from .model import AttendanceRecord, BreakRecord, ClosedBreak, OpenBreak
from .repository import AttendanceRepository

ATTENDANCE_COLUMNS = """
    attendance_id, user_id, store_id, schedule_id, work_date,
    clock_in, clock_out, clock_in_2, clock_out_2, status,
    total_minutes, break_minutes, net_work_minutes, overtime_minutes, note, version
"""


def _opt_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def _row_to_break(r: Dict[str, Any]) -> BreakRecord:
    if r.get("end_time") is None:
        return OpenBreak(
            break_id=int(r["break_id"]),
            attendance_id=int(r["attendance_id"]),
            start_time=r["start_time"],
            break_type=BreakType(r["break_type"]),
        )
    return ClosedBreak(
        break_id=int(r["break_id"]),
        attendance_id=int(r["attendance_id"]),
        start_time=r["start_time"],
        break_type=BreakType(r["break_type"]),
        end_time=r["end_time"],
        duration_minutes=int(r["duration_minutes"] or 0),
    )


def _row_to_record(r: Dict[str, Any], breaks: Iterable[BreakRecord]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        store_id=int(r["store_id"]),
        schedule_id=_opt_int(r.get("schedule_id")),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        clock_in_2=r.get("clock_in_2"),
        clock_out_2=r.get("clock_out_2"),
        total_minutes=_opt_int(r.get("total_minutes")),
        break_minutes=_opt_int(r.get("break_minutes")),
        net_work_minutes=_opt_int(r.get("net_work_minutes")),
        overtime_minutes=_opt_int(r.get("overtime_minutes")),
        breaks=tuple(breaks),
        note=r.get("note"),
        version=int(r["version"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_breaks(self, cur, attendance_ids: Sequence[int]) -> Dict[int, List[BreakRecord]]:
        by_attendance: Dict[int, List[BreakRecord]] = defaultdict(list)
        if not attendance_ids:
            return by_attendance
        placeholders = ",".join(["%s"] * len(attendance_ids))
        cur.execute(
            f"""
            SELECT break_id, attendance_id, start_time, end_time, break_type, duration_minutes
            FROM breaks
            WHERE attendance_id IN ({placeholders})
            ORDER BY start_time
            """,
            tuple(attendance_ids),
        )
        for r in fetchall(cur):
            by_attendance[int(r["attendance_id"])].append(_row_to_break(r))
        return by_attendance

    def _get_one(self, where: str, params: tuple) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {ATTENDANCE_COLUMNS} FROM attendance_records WHERE {where}", params)
            r = fetchone(cur)
            if not r:
                return None
            breaks = self._load_breaks(cur, [int(r["attendance_id"])])
            return _row_to_record(r, breaks[int(r["attendance_id"])])

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._get_one("user_id=%s AND work_date=%s", (int(user_id), work_date))

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._get_one("attendance_id=%s", (int(attendance_id),))

    def create_clock_in(
        self,
        *,
        user_id: int,
        store_id: int,
        work_date: date,
        clock_in: datetime,
        schedule_id: Optional[int] = None,
    ) -> int:
        # UNIQUE(user_id, work_date) makes the losing concurrent insert a ConflictError.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, store_id, schedule_id, work_date, clock_in, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(store_id), schedule_id, work_date, clock_in, AttendanceStatus.CLOCKED_IN.value),
            )
            return int(cur.lastrowid)

    def record_clock_in_2(self, *, attendance_id: int, expected_version: int, clock_in_2: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_in_2=%s, status=%s, version=version+1
                WHERE attendance_id=%s AND version=%s
                """,
                (clock_in_2, AttendanceStatus.CLOCKED_IN.value, int(attendance_id), int(expected_version)),
            )
            require_row_updated(cur, f"attendance {attendance_id}")

    def record_clock_out(
        self,
        *,
        attendance_id: int,
        expected_version: int,
        clock_out_time: datetime,
        segment: int,
        status: AttendanceStatus,
        total_minutes: int,
        break_minutes: int,
        net_work_minutes: int,
        overtime_minutes: int,
        note: Optional[str] = None,
    ) -> None:
        column = "clock_out_2" if segment == 2 else "clock_out"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance_records
                SET {column}=%s, status=%s, total_minutes=%s, break_minutes=%s,
                    net_work_minutes=%s, overtime_minutes=%s, note=%s, version=version+1
                WHERE attendance_id=%s AND version=%s
                """,
                (
                    clock_out_time,
                    status.value,
                    total_minutes,
                    break_minutes,
                    net_work_minutes,
                    overtime_minutes,
                    note,
                    int(attendance_id),
                    int(expected_version),
                ),
            )
            require_row_updated(cur, f"attendance {attendance_id}")

    def create_break(
        self,
        *,
        attendance_id: int,
        expected_version: int,
        start_time: datetime,
        break_type: BreakType,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, version=version+1
                WHERE attendance_id=%s AND version=%s
                """,
                (AttendanceStatus.ON_BREAK.value, int(attendance_id), int(expected_version)),
            )
            require_row_updated(cur, f"attendance {attendance_id}")
            cur.execute(
                "INSERT INTO breaks(attendance_id, start_time, break_type) VALUES(%s,%s,%s)",
                (int(attendance_id), start_time, break_type.value),
            )
            return int(cur.lastrowid)

    def close_break(
        self,
        *,
        break_id: int,
        attendance_id: int,
        expected_version: int,
        end_time: datetime,
        duration_minutes: int,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, version=version+1
                WHERE attendance_id=%s AND version=%s
                """,
                (AttendanceStatus.CLOCKED_IN.value, int(attendance_id), int(expected_version)),
            )
            require_row_updated(cur, f"attendance {attendance_id}")
            cur.execute(
                """
                UPDATE breaks
                SET end_time=%s, duration_minutes=%s
                WHERE break_id=%s AND end_time IS NULL
                """,
                (end_time, int(duration_minutes), int(break_id)),
            )
            require_row_updated(cur, f"break {break_id}")

    def list_for_period(
        self,
        *,
        start_date: date,
        end_date: date,
        statuses: Sequence[AttendanceStatus] = (),
        store_id: Optional[int] = None,
        user_ids: Sequence[int] = (),
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if statuses:
            clauses.append(f"status IN ({','.join(['%s'] * len(statuses))})")
            params.extend(s.value for s in statuses)
        if store_id is not None:
            clauses.append("store_id=%s")
            params.append(int(store_id))
        if user_ids:
            clauses.append(f"user_id IN ({','.join(['%s'] * len(user_ids))})")
            params.extend(int(u) for u in user_ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {ATTENDANCE_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY user_id ASC, work_date ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            breaks = self._load_breaks(cur, [int(r["attendance_id"]) for r in rows])
            return [_row_to_record(r, breaks[int(r["attendance_id"])]) for r in rows]
