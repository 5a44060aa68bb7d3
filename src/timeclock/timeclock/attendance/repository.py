from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, BreakType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Persistence interface for attendance and break rows.

    Writes that change an existing record pass the version they read; a stale
    version, or a second record for the same (user, day), raises ConflictError.
    """

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        user_id: int,
        store_id: int,
        work_date: date,
        clock_in: datetime,
        schedule_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def record_clock_in_2(self, *, attendance_id: int, expected_version: int, clock_in_2: datetime) -> None:
        raise NotImplementedError

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
        raise NotImplementedError

    def create_break(
        self,
        *,
        attendance_id: int,
        expected_version: int,
        start_time: datetime,
        break_type: BreakType,
    ) -> int:
        """Insert an open break and flip the record to ON_BREAK in one transaction."""

        raise NotImplementedError

    def close_break(
        self,
        *,
        break_id: int,
        attendance_id: int,
        expected_version: int,
        end_time: datetime,
        duration_minutes: int,
    ) -> None:
        """Close the break and flip the record back to CLOCKED_IN in one transaction."""

        raise NotImplementedError

    def list_for_period(
        self,
        *,
        start_date: date,
        end_date: date,
        statuses: Sequence[AttendanceStatus] = (),
        store_id: Optional[int] = None,
        user_ids: Sequence[int] = (),
    ) -> Sequence[AttendanceRecord]:
        """Records ordered by user then day, breaks included."""

        raise NotImplementedError
