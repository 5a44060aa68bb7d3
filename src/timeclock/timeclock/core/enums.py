from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Persisted status of a day's attendance record."""

    CLOCKED_IN = "CLOCKED_IN"
    ON_BREAK = "ON_BREAK"
    CLOCKED_OUT = "CLOCKED_OUT"
    PENDING_REVIEW = "PENDING_REVIEW"
    APPROVED = "APPROVED"
    ABSENT = "ABSENT"
    REJECTED = "REJECTED"


# Statuses payroll treats as final
FINALIZED_STATUSES = (AttendanceStatus.CLOCKED_OUT, AttendanceStatus.APPROVED)

# Statuses of a day still on the clock; such a day carries past midnight
OPEN_STATUSES = (AttendanceStatus.CLOCKED_IN, AttendanceStatus.ON_BREAK)


class BreakType(str, Enum):
    REST = "REST"
    MEAL = "MEAL"
    PERSONAL = "PERSONAL"
    EMERGENCY = "EMERGENCY"


class EmploymentType(str, Enum):
    HOURLY = "HOURLY"
    SALARIED = "SALARIED"


class ClockState(str, Enum):
    """Derived clock state; never stored."""

    NOT_CLOCKED_IN = "NOT_CLOCKED_IN"
    WORKING = "WORKING"
    ON_BREAK = "ON_BREAK"
    CLOCKED_OUT = "CLOCKED_OUT"
    SPLIT_BREAK = "SPLIT_BREAK"


class ClockAction(str, Enum):
    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    START_BREAK = "START_BREAK"
    END_BREAK = "END_BREAK"
    CLOCK_IN_SEGMENT_2 = "CLOCK_IN_SEGMENT_2"
    CLOCK_OUT_SEGMENT_2 = "CLOCK_OUT_SEGMENT_2"


class Role(str, Enum):
    """User role used by the HTTP layer for authorization."""

    STAFF = "staff"
    MANAGER = "manager"
    ADMIN = "admin"
