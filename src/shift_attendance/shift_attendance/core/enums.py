from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization on the JSON API."""

    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


class TimesheetStatus(str, Enum):
    """Status stamped on a Timesheet by the attendance authority at check-in."""

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    UNKNOWN = "UNKNOWN"


class AttendanceState(str, Enum):
    """Derived state of one scheduled shift; never persisted."""

    AWAITING_CHECK_IN = "AWAITING_CHECK_IN"
    CHECKED_IN = "CHECKED_IN"
    COMPLETED = "COMPLETED"


class CheckAction(str, Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
