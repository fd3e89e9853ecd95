from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles the auth collaborator stores in the session."""

    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


class ShiftType(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    NIGHT = "night"
    FULL_DAY = "full_day"


class ShiftStatus(str, Enum):
    """Lifecycle of a work shift."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    MISSED = "missed"
    CANCELLED = "cancelled"


# Shifts in these states still occupy the staff member's time.
ACTIVE_SHIFT_STATUSES = frozenset({ShiftStatus.SCHEDULED, ShiftStatus.COMPLETED})


class AttendanceStatus(str, Enum):
    """Attendance status stored on each log."""

    ON_TIME = "on_time"
    LATE = "late"
    EARLY_LEAVE = "early_leave"
    ABSENT = "absent"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
