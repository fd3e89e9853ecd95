from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..common.datetime_utils import format_duration
from ..core.enums import AttendanceStatus

STATUS_COLORS = {
    AttendanceStatus.ON_TIME: "green",
    AttendanceStatus.LATE: "yellow",
    AttendanceStatus.EARLY_LEAVE: "orange",
    AttendanceStatus.ABSENT: "red",
}


@dataclass(frozen=True)
class AttendanceLog:
    """One staff member's check-in/check-out pair for one calendar day."""

    log_id: int
    staff_id: int
    shift_id: Optional[int]
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    work_hours: Optional[Decimal] = None
    notes: Optional[str] = None
    # Joined from users/staff_profiles/work_shifts for display only.
    staff_name: Optional[str] = None
    department: Optional[str] = None
    shift_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def work_date(self) -> date:
        return self.check_in_time.date()

    @property
    def is_complete(self) -> bool:
        return self.check_out_time is not None

    @property
    def work_duration(self) -> str:
        return format_duration(self.work_hours)

    @property
    def status_color(self) -> str:
        return STATUS_COLORS.get(self.status, "gray")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.log_id,
            "staff_id": self.staff_id,
            "shift_id": self.shift_id,
            "check_in_time": self.check_in_time.isoformat(),
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "work_hours": float(self.work_hours) if self.work_hours is not None else None,
            "status": self.status.value,
            "notes": self.notes,
            "staff_name": self.staff_name,
            "department": self.department,
            "shift_type": self.shift_type,
            "work_duration": self.work_duration,
            "status_color": self.status_color,
            "is_complete": self.is_complete,
        }


@dataclass(frozen=True)
class NewAttendanceLog:
    staff_id: int
    shift_id: Optional[int]
    check_in_time: datetime
    status: AttendanceStatus = AttendanceStatus.ON_TIME
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceFilters:
    staff_id: Optional[int] = None
    department: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
