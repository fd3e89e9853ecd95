from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import ShiftStatus, ShiftType


@dataclass(frozen=True)
class WorkShift:
    """A scheduled work interval for one staff member on one calendar date."""

    shift_id: int
    staff_id: int
    shift_date: date
    shift_type: ShiftType
    start_time: time
    end_time: time
    status: ShiftStatus = ShiftStatus.SCHEDULED
    notes: Optional[str] = None
    # Joined from users/staff_profiles for display only.
    staff_name: Optional[str] = None
    department: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def starts_at(self) -> datetime:
        return datetime.combine(self.shift_date, self.start_time)

    def ends_at(self) -> datetime:
        return datetime.combine(self.shift_date, self.end_time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.shift_id,
            "staff_id": self.staff_id,
            "shift_date": self.shift_date.isoformat(),
            "shift_type": self.shift_type.value,
            "start_time": format_hhmm(self.start_time),
            "end_time": format_hhmm(self.end_time),
            "status": self.status.value,
            "notes": self.notes,
            "staff_name": self.staff_name,
            "department": self.department,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class NewShift:
    """Insert payload; the id is generated by storage."""

    staff_id: int
    shift_date: date
    shift_type: ShiftType
    start_time: time
    end_time: time
    status: ShiftStatus = ShiftStatus.SCHEDULED
    notes: Optional[str] = None


@dataclass(frozen=True)
class ShiftFilters:
    department: Optional[str] = None
    status: Optional[ShiftStatus] = None
    staff_id: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
