from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..common.pagination import Page
from .model import AttendanceFilters, AttendanceLog, NewAttendanceLog


class AttendanceRepository(Protocol):
    def get_by_id(self, log_id: int) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def find_for_staff_and_date(self, *, staff_id: int, work_date: date) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def insert(self, log: NewAttendanceLog) -> int:
        """Persist a check-in and return the generated id.

        Raises AlreadyCheckedInError when the staff member already has a log
        for the check-in's calendar day.
        """

        raise NotImplementedError

    def update(self, log_id: int, fields: Mapping[str, Any]) -> bool:
        """Partial update of check_out_time, work_hours, status and notes."""

        raise NotImplementedError

    def list_filtered(self, filters: AttendanceFilters, *, page: int, limit: int) -> Page[AttendanceLog]:
        raise NotImplementedError

    def list_for_staff(
        self,
        *,
        staff_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[AttendanceLog]:
        """Newest first."""

        raise NotImplementedError

    def list_range(
        self,
        *,
        start: date,
        end: date,
        department: Optional[str] = None,
        staff_id: Optional[int] = None,
    ) -> Sequence[AttendanceLog]:
        """Logs whose check-in day falls in [start, end], oldest first."""

        raise NotImplementedError
