from __future__ import annotations

from datetime import date, time
from typing import Optional

from ..core.enums import ACTIVE_SHIFT_STATUSES
from .model import WorkShift
from .repository import ShiftRepository


def intervals_overlap(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    """Half-open interval overlap: [a_start, a_end) vs [b_start, b_end).

    Covers the three classic cases (a straddles b's start, a straddles b's
    end, a lies inside b) in one comparison. Touching ends do not overlap, so
    08:00-12:00 and 12:00-16:00 are compatible.
    """

    return a_start < b_end and b_start < a_end


class ShiftConflictChecker:
    """Finds the active shifts a candidate interval would collide with."""

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def find_conflicts(
        self,
        *,
        staff_id: int,
        shift_date: date,
        start_time: time,
        end_time: time,
        exclude_shift_id: Optional[int] = None,
    ) -> list[WorkShift]:
        """Return every scheduled/completed shift overlapping the interval.

        The caller guarantees ``start_time < end_time``. ``exclude_shift_id``
        lets an update ignore the shift being edited.
        """

        existing = self._shifts.find_by_staff_and_date(staff_id=int(staff_id), shift_date=shift_date)
        return [
            s
            for s in existing
            if s.status in ACTIVE_SHIFT_STATUSES
            and s.shift_id != exclude_shift_id
            and intervals_overlap(s.start_time, s.end_time, start_time, end_time)
        ]
