from __future__ import annotations

from datetime import date
from typing import Any, ContextManager, Mapping, Optional, Protocol, Sequence

from ..common.pagination import Page
from .model import NewShift, ShiftFilters, WorkShift


class ShiftRepository(Protocol):
    def get_by_id(self, shift_id: int) -> Optional[WorkShift]:
        raise NotImplementedError

    def find_by_staff_and_date(self, *, staff_id: int, shift_date: date) -> Sequence[WorkShift]:
        """Every shift of the staff member on that date, whatever its status."""

        raise NotImplementedError

    def insert(self, shift: NewShift) -> int:
        """Persist a shift and return the generated id."""

        raise NotImplementedError

    def update(self, shift_id: int, fields: Mapping[str, Any]) -> bool:
        """Partial update; keys are WorkShift attribute names."""

        raise NotImplementedError

    def delete(self, shift_id: int) -> bool:
        raise NotImplementedError

    def list_filtered(self, filters: ShiftFilters, *, page: int, limit: int) -> Page[WorkShift]:
        raise NotImplementedError

    def list_for_staff(
        self,
        *,
        staff_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[WorkShift]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date) -> Sequence[WorkShift]:
        """Shifts dated within [start, end], ordered by date then start time."""

        raise NotImplementedError

    def staff_lock(self, staff_id: int) -> ContextManager[None]:
        """Serialize conflict-check + write sequences for one staff member."""

        raise NotImplementedError
