from __future__ import annotations

from typing import Optional, Protocol

from .model import StaffProfile


class StaffRepository(Protocol):
    def get_profile(self, staff_id: int) -> Optional[StaffProfile]:
        """Return the staff profile joined with its user row, or None."""

        raise NotImplementedError
