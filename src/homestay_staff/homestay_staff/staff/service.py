from __future__ import annotations

from ..core.enums import Role
from ..core.exceptions import NotFoundError, StaffInactiveError
from .model import StaffProfile
from .repository import StaffRepository


class StaffDirectory:
    """Gate consulted before check-in and shift assignment."""

    def __init__(self, staff: StaffRepository):
        self._staff = staff

    def require_active(self, staff_id: int) -> StaffProfile:
        profile = self._staff.get_profile(int(staff_id))
        if not profile or profile.role != Role.STAFF:
            raise NotFoundError("Staff member not found")
        if not profile.is_active:
            raise StaffInactiveError()
        return profile
