from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role, StaffStatus


@dataclass(frozen=True)
class StaffProfile:
    """Staff member as seen by scheduling: owned by user management, read-only here."""

    staff_id: int
    full_name: str
    role: Role
    department: Optional[str]
    position: Optional[str]
    status: StaffStatus

    @property
    def is_active(self) -> bool:
        return self.status == StaffStatus.ACTIVE
