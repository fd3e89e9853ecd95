from __future__ import annotations

from typing import Optional

from ..core.enums import Role, StaffStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import StaffProfile
from .repository import StaffRepository


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_profile(self, staff_id: int) -> Optional[StaffProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.id, u.full_name, u.role, sp.department, sp.position, sp.status
                FROM users u
                JOIN staff_profiles sp ON sp.user_id = u.id
                WHERE u.id=%s AND u.role IN (%s, %s, %s)
                """,
                (int(staff_id), Role.ADMIN.value, Role.MANAGER.value, Role.STAFF.value),
            )
            r = fetchone(cur)
            if not r:
                return None
            return StaffProfile(
                staff_id=int(r["id"]),
                full_name=r["full_name"],
                role=Role(r["role"]),
                department=r.get("department"),
                position=r.get("position"),
                status=StaffStatus(r["status"]),
            )
