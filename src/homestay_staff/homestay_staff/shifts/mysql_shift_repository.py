from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..common.pagination import Page
from ..core.constants import SHIFT_LOCK_TIMEOUT_SECONDS
from ..core.enums import ShiftStatus, ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, named_lock, normalize_mysql_time
from .model import NewShift, ShiftFilters, WorkShift
from .repository import ShiftRepository

_SELECT = """
    SELECT ws.id, ws.staff_id, ws.shift_date, ws.shift_type, ws.start_time, ws.end_time,
           ws.status, ws.notes, ws.created_at, ws.updated_at,
           u.full_name AS staff_name, sp.department
    FROM work_shifts ws
    LEFT JOIN users u ON ws.staff_id = u.id
    LEFT JOIN staff_profiles sp ON u.id = sp.user_id
"""

_UPDATABLE_COLUMNS = ("shift_date", "shift_type", "start_time", "end_time", "status", "notes")


def _row_to_shift(r: dict) -> WorkShift:
    return WorkShift(
        shift_id=int(r["id"]),
        staff_id=int(r["staff_id"]),
        shift_date=r["shift_date"],
        shift_type=ShiftType(r["shift_type"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        status=ShiftStatus(r["status"]),
        notes=r.get("notes"),
        staff_name=r.get("staff_name"),
        department=r.get("department"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, lock_timeout: int = SHIFT_LOCK_TIMEOUT_SECONDS):
        self._conn_factory = conn_factory
        self._lock_timeout = int(lock_timeout)

    def get_by_id(self, shift_id: int) -> Optional[WorkShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE ws.id=%s", (int(shift_id),))
            r = fetchone(cur)
            return _row_to_shift(r) if r else None

    def find_by_staff_and_date(self, *, staff_id: int, shift_date: date) -> Sequence[WorkShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE ws.staff_id=%s AND ws.shift_date=%s ORDER BY ws.start_time",
                (int(staff_id), shift_date),
            )
            return [_row_to_shift(r) for r in fetchall(cur)]

    def insert(self, shift: NewShift) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_shifts(staff_id, shift_date, shift_type, start_time, end_time, status, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(shift.staff_id),
                    shift.shift_date,
                    shift.shift_type.value,
                    shift.start_time,
                    shift.end_time,
                    shift.status.value,
                    shift.notes,
                ),
            )
            return int(cur.lastrowid)

    def update(self, shift_id: int, fields: Mapping[str, Any]) -> bool:
        columns = [c for c in _UPDATABLE_COLUMNS if c in fields]
        if not columns:
            return False

        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = [_db_value(fields[c]) for c in columns] + [int(shift_id)]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE work_shifts SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE id=%s",
                tuple(params),
            )
            return cur.rowcount > 0

    def delete(self, shift_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_shifts WHERE id=%s", (int(shift_id),))
            return cur.rowcount > 0

    def list_filtered(self, filters: ShiftFilters, *, page: int, limit: int) -> Page[WorkShift]:
        clauses = ["1=1"]
        params: list[object] = []

        if filters.department:
            clauses.append("sp.department=%s")
            params.append(filters.department)
        if filters.status is not None:
            clauses.append("ws.status=%s")
            params.append(filters.status.value)
        if filters.staff_id is not None:
            clauses.append("ws.staff_id=%s")
            params.append(int(filters.staff_id))
        if filters.date_from is not None:
            clauses.append("ws.shift_date >= %s")
            params.append(filters.date_from)
        if filters.date_to is not None:
            clauses.append("ws.shift_date <= %s")
            params.append(filters.date_to)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM work_shifts ws
                LEFT JOIN users u ON ws.staff_id = u.id
                LEFT JOIN staff_profiles sp ON u.id = sp.user_id
                WHERE {where}
                """,
                tuple(params),
            )
            total = int(fetchone(cur)["total"])

            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY ws.shift_date DESC, ws.start_time LIMIT %s OFFSET %s",
                tuple(params) + (int(limit), (int(page) - 1) * int(limit)),
            )
            items = [_row_to_shift(r) for r in fetchall(cur)]

        return Page(items=items, total=total, page=page, limit=limit)

    def list_for_staff(
        self,
        *,
        staff_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[WorkShift]:
        clauses = ["ws.staff_id=%s"]
        params: list[object] = [int(staff_id)]
        if date_from is not None:
            clauses.append("ws.shift_date >= %s")
            params.append(date_from)
        if date_to is not None:
            clauses.append("ws.shift_date <= %s")
            params.append(date_to)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY ws.shift_date, ws.start_time",
                tuple(params),
            )
            return [_row_to_shift(r) for r in fetchall(cur)]

    def list_range(self, *, start: date, end: date) -> Sequence[WorkShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE ws.shift_date BETWEEN %s AND %s ORDER BY ws.shift_date, ws.start_time, sp.department",
                (start, end),
            )
            return [_row_to_shift(r) for r in fetchall(cur)]

    def staff_lock(self, staff_id: int):
        name = f"{self._conn_factory.database}.work_shifts.staff.{int(staff_id)}"
        return named_lock(self._conn_factory, name, timeout=self._lock_timeout)
