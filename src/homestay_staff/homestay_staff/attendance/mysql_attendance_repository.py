from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.pagination import Page
from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyCheckedInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceFilters, AttendanceLog, NewAttendanceLog
from .repository import AttendanceRepository

_SELECT = """
    SELECT al.id, al.staff_id, al.shift_id, al.check_in_time, al.check_out_time,
           al.work_hours, al.status, al.notes, al.created_at, al.updated_at,
           u.full_name AS staff_name, sp.department, ws.shift_type
    FROM attendance_logs al
    LEFT JOIN users u ON al.staff_id = u.id
    LEFT JOIN staff_profiles sp ON u.id = sp.user_id
    LEFT JOIN work_shifts ws ON al.shift_id = ws.id
"""

_UPDATABLE_COLUMNS = ("check_out_time", "work_hours", "status", "notes")


def _row_to_log(r: dict) -> AttendanceLog:
    work_hours = r.get("work_hours")
    return AttendanceLog(
        log_id=int(r["id"]),
        staff_id=int(r["staff_id"]),
        shift_id=int(r["shift_id"]) if r.get("shift_id") is not None else None,
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        work_hours=Decimal(str(work_hours)) if work_hours is not None else None,
        notes=r.get("notes"),
        staff_name=r.get("staff_name"),
        department=r.get("department"),
        shift_type=r.get("shift_type"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, log_id: int) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE al.id=%s", (int(log_id),))
            r = fetchone(cur)
            return _row_to_log(r) if r else None

    def find_for_staff_and_date(self, *, staff_id: int, work_date: date) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE al.staff_id=%s AND al.work_date=%s", (int(staff_id), work_date))
            r = fetchone(cur)
            return _row_to_log(r) if r else None

    def insert(self, log: NewAttendanceLog) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_logs(staff_id, shift_id, check_in_time, status, notes)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(log.staff_id), log.shift_id, log.check_in_time, log.status.value, log.notes),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            # uq_attendance_staff_day: a concurrent check-in won the race.
            if is_duplicate_key(exc):
                raise AlreadyCheckedInError() from exc
            raise

    def update(self, log_id: int, fields: Mapping[str, Any]) -> bool:
        columns = [c for c in _UPDATABLE_COLUMNS if c in fields]
        if not columns:
            return False

        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = [fields[c].value if isinstance(fields[c], Enum) else fields[c] for c in columns]
        params.append(int(log_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_logs SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE id=%s",
                tuple(params),
            )
            return cur.rowcount > 0

    def list_filtered(self, filters: AttendanceFilters, *, page: int, limit: int) -> Page[AttendanceLog]:
        clauses = ["1=1"]
        params: list[object] = []

        if filters.staff_id is not None:
            clauses.append("al.staff_id=%s")
            params.append(int(filters.staff_id))
        if filters.department:
            clauses.append("sp.department=%s")
            params.append(filters.department)
        if filters.status is not None:
            clauses.append("al.status=%s")
            params.append(filters.status.value)
        if filters.date_from is not None:
            clauses.append("al.work_date >= %s")
            params.append(filters.date_from)
        if filters.date_to is not None:
            clauses.append("al.work_date <= %s")
            params.append(filters.date_to)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM attendance_logs al
                LEFT JOIN users u ON al.staff_id = u.id
                LEFT JOIN staff_profiles sp ON u.id = sp.user_id
                WHERE {where}
                """,
                tuple(params),
            )
            total = int(fetchone(cur)["total"])

            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY al.check_in_time DESC LIMIT %s OFFSET %s",
                tuple(params) + (int(limit), (int(page) - 1) * int(limit)),
            )
            items = [_row_to_log(r) for r in fetchall(cur)]

        return Page(items=items, total=total, page=page, limit=limit)

    def list_for_staff(
        self,
        *,
        staff_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[AttendanceLog]:
        clauses = ["al.staff_id=%s"]
        params: list[object] = [int(staff_id)]
        if date_from is not None:
            clauses.append("al.work_date >= %s")
            params.append(date_from)
        if date_to is not None:
            clauses.append("al.work_date <= %s")
            params.append(date_to)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY al.check_in_time DESC",
                tuple(params),
            )
            return [_row_to_log(r) for r in fetchall(cur)]

    def list_range(
        self,
        *,
        start: date,
        end: date,
        department: Optional[str] = None,
        staff_id: Optional[int] = None,
    ) -> Sequence[AttendanceLog]:
        clauses = ["al.work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if department:
            clauses.append("sp.department=%s")
            params.append(department)
        if staff_id is not None:
            clauses.append("al.staff_id=%s")
            params.append(int(staff_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY al.check_in_time",
                tuple(params),
            )
            return [_row_to_log(r) for r in fetchall(cur)]
