from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Mapping, Optional

import pytest

from src.homestay_staff.homestay_staff.attendance.model import AttendanceFilters, AttendanceLog, NewAttendanceLog
from src.homestay_staff.homestay_staff.common.datetime_utils import FixedClock
from src.homestay_staff.homestay_staff.common.pagination import Page
from src.homestay_staff.homestay_staff.container import wire_container
from src.homestay_staff.homestay_staff.core.enums import Role, StaffStatus
from src.homestay_staff.homestay_staff.core.exceptions import AlreadyCheckedInError
from src.homestay_staff.homestay_staff.shifts.model import NewShift, ShiftFilters, WorkShift
from src.homestay_staff.homestay_staff.staff.model import StaffProfile


class InMemoryStaff:
    def __init__(self, profiles: Mapping[int, StaffProfile]):
        self.profiles = dict(profiles)

    def get_profile(self, staff_id: int) -> Optional[StaffProfile]:
        return self.profiles.get(staff_id)


class InMemoryShifts:
    def __init__(self, staff: Optional[InMemoryStaff] = None):
        self.shifts: dict[int, WorkShift] = {}
        self._staff = staff
        self._id = 0
        self._locks: dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def _decorate(self, shift: WorkShift) -> WorkShift:
        profile = self._staff.get_profile(shift.staff_id) if self._staff else None
        if not profile:
            return shift
        return replace(shift, staff_name=profile.full_name, department=profile.department)

    def get_by_id(self, shift_id: int) -> Optional[WorkShift]:
        shift = self.shifts.get(shift_id)
        return self._decorate(shift) if shift else None

    def find_by_staff_and_date(self, *, staff_id: int, shift_date: date):
        items = [s for s in self.shifts.values() if s.staff_id == staff_id and s.shift_date == shift_date]
        return sorted(items, key=lambda s: s.start_time)

    def insert(self, shift: NewShift) -> int:
        self._id += 1
        self.shifts[self._id] = WorkShift(
            shift_id=self._id,
            staff_id=shift.staff_id,
            shift_date=shift.shift_date,
            shift_type=shift.shift_type,
            start_time=shift.start_time,
            end_time=shift.end_time,
            status=shift.status,
            notes=shift.notes,
        )
        return self._id

    def update(self, shift_id: int, fields: Mapping[str, Any]) -> bool:
        if shift_id not in self.shifts:
            return False
        self.shifts[shift_id] = replace(self.shifts[shift_id], **fields)
        return True

    def delete(self, shift_id: int) -> bool:
        return self.shifts.pop(shift_id, None) is not None

    def list_filtered(self, filters: ShiftFilters, *, page: int, limit: int) -> Page[WorkShift]:
        items = [self._decorate(s) for s in self.shifts.values()]
        if filters.department:
            items = [s for s in items if s.department == filters.department]
        if filters.status is not None:
            items = [s for s in items if s.status == filters.status]
        if filters.staff_id is not None:
            items = [s for s in items if s.staff_id == filters.staff_id]
        if filters.date_from is not None:
            items = [s for s in items if s.shift_date >= filters.date_from]
        if filters.date_to is not None:
            items = [s for s in items if s.shift_date <= filters.date_to]
        items.sort(key=lambda s: s.start_time)
        items.sort(key=lambda s: s.shift_date, reverse=True)
        start = (page - 1) * limit
        return Page(items=items[start : start + limit], total=len(items), page=page, limit=limit)

    def list_for_staff(self, *, staff_id: int, date_from: Optional[date] = None, date_to: Optional[date] = None):
        items = [
            self._decorate(s)
            for s in self.shifts.values()
            if s.staff_id == staff_id
            and (date_from is None or s.shift_date >= date_from)
            and (date_to is None or s.shift_date <= date_to)
        ]
        return sorted(items, key=lambda s: (s.shift_date, s.start_time))

    def list_range(self, *, start: date, end: date):
        items = [self._decorate(s) for s in self.shifts.values() if start <= s.shift_date <= end]
        return sorted(items, key=lambda s: (s.shift_date, s.start_time))

    def staff_lock(self, staff_id: int):
        with self._guard:
            return self._locks.setdefault(staff_id, threading.Lock())


class InMemoryAttendance:
    def __init__(self, staff: Optional[InMemoryStaff] = None):
        self.logs: dict[int, AttendanceLog] = {}
        self._staff = staff
        self._id = 0
        self._insert_lock = threading.Lock()

    def _decorate(self, log: AttendanceLog) -> AttendanceLog:
        profile = self._staff.get_profile(log.staff_id) if self._staff else None
        if not profile:
            return log
        return replace(log, staff_name=profile.full_name, department=profile.department)

    def add(self, log: AttendanceLog) -> AttendanceLog:
        """Seed a finished log directly (reports, history)."""
        self.logs[log.log_id] = log
        self._id = max(self._id, log.log_id)
        return log

    def get_by_id(self, log_id: int) -> Optional[AttendanceLog]:
        log = self.logs.get(log_id)
        return self._decorate(log) if log else None

    def find_for_staff_and_date(self, *, staff_id: int, work_date: date) -> Optional[AttendanceLog]:
        for log in self.logs.values():
            if log.staff_id == staff_id and log.work_date == work_date:
                return self._decorate(log)
        return None

    def insert(self, log: NewAttendanceLog) -> int:
        # same guarantee as the UNIQUE (staff_id, work_date) key
        with self._insert_lock:
            if any(
                x.staff_id == log.staff_id and x.work_date == log.check_in_time.date() for x in self.logs.values()
            ):
                raise AlreadyCheckedInError()
            self._id += 1
            self.logs[self._id] = AttendanceLog(
                log_id=self._id,
                staff_id=log.staff_id,
                shift_id=log.shift_id,
                check_in_time=log.check_in_time,
                check_out_time=None,
                status=log.status,
                notes=log.notes,
            )
            return self._id

    def update(self, log_id: int, fields: Mapping[str, Any]) -> bool:
        if log_id not in self.logs:
            return False
        self.logs[log_id] = replace(self.logs[log_id], **fields)
        return True

    def list_filtered(self, filters: AttendanceFilters, *, page: int, limit: int) -> Page[AttendanceLog]:
        items = [self._decorate(x) for x in self.logs.values()]
        if filters.staff_id is not None:
            items = [x for x in items if x.staff_id == filters.staff_id]
        if filters.department:
            items = [x for x in items if x.department == filters.department]
        if filters.status is not None:
            items = [x for x in items if x.status == filters.status]
        if filters.date_from is not None:
            items = [x for x in items if x.work_date >= filters.date_from]
        if filters.date_to is not None:
            items = [x for x in items if x.work_date <= filters.date_to]
        items.sort(key=lambda x: x.check_in_time, reverse=True)
        start = (page - 1) * limit
        return Page(items=items[start : start + limit], total=len(items), page=page, limit=limit)

    def list_for_staff(self, *, staff_id: int, date_from: Optional[date] = None, date_to: Optional[date] = None):
        items = [
            self._decorate(x)
            for x in self.logs.values()
            if x.staff_id == staff_id
            and (date_from is None or x.work_date >= date_from)
            and (date_to is None or x.work_date <= date_to)
        ]
        return sorted(items, key=lambda x: x.check_in_time, reverse=True)

    def list_range(
        self,
        *,
        start: date,
        end: date,
        department: Optional[str] = None,
        staff_id: Optional[int] = None,
    ):
        items = [self._decorate(x) for x in self.logs.values() if start <= x.work_date <= end]
        if department:
            items = [x for x in items if x.department == department]
        if staff_id is not None:
            items = [x for x in items if x.staff_id == staff_id]
        return sorted(items, key=lambda x: x.check_in_time)


def _profile(staff_id: int, name: str, department: str, *, role=Role.STAFF, status=StaffStatus.ACTIVE):
    return StaffProfile(
        staff_id=staff_id,
        full_name=name,
        role=role,
        department=department,
        position=None,
        status=status,
    )


@pytest.fixture
def staff_repo() -> InMemoryStaff:
    return InMemoryStaff(
        {
            1: _profile(1, "Admin Demo", "management", role=Role.ADMIN),
            2: _profile(2, "Nguyen Van A", "reception"),
            3: _profile(3, "Tran Thi B", "housekeeping"),
            4: _profile(4, "Le Van C", "reception", status=StaffStatus.INACTIVE),
        }
    )


@pytest.fixture
def shifts_repo(staff_repo) -> InMemoryShifts:
    return InMemoryShifts(staff_repo)


@pytest.fixture
def attendance_repo(staff_repo) -> InMemoryAttendance:
    return InMemoryAttendance(staff_repo)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 3, 10, 8, 0))


@pytest.fixture
def container(staff_repo, shifts_repo, attendance_repo, clock):
    return wire_container(
        staff_repo=staff_repo,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        clock=clock,
    )
