from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock
from ..common.pagination import Page
from ..common.validators import validate_attendance_update, validate_check_in
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AuthorizationError,
    NoCheckInError,
    NotFoundError,
    ValidationError,
)
from ..shifts.model import WorkShift
from ..shifts.repository import ShiftRepository
from ..staff.service import StaffDirectory
from .factory import AttendanceStrategyFactory
from .model import AttendanceFilters, AttendanceLog, NewAttendanceLog
from .repository import AttendanceRepository
from .work_hours import ElapsedHoursCalculator, WorkHoursCalculator

logger = logging.getLogger(__name__)


class AttendanceTracker:
    """Check-in/check-out lifecycle for one staff member per calendar day.

    NoLog -> CheckedIn -> CheckedOut. Status is derived by the strategy chosen
    from the referenced shift; "now" always comes from the injected clock.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        shifts: ShiftRepository,
        staff: StaffDirectory,
        *,
        clock: Optional[Clock] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        calculator: Optional[WorkHoursCalculator] = None,
    ):
        self._attendance = attendance
        self._shifts = shifts
        self._staff = staff
        self._clock = clock or SystemClock()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._calculator = calculator or ElapsedHoursCalculator()

    def _shift_for_check_in(self, staff_id: int, shift_id: int, today: date) -> WorkShift:
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise NotFoundError("Work shift not found")
        if shift.staff_id != staff_id:
            raise AuthorizationError("Shift is not assigned to you")
        if shift.shift_date != today:
            raise ValidationError("Shift is not for today")
        return shift

    # ----- lifecycle -----

    def check_in(self, staff_id: int, data: Optional[Mapping[str, Any]] = None) -> AttendanceLog:
        staff_id = int(staff_id)
        shift_id = validate_check_in(data or {})
        self._staff.require_active(staff_id)

        now = self._clock.now()
        today = now.date()

        if self._attendance.find_for_staff_and_date(staff_id=staff_id, work_date=today):
            raise AlreadyCheckedInError()

        shift = self._shift_for_check_in(staff_id, shift_id, today) if shift_id else None
        strategy = self._factory.for_checkin(now=now, shift=shift)
        decision = strategy.decide(now=now, shift=shift, current=None)

        notes = (data or {}).get("notes")
        log_id = self._attendance.insert(
            NewAttendanceLog(
                staff_id=staff_id,
                shift_id=shift.shift_id if shift else None,
                check_in_time=now,
                status=decision.status,
                notes=notes or decision.note,
            )
        )
        logger.info(
            "Staff checked in",
            extra={"staff_id": staff_id, "shift_id": shift_id, "status": decision.status.value, "log_id": log_id},
        )
        return self.get_log(log_id)

    def check_out(self, staff_id: int) -> AttendanceLog:
        staff_id = int(staff_id)
        now = self._clock.now()

        log = self._attendance.find_for_staff_and_date(staff_id=staff_id, work_date=now.date())
        if not log:
            raise NoCheckInError()
        if log.check_out_time is not None:
            raise AlreadyCheckedOutError()

        shift = self._shifts.get_by_id(log.shift_id) if log.shift_id else None
        strategy = self._factory.for_checkout(now=now, shift=shift)
        # TODO: decide whether leaving early should overwrite a late check-in or be recorded alongside it.
        decision = strategy.decide(now=now, shift=shift, current=log.status)
        work_hours = self._calculator.hours(log.check_in_time, now)

        self._attendance.update(
            log.log_id,
            {"check_out_time": now, "work_hours": work_hours, "status": decision.status},
        )
        logger.info(
            "Staff checked out",
            extra={"staff_id": staff_id, "log_id": log.log_id, "work_hours": str(work_hours), "status": decision.status.value},
        )
        return self.get_log(log.log_id)

    def update_log(self, log_id: int, data: Mapping[str, Any]) -> AttendanceLog:
        """Administrative correction: only status and notes are settable."""
        log = self.get_log(log_id)
        validate_attendance_update(data)

        fields: dict[str, Any] = {}
        if data.get("status") is not None:
            fields["status"] = AttendanceStatus(data["status"])
        if "notes" in data:
            fields["notes"] = data["notes"]
        if not fields:
            return log

        self._attendance.update(log.log_id, fields)
        logger.info("Attendance log updated", extra={"log_id": log.log_id, "fields": sorted(fields)})
        return self.get_log(log.log_id)

    # ----- reads -----

    def get_log(self, log_id: int) -> AttendanceLog:
        log = self._attendance.get_by_id(int(log_id))
        if not log:
            raise NotFoundError("Attendance log not found")
        return log

    def list_logs(
        self,
        filters: AttendanceFilters,
        *,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Page[AttendanceLog]:
        return self._attendance.list_filtered(filters, page=page, limit=limit)

    def logs_for_staff(
        self,
        staff_id: int,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[AttendanceLog]:
        return self._attendance.list_for_staff(staff_id=int(staff_id), date_from=date_from, date_to=date_to)

    def logs_on_date(self, work_date: date) -> Sequence[AttendanceLog]:
        return self._attendance.list_range(start=work_date, end=work_date)

    def today_status(self, staff_id: int) -> dict[str, Any]:
        today = self._clock.now().date()
        log = self._attendance.find_for_staff_and_date(staff_id=int(staff_id), work_date=today)

        if not log:
            message = "Not checked in yet today"
        elif log.check_out_time is not None:
            message = "Checked out for today"
        else:
            message = "Checked in, not checked out yet"

        return {
            "checked_in": log is not None,
            "checked_out": bool(log and log.check_out_time is not None),
            "attendance_log": log,
            "message": message,
        }

    def work_hours_on(self, staff_id: int, work_date: date) -> Decimal:
        log = self._attendance.find_for_staff_and_date(staff_id=int(staff_id), work_date=work_date)
        if not log or log.work_hours is None:
            return Decimal("0.00")
        return log.work_hours
