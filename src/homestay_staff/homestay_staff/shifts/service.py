from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.pagination import Page
from ..common.validators import is_hhmm, is_iso_date, require_positive_id, validate_work_shift
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, WEEK_DAYS
from ..core.enums import ACTIVE_SHIFT_STATUSES, ShiftStatus, ShiftType
from ..core.exceptions import ConflictError, NotFoundError, StateError, ValidationError
from ..staff.service import StaffDirectory
from .conflicts import ShiftConflictChecker
from .model import NewShift, ShiftFilters, WorkShift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)

_TIME_FIELDS = ("shift_date", "start_time", "end_time")


def _parse_shift_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert validated wire values (strings) into WorkShift attribute types."""
    fields: dict[str, Any] = {}
    if data.get("shift_date") is not None:
        fields["shift_date"] = parse_iso_date(data["shift_date"])
    if data.get("shift_type") is not None:
        fields["shift_type"] = ShiftType(data["shift_type"])
    if data.get("start_time") is not None:
        fields["start_time"] = parse_hhmm(data["start_time"])
    if data.get("end_time") is not None:
        fields["end_time"] = parse_hhmm(data["end_time"])
    if data.get("status") is not None:
        fields["status"] = ShiftStatus(data["status"])
    if "notes" in data:
        fields["notes"] = (data["notes"] or "").strip() or None
    return fields


class ShiftScheduler:
    """Creates, reschedules and transitions work shifts.

    Every write that changes when a shift happens goes through the conflict
    checker while holding the repository's per-staff lock, so two concurrent
    requests cannot both pass the check and store an overlap.
    """

    def __init__(self, shifts: ShiftRepository, conflicts: ShiftConflictChecker, staff: StaffDirectory):
        self._shifts = shifts
        self._conflicts = conflicts
        self._staff = staff

    # ----- reads -----

    def get_shift(self, shift_id: int) -> WorkShift:
        shift = self._shifts.get_by_id(int(shift_id))
        if not shift:
            raise NotFoundError("Work shift not found")
        return shift

    def list_shifts(
        self,
        filters: ShiftFilters,
        *,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Page[WorkShift]:
        return self._shifts.list_filtered(filters, page=page, limit=limit)

    def shifts_for_staff(
        self,
        staff_id: int,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[WorkShift]:
        return self._shifts.list_for_staff(staff_id=int(staff_id), date_from=date_from, date_to=date_to)

    def shifts_on_date(self, shift_date: date) -> Sequence[WorkShift]:
        return self._shifts.list_range(start=shift_date, end=shift_date)

    def weekly_schedule(self, start_date: date) -> Sequence[WorkShift]:
        return self._shifts.list_range(start=start_date, end=start_date + timedelta(days=WEEK_DAYS - 1))

    def check_conflicts(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Dry-run conflict detection for a prospective interval."""
        required = ("staff_id", "shift_date", "start_time", "end_time")
        if any(not data.get(k) for k in required):
            raise ValidationError("Missing required fields: staff_id, shift_date, start_time, end_time")

        staff_id = require_positive_id(data["staff_id"], "staff ID")
        if not is_iso_date(data["shift_date"]):
            raise ValidationError("Valid shift date is required (YYYY-MM-DD)")
        if not is_hhmm(data["start_time"]) or not is_hhmm(data["end_time"]):
            raise ValidationError("Start and end time must be in HH:MM format")

        exclude = data.get("exclude_shift_id")
        conflicts = self._conflicts.find_conflicts(
            staff_id=staff_id,
            shift_date=parse_iso_date(data["shift_date"]),
            start_time=parse_hhmm(data["start_time"]),
            end_time=parse_hhmm(data["end_time"]),
            exclude_shift_id=require_positive_id(exclude, "exclude shift ID") if exclude else None,
        )
        return {
            "has_conflicts": bool(conflicts),
            "conflicts": conflicts,
            "message": "Shift conflicts detected" if conflicts else "No conflicts found",
        }

    # ----- writes -----

    def create_shift(self, data: Mapping[str, Any]) -> WorkShift:
        logger.debug("Creating work shift", extra={"payload": dict(data)})
        validate_work_shift(data, is_create=True)
        self._staff.require_active(data["staff_id"])

        fields = _parse_shift_fields(data)
        new_shift = NewShift(
            staff_id=int(data["staff_id"]),
            shift_date=fields["shift_date"],
            shift_type=fields["shift_type"],
            start_time=fields["start_time"],
            end_time=fields["end_time"],
            status=fields.get("status", ShiftStatus.SCHEDULED),
            notes=fields.get("notes"),
        )

        with self._shifts.staff_lock(new_shift.staff_id):
            conflicts = self._conflicts.find_conflicts(
                staff_id=new_shift.staff_id,
                shift_date=new_shift.shift_date,
                start_time=new_shift.start_time,
                end_time=new_shift.end_time,
            )
            if conflicts:
                logger.warning(
                    "Shift conflict detected",
                    extra={"staff_id": new_shift.staff_id, "conflict_ids": [c.shift_id for c in conflicts]},
                )
                raise ConflictError(conflicts=conflicts)
            shift_id = self._shifts.insert(new_shift)

        logger.info(
            "Work shift created",
            extra={"shift_id": shift_id, "staff_id": new_shift.staff_id, "shift_date": new_shift.shift_date},
        )
        return self.get_shift(shift_id)

    def assign_shift(self, staff_id: int, data: Mapping[str, Any]) -> WorkShift:
        """Create a shift for ``staff_id``; assigned shifts always start as scheduled."""
        payload = {**data, "staff_id": staff_id, "status": ShiftStatus.SCHEDULED.value}
        return self.create_shift(payload)

    def update_shift(self, shift_id: int, data: Mapping[str, Any]) -> WorkShift:
        shift = self.get_shift(shift_id)
        logger.debug("Updating work shift", extra={"shift_id": shift.shift_id, "payload": dict(data)})
        validate_work_shift(data, is_create=False)

        fields = _parse_shift_fields(data)
        if not fields:
            return shift

        new_status = fields.get("status", shift.status)
        if shift.status == ShiftStatus.COMPLETED and new_status != ShiftStatus.COMPLETED:
            raise StateError("Cannot change status of a completed shift")

        merged_start = fields.get("start_time", shift.start_time)
        merged_end = fields.get("end_time", shift.end_time)
        if merged_end <= merged_start:
            raise ValidationError(errors=["End time must be after start time"])

        reschedules = any(k in fields for k in _TIME_FIELDS)
        # A cancelled/missed shift brought back to scheduled occupies time again.
        reactivates = shift.status not in ACTIVE_SHIFT_STATUSES and new_status in ACTIVE_SHIFT_STATUSES

        if new_status in ACTIVE_SHIFT_STATUSES and (reschedules or reactivates):
            with self._shifts.staff_lock(shift.staff_id):
                conflicts = self._conflicts.find_conflicts(
                    staff_id=shift.staff_id,
                    shift_date=fields.get("shift_date", shift.shift_date),
                    start_time=merged_start,
                    end_time=merged_end,
                    exclude_shift_id=shift.shift_id,
                )
                if conflicts:
                    logger.warning(
                        "Shift update conflict detected",
                        extra={"shift_id": shift.shift_id, "conflict_ids": [c.shift_id for c in conflicts]},
                    )
                    raise ConflictError("Updated shift conflicts with existing schedule", conflicts=conflicts)
                self._shifts.update(shift.shift_id, fields)
        else:
            self._shifts.update(shift.shift_id, fields)

        logger.info("Work shift updated", extra={"shift_id": shift.shift_id, "staff_id": shift.staff_id})
        return self.get_shift(shift.shift_id)

    def mark_completed(self, shift_id: int) -> WorkShift:
        shift = self.get_shift(shift_id)
        if shift.status in ACTIVE_SHIFT_STATUSES:
            self._shifts.update(shift.shift_id, {"status": ShiftStatus.COMPLETED})
        else:
            with self._shifts.staff_lock(shift.staff_id):
                conflicts = self._conflicts.find_conflicts(
                    staff_id=shift.staff_id,
                    shift_date=shift.shift_date,
                    start_time=shift.start_time,
                    end_time=shift.end_time,
                    exclude_shift_id=shift.shift_id,
                )
                if conflicts:
                    raise ConflictError("Completed shift would overlap an existing shift", conflicts=conflicts)
                self._shifts.update(shift.shift_id, {"status": ShiftStatus.COMPLETED})
        logger.info("Shift marked as completed", extra={"shift_id": shift.shift_id, "staff_id": shift.staff_id})
        return self.get_shift(shift.shift_id)

    def mark_missed(self, shift_id: int) -> WorkShift:
        shift = self.get_shift(shift_id)
        if shift.status == ShiftStatus.COMPLETED:
            raise StateError("Cannot mark completed shift as missed")
        self._shifts.update(shift.shift_id, {"status": ShiftStatus.MISSED})
        logger.info("Shift marked as missed", extra={"shift_id": shift.shift_id, "staff_id": shift.staff_id})
        return self.get_shift(shift.shift_id)

    def delete_shift(self, shift_id: int) -> None:
        shift = self.get_shift(shift_id)
        if shift.status == ShiftStatus.COMPLETED:
            raise StateError("Cannot delete completed shifts")
        self._shifts.delete(shift.shift_id)
        logger.info("Work shift deleted", extra={"shift_id": shift.shift_id, "staff_id": shift.staff_id})
