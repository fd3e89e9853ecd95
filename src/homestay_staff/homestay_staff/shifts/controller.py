from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import (
    MANAGEMENT_ROLES,
    current_user_id,
    ensure_self_or_management,
    is_management,
    login_required,
    paginated,
    roles_required,
    success,
)
from ..common.pagination import normalize_paging
from ..common.validators import require_iso_date, require_positive_id
from ..container import Container
from ..core.enums import ShiftStatus
from ..core.exceptions import AuthorizationError, StateError, ValidationError
from .model import ShiftFilters


def _optional_date(name: str):
    value = request.args.get(name)
    return parse_iso_date(require_iso_date(value, name)) if value else None


def _filters_from_query() -> ShiftFilters:
    status = request.args.get("status")
    if status and status not in {s.value for s in ShiftStatus}:
        raise ValidationError("Status must be: scheduled, completed, missed, or cancelled")
    staff_id = request.args.get("staff_id")
    return ShiftFilters(
        department=request.args.get("department") or None,
        status=ShiftStatus(status) if status else None,
        staff_id=require_positive_id(staff_id, "staff ID") if staff_id else None,
        date_from=_optional_date("date_from"),
        date_to=_optional_date("date_to"),
    )


def register(app: Flask, container: Container) -> None:
    scheduler = container.shift_scheduler

    @app.route("/api/staff/shifts", methods=["POST"], endpoint="shifts_create")
    @roles_required(*MANAGEMENT_ROLES)
    def create_shift():
        shift = scheduler.create_shift(request.get_json(silent=True) or {})
        return success(shift, "Work shift created successfully", 201)

    @app.route("/api/staff/shifts", methods=["GET"], endpoint="shifts_list")
    @roles_required(*MANAGEMENT_ROLES)
    def list_shifts():
        page, limit = normalize_paging(request.args.get("page"), request.args.get("limit"))
        result = scheduler.list_shifts(_filters_from_query(), page=page, limit=limit)
        return paginated(result, "Work shifts retrieved successfully")

    @app.route("/api/staff/shifts/my-shifts", methods=["GET"], endpoint="shifts_mine")
    @login_required
    def my_shifts():
        shifts = scheduler.shifts_for_staff(
            current_user_id(),
            date_from=_optional_date("date_from"),
            date_to=_optional_date("date_to"),
        )
        return success(shifts, "Your shifts retrieved successfully")

    @app.route("/api/staff/shifts/<int:shift_id>", methods=["GET"], endpoint="shifts_get")
    @login_required
    def get_shift(shift_id: int):
        shift = scheduler.get_shift(shift_id)
        ensure_self_or_management(shift.staff_id)
        return success(shift, "Work shift retrieved successfully")

    @app.route("/api/staff/shifts/staff/<int:staff_id>", methods=["GET"], endpoint="shifts_for_staff")
    @login_required
    def shifts_for_staff(staff_id: int):
        ensure_self_or_management(staff_id)
        shifts = scheduler.shifts_for_staff(
            staff_id,
            date_from=_optional_date("date_from"),
            date_to=_optional_date("date_to"),
        )
        return success(shifts, "Staff shifts retrieved successfully")

    @app.route("/api/staff/shifts/date/<shift_date>", methods=["GET"], endpoint="shifts_on_date")
    @roles_required(*MANAGEMENT_ROLES)
    def shifts_on_date(shift_date: str):
        day = parse_iso_date(require_iso_date(shift_date, "date"))
        return success(scheduler.shifts_on_date(day), f"Shifts for {shift_date} retrieved successfully")

    @app.route("/api/staff/shifts/weekly/<start_date>", methods=["GET"], endpoint="shifts_weekly")
    @roles_required(*MANAGEMENT_ROLES)
    def weekly_schedule(start_date: str):
        day = parse_iso_date(require_iso_date(start_date, "start date"))
        return success(scheduler.weekly_schedule(day), "Weekly schedule retrieved successfully")

    @app.route("/api/staff/shifts/<int:shift_id>", methods=["PUT"], endpoint="shifts_update")
    @roles_required(*MANAGEMENT_ROLES)
    def update_shift(shift_id: int):
        shift = scheduler.update_shift(shift_id, request.get_json(silent=True) or {})
        return success(shift, "Work shift updated successfully")

    @app.route("/api/staff/shifts/assign", methods=["POST"], endpoint="shifts_assign")
    @roles_required(*MANAGEMENT_ROLES)
    def assign_shift():
        data = request.get_json(silent=True) or {}
        staff_id = require_positive_id(data.get("staff_id"), "staff ID")
        shift = scheduler.assign_shift(staff_id, data)
        return success(shift, "Shift assigned successfully", 201)

    @app.route("/api/staff/shifts/<int:shift_id>/complete", methods=["PATCH"], endpoint="shifts_complete")
    @login_required
    def complete_shift(shift_id: int):
        shift = scheduler.get_shift(shift_id)
        if not is_management() and shift.staff_id != current_user_id():
            raise AuthorizationError("You can only complete your own shifts")
        if shift.status == ShiftStatus.COMPLETED:
            raise StateError("Shift is already completed")
        return success(scheduler.mark_completed(shift_id), "Shift marked as completed")

    @app.route("/api/staff/shifts/<int:shift_id>/missed", methods=["PATCH"], endpoint="shifts_missed")
    @roles_required(*MANAGEMENT_ROLES)
    def missed_shift(shift_id: int):
        return success(scheduler.mark_missed(shift_id), "Shift marked as missed")

    @app.route("/api/staff/shifts/<int:shift_id>", methods=["DELETE"], endpoint="shifts_delete")
    @roles_required(*MANAGEMENT_ROLES)
    def delete_shift(shift_id: int):
        scheduler.delete_shift(shift_id)
        return success(None, "Work shift deleted successfully")

    @app.route("/api/staff/shifts/check-conflicts", methods=["POST"], endpoint="shifts_check_conflicts")
    @roles_required(*MANAGEMENT_ROLES)
    def check_conflicts():
        result = scheduler.check_conflicts(request.get_json(silent=True) or {})
        return success(result, "Conflict check completed")
