from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_duration, parse_iso_date
from ..common.http import (
    MANAGEMENT_ROLES,
    current_user_id,
    ensure_self_or_management,
    login_required,
    paginated,
    roles_required,
    success,
)
from ..common.pagination import normalize_paging
from ..common.validators import require_iso_date, require_positive_id
from ..container import Container
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ValidationError
from .model import AttendanceFilters


def _optional_date(name: str):
    value = request.args.get(name)
    return parse_iso_date(require_iso_date(value, name)) if value else None


def _int_arg(name: str, default: int) -> int:
    value = request.args.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}") from None


def _filters_from_query() -> AttendanceFilters:
    status = request.args.get("status")
    if status and status not in {s.value for s in AttendanceStatus}:
        raise ValidationError("Invalid status. Must be: on_time, late, early_leave, or absent")
    staff_id = request.args.get("staff_id")
    return AttendanceFilters(
        staff_id=require_positive_id(staff_id, "staff ID") if staff_id else None,
        department=request.args.get("department") or None,
        status=AttendanceStatus(status) if status else None,
        date_from=_optional_date("date_from"),
        date_to=_optional_date("date_to"),
    )


def register(app: Flask, container: Container) -> None:
    tracker = container.attendance_tracker
    reports = container.report_aggregator

    @app.route("/api/staff/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @roles_required(Role.STAFF)
    def check_in():
        log = tracker.check_in(current_user_id(), request.get_json(silent=True) or {})
        return success(log, "Checked in successfully", 201)

    @app.route("/api/staff/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @roles_required(Role.STAFF)
    def check_out():
        return success(tracker.check_out(current_user_id()), "Checked out successfully")

    @app.route("/api/staff/attendance", methods=["GET"], endpoint="attendance_list")
    @roles_required(*MANAGEMENT_ROLES)
    def list_logs():
        page, limit = normalize_paging(request.args.get("page"), request.args.get("limit"))
        result = tracker.list_logs(_filters_from_query(), page=page, limit=limit)
        return paginated(result, "Attendance logs retrieved successfully")

    @app.route("/api/staff/attendance/my-attendance", methods=["GET"], endpoint="attendance_mine")
    @login_required
    def my_attendance():
        logs = tracker.logs_for_staff(
            current_user_id(),
            date_from=_optional_date("date_from"),
            date_to=_optional_date("date_to"),
        )
        return success(logs, "Your attendance retrieved successfully")

    @app.route("/api/staff/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today_status():
        return success(tracker.today_status(current_user_id()), "Today's attendance status retrieved")

    @app.route("/api/staff/attendance/report", methods=["GET"], endpoint="attendance_report")
    @roles_required(*MANAGEMENT_ROLES)
    def attendance_report():
        date_from, date_to = request.args.get("date_from"), request.args.get("date_to")
        if not date_from or not date_to:
            raise ValidationError("date_from and date_to are required")
        report = reports.build_report(
            date_from=parse_iso_date(require_iso_date(date_from, "date")),
            date_to=parse_iso_date(require_iso_date(date_to, "date")),
            department=request.args.get("department") or None,
        )
        return success(report, "Attendance report generated successfully")

    @app.route("/api/staff/attendance/<int:log_id>", methods=["GET"], endpoint="attendance_get")
    @login_required
    def get_log(log_id: int):
        log = tracker.get_log(log_id)
        ensure_self_or_management(log.staff_id)
        return success(log, "Attendance log retrieved successfully")

    @app.route("/api/staff/attendance/<int:log_id>", methods=["PUT"], endpoint="attendance_update")
    @roles_required(*MANAGEMENT_ROLES)
    def update_log(log_id: int):
        log = tracker.update_log(log_id, request.get_json(silent=True) or {})
        return success(log, "Attendance log updated successfully")

    @app.route("/api/staff/attendance/staff/<int:staff_id>", methods=["GET"], endpoint="attendance_for_staff")
    @login_required
    def logs_for_staff(staff_id: int):
        ensure_self_or_management(staff_id)
        logs = tracker.logs_for_staff(
            staff_id,
            date_from=_optional_date("date_from"),
            date_to=_optional_date("date_to"),
        )
        return success(logs, "Staff attendance retrieved successfully")

    @app.route("/api/staff/attendance/date/<work_date>", methods=["GET"], endpoint="attendance_on_date")
    @roles_required(*MANAGEMENT_ROLES)
    def logs_on_date(work_date: str):
        day = parse_iso_date(require_iso_date(work_date, "date"))
        return success(tracker.logs_on_date(day), f"Attendance for {work_date} retrieved successfully")

    @app.route("/api/staff/attendance/monthly/<int:staff_id>", methods=["GET"], endpoint="attendance_monthly")
    @login_required
    def monthly(staff_id: int):
        ensure_self_or_management(staff_id)
        today = container.clock.now().date()
        month = _int_arg("month", today.month)
        year = _int_arg("year", today.year)
        result = reports.monthly_summary(staff_id, month=month, year=year)
        return success(result, f"Monthly attendance for {month}/{year} retrieved successfully")

    @app.route(
        "/api/staff/attendance/work-hours/<int:staff_id>/<work_date>",
        methods=["GET"],
        endpoint="attendance_work_hours",
    )
    @login_required
    def work_hours(staff_id: int, work_date: str):
        ensure_self_or_management(staff_id)
        day = parse_iso_date(require_iso_date(work_date, "date"))
        hours = tracker.work_hours_on(staff_id, day)
        return success(
            {
                "staff_id": staff_id,
                "date": work_date,
                "work_hours": float(hours),
                "formatted": format_duration(hours) if hours else "0h 0m",
            },
            "Work hours retrieved successfully",
        )
