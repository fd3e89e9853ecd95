from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Type

from ..core.constants import NOTES_MAX_LENGTH
from ..core.enums import AttendanceStatus, ShiftStatus, ShiftType
from ..core.exceptions import ValidationError
from .datetime_utils import HHMM_RE, ISO_DATE_RE, parse_hhmm, parse_iso_date


def is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def is_iso_date(value: Any) -> bool:
    if not isinstance(value, str) or not ISO_DATE_RE.match(value):
        return False
    try:
        parse_iso_date(value)
    except ValueError:
        return False
    return True


def is_hhmm(value: Any) -> bool:
    return isinstance(value, str) and bool(HHMM_RE.match(value))


def _enum_values(enum_cls: Type[Enum]) -> list[str]:
    return [m.value for m in enum_cls]


def _in_enum(value: Any, enum_cls: Type[Enum]) -> bool:
    return value in _enum_values(enum_cls)


def require_iso_date(value: Any, field_name: str) -> str:
    if not is_iso_date(value):
        raise ValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD")
    return value


def require_positive_id(value: Any, field_name: str) -> int:
    """Accept ints and digit strings (path/query params) above zero."""
    if isinstance(value, str) and value.isdigit():
        value = int(value)
    if not is_positive_int(value):
        raise ValidationError(f"Valid {field_name} is required")
    return value


def validate_work_shift(data: Mapping[str, Any], *, is_create: bool = True) -> None:
    """Collect every problem with a shift payload and raise them together."""
    errors: list[str] = []

    if is_create:
        if not is_positive_int(data.get("staff_id")):
            errors.append("Valid staff ID is required")
        if not is_iso_date(data.get("shift_date")):
            errors.append("Valid shift date is required (YYYY-MM-DD)")
        if not _in_enum(data.get("shift_type"), ShiftType):
            errors.append("Shift type must be: morning, afternoon, night, or full_day")
        if not is_hhmm(data.get("start_time")):
            errors.append("Start time must be in HH:MM format")
        if not is_hhmm(data.get("end_time")):
            errors.append("End time must be in HH:MM format")
    else:
        if "shift_date" in data and not is_iso_date(data["shift_date"]):
            errors.append("Valid shift date is required (YYYY-MM-DD)")
        if "shift_type" in data and not _in_enum(data["shift_type"], ShiftType):
            errors.append("Shift type must be: morning, afternoon, night, or full_day")
        if "start_time" in data and not is_hhmm(data["start_time"]):
            errors.append("Start time must be in HH:MM format")
        if "end_time" in data and not is_hhmm(data["end_time"]):
            errors.append("End time must be in HH:MM format")

    if data.get("status") is not None and not _in_enum(data["status"], ShiftStatus):
        errors.append("Status must be: scheduled, completed, missed, or cancelled")

    _check_notes(data.get("notes"), errors)

    start, end = data.get("start_time"), data.get("end_time")
    if is_hhmm(start) and is_hhmm(end) and parse_hhmm(end) <= parse_hhmm(start):
        errors.append("End time must be after start time")

    if errors:
        raise ValidationError(errors=errors)


def validate_check_in(data: Mapping[str, Any]) -> Optional[int]:
    errors: list[str] = []
    shift_id = data.get("shift_id")
    if shift_id is not None and not is_positive_int(shift_id):
        errors.append("Shift ID must be a valid integer")
    _check_notes(data.get("notes"), errors)
    if errors:
        raise ValidationError(errors=errors)
    return shift_id


def validate_attendance_update(data: Mapping[str, Any]) -> None:
    errors: list[str] = []
    if data.get("status") is not None and not _in_enum(data["status"], AttendanceStatus):
        errors.append("Invalid status. Must be: on_time, late, early_leave, or absent")
    _check_notes(data.get("notes"), errors)
    if errors:
        raise ValidationError(errors=errors)


def _check_notes(notes: Any, errors: list[str]) -> None:
    if notes is None:
        return
    if not isinstance(notes, str):
        errors.append("Notes must be text")
    elif len(notes) > NOTES_MAX_LENGTH:
        errors.append(f"Notes must be less than {NOTES_MAX_LENGTH} characters")
