from __future__ import annotations

import logging
from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..attendance.model import AttendanceLog
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, SystemClock
from ..core.constants import MIN_REPORT_YEAR
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _total_hours(logs: Iterable[AttendanceLog]) -> Decimal:
    return sum((log.work_hours or Decimal("0") for log in logs), Decimal("0.00"))


def _count(logs: Iterable[AttendanceLog], status: AttendanceStatus) -> int:
    return sum(1 for log in logs if log.status == status)


@dataclass
class StaffTotals:
    staff_id: int
    staff_name: Optional[str]
    department: Optional[str]
    records: list[AttendanceLog] = field(default_factory=list)
    total_hours: Decimal = Decimal("0.00")
    total_days: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "department": self.department,
            "records": [r.to_dict() for r in self.records],
            "total_hours": float(self.total_hours),
            "total_days": self.total_days,
        }


@dataclass(frozen=True)
class AttendanceReport:
    date_from: date
    date_to: date
    department: str
    summary: dict[str, Any]
    by_staff: list[StaffTotals]
    detailed_records: list[AttendanceLog]

    def to_dict(self) -> dict[str, Any]:
        return {
            "date_range": {"from": self.date_from.isoformat(), "to": self.date_to.isoformat()},
            "department": self.department,
            "summary": {**self.summary, "total_work_hours": float(self.summary["total_work_hours"])},
            "by_staff": [s.to_dict() for s in self.by_staff],
            "detailed_records": [r.to_dict() for r in self.detailed_records],
        }


@dataclass(frozen=True)
class MonthlySummary:
    staff_id: int
    month: int
    year: int
    attendance: list[AttendanceLog]
    summary: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "year": self.year,
            "attendance": [r.to_dict() for r in self.attendance],
            "summary": {**self.summary, "total_work_hours": float(self.summary["total_work_hours"])},
        }


class AttendanceReportAggregator:
    """Read-only summaries over a range of attendance logs."""

    def __init__(self, attendance: AttendanceRepository, *, clock: Optional[Clock] = None):
        self._attendance = attendance
        self._clock = clock or SystemClock()

    def build_report(self, *, date_from: date, date_to: date, department: Optional[str] = None) -> AttendanceReport:
        if date_to < date_from:
            raise ValidationError("date_to must not be before date_from")

        logs = list(self._attendance.list_range(start=date_from, end=date_to, department=department))

        summary = {
            "total_records": len(logs),
            "total_work_hours": _total_hours(logs),
            "on_time_count": _count(logs, AttendanceStatus.ON_TIME),
            "late_count": _count(logs, AttendanceStatus.LATE),
            "early_leave_count": _count(logs, AttendanceStatus.EARLY_LEAVE),
            "absent_count": _count(logs, AttendanceStatus.ABSENT),
        }

        # dicts keep insertion order, so staff appear in first-seen order
        by_staff: dict[int, StaffTotals] = {}
        for log in logs:
            totals = by_staff.get(log.staff_id)
            if not totals:
                totals = StaffTotals(staff_id=log.staff_id, staff_name=log.staff_name, department=log.department)
                by_staff[log.staff_id] = totals
            totals.records.append(log)
            totals.total_hours += log.work_hours or Decimal("0")
            totals.total_days += 1

        logger.debug(
            "Attendance report built",
            extra={"date_from": date_from, "date_to": date_to, "department": department, "records": len(logs)},
        )
        return AttendanceReport(
            date_from=date_from,
            date_to=date_to,
            department=department or "all",
            summary=summary,
            by_staff=list(by_staff.values()),
            detailed_records=logs,
        )

    def monthly_summary(self, staff_id: int, *, month: int, year: int) -> MonthlySummary:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Invalid month. Must be between 1 and 12")
        if not MIN_REPORT_YEAR <= int(year) <= self._clock.now().year + 1:
            raise ValidationError("Invalid year")

        month, year = int(month), int(year)
        start = date(year, month, 1)
        end = date(year, month, monthrange(year, month)[1])
        logs = list(self._attendance.list_range(start=start, end=end, staff_id=int(staff_id)))

        summary = {
            "total_days": len(logs),
            "total_work_hours": _total_hours(logs),
            "on_time_days": _count(logs, AttendanceStatus.ON_TIME),
            "late_days": _count(logs, AttendanceStatus.LATE),
            "early_leave_days": _count(logs, AttendanceStatus.EARLY_LEAVE),
            "absent_days": _count(logs, AttendanceStatus.ABSENT),
        }
        return MonthlySummary(staff_id=int(staff_id), month=month, year=year, attendance=logs, summary=summary)
