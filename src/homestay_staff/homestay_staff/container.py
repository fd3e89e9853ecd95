from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceTracker
from .common.datetime_utils import Clock, SystemClock
from .core.constants import GRACE_MINUTES, SHIFT_LOCK_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import AttendanceReportAggregator
from .shifts.conflicts import ShiftConflictChecker
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftScheduler
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.repository import StaffRepository
from .staff.service import StaffDirectory


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    clock: Clock

    staff_repo: StaffRepository
    shifts_repo: ShiftRepository
    attendance_repo: AttendanceRepository

    staff_directory: StaffDirectory
    conflict_checker: ShiftConflictChecker
    shift_scheduler: ShiftScheduler
    attendance_tracker: AttendanceTracker
    report_aggregator: AttendanceReportAggregator


def wire_container(
    *,
    staff_repo: StaffRepository,
    shifts_repo: ShiftRepository,
    attendance_repo: AttendanceRepository,
    clock: Clock,
    grace_minutes: int = GRACE_MINUTES,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services on top of any repository implementations."""
    staff_directory = StaffDirectory(staff_repo)
    conflict_checker = ShiftConflictChecker(shifts_repo)
    shift_scheduler = ShiftScheduler(shifts_repo, conflict_checker, staff_directory)
    attendance_tracker = AttendanceTracker(
        attendance_repo,
        shifts_repo,
        staff_directory,
        clock=clock,
        strategy_factory=AttendanceStrategyFactory(grace_minutes=grace_minutes),
    )
    report_aggregator = AttendanceReportAggregator(attendance_repo, clock=clock)

    return Container(
        conn=conn,
        clock=clock,
        staff_repo=staff_repo,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        staff_directory=staff_directory,
        conflict_checker=conflict_checker,
        shift_scheduler=shift_scheduler,
        attendance_tracker=attendance_tracker,
        report_aggregator=report_aggregator,
    )


def build_container(
    *,
    db_config: dict,
    grace_minutes: int = GRACE_MINUTES,
    timezone: Optional[str] = None,
    lock_timeout: int = SHIFT_LOCK_TIMEOUT_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire_container(
        staff_repo=MySQLStaffRepository(conn),
        shifts_repo=MySQLShiftRepository(conn, lock_timeout=lock_timeout),
        attendance_repo=MySQLAttendanceRepository(conn),
        clock=SystemClock(timezone),
        grace_minutes=grace_minutes,
        conn=conn,
    )
