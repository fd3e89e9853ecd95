from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import GRACE_MINUTES
from ..shifts.model import WorkShift
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


def is_late(check_in: datetime, shift: WorkShift, grace: timedelta) -> bool:
    """Strictly after start + grace counts as late."""
    return check_in > shift.starts_at() + grace


def is_early_leave(check_out: datetime, shift: WorkShift, grace: timedelta) -> bool:
    """Strictly before end - grace counts as leaving early."""
    return check_out < shift.ends_at() - grace


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    grace_minutes: int = GRACE_MINUTES

    @property
    def grace(self) -> timedelta:
        return timedelta(minutes=self.grace_minutes)

    def for_checkin(self, *, now: datetime, shift: Optional[WorkShift]) -> AttendanceStrategy:
        if shift and is_late(now, shift, self.grace):
            return LateStrategy()
        return NormalStrategy()

    def for_checkout(self, *, now: datetime, shift: Optional[WorkShift]) -> AttendanceStrategy:
        if shift and is_early_leave(now, shift, self.grace):
            return EarlyLeaveStrategy()
        return NormalStrategy()
