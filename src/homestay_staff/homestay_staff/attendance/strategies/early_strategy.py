from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import WorkShift
from .base import AttendanceStrategy, StatusDecision


class EarlyLeaveStrategy(AttendanceStrategy):
    """Early check-out; replaces whatever status the check-in recorded."""

    def decide(self, *, now: datetime, shift: Optional[WorkShift], current: Optional[AttendanceStatus]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.EARLY_LEAVE)
