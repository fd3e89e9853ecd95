from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import WorkShift
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in, normal check-out (status kept)."""

    def decide(self, *, now: datetime, shift: Optional[WorkShift], current: Optional[AttendanceStatus]) -> StatusDecision:
        return StatusDecision(status=current or AttendanceStatus.ON_TIME)
