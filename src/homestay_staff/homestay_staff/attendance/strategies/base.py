from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import WorkShift


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status.

    ``current`` is None at check-in and the stored status at check-out.
    """

    @abstractmethod
    def decide(self, *, now: datetime, shift: Optional[WorkShift], current: Optional[AttendanceStatus]) -> StatusDecision:
        raise NotImplementedError
