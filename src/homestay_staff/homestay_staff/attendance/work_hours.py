from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from ..common.datetime_utils import hours_between


class WorkHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def hours(self, check_in: datetime, check_out: datetime) -> Decimal:
        raise NotImplementedError


class ElapsedHoursCalculator(WorkHoursCalculator):
    """Standard rule: out - in, in hours, two decimals."""

    def hours(self, check_in: datetime, check_out: datetime) -> Decimal:
        return hours_between(check_in, check_out)
