from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol
from zoneinfo import ZoneInfo

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
HHMM_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

_TWO_PLACES = Decimal("0.01")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse a 24-hour HH:MM string into time."""
    return datetime.strptime(value, "%H:%M").time()


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def hours_between(start: datetime, end: datetime) -> Decimal:
    """Elapsed hours between two instants, rounded half-up to two places."""
    seconds = Decimal(str((end - start).total_seconds()))
    return (seconds / Decimal(3600)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def format_duration(hours: Optional[Decimal]) -> str:
    """Render decimal hours as "Xh Ym"; "N/A" when nothing was worked yet."""
    if not hours:
        return "N/A"
    whole = int(hours)
    minutes = int(((hours - whole) * 60).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return f"{whole}h {minutes}m"


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Wall clock, as naive local time.

    When a timezone name is given, "now" is taken in that zone and then made
    naive so it compares with the naive shift times stored in MySQL.
    Microseconds are dropped to match the DATETIME(0) columns.
    """

    def __init__(self, tz_name: Optional[str] = None):
        self._tz = ZoneInfo(tz_name) if tz_name else None

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now().replace(microsecond=0)
        return datetime.now(self._tz).replace(tzinfo=None, microsecond=0)


@dataclass
class FixedClock:
    """Clock pinned to a single instant (tests, replays)."""

    instant: datetime

    def now(self) -> datetime:
        return self.instant
