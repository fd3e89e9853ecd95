from datetime import datetime
from decimal import Decimal

from src.homestay_staff.homestay_staff.common.datetime_utils import (
    FixedClock,
    SystemClock,
    format_duration,
    hours_between,
)


def test_hours_between_rounds_half_up():
    assert hours_between(datetime(2025, 1, 1, 8), datetime(2025, 1, 1, 8, 7, 30)) == Decimal("0.13")
    assert hours_between(datetime(2025, 1, 1, 8), datetime(2025, 1, 1, 8)) == Decimal("0.00")


def test_format_duration():
    assert format_duration(Decimal("8.50")) == "8h 30m"
    assert format_duration(Decimal("0.25")) == "0h 15m"
    assert format_duration(None) == "N/A"
    assert format_duration(Decimal("0")) == "N/A"


def test_fixed_clock():
    instant = datetime(2025, 6, 1, 9, 30)
    assert FixedClock(instant).now() == instant


def test_system_clock_drops_microseconds():
    assert SystemClock().now().microsecond == 0
    assert SystemClock("Asia/Ho_Chi_Minh").now().microsecond == 0
    assert SystemClock("Asia/Ho_Chi_Minh").now().tzinfo is None
