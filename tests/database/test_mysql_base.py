from datetime import time, timedelta

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from src.homestay_staff.homestay_staff.database.mysql_base import is_duplicate_key, normalize_mysql_time


@pytest.mark.parametrize(
    "raw, expected",
    [
        (time(8, 30), time(8, 30)),
        (timedelta(hours=16, minutes=45), time(16, 45)),
        ("07:05:09", time(7, 5, 9)),
        ("23:59", time(23, 59)),
        (None, None),
    ],
)
def test_normalize_mysql_time(raw, expected):
    assert normalize_mysql_time(raw) == expected


def test_duplicate_key_detection():
    assert is_duplicate_key(IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY))
    assert not is_duplicate_key(IntegrityError(msg="FK failed", errno=errorcode.ER_NO_REFERENCED_ROW_2))
