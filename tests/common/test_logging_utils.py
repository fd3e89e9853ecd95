import json
import logging

from src.homestay_staff.homestay_staff.common.logging_utils import JsonFormatter


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("homestay.shifts", logging.INFO, __file__, 1, "Work shift created", None, None)
    record.shift_id = 12
    record.staff_id = 2

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "homestay.shifts"
    assert payload["message"] == "Work shift created"
    assert payload["shift_id"] == 12 and payload["staff_id"] == 2
    assert "exception" not in payload
