import json
import logging

from src.shift_attendance.shift_attendance.common.logging_utils import JsonFormatter


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("shift_attendance.test", logging.WARNING, __file__, 1, "clock_sync_degraded", (), None)
    record.error = "timeout"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "clock_sync_degraded"
    assert payload["level"] == "WARNING"
    assert payload["error"] == "timeout"
