from __future__ import annotations

import json
import logging

from negotiator.core.logging_config import JsonFormatter


def test_json_formatter_includes_extra_fields():
    record = logging.makeLogRecord(
        {"name": "negotiator.test", "levelname": "INFO", "levelno": logging.INFO, "msg": "call_result.recorded"}
    )
    record.event = "call_result.recorded"
    record.session_id = "abc"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "call_result.recorded"
    assert payload["event"] == "call_result.recorded"
    assert payload["session_id"] == "abc"
    assert payload["level"] == "INFO"
    assert "msg" not in payload
