"""
Tests for the JSON log formatter.
"""

import json
import logging
import sys

from volunteer_system.logging_config import JsonFormatter, configure_logging


def make_record(message="application_created", **extra):
    record = logging.LogRecord(
        name="volunteer_system.services.application_service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_context_fields_become_top_level_keys():
    line = JsonFormatter().format(
        make_record(application_id=3, activity_id=7, user_id=11)
    )

    payload = json.loads(line)
    assert payload["event"] == "application_created"
    assert payload["service"] == "volunteer-system"
    assert payload["application_id"] == 3
    assert payload["activity_id"] == 7
    assert payload["user_id"] == 11
    assert payload["level"] == "INFO"


def test_unset_and_unknown_fields_are_left_out():
    line = JsonFormatter(service="sweeper").format(
        make_record("Sweep finished", expired_count=0, handler_id=None, colour="red")
    )

    payload = json.loads(line)
    assert payload["service"] == "sweeper"
    assert payload["expired_count"] == 0
    assert "handler_id" not in payload
    assert "colour" not in payload


def test_exception_is_included():
    try:
        raise RuntimeError("disk full")
    except RuntimeError:
        record = make_record("Failed to expire activity", activity_id=5)
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))

    assert payload["activity_id"] == 5
    assert "RuntimeError: disk full" in payload["exception"]


def test_configure_logging_installs_json_handler(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging("DEBUG", service="sweeper")

    assert len(calls) == 1
    assert calls[0]["level"] == "DEBUG"
    assert calls[0]["force"] is True
    formatter = calls[0]["handlers"][0].formatter
    assert isinstance(formatter, JsonFormatter)
    assert formatter.service == "sweeper"
    assert logging.getLogger("apscheduler").level == logging.WARNING
