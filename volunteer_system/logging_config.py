"""
Structured logging setup.

Every log line is a single JSON object on stdout so that log
collectors can index lifecycle events by activity or application.
Only the context fields the services actually pass as `extra`
are promoted to top-level keys, and only when they are set.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

SERVICE_NAME = "volunteer-system"

# Context keys passed via `extra=` by the services and the sweeper.
CONTEXT_FIELDS = (
    "activity_id",
    "application_id",
    "user_id",
    "handler_id",
    "status",
    "expired_count",
)

# APScheduler reports every job run at INFO; one line per sweep
# from the sweeper itself is enough.
QUIET_LOGGERS = ("apscheduler",)


class JsonFormatter(logging.Formatter):

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "event": record.getMessage(),
        }

        context = {
            key: getattr(record, key)
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        }
        if context:
            payload.update(context)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", service: str = SERVICE_NAME) -> None:
    """Route the root logger to stdout as JSON. Safe to call more than once."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(service))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
