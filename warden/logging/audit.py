"""Structured JSON logging for the Warden client.

The library only emits records on the "warden" logger tree; applications
opt in to output with setup_logging(). Records are single-line JSON so log
aggregators can ingest them without parsing rules.

API keys are never part of a log record.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from warden.config.settings import Settings, get_settings

LOGGER_NAME = "warden.client"

# Correlates every attempt of one logical call
call_id_var: ContextVar[str] = ContextVar("call_id", default="")

logging.getLogger("warden").addHandler(logging.NullHandler())


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "call_id": call_id_var.get(""),
        }
        if hasattr(record, "audit_data"):
            log_entry.update(record.audit_data)
        return json.dumps(log_entry, default=str)


def setup_logging(settings: Settings | None = None) -> None:
    """Send client logs to stdout (and optionally a file) as JSON lines."""
    settings = settings or get_settings()

    logger = logging.getLogger("warden")
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False


def get_client_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def generate_call_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestTimer:
    """Context manager to measure attempt latency."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
