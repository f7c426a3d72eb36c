"""
Structured logging configuration.

- Development: human-readable colored lines
- Production: one JSON object per line (log aggregator compatible)
- Log level: controlled via LOG_LEVEL env variable

Inside a request every record is stamped with the request id and the
signed-in employee, so service log lines can be tied back to the call
that produced them without passing those values around.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context

# Fields services and middleware pass through ``extra=``
_EXTRA_FIELDS = (
    "method",
    "path",
    "status",
    "duration_ms",
    "remote_addr",
    "request_id",
    "employee_id",
    "actor_id",
    "record_type",
    "record_id",
    "decision",
    "amount",
)


class RequestContextFilter(logging.Filter):
    """Copy request_id / employee_id from ``g`` onto records that lack them."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            if getattr(record, "request_id", None) is None:
                record.request_id = g.get("request_id")
            if getattr(record, "employee_id", None) is None:
                record.employee_id = g.get("employee_id")
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """Colored single-line formatter for development.

    ``12:04:31 INFO     approval_service: time_log #7 moved ... <e2> {time_log#7 420.00}``
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        logger_name = record.name.rsplit(".", 1)[-1]
        parts = [f"{color}{ts} {record.levelname:<8}{self.RESET} {logger_name}: {record.getMessage()}"]

        who = getattr(record, "actor_id", None) or getattr(record, "employee_id", None)
        if who:
            parts.append(f"<{who}>")
        if getattr(record, "record_type", None):
            ref = f"{record.record_type}#{getattr(record, 'record_id', '?')}"
            amount = getattr(record, "amount", None)
            parts.append(f"{{{ref} {amount:.2f}}}" if amount is not None else f"{{{ref}}}")
        duration = getattr(record, "duration_ms", None)
        if duration is not None:
            parts.append(f"[{duration:.0f}ms]")

        line = " ".join(parts)
        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(app):
    """
    Set up logging for the Flask app.

    Reads LOG_LEVEL from env (default: DEBUG in dev, INFO in prod,
    WARNING under TESTING).
    """
    is_testing = app.config.get("TESTING", False)
    is_prod = not app.config.get("DEBUG", False) and not is_testing

    default_level = "INFO" if is_prod else ("WARNING" if is_testing else "DEBUG")
    level_name = os.getenv("LOG_LEVEL", default_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if is_prod else ReadableFormatter())
    handler.addFilter(RequestContextFilter())
    handler.setLevel(level)

    root = logging.getLogger()
    # create_app runs once per test session and once per CLI call; never stack handlers
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ("werkzeug", "sqlalchemy.engine", "flask_limiter"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    app.logger.setLevel(level)
    if not is_testing:
        app.logger.info("Logging configured: level=%s format=%s",
                        level_name, "JSON" if is_prod else "readable")
