"""Logging helpers for lockable-file.

The library only logs through ``logging.getLogger(__name__)`` loggers and
never configures handlers on import. ``setup_logging`` is for applications and
tests that want lock activity on the console.
"""

import json
import logging
import os
import sys
from datetime import UTC, datetime

from lockable_file.core.constants import (
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    LOG_LEVEL_ENV,
    VALID_LOG_LEVELS,
)

_LOG_RECORD_RESERVED_FIELDS = set(logging.makeLogRecord({}).__dict__.keys()) | {"message", "asctime"}
_PACKAGE_LOGGER_NAME = "lockable_file"

# Handler installed by setup_logging, replaced on reconfiguration
_configured_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging output.

    Each record becomes one JSON object per line. Context fields attached
    with ``with_log_context`` (file name, mechanism) are merged in.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "process": record.process,
            "thread_name": record.threadName,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _LOG_RECORD_RESERVED_FIELDS or key.startswith("_"):
                continue
            log_entry.setdefault(key, value)

        return json.dumps(log_entry, default=str)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter whose persistent fields yield to per-call ``extra`` keys."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        call_extra = kwargs.get("extra") or {}
        kwargs["extra"] = {**self.extra, **call_extra}
        return msg, kwargs


def with_log_context(
    logger: logging.Logger | logging.LoggerAdapter, **context: object
) -> logging.Logger | logging.LoggerAdapter:
    """Return a logger enriched with persistent contextual fields.

    ``None`` values are dropped so optional context never shows up as null.
    Wrapping an adapter keeps its fields and attaches to the underlying logger.
    """
    fields: dict[str, object] = {}
    target = logger
    while isinstance(target, logging.LoggerAdapter):
        fields = {**(target.extra or {}), **fields}
        target = target.logger
    if not isinstance(target, logging.Logger):
        return logger

    fields.update((key, value) for key, value in context.items() if value is not None)
    return ContextLoggerAdapter(target, fields)


def setup_logging(log_level: str | None = None, log_format: str = "text") -> logging.Logger:
    """Send lockable-file log records to stderr.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "text" (default) or "json" for structured output

    Returns:
        The package logger

    Priority: 1) Passed parameter, 2) Environment variable LOG_LEVEL, 3) Default INFO
    """
    global _configured_handler

    if log_level is None:
        log_level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)

    if log_level.upper() not in VALID_LOG_LEVELS:
        print(f"Warning: Invalid log level '{log_level}', using {DEFAULT_LOG_LEVEL}", file=sys.stderr)
        log_level = DEFAULT_LOG_LEVEL

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(_PACKAGE_LOGGER_NAME)

    if _configured_handler is not None:
        logger.removeHandler(_configured_handler)
        _configured_handler.close()

    handler = logging.StreamHandler(sys.stderr)
    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    handler.setLevel(numeric_level)

    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    _configured_handler = handler

    return logger
