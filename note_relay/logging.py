"""
Logging for the relay.

Log lines of a WebSocket connection carry the first characters of its
connection id, HTTP requests carry the correlation id of the request. Both
show up as ``request_id`` in JSON output and in brackets on the console.
Errors are also written as JSON to LOG_FILE_PATH, and everything from INFO
up is pushed to Loki when LOKI_ENABLED is set.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from typing import Any

from note_relay.settings import app_settings

# Fields attached to every log line of the current request or connection
log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

# Attributes every LogRecord has; anything else was passed via ``extra=``
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "correlation_id"}


def get_correlation_id() -> str:
    """
    Id that ties log lines together: the HTTP correlation id, or for a
    WebSocket connection the short connection id from the log context.
    """
    from note_relay.middlewares.correlation_id import (
        get_correlation_id as _get_cid,
    )

    return _get_cid() or log_context.get().get("correlation_id", "")


def set_log_context(**kwargs: Any) -> None:
    """
    Add fields to every following log line of this request or connection.

    Example:
        >>> set_log_context(connection_id="9b2f...", endpoint="/ws")
        >>> logger.info("Relaying note")  # carries connection_id and endpoint
    """
    # Copy so that a context inherited by another task is never mutated
    log_context.set({**log_context.get(), **kwargs})


def get_log_context() -> dict[str, Any]:
    return log_context.get()


def clear_log_context() -> None:
    log_context.set({})


class StructuredJSONFormatter(logging.Formatter):
    """
    One JSON object per log line, with the log context, the correlation id
    and any ``extra=`` fields merged in.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "environment": app_settings.ENVIRONMENT,
        }

        if correlation_id := get_correlation_id():
            log_data["request_id"] = correlation_id

        log_data.update(get_log_context())
        log_data.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES
        )

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Console format. INFO lines stay short, every other level also names
    the code location that logged it.
    """

    SHORT_FMT = "%(asctime)s - [%(correlation_id)s] %(levelname)s: %(message)s"
    LOCATION_FMT = "%(asctime)s - [%(correlation_id)s] %(levelname)s: %(module)s.%(funcName)s:%(lineno)d - %(message)s"

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")
        self._location = logging.Formatter(self.LOCATION_FMT, self.datefmt)
        self._short = logging.Formatter(self.SHORT_FMT, self.datefmt)

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_correlation_id() or "-"
        if record.levelno == logging.INFO:
            return self._short.format(record)
        return self._location.format(record)


def setup_logging() -> logging.Logger:
    """
    Configure the root logger: console output, JSON error file and, when
    enabled, Loki.
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, app_settings.LOG_LEVEL.upper()))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(HumanReadableFormatter())
    logger.addHandler(console_handler)

    try:
        log_dir = os.path.dirname(app_settings.LOG_FILE_PATH)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(app_settings.LOG_FILE_PATH)
    except OSError as e:
        logger.warning(f"Could not write errors to {app_settings.LOG_FILE_PATH}: {e}")
    else:
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(StructuredJSONFormatter())
        logger.addHandler(file_handler)

    if app_settings.LOKI_ENABLED:
        from logging_loki import LokiHandler

        loki_handler = LokiHandler(
            url=f"{app_settings.LOKI_URL}/loki/api/v{app_settings.LOKI_VERSION}/push",
            tags={
                "application": "note-relay",
                "environment": app_settings.ENVIRONMENT,
            },
            version=app_settings.LOKI_VERSION,
        )
        loki_handler.setLevel(logging.INFO)
        loki_handler.setFormatter(StructuredJSONFormatter())
        logger.addHandler(loki_handler)
        logger.info(f"Pushing logs to Loki at {app_settings.LOKI_URL}")

    # Keep test output quiet
    if sys.argv[0].split("/")[-1] in ["pytest"]:
        logging.disable(logging.ERROR)

    return logger


logger = setup_logging()
