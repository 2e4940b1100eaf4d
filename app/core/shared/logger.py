"""
Logging for the e-commerce core.

`configure_logging` installs one console handler (colored, JSON or plain)
and an optional JSON file handler. Services and repositories log through a
`ContextLogger`, whose key/value context (order id, transaction id, user)
ends up in every record it emits.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

LINE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "aiosqlite")


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, context under "context"."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = _record_context(record)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter: colored level name, context appended as key=value."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        plain_level = record.levelname
        record.levelname = f"{self.COLORS.get(record.levelno, '')}{plain_level}{self.RESET}"
        try:
            line = super().format(record)
        finally:
            record.levelname = plain_level
        context = _record_context(record)
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


class ContextLogger:
    """
    Wrapper around a stdlib logger that attaches context to each record.

    Keyword arguments of a log call are merged over the bound context:

        log = get_service_logger("payment").with_context(user_id=user_id)
        log.info("Gateway approved payment", transaction_id=str(tx_id))
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        self._logger = logging.getLogger(name)
        self._context = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def with_context(self, **context: Any) -> "ContextLogger":
        """A child logger with more bound context; this one is left untouched."""
        return ContextLogger(self._logger.name, {**self._context, **context})

    def log(self, level: int, message: str, exc_info: bool = False, **context: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, exc_info=exc_info, extra={"context": {**self._context, **context}})

    def debug(self, message: str, **context: Any) -> None:
        self.log(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self.log(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.log(logging.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        self.log(logging.ERROR, message, **context)

    def exception(self, message: str, **context: Any) -> None:
        """ERROR with the traceback being handled."""
        self.log(logging.ERROR, message, exc_info=True, **context)


def configure_logging(level: str = "INFO", format_type: str = "colored", log_file: str | None = None) -> None:
    """
    Replace the root handlers according to settings.

    Args:
        level: LOG_LEVEL name; unknown names fall back to INFO
        format_type: LOG_FORMAT, one of 'colored', 'json' or 'plain'
        log_file: LOG_FILE; when set, records are also written there as JSON
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    formatters: dict[str, logging.Formatter] = {
        "json": JSONFormatter(),
        "colored": ColoredFormatter(LINE_FORMAT, datefmt=DATE_FORMAT),
    }
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatters.get(format_type, logging.Formatter(LINE_FORMAT, datefmt=DATE_FORMAT)))
    handlers: list[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(numeric_level)
    for handler in handlers:
        handler.setLevel(numeric_level)
        root.addHandler(handler)

    # SQL echo is controlled by DB_ECHO
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, context: dict[str, Any] | None = None) -> ContextLogger:
    return ContextLogger(name, context)


def get_service_logger(service_name: str) -> ContextLogger:
    """Logger for an orchestration service, tagged with its name."""
    return get_logger(f"service.{service_name}", {"component": "service", "service": service_name})


def get_repository_logger(repo_name: str) -> ContextLogger:
    """Logger for a repository, tagged with its name."""
    return get_logger(f"repository.{repo_name}", {"component": "repository", "repository": repo_name})
