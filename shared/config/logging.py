"""
Structured logging for the organizer persistence layer.

Loggers obtained from get_logger() accept keyword arguments on every level
method; they are attached to the record as ``extra_data`` and rendered by
both formatters:

    logger.warning("Validation skipped: validator failed", mutation="createTenant")

Records also carry the request and tenant identifiers of the current
execution context (see shared.infrastructure.context.ContextFilter).
Production emits one JSON object per line; development emits colored text.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings

# Placeholder ContextFilter writes when no value is bound
UNSET = "-"


def _context_of(record: logging.LogRecord) -> dict[str, str]:
    """Request/tenant identifiers bound to a record, skipping unset ones."""
    context = {}
    for key in ("request_id", "tenant_id"):
        value = getattr(record, key, None)
        if value and value != UNSET:
            context[key] = value
    return context


def _data_of(record: logging.LogRecord) -> dict[str, Any] | None:
    return getattr(record, "extra_data", None) or None


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context_of(record),
        }

        data = _data_of(record)
        if data:
            payload["data"] = data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if settings.debug:
            payload["source"] = f"{record.filename}:{record.lineno} in {record.funcName}"

        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Colored single-line text for a terminal."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname, self.RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        context = _context_of(record)
        tags = []
        if "request_id" in context:
            tags.append(context["request_id"][:8])
        if "tenant_id" in context:
            tags.append(f"t:{context['tenant_id'][:8]}")
        prefix = f"{self.DIM}[{' '.join(tags)}]{self.RESET} " if tags else ""

        line = f"{color}{clock} {record.levelname:<8}{self.RESET} {prefix}{record.name}: {record.getMessage()}"

        data = _data_of(record)
        if data:
            line += " (" + ", ".join(f"{key}={value}" for key, value in data.items()) + ")"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take structured keyword arguments."""

    def _log_structured(self, level: int, msg: str, args: tuple, kwargs: dict[str, Any]) -> None:
        if not self.isEnabledFor(level):
            return
        exc_info = kwargs.pop("exc_info", None)
        extra = kwargs.pop("extra", None) or {}
        extra["extra_data"] = kwargs or None
        self._log(level, msg, args, exc_info=exc_info, extra=extra, stacklevel=3)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_structured(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_structured(logging.INFO, msg, args, kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_structured(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_structured(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_structured(logging.CRITICAL, msg, args, kwargs)


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """
    Install a stdout handler on the root logger.

    Call once at process startup. Level and format follow settings:
    ``debug`` forces DEBUG, ``environment == "production"`` selects JSON.
    """
    from shared.infrastructure.context import ContextFilter

    if settings.debug:
        level = logging.DEBUG
    else:
        level = logging.getLevelName(settings.log_level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(ContextFilter())
    handler.setFormatter(
        StructuredFormatter() if settings.environment == "production" else DevelopmentFormatter()
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # SQL echo is handled by the engine, keep the pool quiet
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Logger for a module.

    Usage:
        logger = get_logger(__name__)
        logger.info("Entity soft-deleted", entity="Space", entity_id=space_id)
        logger.error("Failed to commit unit of work", exc_info=True)
    """
    return logging.getLogger(name)  # type: ignore[return-value]
