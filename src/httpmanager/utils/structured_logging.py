r"""Structured logging utilities for machine-readable log output.

httpmanager logs through the standard ``logging`` module under the
``httpmanager`` logger hierarchy. This module adds an opt-in JSON
formatter, context-local correlation IDs to tie the records of one
logical operation together, and a helper to attach structured fields
to a record.

Example:
    Enable structured logging for httpmanager:

    ```python
    import logging

    from httpmanager.utils.structured_logging import (
        clear_correlation_id,
        configure_structured_logging,
        set_correlation_id,
    )

    configure_structured_logging(logging.DEBUG)
    set_correlation_id("request-123")
    try:
        ...  # issue requests
    finally:
        clear_correlation_id()
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_structured_logging",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
from datetime import datetime, timezone
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "httpmanager_correlation_id", default=None
)

# Attributes present on every LogRecord; anything else came from ``extra``
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def get_correlation_id() -> str | None:
    """Get the correlation ID of the current context.

    Example:
        ```pycon
        >>> from httpmanager.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("req-123")
        >>> get_correlation_id()
        'req-123'
        >>> clear_correlation_id()
        >>> get_correlation_id() is None
        True

        ```
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    The value is stored in a context variable, so it is isolated per
    thread and per asyncio task.
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class StructuredFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Standard fields: ``timestamp`` (ISO 8601, UTC), ``level``,
    ``logger``, ``message``, ``module``, ``function``, ``line``,
    ``thread``, ``process``. ``correlation_id`` is added when set,
    ``exception`` when the record carries exception info, and every field
    passed through ``extra`` is copied as is. Values that are not JSON
    serializable are rendered with ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread": record.threadName,
            "process": record.process,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def log_structured(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Log ``message`` with ``fields`` attached as structured data.

    The fields appear as top-level keys when the record is rendered by
    ``StructuredFormatter``.

    Example:
        ```pycon
        >>> import logging
        >>> from httpmanager.utils.structured_logging import log_structured
        >>> log_structured(
        ...     logging.getLogger("demo"), logging.INFO, "Request completed", status_code=200
        ... )

        ```
    """
    logger.log(level, message, extra=fields)


def configure_structured_logging(
    level: int = logging.INFO, logger_name: str = "httpmanager"
) -> logging.Handler:
    """Attach a ``StructuredFormatter`` stream handler to a logger.

    Args:
        level: The level set on the logger.
        logger_name: The logger to configure. Defaults to the package
            logger.

    Returns:
        The installed handler, so callers can remove it later.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger(logger_name)
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
