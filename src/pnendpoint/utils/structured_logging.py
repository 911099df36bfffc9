r"""Structured logging utilities for machine-readable log output.

This module provides utilities for structured logging with JSON
formatting, correlation IDs, and consistent field names. Request
executors log one structured record per delivered status and scope the
correlation ID to the ``requestid`` of the request being executed, so
log entries of one request can be grouped by log aggregation systems.

The structured logging system is opt-in and can be enabled by configuring
Python's logging system to use the provided formatter.

Example:
    Enable structured logging for pnendpoint:

    ```python
    import logging
    from pnendpoint.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("pnendpoint")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "correlation_id_scope",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator

# Context variable for correlation ID (thread-safe)
_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Attributes of every LogRecord, not copied as extra fields
_RECORD_ATTRIBUTES = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "msecs",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "sinfo",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
    }
)


def get_correlation_id() -> str | None:
    """Get the current correlation ID.

    Returns:
        The current correlation ID, or None if not set.
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    Args:
        correlation_id: The correlation ID to set (e.g., request ID).

    Example:
        ```pycon
        >>> from pnendpoint.utils.structured_logging import (
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("request-456")
        >>> get_correlation_id()
        'request-456'

        ```
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID for the current context."""
    _correlation_id.set(None)


@contextmanager
def correlation_id_scope(correlation_id: str | None) -> Generator[None, None, None]:
    """Set the correlation ID for the duration of a block.

    The previous correlation ID is restored when the block exits. Nothing
    is changed if ``correlation_id`` is None.

    Args:
        correlation_id: The correlation ID to use inside the block.

    Example:
        ```pycon
        >>> from pnendpoint.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     correlation_id_scope,
        ...     get_correlation_id,
        ... )
        >>> clear_correlation_id()
        >>> with correlation_id_scope("req-1"):
        ...     get_correlation_id()
        ...
        'req-1'
        >>> get_correlation_id() is None
        True

        ```
    """
    if correlation_id is None:
        yield
        return
    token = _correlation_id.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    This formatter outputs log records as JSON objects with consistent field
    names. It automatically includes correlation IDs if set, and preserves
    any extra fields added to the log record.

    Standard fields in the JSON output:
        - timestamp: ISO 8601 timestamp
        - level: Log level name
        - logger: Logger name
        - message: Log message
        - correlation_id: Optional correlation/request ID
        - module, function, line: Where the log originated
        - thread: Thread name
        - process: Process ID

    Values of extra fields that are not JSON serializable are rendered
    with ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted log string.
        """
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

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format timestamp as ISO 8601 with millisecond precision.

        Args:
            record: The log record.
            datefmt: Ignored, always uses ISO 8601.

        Returns:
            ISO 8601 formatted timestamp.
        """
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured data.

    The extra fields are included in JSON output when using
    ``StructuredFormatter``.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.INFO).
        message: Log message.
        **extra: Additional structured fields to include in the log.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from pnendpoint.utils.structured_logging import (
        ...     StructuredFormatter,
        ...     log_structured,
        ... )
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("test_structured")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.DEBUG)
        >>> log_structured(logger, logging.INFO, "Status delivered", category="timeout")
        >>> "category" in stream.getvalue()
        True

        ```
    """
    logger.log(level, message, extra=extra)
