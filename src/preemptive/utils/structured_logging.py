r"""Structured logging utilities for machine-readable log output.

Retry and redirect decisions are logged with extra fields (``url``,
``method``, ``attempt``, ``status_code``, ``error_kind``). With the
default formatter they are ordinary log lines; installing
``StructuredFormatter`` turns every record into a JSON object carrying
those fields.

Example:
    ```python
    import logging
    from preemptive.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("preemptive")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = ["StructuredFormatter", "log_structured"]

import json
import logging
import time
from typing import Any

# Attributes every LogRecord carries; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(
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


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Standard fields in the JSON output are ``timestamp`` (ISO 8601),
    ``level``, ``logger``, ``message``, ``module``, ``function``,
    ``line`` and ``thread``. Fields passed through ``extra`` are
    appended, and ``exception`` holds the formatted traceback when the
    record has one.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from preemptive.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured_formatter")
        >>> logger.addHandler(handler)
        >>> logger.warning("Attempting retry #1", extra={"attempt": 1})
        >>> '"attempt": 1' in stream.getvalue()
        True

        ```
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
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        """Format the record timestamp as ISO 8601 with milliseconds.

        Args:
            record: The log record.
            datefmt: Ignored, the format is always ISO 8601.

        Returns:
            The formatted timestamp.
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

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.WARNING).
        message: Log message.
        **extra: Additional structured fields attached to the record.

    Example:
        ```pycon
        >>> import logging
        >>> from preemptive.utils.structured_logging import log_structured
        >>> logger = logging.getLogger("doctest_log_structured")
        >>> log_structured(logger, logging.DEBUG, "Redirecting", url="https://example.com")

        ```
    """
    logger.log(level, message, extra=extra)
