r"""Utility functions for error classification, request formatting
and structured logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "classify_transport_error",
    "is_idempotent",
    "log_structured",
    "request_line",
    "request_was_sent",
]

from preemptive.utils.errors import classify_transport_error, request_was_sent
from preemptive.utils.request import is_idempotent, request_line
from preemptive.utils.structured_logging import StructuredFormatter, log_structured
