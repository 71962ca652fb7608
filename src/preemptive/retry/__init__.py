r"""Retry policies composed by the client.

Public API:
    - RetryContext: Per-call attempt bookkeeping
    - ExceptionRetryPolicy: Retry decision after transport failures
    - StatusRetryPolicy: Retry decision after 5xx responses
"""

from __future__ import annotations

__all__ = ["ExceptionRetryPolicy", "RetryContext", "StatusRetryPolicy"]

from preemptive.retry.context import RetryContext
from preemptive.retry.exception_policy import ExceptionRetryPolicy
from preemptive.retry.status_policy import StatusRetryPolicy
