r"""Retry decision after transport-level failures."""

from __future__ import annotations

__all__ = ["REQUEST_SENT_RETRY_ENABLED", "ExceptionRetryPolicy"]

import logging
from typing import TYPE_CHECKING

from preemptive.exceptions import NON_RETRIABLE_ERROR_KINDS
from preemptive.utils.request import is_idempotent, request_line
from preemptive.utils.structured_logging import log_structured

if TYPE_CHECKING:
    import httpx

    from preemptive.exceptions import ErrorKind

# Requests that failed after being (partially) transmitted are still retried
REQUEST_SENT_RETRY_ENABLED = True


class ExceptionRetryPolicy:
    """Decides whether to resend a request after a transport failure.

    The rules are applied in order:

    1. Retries are exhausted once ``attempt > max_retries``.
    2. Non-retriable kinds (secure channel failures) are never retried.
    3. Requests without an enclosed body are always safe to resend.
       Other requests are resent when they were not transmitted yet, or
       when ``request_sent_retry_enabled`` is set.

    Args:
        max_retries: Maximum number of retries after the initial attempt.
        request_sent_retry_enabled: Whether requests that may have been
            transmitted are resent.
        logger: Optional logger, defaults to this module's logger.

    Example:
        ```pycon
        >>> from preemptive.exceptions import ErrorKind
        >>> from preemptive.retry import ExceptionRetryPolicy
        >>> policy = ExceptionRetryPolicy(max_retries=2)
        >>> policy.should_retry(ErrorKind.TIMEOUT, attempt=1)
        True
        >>> policy.should_retry(ErrorKind.TIMEOUT, attempt=3)
        False
        >>> policy.should_retry(ErrorKind.SECURE_CHANNEL_FAILURE, attempt=1)
        False

        ```
    """

    non_retriable_kinds = NON_RETRIABLE_ERROR_KINDS

    def __init__(
        self,
        max_retries: int,
        request_sent_retry_enabled: bool = REQUEST_SENT_RETRY_ENABLED,
        logger: logging.Logger | None = None,
    ) -> None:
        self.max_retries = max_retries
        self.request_sent_retry_enabled = request_sent_retry_enabled
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def should_retry(
        self,
        kind: ErrorKind,
        attempt: int,
        request: httpx.Request | None = None,
        *,
        request_sent: bool = True,
    ) -> bool:
        """Decide whether to retry after a transport failure.

        Args:
            kind: The classified failure kind.
            attempt: The cumulative number of the failed attempt
                (1-based).
            request: The request that failed, if available.
            request_sent: Whether the request may have been transmitted
                before the failure.

        Returns:
            ``True`` if the request should be sent again.
        """
        if attempt > self.max_retries:
            return False
        if kind in self.non_retriable_kinds:
            return False
        if not self._is_safe_to_retry(request, request_sent):
            return False
        log_structured(
            self.logger,
            logging.WARNING,
            f"Attempting retry #{attempt}",
            attempt=attempt,
            error_kind=kind.value,
        )
        return True

    def log_failure(self, request: httpx.Request, exc: BaseException, kind: ErrorKind) -> None:
        """Log a transport failure before the retry decision."""
        log_structured(
            self.logger,
            logging.WARNING,
            f"Error occurred for request {request_line(request)}: {exc}.",
            url=str(request.url),
            method=request.method,
            error_kind=kind.value,
        )

    def _is_safe_to_retry(self, request: httpx.Request | None, request_sent: bool) -> bool:
        if is_idempotent(request):
            return True
        return not request_sent or self.request_sent_retry_enabled
