r"""Retry decision after responses signalling server unavailability.

Only statuses strictly greater than 500 are retried. A 500 is treated
as a definite application failure and, like every status up to 500, is
handed back to the caller unchanged.
"""

from __future__ import annotations

__all__ = ["StatusRetryPolicy"]

import logging
from typing import TYPE_CHECKING

from preemptive.core.config import DEFAULT_RETRY_INTERVAL
from preemptive.core.validation import validate_retry_params
from preemptive.utils.request import request_line
from preemptive.utils.structured_logging import log_structured

if TYPE_CHECKING:
    import httpx


class StatusRetryPolicy:
    """Decides whether to resend a request after a 5xx response.

    Args:
        max_retries: Maximum number of retries after the initial attempt.
        retry_interval: Seconds to wait before resending. Defaults to 0,
            which resends immediately; under sustained overload that
            can turn into a retry storm.
        logger: Optional logger, defaults to this module's logger.

    Example:
        ```pycon
        >>> import httpx
        >>> from preemptive.retry import StatusRetryPolicy
        >>> policy = StatusRetryPolicy(max_retries=3)
        >>> request = httpx.Request("GET", "https://example.com")
        >>> policy.should_retry(httpx.Response(503, request=request), attempt=3)
        True
        >>> policy.should_retry(httpx.Response(503, request=request), attempt=4)
        False
        >>> policy.should_retry(httpx.Response(500, request=request), attempt=1)
        False

        ```
    """

    def __init__(
        self,
        max_retries: int,
        retry_interval: float = DEFAULT_RETRY_INTERVAL,
        logger: logging.Logger | None = None,
    ) -> None:
        validate_retry_params(retry_interval=retry_interval)
        self.max_retries = max_retries
        self.retry_interval = retry_interval
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def should_retry(self, response: httpx.Response, attempt: int) -> bool:
        """Decide whether to retry after a response.

        Args:
            response: The received response. Its ``request`` is used for
                logging when available.
            attempt: The cumulative number of the attempt that produced
                the response (1-based).

        Returns:
            ``True`` if the request should be sent again.
        """
        status_code = response.status_code
        if status_code <= 500:
            return False

        url = method = None
        line = "<unknown>"
        try:
            request = response.request
        except RuntimeError:
            # Response built without a request
            pass
        else:
            line, url, method = request_line(request), str(request.url), request.method
        log_structured(
            self.logger,
            logging.WARNING,
            f"Error occurred for request {line}. Received status code {status_code} "
            f"and message: {response.reason_phrase}.",
            url=url,
            method=method,
            status_code=status_code,
        )
        if attempt > self.max_retries:
            return False
        log_structured(
            self.logger,
            logging.WARNING,
            f"Attempting retry #{attempt}",
            attempt=attempt,
            status_code=status_code,
        )
        return True

    def get_retry_interval(self) -> float:
        """Return the number of seconds to wait before resending."""
        return self.retry_interval
