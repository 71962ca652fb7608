r"""Per-call retry bookkeeping."""

from __future__ import annotations

__all__ = ["RetryContext"]

from dataclasses import dataclass


@dataclass
class RetryContext:
    """Attempt counters of a single ``execute`` call.

    The attempt number is 1-based and cumulative across the whole call:
    transport retries and status retries share it, and following a
    redirect does not advance it.

    Attributes:
        max_retries: The effective number of retries allowed.
        attempt: The number of the send about to be, or last, performed.
        sends: The total number of sends, redirects included.
        redirects: The number of redirects followed.

    Example:
        ```pycon
        >>> from preemptive.retry.context import RetryContext
        >>> context = RetryContext(max_retries=3)
        >>> context.attempt
        1
        >>> context.next_attempt()
        2

        ```
    """

    max_retries: int
    attempt: int = 1
    sends: int = 0
    redirects: int = 0

    def next_attempt(self) -> int:
        """Advance to the next attempt and return its number."""
        self.attempt += 1
        return self.attempt
