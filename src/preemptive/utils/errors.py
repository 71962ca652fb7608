r"""Classification of httpx transport errors.

This module maps the httpx exception hierarchy onto the closed
``ErrorKind`` enumeration consulted by the retry policy.
"""

from __future__ import annotations

__all__ = ["classify_transport_error", "iter_causes", "request_was_sent"]

import ssl
from typing import TYPE_CHECKING

import httpx

from preemptive.exceptions import ErrorKind

if TYPE_CHECKING:
    from collections.abc import Iterator


def iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield an exception and every exception it was raised from.

    Follows ``__cause__`` first, then ``__context__``, and stops on
    cycles.
    """
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def classify_transport_error(exc: BaseException) -> ErrorKind:
    """Classify a transport failure.

    httpx re-raises TLS failures as ``httpx.ConnectError`` (or a read
    error mid-stream), so the whole cause chain is searched for an
    ``ssl.SSLError`` first.

    Args:
        exc: The exception raised while sending a request.

    Returns:
        The error kind.

    Example:
        ```pycon
        >>> import httpx
        >>> from preemptive.utils.errors import classify_transport_error
        >>> classify_transport_error(httpx.ReadTimeout("timed out"))
        <ErrorKind.TIMEOUT: 'timeout'>
        >>> classify_transport_error(httpx.ConnectError("connection refused"))
        <ErrorKind.CONNECTION_RESET: 'connection_reset'>

        ```
    """
    if any(isinstance(cause, ssl.SSLError) for cause in iter_causes(exc)):
        return ErrorKind.SECURE_CHANNEL_FAILURE
    if isinstance(exc, httpx.TimeoutException):
        return ErrorKind.TIMEOUT
    if isinstance(exc, (httpx.NetworkError, httpx.RemoteProtocolError)):
        return ErrorKind.CONNECTION_RESET
    return ErrorKind.UNKNOWN


def request_was_sent(exc: BaseException) -> bool:
    """Return whether the request may have reached the server before
    the failure.

    Only failures while acquiring or opening a connection guarantee
    that nothing was transmitted.
    """
    return not isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout))
