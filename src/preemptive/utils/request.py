r"""Helpers describing outgoing requests."""

from __future__ import annotations

__all__ = ["NON_ENCLOSING_METHODS", "is_idempotent", "request_line"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

# Methods that never enclose a request body; re-sending them cannot
# duplicate an uploaded entity
NON_ENCLOSING_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "TRACE", "DELETE"})


def request_line(request: httpx.Request) -> str:
    """Format the request line of a request.

    Example:
        ```pycon
        >>> import httpx
        >>> from preemptive.utils.request import request_line
        >>> request_line(httpx.Request("GET", "https://example.com/api/build"))
        'GET https://example.com/api/build HTTP/1.1'

        ```
    """
    return f"{request.method} {request.url} HTTP/1.1"


def is_idempotent(request: httpx.Request | None) -> bool:
    """Return whether a request can be re-sent without side effects
    beyond what its method already allows."""
    return request is not None and request.method.upper() in NON_ENCLOSING_METHODS
