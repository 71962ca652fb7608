r"""Exceptions raised by the preemptive HTTP client.

The client surfaces exactly one terminal error per ``execute`` call.
Intermediate retry and redirect steps are never raised; they are only
visible through logging.
"""

from __future__ import annotations

__all__ = [
    "NON_RETRIABLE_ERROR_KINDS",
    "AuthError",
    "ErrorKind",
    "PreemptiveHttpError",
    "TooManyRedirectsError",
    "TransportError",
]

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from preemptive.auth.credentials import AuthScope


class ErrorKind(Enum):
    """Closed set of transport failure kinds.

    Attributes:
        TIMEOUT: Connect, read, write or pool timeout.
        CONNECTION_RESET: Connection refused, reset, broken pipe or a
            peer that closed the connection mid-exchange.
        SECURE_CHANNEL_FAILURE: TLS handshake or certificate failure.
        UNKNOWN: Any other transport failure.
    """

    TIMEOUT = "timeout"
    CONNECTION_RESET = "connection_reset"
    SECURE_CHANNEL_FAILURE = "secure_channel_failure"
    UNKNOWN = "unknown"


# Retrying will not fix a handshake or certificate problem
NON_RETRIABLE_ERROR_KINDS: frozenset[ErrorKind] = frozenset({ErrorKind.SECURE_CHANNEL_FAILURE})


class PreemptiveHttpError(RuntimeError):
    """Base class of all errors raised by the client.

    Args:
        message: A descriptive error message.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(PreemptiveHttpError):
    """Raised when no credentials are available for preemptive
    authentication.

    This is a configuration error, not a transient one, and is never
    retried.

    Args:
        message: A descriptive error message.
        scope: The scope that was looked up, if known.

    Example:
        ```pycon
        >>> from preemptive.exceptions import AuthError
        >>> raise AuthError("No credentials for preemptive authentication")
        Traceback (most recent call last):
            ...
        preemptive.exceptions.AuthError: No credentials for preemptive authentication

        ```
    """

    def __init__(self, message: str, scope: AuthScope | None = None) -> None:
        super().__init__(message)
        self.scope = scope


class TransportError(PreemptiveHttpError):
    """Raised when a transport failure cannot be retried any further.

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        message: A descriptive error message.
        kind: The classified failure kind.
        attempts: The number of sends performed for the call.
        cause: The last underlying exception.

    Example:
        ```pycon
        >>> from preemptive.exceptions import ErrorKind, TransportError
        >>> error = TransportError(
        ...     method="GET",
        ...     url="https://example.com",
        ...     message="GET request to https://example.com failed",
        ...     kind=ErrorKind.TIMEOUT,
        ...     attempts=4,
        ... )
        >>> error.kind
        <ErrorKind.TIMEOUT: 'timeout'>
        >>> error.attempts
        4

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        attempts: int = 1,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.kind = kind
        self.attempts = attempts
        self.cause = cause


class TooManyRedirectsError(PreemptiveHttpError):
    """Raised when a call follows more redirects than allowed.

    Args:
        message: A descriptive error message.
        max_redirects: The configured redirect cap.
    """

    def __init__(self, message: str, max_redirects: int) -> None:
        super().__init__(message)
        self.max_redirects = max_redirects
