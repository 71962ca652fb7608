r"""Shared test helpers for scripted transports.

A ``ScriptedTransport`` replays a list of outcomes, one per send: an
``int`` becomes a response with that status, an ``httpx.Response`` is
returned as is, and an exception instance or callable raising one is
raised. Every request reaching the transport is recorded.
"""

from __future__ import annotations

__all__ = [
    "ScriptedTransport",
    "always",
    "create_response",
    "create_ssl_error",
]

import ssl
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


def create_response(status_code: int, **kwargs: Any) -> httpx.Response:
    """Create an httpx.Response with the given status code."""
    return httpx.Response(status_code, **kwargs)


def create_ssl_error(request: httpx.Request) -> httpx.ConnectError:
    """Create a ConnectError chained to an ssl.SSLError, as httpx raises
    for a failed TLS handshake."""
    try:
        msg = "[SSL: CERTIFICATE_VERIFY_FAILED] certificate verify failed"
        raise ssl.SSLCertVerificationError(msg)
    except ssl.SSLError as exc:
        error = httpx.ConnectError(str(exc), request=request)
        error.__cause__ = exc
        return error


class ScriptedTransport(httpx.MockTransport):
    """Mock transport replaying a script of outcomes.

    Args:
        outcomes: The outcome of each send, in order. The last outcome
            repeats once the script is exhausted.
    """

    def __init__(self, outcomes: Iterable[Any]) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    @property
    def sends(self) -> int:
        return len(self.requests)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        index = min(len(self.requests), len(self.outcomes) - 1)
        self.requests.append(request)
        outcome = self.outcomes[index]
        if callable(outcome) and not isinstance(outcome, httpx.Response):
            outcome = outcome(request)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome)
        return outcome


def always(outcome: Callable[[httpx.Request], Any]) -> ScriptedTransport:
    """Create a transport producing the same outcome for every send."""
    return ScriptedTransport([outcome])
