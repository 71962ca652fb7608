r"""Credentials and the scoped credential store.

A credential is registered under an ``AuthScope``: an exact
``(host, port)`` pair, a partially wildcarded pair, or the ``ANY``
wildcard. Lookups return the most specific registered scope that
matches.
"""

from __future__ import annotations

__all__ = ["AuthScope", "CredentialStore", "Credentials"]

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    import httpx

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthScope:
    """The ``(host, port)`` pair a credential applies to.

    ``None`` stands for any host or any port. Host names are compared
    case-insensitively.

    Args:
        host: The host name, or ``None`` for any host.
        port: The port, or ``None`` for any port.

    Example:
        ```pycon
        >>> from preemptive.auth.credentials import AuthScope
        >>> AuthScope("Example.COM", 443)
        AuthScope(host='example.com', port=443)
        >>> AuthScope.ANY
        AuthScope(host=None, port=None)
        >>> AuthScope("example.com", 443).match(AuthScope.ANY)
        0
        >>> AuthScope("example.com", 443).match(AuthScope("example.com", 443))
        12

        ```
    """

    ANY: ClassVar[AuthScope]

    host: str | None = None
    port: int | None = None

    def __post_init__(self) -> None:
        if self.host is not None:
            object.__setattr__(self, "host", self.host.lower())

    @classmethod
    def from_url(cls, url: httpx.URL) -> AuthScope:
        """Create the exact scope of a URL, using the scheme's default
        port when the URL has none."""
        port = url.port
        if port is None:
            port = 443 if url.scheme == "https" else 80
        return cls(host=url.host, port=port)

    @property
    def is_wildcard(self) -> bool:
        return self.host is None and self.port is None

    def match(self, other: AuthScope) -> int:
        """Score how well ``other`` matches this scope.

        Args:
            other: A registered scope.

        Returns:
            ``-1`` when the scopes conflict, otherwise a score where a
            matching host weighs 8 and a matching port weighs 4. Higher
            is more specific.
        """
        factor = 0
        if self.port == other.port:
            factor += 4
        elif self.port is not None and other.port is not None:
            return -1
        if self.host == other.host:
            factor += 8
        elif self.host is not None and other.host is not None:
            return -1
        return factor


AuthScope.ANY = AuthScope()


@dataclass(frozen=True)
class Credentials:
    """A username and password pair.

    Args:
        username: The user name.
        password: The password.

    Example:
        ```pycon
        >>> from preemptive.auth.credentials import Credentials
        >>> Credentials("alice", "secret")
        Credentials(username='alice', password='***')

        ```
    """

    username: str
    password: str = ""

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


class CredentialStore:
    """Thread-safe map from scopes to credentials.

    Example:
        ```pycon
        >>> from preemptive.auth.credentials import AuthScope, CredentialStore, Credentials
        >>> store = CredentialStore()
        >>> store.set_credentials(AuthScope.ANY, Credentials("anonymous", ""))
        >>> store.set_credentials(AuthScope("proxy.local", 8888), Credentials("bob", "pw"))
        >>> store.lookup(AuthScope("proxy.local", 8888))
        Credentials(username='bob', password='***')
        >>> store.lookup(AuthScope("example.com", 443))
        Credentials(username='anonymous', password='***')

        ```
    """

    def __init__(self) -> None:
        self._credentials: dict[AuthScope, Credentials] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._credentials)

    def set_credentials(self, scope: AuthScope, credentials: Credentials) -> None:
        """Register credentials for a scope, replacing any previous
        entry."""
        with self._lock:
            self._credentials[scope] = credentials

    def lookup(self, scope: AuthScope) -> Credentials | None:
        """Find the credentials for a scope.

        An exact registration wins. Otherwise the registered scope with
        the highest ``match`` score is used.

        Args:
            scope: The scope of the target.

        Returns:
            The best matching credentials, or ``None`` if no registered
            scope matches.
        """
        with self._lock:
            credentials = self._credentials.get(scope)
            if credentials is not None:
                return credentials
            best_factor = -1
            for candidate, value in self._credentials.items():
                factor = scope.match(candidate)
                if factor > best_factor:
                    best_factor = factor
                    credentials = value
        if credentials is None:
            logger.debug(f"No credentials registered for {scope}")
        return credentials

    def clear(self) -> None:
        """Remove every registered credential."""
        with self._lock:
            self._credentials.clear()
