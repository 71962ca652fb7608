r"""Per-host record of the committed authentication scheme.

The cache is shared by every caller of a client. Committing a scheme
for a host uses compare-and-set semantics: under concurrent first
requests to the same host, exactly one state is stored and every caller
observes that state.
"""

from __future__ import annotations

__all__ = ["AuthCache", "AuthState", "BasicScheme"]

import base64
import logging
import threading
from dataclasses import dataclass

from preemptive.auth.credentials import AuthScope, Credentials

logger: logging.Logger = logging.getLogger(__name__)


class BasicScheme:
    """HTTP Basic authentication scheme.

    Example:
        ```pycon
        >>> from preemptive.auth.cache import BasicScheme
        >>> from preemptive.auth.credentials import Credentials
        >>> BasicScheme().authenticate(Credentials("alice", "secret"))
        'Basic YWxpY2U6c2VjcmV0'

        ```
    """

    name = "basic"

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BasicScheme)

    def __hash__(self) -> int:
        return hash(self.name)

    def authenticate(self, credentials: Credentials) -> str:
        """Build the value of the ``Authorization`` header.

        Args:
            credentials: The credentials to encode.

        Returns:
            The header value.
        """
        userpass = f"{credentials.username}:{credentials.password}".encode()
        return f"Basic {base64.b64encode(userpass).decode('ascii')}"


@dataclass(frozen=True)
class AuthState:
    """The scheme committed for a host.

    Attributes:
        scheme: The committed scheme.
        credentials: The credentials bound to the scheme, or ``None``
            when they are resolved from the credential store when the
            header is built (the case for a pre-seeded proxy).
    """

    scheme: BasicScheme
    credentials: Credentials | None = None


class AuthCache:
    """Thread-safe map from host scopes to committed auth states.

    Example:
        ```pycon
        >>> from preemptive.auth.cache import AuthCache, AuthState, BasicScheme
        >>> from preemptive.auth.credentials import AuthScope, Credentials
        >>> cache = AuthCache()
        >>> host = AuthScope("example.com", 443)
        >>> first = cache.commit(host, AuthState(BasicScheme(), Credentials("alice", "x")))
        >>> second = cache.commit(host, AuthState(BasicScheme(), Credentials("bob", "y")))
        >>> second is first
        True

        ```
    """

    def __init__(self) -> None:
        self._states: dict[AuthScope, AuthState] = {}
        self._lock = threading.Lock()

    def __contains__(self, host: object) -> bool:
        with self._lock:
            return host in self._states

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)

    def get(self, host: AuthScope) -> AuthState | None:
        """Return the state committed for a host, if any."""
        with self._lock:
            return self._states.get(host)

    def put(self, host: AuthScope, state: AuthState) -> None:
        """Store a state unconditionally.

        Used to pre-seed hosts whose scheme is known up front, such as
        an authenticated proxy.
        """
        with self._lock:
            self._states[host] = state
        logger.debug(f"Seeded {state.scheme.name} scheme for {host.host}:{host.port}")

    def commit(self, host: AuthScope, state: AuthState) -> AuthState:
        """Commit a state for a host unless one is already committed.

        Args:
            host: The host scope.
            state: The candidate state.

        Returns:
            The state stored for the host after the call: ``state`` if
            this call won, otherwise the previously committed state.
        """
        with self._lock:
            current = self._states.setdefault(host, state)
        if current is state:
            logger.debug(f"Committed {state.scheme.name} scheme for {host.host}:{host.port}")
        return current

    def remove(self, host: AuthScope) -> None:
        """Forget the state of a host. Unknown hosts are ignored."""
        with self._lock:
            self._states.pop(host, None)

    def clear(self) -> None:
        with self._lock:
            self._states.clear()
