r"""Pre-send hook forcing Basic authentication before any challenge.

The injector is run for every outgoing request. When the target host
has no committed scheme yet, it binds a Basic scheme to the credentials
registered for the host's scope, so the request carries an
``Authorization`` header without first waiting for a 401 challenge.
"""

from __future__ import annotations

__all__ = ["PreemptiveAuthInjector"]

import logging
from typing import TYPE_CHECKING

from preemptive.auth.cache import AuthState, BasicScheme
from preemptive.auth.credentials import AuthScope
from preemptive.exceptions import AuthError

if TYPE_CHECKING:
    import httpx

    from preemptive.auth.cache import AuthCache
    from preemptive.auth.credentials import CredentialStore, Credentials

logger: logging.Logger = logging.getLogger(__name__)


class PreemptiveAuthInjector:
    """Seed the auth state of a request's target host.

    Args:
        credentials: The store credentials are looked up in.
        auth_cache: The shared per-host auth cache.

    Example:
        ```pycon
        >>> import httpx
        >>> from preemptive.auth import (
        ...     AuthCache,
        ...     AuthScope,
        ...     CredentialStore,
        ...     Credentials,
        ...     PreemptiveAuthInjector,
        ... )
        >>> store = CredentialStore()
        >>> store.set_credentials(AuthScope.ANY, Credentials("alice", "secret"))
        >>> injector = PreemptiveAuthInjector(store, AuthCache())
        >>> state = injector.process(httpx.Request("GET", "https://example.com/api"))
        >>> state.credentials
        Credentials(username='alice', password='***')

        ```
    """

    def __init__(self, credentials: CredentialStore, auth_cache: AuthCache) -> None:
        self.credentials = credentials
        self.auth_cache = auth_cache

    def process(self, request: httpx.Request) -> AuthState:
        """Ensure a scheme is committed for the request's target host.

        Args:
            request: The outgoing request.

        Returns:
            The auth state committed for the target host.

        Raises:
            AuthError: If no scheme is committed and no credentials
                match the target scope.
        """
        host = AuthScope.from_url(request.url)
        state = self.auth_cache.get(host)
        if state is not None:
            return state

        credentials = self.credentials.lookup(host)
        if credentials is None:
            msg = "No credentials for preemptive authentication"
            raise AuthError(msg, scope=host)
        logger.debug(
            f"Preemptively authenticating {host.host}:{host.port} as {credentials.username!r}"
        )
        return self.auth_cache.commit(host, AuthState(BasicScheme(), credentials))

    def resolve(self, state: AuthState, host: AuthScope) -> Credentials | None:
        """Return the credentials a state applies with.

        States seeded without credentials resolve them from the store.
        """
        if state.credentials is not None:
            return state.credentials
        return self.credentials.lookup(host)
