r"""HTTP client forcing preemptive Basic authentication.

This module provides PreemptiveClient, a wrapper of ``httpx.Client``
that attaches Basic credentials to every request before any challenge,
retries transport failures and 5xx responses a bounded number of times,
and follows redirects for GET, POST, HEAD, DELETE and PUT.
"""

from __future__ import annotations

__all__ = ["PreemptiveClient"]

import logging
import threading
import time
from typing import TYPE_CHECKING, Any

import httpx

from preemptive.auth import (
    AuthCache,
    AuthScope,
    AuthState,
    BasicScheme,
    CredentialStore,
    Credentials,
    PreemptiveAuthInjector,
)
from preemptive.core.config import (
    ANONYMOUS_USERNAME,
    CONNECTION_POOL_SIZE,
    USER_AGENT,
    ClientConfig,
)
from preemptive.exceptions import TooManyRedirectsError, TransportError
from preemptive.redirect import RedirectPolicy
from preemptive.retry import ExceptionRetryPolicy, RetryContext, StatusRetryPolicy
from preemptive.utils.errors import classify_transport_error, request_was_sent

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from preemptive.core.config import ProxyConfig


class PreemptiveClient:
    r"""HTTP client with preemptive authentication, bounded retry and
    extended redirects.

    The client is built once and shared by every thread of the process.
    Credentials and committed auth schemes persist across calls; retry
    bookkeeping is created fresh for every ``execute`` call.

    Each call runs the following loop until it reaches a terminal
    outcome:

    1. Commit a Basic scheme for the target host if none is committed
       yet, and attach the ``Authorization`` header.
    2. Send the request through the connection pool.
    3. On a transport failure, consult the ``ExceptionRetryPolicy``:
       resend, or raise ``TransportError``.
    4. On a status > 500, consult the ``StatusRetryPolicy``: resend, or
       keep the response.
    5. On a redirect, consult the ``RedirectPolicy``: loop with the
       follow-up request, or return the 3xx response unchanged.

    Args:
        config: Optional ClientConfig. If ``None``, a default
            ClientConfig (anonymous user) is used.
        transport: Optional httpx transport. If ``None``, httpx's pooled
            HTTP transport is used.
        logger: Optional logger shared by the client and its policies.

    Example:
        ```pycon
        >>> import httpx
        >>> from preemptive import ClientConfig, PreemptiveClient
        >>> with PreemptiveClient(
        ...     ClientConfig(username="alice", password="secret", max_retries=3)
        ... ) as client:  # doctest: +SKIP
        ...     response = client.execute(httpx.Request("GET", "https://repo.example.com/api"))
        ...

        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config: ClientConfig = config or ClientConfig()
        self._logger: logging.Logger = (
            logger if logger is not None else logging.getLogger(__name__)
        )
        self._credentials = CredentialStore()
        self._auth_cache = AuthCache()
        self._injector = PreemptiveAuthInjector(self._credentials, self._auth_cache)
        self._exception_policy = ExceptionRetryPolicy(
            self._config.retry_count, logger=self._logger
        )
        self._status_policy = StatusRetryPolicy(
            self._config.retry_count,
            retry_interval=self._config.retry_interval,
            logger=self._logger,
        )
        self._redirect_policy = RedirectPolicy(logger=self._logger)
        self._closed = False
        self._close_lock = threading.Lock()

        username, password = self._config.username, self._config.password
        if not username:
            username, password = ANONYMOUS_USERNAME, ""
        self._credentials.set_credentials(AuthScope.ANY, Credentials(username, password or ""))

        proxy = None
        if self._config.proxy is not None:
            proxy = self._create_proxy(self._config.proxy)

        self._client = httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=httpx.Timeout(self._config.timeout),
            limits=httpx.Limits(
                max_connections=CONNECTION_POOL_SIZE,
                max_keepalive_connections=CONNECTION_POOL_SIZE,
            ),
            follow_redirects=False,
            proxy=proxy,
            transport=transport,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    @property
    def auth_cache(self) -> AuthCache:
        return self._auth_cache

    @property
    def is_closed(self) -> bool:
        return self._closed

    def set_logger(self, logger: logging.Logger) -> None:
        """Replace the logger of the client and of every policy."""
        self._logger = logger
        self._exception_policy.logger = logger
        self._status_policy.logger = logger
        self._redirect_policy.logger = logger

    def build_request(self, method: str, url: str, **kwargs: Any) -> httpx.Request:
        """Build a request carrying the client's default headers.

        Args:
            method: The HTTP method.
            url: The target URL.
            **kwargs: Additional keyword arguments passed to
                ``httpx.Client.build_request()`` (``content``, ``json``,
                ``headers``, ``params``...).

        Returns:
            The request, ready for ``execute``.
        """
        return self._client.build_request(method, url, **kwargs)

    def execute(self, request: httpx.Request) -> httpx.Response:
        """Send a request with preemptive authentication, retries and
        redirects.

        The request body is buffered so that it can be sent again. A
        caller-supplied ``Authorization`` header is left untouched.

        Args:
            request: The request to send.

        Returns:
            The final response. Statuses up to 500 and 4xx responses are
            returned as they are, as are 5xx responses once retries are
            exhausted and 3xx responses for methods that are not
            redirected.

        Raises:
            AuthError: If no credentials match the target host.
            TransportError: If a transport failure cannot be retried.
            TooManyRedirectsError: If more than ``max_redirects``
                redirects are followed.
            RuntimeError: If the client is closed.
        """
        if self._closed:
            msg = "Cannot send a request, as the client has been closed"
            raise RuntimeError(msg)

        request.read()
        context = RetryContext(max_retries=self._config.retry_count)
        current = request
        while True:
            outgoing = self._prepare(current)
            context.sends += 1
            try:
                response = self._client.send(outgoing)
            except httpx.TransportError as exc:
                kind = classify_transport_error(exc)
                self._exception_policy.log_failure(current, exc, kind)
                if self._exception_policy.should_retry(
                    kind, context.attempt, current, request_sent=request_was_sent(exc)
                ):
                    context.next_attempt()
                    continue
                raise TransportError(
                    method=current.method,
                    url=str(current.url),
                    message=(
                        f"{current.method} request to {current.url} failed after "
                        f"{context.sends} attempts: {exc}"
                    ),
                    kind=kind,
                    attempts=context.sends,
                    cause=exc,
                ) from exc

            if self._status_policy.should_retry(response, context.attempt):
                response.close()
                interval = self._status_policy.get_retry_interval()
                if interval > 0:
                    time.sleep(interval)
                context.next_attempt()
                continue

            if self._redirect_policy.is_redirected(current, response):
                if context.redirects >= self._config.max_redirects:
                    response.close()
                    msg = f"Exceeded maximum of {self._config.max_redirects} redirects"
                    raise TooManyRedirectsError(msg, max_redirects=self._config.max_redirects)
                current = self._redirect_policy.build_redirect_request(current, response)
                response.close()
                context.redirects += 1
                continue

            if context.sends > 1:
                self._logger.debug(
                    f"{request.method} request to {request.url} completed with status "
                    f"{response.status_code} after {context.sends} sends"
                )
            return response

    def close(self) -> None:
        """Stop accepting requests and release pooled connections.

        Only the first call has an effect; it never raises.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        try:
            self._client.close()
        except (httpx.HTTPError, OSError):
            self._logger.debug("Error while closing the connection pool", exc_info=True)

    def _prepare(self, request: httpx.Request) -> httpx.Request:
        """Return the request to send, carrying the user agent and the
        committed scheme of its target host.

        Headers already set on ``request`` are kept.
        """
        state = self._injector.process(request)
        headers = request.headers.copy()
        headers.setdefault("User-Agent", USER_AGENT)
        if "Authorization" not in headers:
            credentials = self._injector.resolve(state, AuthScope.from_url(request.url))
            if credentials is not None:
                headers["Authorization"] = state.scheme.authenticate(credentials)
        return httpx.Request(
            method=request.method,
            url=request.url,
            headers=headers,
            content=request.content,
            extensions=request.extensions,
        )

    def _create_proxy(self, proxy: ProxyConfig) -> httpx.Proxy:
        """Register the proxy credentials and pre-commit its Basic
        scheme."""
        if proxy.username is None:
            return httpx.Proxy(proxy.url)
        scope = AuthScope(proxy.host, proxy.port)
        self._credentials.set_credentials(scope, Credentials(proxy.username, proxy.password or ""))
        self._auth_cache.put(scope, AuthState(BasicScheme()))

        state = self._auth_cache.get(scope)
        credentials = self._injector.resolve(state, scope)
        return httpx.Proxy(
            proxy.url, headers={"Proxy-Authorization": state.scheme.authenticate(credentials)}
        )
