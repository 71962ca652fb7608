r"""Configuration dataclasses and defaults for PreemptiveClient.

This module provides configuration constants and dataclass-based
configuration objects for the PreemptiveClient class.
"""

from __future__ import annotations

__all__ = [
    "ANONYMOUS_USERNAME",
    "CLIENT_VERSION",
    "CONNECTION_POOL_SIZE",
    "DEFAULT_CONNECTION_RETRY",
    "DEFAULT_MAX_REDIRECTS",
    "DEFAULT_RETRY_INTERVAL",
    "DEFAULT_TIMEOUT",
    "PRODUCT_NAME",
    "USER_AGENT",
    "ClientConfig",
    "ProxyConfig",
]

from dataclasses import dataclass, replace
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from preemptive.core.validation import (
    validate_port,
    validate_redirect_params,
    validate_retry_params,
    validate_timeout,
)

# Default timeout in seconds, applied to connect, read, write and pool waits
DEFAULT_TIMEOUT = 300.0

# Retry count used when max_retries is negative
# Total attempts = retry count + 1 (initial attempt)
DEFAULT_CONNECTION_RETRY = 3

# Status-triggered retries are immediate by default. Under sustained
# server overload this can produce retry storms; raise retry_interval
# to space attempts out.
DEFAULT_RETRY_INTERVAL = 0.0

# Redirects may be circular, so a call is capped instead
DEFAULT_MAX_REDIRECTS = 50

# Total connection cap; also bounds connections per host
CONNECTION_POOL_SIZE = 10

# Username stored under the wildcard scope when none is configured
ANONYMOUS_USERNAME = "anonymous"

PRODUCT_NAME = "ArtifactoryBuildClient"

try:
    CLIENT_VERSION = version("preemptive-http")
except PackageNotFoundError:  # pragma: no cover
    CLIENT_VERSION = "unknown"

USER_AGENT = f"{PRODUCT_NAME}/{CLIENT_VERSION}"


@dataclass(frozen=True)
class ProxyConfig:
    """Configuration of an HTTP proxy.

    When ``username`` is set, the proxy credentials are registered under
    the proxy's exact scope and a Basic scheme is committed for the proxy
    up front, so the first proxied request is already authenticated.

    Args:
        host: The proxy host name.
        port: The proxy port.
        username: Optional proxy username.
        password: Optional proxy password.

    Example:
        ```pycon
        >>> from preemptive.core.config import ProxyConfig
        >>> proxy = ProxyConfig(host="proxy.local", port=8888, username="bob", password="pw")
        >>> proxy.url
        'http://proxy.local:8888'
        >>> proxy
        ProxyConfig(host='proxy.local', port=8888, username='bob', password='***')

        ```
    """

    host: str
    port: int
    username: str | None = None
    password: str | None = None

    def __post_init__(self) -> None:
        if not self.host:
            msg = "proxy host must not be empty"
            raise ValueError(msg)
        validate_port(self.port)

    def __repr__(self) -> str:
        password = None if self.password is None else "***"
        return (
            f"ProxyConfig(host={self.host!r}, port={self.port}, "
            f"username={self.username!r}, password={password!r})"
        )

    @property
    def url(self) -> str:
        """The proxy URL passed to the connection pool."""
        return f"http://{self.host}:{self.port}"


@dataclass
class ClientConfig:
    """Configuration for PreemptiveClient.

    Args:
        username: Optional username used for preemptive Basic
            authentication of every target host. When empty, the
            anonymous user with an empty password is used.
        password: Optional password matching ``username``.
        timeout: Seconds applied to the connect, read, write and pool
            phases. Must be > 0.
        proxy: Optional proxy configuration.
        max_retries: Maximum number of retries after the initial
            attempt. A negative value selects
            ``DEFAULT_CONNECTION_RETRY``.
        retry_interval: Seconds to wait before a status-triggered retry.
            Must be >= 0. Defaults to 0 (immediate retry).
        max_redirects: Maximum number of redirects followed per call.
            Must be >= 0.

    Example:
        ```pycon
        >>> from preemptive.core.config import ClientConfig
        >>> config = ClientConfig()
        >>> config.retry_count
        3
        >>> config = ClientConfig(username="alice", password="secret", max_retries=5)
        >>> config.retry_count
        5
        >>> config.merge(max_retries=0).retry_count
        0

        ```
    """

    username: str | None = None
    password: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    proxy: ProxyConfig | None = None
    max_retries: int = -1
    retry_interval: float = DEFAULT_RETRY_INTERVAL
    max_redirects: int = DEFAULT_MAX_REDIRECTS

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_timeout(self.timeout)
        validate_retry_params(retry_interval=self.retry_interval)
        validate_redirect_params(self.max_redirects)

    def __repr__(self) -> str:
        password = None if self.password is None else "***"
        return (
            f"ClientConfig(username={self.username!r}, password={password!r}, "
            f"timeout={self.timeout}, proxy={self.proxy!r}, max_retries={self.max_retries}, "
            f"retry_interval={self.retry_interval}, max_redirects={self.max_redirects})"
        )

    @property
    def retry_count(self) -> int:
        """The effective number of retries after the initial attempt."""
        return DEFAULT_CONNECTION_RETRY if self.max_retries < 0 else self.max_retries

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
