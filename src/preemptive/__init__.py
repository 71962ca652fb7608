r"""preemptive - HTTP client with preemptive authentication and bounded
retry.

This package wraps an httpx connection pool with the policy layer of a
build-server client: Basic credentials are attached before any
authentication challenge, transport failures and 5xx responses are
retried a bounded number of times, and redirects are followed for GET,
POST, HEAD, DELETE and PUT.

Key Features:
    - Preemptive Basic authentication, per host, committed once
    - Anonymous fallback credentials when no user is configured
    - Authenticated HTTP proxies with a pre-committed Basic scheme
    - Retry of transport failures, except TLS failures
    - Retry of statuses above 500, with a configurable interval
    - Redirects preserving method, headers and body
    - Thread-safe shared credential store and auth cache

Example:
    ```pycon
    >>> import httpx
    >>> from preemptive import ClientConfig, PreemptiveClient
    >>> config = ClientConfig(username="alice", password="secret", max_retries=3)
    >>> with PreemptiveClient(config) as client:  # doctest: +SKIP
    ...     request = client.build_request("PUT", "https://repo.example.com/api/build", json={})
    ...     response = client.execute(request)
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AuthError",
    "ClientConfig",
    "ErrorKind",
    "PreemptiveClient",
    "PreemptiveHttpError",
    "ProxyConfig",
    "TooManyRedirectsError",
    "TransportError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from preemptive.client import PreemptiveClient
from preemptive.core.config import ClientConfig, ProxyConfig
from preemptive.exceptions import (
    AuthError,
    ErrorKind,
    PreemptiveHttpError,
    TooManyRedirectsError,
    TransportError,
)

try:
    __version__ = version("preemptive-http")
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
