r"""Configuration and validation shared by the client and its
policies."""

from __future__ import annotations

__all__ = [
    "CONNECTION_POOL_SIZE",
    "DEFAULT_CONNECTION_RETRY",
    "DEFAULT_MAX_REDIRECTS",
    "DEFAULT_RETRY_INTERVAL",
    "DEFAULT_TIMEOUT",
    "USER_AGENT",
    "ClientConfig",
    "ProxyConfig",
    "validate_port",
    "validate_redirect_params",
    "validate_retry_params",
    "validate_timeout",
]

from preemptive.core.config import (
    CONNECTION_POOL_SIZE,
    DEFAULT_CONNECTION_RETRY,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_RETRY_INTERVAL,
    DEFAULT_TIMEOUT,
    USER_AGENT,
    ClientConfig,
    ProxyConfig,
)
from preemptive.core.validation import (
    validate_port,
    validate_redirect_params,
    validate_retry_params,
    validate_timeout,
)
