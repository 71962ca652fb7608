r"""Parameter validation utilities for the preemptive HTTP client.

This module provides validation functions for client parameters to ensure
they meet the required constraints before a connection pool is built.
"""

from __future__ import annotations

__all__ = ["validate_port", "validate_redirect_params", "validate_retry_params", "validate_timeout"]


def validate_timeout(timeout: float) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Seconds applied to the connect, read, write and pool
            phases. Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from preemptive.core.validation import validate_timeout
        >>> validate_timeout(300)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(retry_interval: float = 0.0) -> None:
    """Validate retry parameters.

    ``max_retries`` is not validated: a negative value is meaningful and
    selects the default retry count.

    Args:
        retry_interval: Seconds to wait between status-triggered
            retries. Must be >= 0. A value of 0 retries immediately.

    Raises:
        ValueError: If retry_interval is negative.

    Example:
        ```pycon
        >>> from preemptive.core.validation import validate_retry_params
        >>> validate_retry_params(retry_interval=0.0)
        >>> validate_retry_params(retry_interval=1.5)

        ```
    """
    if retry_interval < 0:
        msg = f"retry_interval must be >= 0, got {retry_interval}"
        raise ValueError(msg)


def validate_redirect_params(max_redirects: int) -> None:
    """Validate redirect parameters.

    Args:
        max_redirects: Maximum number of redirects followed per call.
            Must be >= 0.

    Raises:
        ValueError: If max_redirects is negative.
    """
    if max_redirects < 0:
        msg = f"max_redirects must be >= 0, got {max_redirects}"
        raise ValueError(msg)


def validate_port(port: int) -> None:
    """Validate a TCP port number.

    Args:
        port: The port to validate. Must be in ``[1, 65535]``.

    Raises:
        ValueError: If the port is out of range.
    """
    if not 0 < port <= 65535:
        msg = f"port must be in [1, 65535], got {port}"
        raise ValueError(msg)
