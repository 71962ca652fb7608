r"""Redirect eligibility and follow-up request construction.

Redirects are followed for GET, POST, HEAD, DELETE and PUT. Any other
method gets the 3xx response back unchanged. The follow-up request keeps
the original method, headers and body, and only changes the target URI.
"""

from __future__ import annotations

__all__ = ["REDIRECTABLE_METHODS", "REDIRECT_STATUS_CODES", "RedirectPolicy"]

import logging

import httpx

from preemptive.utils.structured_logging import log_structured

REDIRECTABLE_METHODS = frozenset({"get", "post", "head", "delete", "put"})

# 301 Moved Permanently, 302 Found, 303 See Other,
# 307 Temporary Redirect, 308 Permanent Redirect
REDIRECT_STATUS_CODES = (301, 302, 303, 307, 308)


class RedirectPolicy:
    """Decides whether a response is a redirect to follow and builds
    the follow-up request.

    Args:
        logger: Optional logger, defaults to this module's logger.

    Example:
        ```pycon
        >>> import httpx
        >>> from preemptive.redirect import RedirectPolicy
        >>> policy = RedirectPolicy()
        >>> policy.is_redirectable("put")
        True
        >>> policy.is_redirectable("PATCH")
        False
        >>> request = httpx.Request("PUT", "https://example.com/a/b", content=b"data")
        >>> response = httpx.Response(307, headers={"Location": "../c"}, request=request)
        >>> redirect = policy.build_redirect_request(request, response)
        >>> redirect.method, str(redirect.url), redirect.content
        ('PUT', 'https://example.com/c', b'data')

        ```
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def is_redirectable(self, method: str) -> bool:
        """Return whether redirects are followed for a method.

        Args:
            method: The HTTP method, in any case.

        Returns:
            ``True`` for GET, POST, HEAD, DELETE and PUT.
        """
        if method.lower() in REDIRECTABLE_METHODS:
            self.logger.debug(f"The method {method} can be redirected.")
            return True
        log_structured(
            self.logger, logging.ERROR, f"The method {method} cannot be redirected.", method=method
        )
        return False

    def is_redirected(self, request: httpx.Request, response: httpx.Response) -> bool:
        """Return whether a response is a redirect to follow.

        Args:
            request: The request that produced the response.
            response: The received response.

        Returns:
            ``True`` if ``build_redirect_request`` should be called.
        """
        if response.status_code not in REDIRECT_STATUS_CODES:
            return False
        if "Location" not in response.headers:
            self.logger.debug(
                f"Received redirect response {response.status_code} without a Location header"
            )
            return False
        if response.status_code == 303:
            return True
        return self.is_redirectable(request.method)

    def get_location(self, request: httpx.Request, response: httpx.Response) -> httpx.URL:
        """Resolve the redirect target against the request URL.

        Args:
            request: The request that produced the response.
            response: The redirect response.

        Returns:
            The absolute target URL. A location without a fragment keeps
            the fragment of the request URL.
        """
        location = httpx.URL(response.headers["Location"])
        url = request.url.join(location)
        if request.url.fragment and not url.fragment:
            url = url.copy_with(fragment=request.url.fragment)
        return url

    def build_redirect_request(
        self, request: httpx.Request, response: httpx.Response
    ) -> httpx.Request:
        """Build the follow-up request of a redirect.

        Args:
            request: The request that produced the response.
            response: The redirect response.

        Returns:
            A request with the method, headers and body of ``request``
            targeting the resolved location.
        """
        url = self.get_location(request, response)
        log_structured(self.logger, logging.DEBUG, f"Redirecting to {url}", url=str(url))
        headers = request.headers.copy()
        # Recomputed from the new URL
        headers.pop("Host", None)
        return httpx.Request(
            method=request.method,
            url=url,
            headers=headers,
            content=request.content,
            extensions=request.extensions,
        )
