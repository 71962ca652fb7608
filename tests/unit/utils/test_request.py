from __future__ import annotations

import httpx
import pytest

from preemptive.utils.request import is_idempotent, request_line

##################################
#     Tests for request_line     #
##################################


def test_request_line() -> None:
    request = httpx.Request("PUT", "https://repo.example.com/api/build?project=x")
    assert request_line(request) == "PUT https://repo.example.com/api/build?project=x HTTP/1.1"


###################################
#     Tests for is_idempotent     #
###################################


@pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS", "TRACE", "DELETE", "get"])
def test_is_idempotent_true(method: str) -> None:
    assert is_idempotent(httpx.Request(method, "https://example.com"))


@pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
def test_is_idempotent_false(method: str) -> None:
    assert not is_idempotent(httpx.Request(method, "https://example.com"))


def test_is_idempotent_none() -> None:
    assert not is_idempotent(None)
