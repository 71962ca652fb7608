from __future__ import annotations

import logging
from unittest.mock import Mock

import httpx
import pytest

from preemptive.exceptions import ErrorKind
from preemptive.retry import ExceptionRetryPolicy

RETRIABLE_KINDS = [ErrorKind.TIMEOUT, ErrorKind.CONNECTION_RESET, ErrorKind.UNKNOWN]

##########################################
#     Tests for ExceptionRetryPolicy     #
##########################################


def test_exception_retry_policy_defaults() -> None:
    policy = ExceptionRetryPolicy(max_retries=3)
    assert policy.max_retries == 3
    assert policy.request_sent_retry_enabled
    assert policy.non_retriable_kinds == frozenset({ErrorKind.SECURE_CHANNEL_FAILURE})


@pytest.mark.parametrize("kind", RETRIABLE_KINDS)
@pytest.mark.parametrize("attempt", [1, 2, 3])
def test_exception_retry_policy_retries_within_budget(kind: ErrorKind, attempt: int) -> None:
    assert ExceptionRetryPolicy(max_retries=3).should_retry(kind, attempt)


@pytest.mark.parametrize("kind", RETRIABLE_KINDS)
def test_exception_retry_policy_exhausted(kind: ErrorKind) -> None:
    assert not ExceptionRetryPolicy(max_retries=3).should_retry(kind, 4)


def test_exception_retry_policy_zero_retries() -> None:
    assert not ExceptionRetryPolicy(max_retries=0).should_retry(ErrorKind.TIMEOUT, 1)


@pytest.mark.parametrize("attempt", [1, 2, 5])
def test_exception_retry_policy_secure_channel_never_retried(attempt: int) -> None:
    policy = ExceptionRetryPolicy(max_retries=10)
    assert not policy.should_retry(ErrorKind.SECURE_CHANNEL_FAILURE, attempt)


def test_exception_retry_policy_sent_post_retried_when_enabled() -> None:
    request = httpx.Request("POST", "https://example.com", content=b"payload")
    policy = ExceptionRetryPolicy(max_retries=3)
    assert policy.should_retry(ErrorKind.CONNECTION_RESET, 1, request, request_sent=True)


def test_exception_retry_policy_sent_post_not_retried_when_disabled() -> None:
    request = httpx.Request("POST", "https://example.com", content=b"payload")
    policy = ExceptionRetryPolicy(max_retries=3, request_sent_retry_enabled=False)
    assert not policy.should_retry(ErrorKind.CONNECTION_RESET, 1, request, request_sent=True)


def test_exception_retry_policy_unsent_post_retried_when_disabled() -> None:
    request = httpx.Request("POST", "https://example.com", content=b"payload")
    policy = ExceptionRetryPolicy(max_retries=3, request_sent_retry_enabled=False)
    assert policy.should_retry(ErrorKind.CONNECTION_RESET, 1, request, request_sent=False)


@pytest.mark.parametrize("method", ["GET", "HEAD", "DELETE", "OPTIONS"])
def test_exception_retry_policy_idempotent_retried_when_disabled(method: str) -> None:
    request = httpx.Request(method, "https://example.com")
    policy = ExceptionRetryPolicy(max_retries=3, request_sent_retry_enabled=False)
    assert policy.should_retry(ErrorKind.TIMEOUT, 1, request, request_sent=True)


def test_exception_retry_policy_logs_retry(mock_logger: Mock) -> None:
    policy = ExceptionRetryPolicy(max_retries=3, logger=mock_logger)
    assert policy.should_retry(ErrorKind.TIMEOUT, 2)
    mock_logger.log.assert_called_once_with(
        logging.WARNING, "Attempting retry #2", extra={"attempt": 2, "error_kind": "timeout"}
    )


def test_exception_retry_policy_no_log_when_declined(mock_logger: Mock) -> None:
    policy = ExceptionRetryPolicy(max_retries=3, logger=mock_logger)
    assert not policy.should_retry(ErrorKind.TIMEOUT, 4)
    mock_logger.log.assert_not_called()


def test_exception_retry_policy_log_failure(mock_logger: Mock) -> None:
    request = httpx.Request("PUT", "https://example.com/api")
    policy = ExceptionRetryPolicy(max_retries=3, logger=mock_logger)
    policy.log_failure(request, httpx.ReadTimeout("timed out"), ErrorKind.TIMEOUT)
    mock_logger.log.assert_called_once_with(
        logging.WARNING,
        "Error occurred for request PUT https://example.com/api HTTP/1.1: timed out.",
        extra={"url": "https://example.com/api", "method": "PUT", "error_kind": "timeout"},
    )
