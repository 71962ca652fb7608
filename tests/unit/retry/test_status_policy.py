from __future__ import annotations

import logging
from unittest.mock import Mock

import httpx
import pytest

from preemptive.retry import StatusRetryPolicy

REQUEST = httpx.Request("GET", "https://repo.example.com/api/build")


def create_response(status_code: int) -> httpx.Response:
    return httpx.Response(status_code, request=REQUEST)


#######################################
#     Tests for StatusRetryPolicy     #
#######################################


def test_status_retry_policy_default_interval() -> None:
    assert StatusRetryPolicy(max_retries=3).get_retry_interval() == 0.0


def test_status_retry_policy_custom_interval() -> None:
    assert StatusRetryPolicy(max_retries=3, retry_interval=2.5).get_retry_interval() == 2.5


def test_status_retry_policy_negative_interval() -> None:
    with pytest.raises(ValueError, match=r"retry_interval must be >= 0, got -1"):
        StatusRetryPolicy(max_retries=3, retry_interval=-1)


@pytest.mark.parametrize("status_code", [501, 502, 503, 504, 599])
@pytest.mark.parametrize("attempt", [1, 2, 3])
def test_status_retry_policy_retries_within_budget(status_code: int, attempt: int) -> None:
    assert StatusRetryPolicy(max_retries=3).should_retry(create_response(status_code), attempt)


@pytest.mark.parametrize("status_code", [501, 502, 503, 504, 599])
@pytest.mark.parametrize("attempt", [4, 5])
def test_status_retry_policy_exhausted(status_code: int, attempt: int) -> None:
    assert not StatusRetryPolicy(max_retries=3).should_retry(create_response(status_code), attempt)


@pytest.mark.parametrize("status_code", [200, 201, 204, 301, 400, 401, 404, 429, 499, 500])
@pytest.mark.parametrize("attempt", [1, 3])
def test_status_retry_policy_never_retries_up_to_500(status_code: int, attempt: int) -> None:
    assert not StatusRetryPolicy(max_retries=3).should_retry(create_response(status_code), attempt)


def test_status_retry_policy_zero_retries() -> None:
    assert not StatusRetryPolicy(max_retries=0).should_retry(create_response(503), 1)


def test_status_retry_policy_logs_retry(mock_logger: Mock) -> None:
    policy = StatusRetryPolicy(max_retries=3, logger=mock_logger)
    assert policy.should_retry(create_response(503), 1)
    assert mock_logger.log.call_count == 2
    first, second = mock_logger.log.call_args_list
    assert first.args == (
        logging.WARNING,
        "Error occurred for request GET https://repo.example.com/api/build HTTP/1.1. "
        "Received status code 503 and message: Service Unavailable.",
    )
    assert first.kwargs["extra"]["status_code"] == 503
    assert second.args == (logging.WARNING, "Attempting retry #1")


def test_status_retry_policy_logs_error_when_exhausted(mock_logger: Mock) -> None:
    policy = StatusRetryPolicy(max_retries=3, logger=mock_logger)
    assert not policy.should_retry(create_response(502), 4)
    mock_logger.log.assert_called_once()
    assert "Received status code 502" in mock_logger.log.call_args.args[1]


def test_status_retry_policy_no_log_up_to_500(mock_logger: Mock) -> None:
    policy = StatusRetryPolicy(max_retries=3, logger=mock_logger)
    assert not policy.should_retry(create_response(500), 1)
    mock_logger.log.assert_not_called()


def test_status_retry_policy_response_without_request(mock_logger: Mock) -> None:
    policy = StatusRetryPolicy(max_retries=3, logger=mock_logger)
    assert policy.should_retry(httpx.Response(503), 1)
    assert "<unknown>" in mock_logger.log.call_args_list[0].args[1]
