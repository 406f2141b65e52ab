r"""Unit tests for attempt outcomes."""

from __future__ import annotations

import httpx
import pytest

from pdfdancer.retry import HttpFailure, NetworkFailure, Success, classify_response

#######################################
#     Tests for classify_response     #
#######################################


@pytest.mark.parametrize("status_code", [200, 201, 204, 301, 399])
def test_classify_response_success(status_code: int) -> None:
    response = httpx.Response(status_code)
    assert classify_response(response) == Success(response=response)


@pytest.mark.parametrize("status_code", [400, 404, 429, 500, 503])
def test_classify_response_failure(status_code: int) -> None:
    response = httpx.Response(status_code)
    outcome = classify_response(response)

    assert isinstance(outcome, HttpFailure)
    assert outcome.status_code == status_code
    assert outcome.response is response
    assert outcome.headers is response.headers


#################################
#     Tests for HttpFailure     #
#################################


def test_http_failure_retry_after() -> None:
    outcome = classify_response(httpx.Response(429, headers={"Retry-After": "5"}))
    assert outcome.retry_after == "5"


def test_http_failure_retry_after_case_insensitive() -> None:
    outcome = classify_response(httpx.Response(503, headers={"retry-after": "7"}))
    assert outcome.retry_after == "7"


def test_http_failure_retry_after_missing() -> None:
    assert classify_response(httpx.Response(503)).retry_after is None


####################################
#     Tests for NetworkFailure     #
####################################


def test_network_failure() -> None:
    error = httpx.ConnectError("Connection refused")
    outcome = NetworkFailure(error=error)
    assert outcome.error is error
    assert outcome == NetworkFailure(error=error)
