r"""Unit tests for AsyncRetryExecutor."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock, call

import httpx
import pytest

from pdfdancer.callbacks import RetryInfo
from pdfdancer.core.config import RetryConfig
from pdfdancer.exceptions import (
    HttpStatusError,
    NetworkError,
    RetryExhaustedError,
    ValidationError,
)
from pdfdancer.retry import AsyncRetryExecutor, CallbackConfig, RetryState
from pdfdancer.retry.executor_core import create_exhausted_error, create_outcome_error
from pdfdancer.retry.outcome import HttpFailure, NetworkFailure

if TYPE_CHECKING:
    import random

TEST_URL = "https://api.pdfdancer.com/pdf/find"

NO_JITTER = RetryConfig(initial_delay=0.1, max_delay=10.0, use_jitter=False)


def _executor(
    config: RetryConfig = NO_JITTER,
    callbacks: CallbackConfig | None = None,
    *,
    sleep: AsyncMock,
    **kwargs,
) -> AsyncRetryExecutor:
    return AsyncRetryExecutor(config, callbacks, sleep=sleep, **kwargs)


def test_async_retry_executor_init(mock_asleep: AsyncMock) -> None:
    executor = _executor(sleep=mock_asleep)
    assert executor.config is NO_JITTER
    assert executor.strategy.config is NO_JITTER
    assert executor.decider.config is NO_JITTER
    assert executor.sleep is mock_asleep


def test_async_retry_executor_default_sleep() -> None:
    assert AsyncRetryExecutor(RetryConfig()).sleep is asyncio.sleep


##############################
#     Tests for success      #
##############################


@pytest.mark.asyncio
async def test_execute_success_first_attempt(
    mock_send: AsyncMock, mock_asleep: AsyncMock, ok_response: httpx.Response
) -> None:
    """Test that a success is returned without any wait."""
    response = await _executor(sleep=mock_asleep).execute("GET", TEST_URL, mock_send)

    assert response is ok_response
    mock_send.assert_awaited_once_with("GET", TEST_URL, None, None, 30.0)
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_execute_success_redirect_status(mock_asleep: AsyncMock) -> None:
    response = httpx.Response(304)
    send = AsyncMock(return_value=response)

    assert await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send) is response


@pytest.mark.asyncio
async def test_execute_passes_request_unchanged(
    mock_send: AsyncMock, mock_asleep: AsyncMock
) -> None:
    """Test that headers, body and timeout are identical on every
    attempt."""
    mock_send.side_effect = [httpx.Response(503), httpx.Response(503), httpx.Response(200)]
    headers = {"Authorization": "Bearer token", "X-Session-Id": "abc"}

    await _executor(sleep=mock_asleep).execute(
        "post", TEST_URL, mock_send, headers=headers, content=b"{}", timeout=5.0
    )

    assert mock_send.call_args_list == [call("POST", TEST_URL, headers, b"{}", 5.0)] * 3


@pytest.mark.asyncio
async def test_execute_retry_429_then_success(mock_asleep: AsyncMock) -> None:
    """Test that a rate limited request is retried once."""
    ok = httpx.Response(200)
    send = AsyncMock(side_effect=[httpx.Response(429), ok])
    config = NO_JITTER.merge(max_retries=2)

    response = await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send)

    assert response is ok
    assert send.await_count == 2
    mock_asleep.assert_awaited_once_with(0.1)


@pytest.mark.asyncio
async def test_execute_retry_network_error_then_success(mock_asleep: AsyncMock) -> None:
    ok = httpx.Response(200)
    send = AsyncMock(side_effect=[httpx.ConnectError("Connection refused"), ok])

    assert await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send) is ok
    assert send.await_count == 2


@pytest.mark.asyncio
async def test_execute_retry_timeout_then_success(mock_asleep: AsyncMock) -> None:
    ok = httpx.Response(200)
    send = AsyncMock(side_effect=[httpx.ReadTimeout("timed out"), ok])

    assert await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send) is ok
    mock_asleep.assert_awaited_once_with(0.1)


@pytest.mark.asyncio
async def test_execute_backoff_delays(mock_asleep: AsyncMock) -> None:
    """Test that the waits between attempts grow exponentially."""
    send = AsyncMock(
        side_effect=[
            httpx.Response(500),
            httpx.Response(502),
            httpx.Response(504),
            httpx.Response(200),
        ]
    )

    await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send)

    assert mock_asleep.call_args_list == [call(0.1), call(0.2), call(0.4)]


@pytest.mark.asyncio
async def test_execute_backoff_capped(mock_asleep: AsyncMock) -> None:
    config = RetryConfig(max_retries=4, initial_delay=1.0, max_delay=3.0, use_jitter=False)
    send = AsyncMock(side_effect=[httpx.Response(503)] * 4 + [httpx.Response(200)])

    await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send)

    assert mock_asleep.call_args_list == [call(1.0), call(2.0), call(3.0), call(3.0)]


@pytest.mark.asyncio
async def test_execute_jitter_bounds(mock_asleep: AsyncMock, rng: random.Random) -> None:
    config = RetryConfig(max_retries=3, initial_delay=1.0, use_jitter=True)
    send = AsyncMock(side_effect=[httpx.Response(503)] * 3 + [httpx.Response(200)])

    await _executor(config, sleep=mock_asleep, rng=rng).execute("GET", TEST_URL, send)

    delays = [args.args[0] for args in mock_asleep.call_args_list]
    assert len(delays) == 3
    for attempt, delay in enumerate(delays):
        raw = 2.0**attempt
        assert raw * 0.5 <= delay <= raw


@pytest.mark.asyncio
async def test_execute_retry_after_seconds(mock_asleep: AsyncMock) -> None:
    """Test that the server hint replaces the computed backoff."""
    send = AsyncMock(
        side_effect=[httpx.Response(429, headers={"Retry-After": "5"}), httpx.Response(200)]
    )

    await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send)

    mock_asleep.assert_awaited_once_with(5.0)


@pytest.mark.asyncio
async def test_execute_retry_after_capped(mock_asleep: AsyncMock) -> None:
    config = RetryConfig(max_delay=5.0, use_jitter=True)
    send = AsyncMock(
        side_effect=[httpx.Response(503, headers={"Retry-After": "60"}), httpx.Response(200)]
    )

    await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send)

    mock_asleep.assert_awaited_once_with(5.0)


@pytest.mark.asyncio
async def test_execute_retry_after_huge_integer_capped(mock_asleep: AsyncMock) -> None:
    config = RetryConfig(max_delay=5.0)
    ok = httpx.Response(200)
    send = AsyncMock(
        side_effect=[httpx.Response(503, headers={"Retry-After": "1" + "0" * 400}), ok]
    )

    assert await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send) is ok
    mock_asleep.assert_awaited_once_with(5.0)


@pytest.mark.asyncio
async def test_execute_retry_after_http_date(mock_asleep: AsyncMock, fixed_now: Mock) -> None:
    send = AsyncMock(
        side_effect=[
            httpx.Response(503, headers={"Retry-After": "Wed, 21 Oct 2015 07:28:03 GMT"}),
            httpx.Response(200),
        ]
    )

    await _executor(sleep=mock_asleep, now=fixed_now).execute("GET", TEST_URL, send)

    mock_asleep.assert_awaited_once_with(3.0)


@pytest.mark.asyncio
async def test_execute_retry_after_invalid_uses_backoff(mock_asleep: AsyncMock) -> None:
    send = AsyncMock(
        side_effect=[httpx.Response(503, headers={"Retry-After": "later"}), httpx.Response(200)]
    )

    await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send)

    mock_asleep.assert_awaited_once_with(0.1)


@pytest.mark.asyncio
async def test_execute_retry_after_ignored(mock_asleep: AsyncMock) -> None:
    config = RetryConfig(initial_delay=0.1, use_jitter=False, respect_retry_after=False)
    send = AsyncMock(
        side_effect=[httpx.Response(429, headers={"Retry-After": "5"}), httpx.Response(200)]
    )

    await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send)

    mock_asleep.assert_awaited_once_with(0.1)


############################
#     Tests for failure    #
############################


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422])
async def test_execute_non_retryable_status(mock_asleep: AsyncMock, status_code: int) -> None:
    """Test that client errors fail on first occurrence."""
    response = httpx.Response(status_code)
    send = AsyncMock(return_value=response)

    with pytest.raises(HttpStatusError) as exc_info:
        await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send)

    assert not isinstance(exc_info.value, RetryExhaustedError)
    assert exc_info.value.status_code == status_code
    assert exc_info.value.response is response
    assert str(exc_info.value) == f"GET request to {TEST_URL} failed with status {status_code}"
    send.assert_awaited_once()
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_execute_custom_retryable_status(mock_asleep: AsyncMock) -> None:
    config = RetryConfig(retryable_status_codes={409}, use_jitter=False)
    send = AsyncMock(side_effect=[httpx.Response(409), httpx.Response(503)])

    with pytest.raises(HttpStatusError) as exc_info:
        await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send)

    assert exc_info.value.status_code == 503
    assert send.await_count == 2


@pytest.mark.asyncio
async def test_execute_network_error_not_retried(mock_asleep: AsyncMock) -> None:
    """Test that a transport failure fails at once when network retries
    are disabled."""
    config = RetryConfig(retry_on_network_error=False)
    error = httpx.ConnectError("Connection refused")
    send = AsyncMock(side_effect=error)

    with pytest.raises(NetworkError) as exc_info:
        await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send)

    assert not isinstance(exc_info.value, RetryExhaustedError)
    assert exc_info.value.cause is error
    assert exc_info.value.__cause__ is error
    assert exc_info.value.status_code is None
    assert "failed on attempt 1" in str(exc_info.value)
    send.assert_awaited_once()
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_execute_timeout_not_retried(mock_asleep: AsyncMock) -> None:
    config = RetryConfig(retry_on_network_error=False)
    send = AsyncMock(side_effect=httpx.ReadTimeout("Read timed out"))

    with pytest.raises(NetworkError, match=r"timed out on attempt 1"):
        await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send)


@pytest.mark.asyncio
async def test_execute_retries_exhausted(mock_asleep: AsyncMock) -> None:
    """Test that max_retries=3 makes exactly 4 attempts and wraps the
    last error."""
    responses = [httpx.Response(503) for _ in range(4)]
    send = AsyncMock(side_effect=responses)
    config = RetryConfig(max_retries=3, initial_delay=0.1, use_jitter=False)

    with pytest.raises(RetryExhaustedError) as exc_info:
        await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send)

    error = exc_info.value
    assert send.await_count == 4
    assert mock_asleep.call_args_list == [call(0.1), call(0.2), call(0.4)]
    assert error.attempts == 4
    assert error.status_code == 503
    assert error.response is responses[-1]
    assert isinstance(error.last_error, HttpStatusError)
    assert error.last_error.response is responses[-1]
    assert error.__cause__ is error.last_error
    assert str(error) == (
        f"GET request to {TEST_URL} failed with status 503 (gave up after 4 attempts)"
    )


@pytest.mark.asyncio
async def test_execute_retries_exhausted_network_error(mock_asleep: AsyncMock) -> None:
    config = RetryConfig(max_retries=2, use_jitter=False)
    errors = [httpx.ConnectError(f"refused {i}") for i in range(3)]
    send = AsyncMock(side_effect=errors)

    with pytest.raises(RetryExhaustedError) as exc_info:
        await _executor(config, sleep=mock_asleep).execute("GET", TEST_URL, send)

    assert exc_info.value.attempts == 3
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.last_error, NetworkError)
    assert exc_info.value.last_error.cause is errors[-1]


@pytest.mark.asyncio
async def test_execute_max_retries_zero(mock_asleep: AsyncMock) -> None:
    """Test that max_retries=0 makes a single attempt."""
    send = AsyncMock(return_value=httpx.Response(503))

    with pytest.raises(RetryExhaustedError) as exc_info:
        await _executor(RetryConfig(max_retries=0), sleep=mock_asleep).execute(
            "GET", TEST_URL, send
        )

    assert exc_info.value.attempts == 1
    send.assert_awaited_once()
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_execute_non_transport_exception_propagates(mock_asleep: AsyncMock) -> None:
    """Test that errors other than transport errors are not retried."""
    send = AsyncMock(side_effect=RuntimeError("bug"))

    with pytest.raises(RuntimeError, match=r"bug"):
        await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send)

    send.assert_awaited_once()


@pytest.mark.asyncio
async def test_execute_cancelled_during_send(mock_asleep: AsyncMock) -> None:
    send = AsyncMock(side_effect=asyncio.CancelledError())

    with pytest.raises(asyncio.CancelledError):
        await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send)

    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_execute_cancelled_during_wait() -> None:
    """Test that cancelling the task during a wait stops the loop."""
    send = AsyncMock(return_value=httpx.Response(503))
    sleep = AsyncMock(side_effect=asyncio.CancelledError())

    with pytest.raises(asyncio.CancelledError):
        await AsyncRetryExecutor(NO_JITTER, sleep=sleep).execute("GET", TEST_URL, send)

    send.assert_awaited_once()


@pytest.mark.asyncio
async def test_execute_waits_do_not_block_event_loop() -> None:
    """Test that other tasks progress while a call waits between
    attempts."""
    config = RetryConfig(max_retries=1, initial_delay=0.05, use_jitter=False)
    send = AsyncMock(side_effect=[httpx.Response(503), httpx.Response(200)])
    ticks = []

    async def ticker() -> None:
        for i in range(3):
            ticks.append(i)
            await asyncio.sleep(0.001)

    response, _ = await asyncio.gather(
        AsyncRetryExecutor(config).execute("GET", TEST_URL, send), ticker()
    )

    assert response.status_code == 200
    assert ticks == [0, 1, 2]


@pytest.mark.asyncio
async def test_execute_concurrent_calls_share_executor(mock_asleep: AsyncMock) -> None:
    executor = _executor(sleep=mock_asleep)
    send_a = AsyncMock(side_effect=[httpx.Response(503), httpx.Response(200)])
    send_b = AsyncMock(return_value=httpx.Response(201))

    response_a, response_b = await asyncio.gather(
        executor.execute("GET", TEST_URL, send_a), executor.execute("GET", TEST_URL, send_b)
    )

    assert response_a.status_code == 200
    assert response_b.status_code == 201
    assert executor.config is NO_JITTER


###############################
#     Tests for validation    #
###############################


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "url", "timeout", "match"),
    [
        ("", TEST_URL, 10.0, r"HTTP method cannot be empty"),
        ("GET", "", 10.0, r"URL cannot be empty"),
        ("GET", TEST_URL, 0.0, r"timeout must be > 0"),
    ],
)
async def test_execute_invalid_request(
    mock_send: AsyncMock, mock_asleep: AsyncMock, method: str, url: str, timeout: float, match: str
) -> None:
    """Test that a malformed request is rejected before any attempt."""
    with pytest.raises(ValidationError, match=match):
        await _executor(sleep=mock_asleep).execute(method, url, mock_send, timeout=timeout)

    mock_send.assert_not_called()


##############################
#     Tests for callbacks    #
##############################


@pytest.mark.asyncio
async def test_execute_callbacks_on_retry_then_success(mock_asleep: AsyncMock) -> None:
    callbacks = CallbackConfig(
        on_request=Mock(), on_retry=Mock(), on_success=Mock(), on_failure=Mock()
    )
    send = AsyncMock(side_effect=[httpx.Response(429), httpx.Response(200)])

    await _executor(callbacks=callbacks, sleep=mock_asleep).execute("GET", TEST_URL, send)

    assert [c.args[0].attempt for c in callbacks.on_request.call_args_list] == [1, 2]
    callbacks.on_retry.assert_called_once_with(
        RetryInfo(
            url=TEST_URL,
            method="GET",
            attempt=2,
            max_retries=3,
            wait_time=0.1,
            error=None,
            status_code=429,
        )
    )
    assert callbacks.on_success.call_args.args[0].attempt == 2
    callbacks.on_failure.assert_not_called()


@pytest.mark.asyncio
async def test_execute_callbacks_on_retry_network_error(mock_asleep: AsyncMock) -> None:
    on_retry = Mock()
    error = httpx.ConnectError("refused")
    send = AsyncMock(side_effect=[error, httpx.Response(200)])

    await _executor(callbacks=CallbackConfig(on_retry=on_retry), sleep=mock_asleep).execute(
        "GET", TEST_URL, send
    )

    info = on_retry.call_args.args[0]
    assert info.error is error
    assert info.status_code is None


@pytest.mark.asyncio
async def test_execute_callbacks_on_failure(mock_asleep: AsyncMock) -> None:
    callbacks = CallbackConfig(on_success=Mock(), on_failure=Mock())
    send = AsyncMock(return_value=httpx.Response(404))

    with pytest.raises(HttpStatusError) as exc_info:
        await _executor(callbacks=callbacks, sleep=mock_asleep).execute("GET", TEST_URL, send)

    info = callbacks.on_failure.call_args.args[0]
    assert info.error is exc_info.value
    assert info.status_code == 404
    assert info.attempt == 1
    callbacks.on_success.assert_not_called()


#############################
#     Tests for logging     #
#############################


@pytest.mark.asyncio
async def test_execute_logs_transitions(
    mock_asleep: AsyncMock, caplog: pytest.LogCaptureFixture
) -> None:
    send = AsyncMock(side_effect=[httpx.Response(503), httpx.Response(200)])

    with caplog.at_level(logging.DEBUG, logger="pdfdancer"):
        await _executor(sleep=mock_asleep).execute("GET", TEST_URL, send)

    assert "will retry in 0.100s (status 503)" in caplog.text
    assert RetryState.SUCCESS.value in caplog.text


####################################
#     Tests for executor helpers   #
####################################


def test_create_outcome_error_http_failure() -> None:
    response = httpx.Response(500)
    outcome = HttpFailure(status_code=500, headers=response.headers, response=response)

    error = create_outcome_error(outcome, url=TEST_URL, method="PUT", attempt=0)

    assert isinstance(error, HttpStatusError)
    assert error.method == "PUT"
    assert error.url == TEST_URL
    assert error.cause is None


def test_create_exhausted_error_network_failure() -> None:
    outcome = NetworkFailure(error=httpx.ConnectTimeout("connect timed out"))

    error = create_exhausted_error(outcome, url=TEST_URL, method="GET", attempt=2)

    assert error.attempts == 3
    assert "timed out on attempt 3" in str(error)
    assert "(gave up after 3 attempts)" in str(error)
