r"""Asynchronous retry executor for HTTP requests.

This module provides the AsyncRetryExecutor class that runs the attempt
loop of a single logical request: send, classify, wait, repeat, or stop
with a success or a terminal failure.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import httpx

from pdfdancer.core.config import DEFAULT_TIMEOUT
from pdfdancer.core.validation import validate_request
from pdfdancer.retry.decider import RetryDecider
from pdfdancer.retry.executor_core import (
    RetryState,
    create_exhausted_error,
    create_outcome_error,
)
from pdfdancer.retry.manager import CallbackManager
from pdfdancer.retry.outcome import (
    HttpFailure,
    NetworkFailure,
    Success,
    classify_response,
)
from pdfdancer.retry.strategy import RetryStrategy

if TYPE_CHECKING:
    import random
    from collections.abc import Awaitable, Callable, Mapping
    from datetime import datetime

    from pdfdancer.core.config import RetryConfig
    from pdfdancer.retry.config import CallbackConfig
    from pdfdancer.retry.outcome import AttemptOutcome
    from pdfdancer.transport import Sender

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    """Executes async HTTP requests with automatic retry logic.

    The executor orchestrates the following components:
    - RetryStrategy: Calculates the wait between attempts
    - RetryDecider: Determines whether a failed attempt is retried
    - CallbackManager: Invokes user-defined callbacks at lifecycle events

    The executor keeps no per-call state, so a single instance can serve
    concurrent calls. The configuration is frozen and is never modified
    by the loop.

    Args:
        retry_config: Configuration for retry behavior.
        callback_config: Optional configuration for lifecycle callbacks.
        sleep: Async function used to wait between attempts. Defaults to
            ``asyncio.sleep`` so that other tasks keep running during waits.
        rng: Optional random source used for jitter.
        now: Optional clock used to evaluate HTTP-date Retry-After hints.

    Attributes:
        config: Retry configuration.
        strategy: Strategy for calculating retry delays.
        decider: Logic for deciding whether to retry.
        callbacks: Manager for invoking callbacks.
        sleep: Async function used to wait between attempts.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from pdfdancer.core.config import RetryConfig
        >>> from pdfdancer.retry import AsyncRetryExecutor
        >>> from pdfdancer.transport import HttpxSender
        >>> async def main():
        ...     executor = AsyncRetryExecutor(RetryConfig(max_retries=2))
        ...     async with httpx.AsyncClient() as client:
        ...         return await executor.execute(
        ...             "GET", "https://api.pdfdancer.com/version", HttpxSender(client)
        ...         )
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        retry_config: RetryConfig,
        callback_config: CallbackConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = retry_config
        self.strategy: RetryStrategy = RetryStrategy(retry_config, rng=rng, now=now)
        self.decider: RetryDecider = RetryDecider(retry_config)
        self.callbacks: CallbackManager = CallbackManager(callback_config)
        self.sleep = sleep

    async def execute(
        self,
        method: str,
        url: str,
        send: Sender,
        *,
        headers: Mapping[str, str] | None = None,
        content: bytes | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> httpx.Response:
        """Execute an async request with automatic retry logic.

        Attempts the request up to max_retries + 1 times. The retry loop
        handles:
        - Successful responses (status < 400): Returns immediately
        - Retryable status codes (e.g., 429, 503): Retries after a delay
        - Non-retryable status codes (e.g., 400, 404): Raises immediately
        - Transport errors including timeouts (httpx.RequestError):
          Retries after a delay if retry_on_network_error is enabled

        Intermediate failures are only logged; the caller sees either the
        final successful response or one terminal error.

        Args:
            method: The HTTP method name (e.g., "GET", "POST").
            url: The URL to request.
            send: The send primitive performing one attempt.
            headers: Headers sent unchanged with every attempt.
            content: Optional request body sent with every attempt.
            timeout: Maximum seconds to wait for a single attempt.

        Returns:
            The successful HTTP response.

        Raises:
            ValidationError: If the request is malformed. No attempt is sent.
            HttpStatusError: If a non-retryable status code is received.
            NetworkError: If a transport failure occurs and network errors
                are not retried.
            RetryExhaustedError: If the last allowed attempt failed with a
                retryable outcome. It wraps the error of that last attempt.
        """
        validate_request(method, url, timeout)
        method = method.upper()
        max_retries = self.config.max_retries
        start_time = time.monotonic()
        attempt = 0

        while True:
            self._transition(RetryState.ATTEMPTING, method, url, attempt)
            self.callbacks.on_request(url, method, attempt, max_retries)
            outcome = await self._attempt(method, url, send, headers, content, timeout)

            if isinstance(outcome, Success):
                self._transition(RetryState.SUCCESS, method, url, attempt)
                self.callbacks.on_success(
                    url, method, attempt, max_retries, outcome.response, start_time
                )
                return outcome.response

            should_retry, reason = self.decider.should_retry(outcome, attempt)
            if not should_retry:
                self._transition(RetryState.FAILED, method, url, attempt)
                if self.decider.is_retryable(outcome):
                    error = create_exhausted_error(outcome, url=url, method=method, attempt=attempt)
                else:
                    error = create_outcome_error(outcome, url=url, method=method, attempt=attempt)
                logger.debug(f"{method} to {url}: giving up ({reason})")
                self.callbacks.on_failure(
                    url, method, attempt, max_retries, error, error.status_code, start_time
                )
                raise error from error.cause

            delay = self.strategy.calculate_delay(attempt, outcome)
            logger.debug(f"{method} to {url}: will retry in {delay:.3f}s ({reason})")
            self.callbacks.on_retry(
                url,
                method,
                attempt,
                max_retries,
                delay,
                outcome.error if isinstance(outcome, NetworkFailure) else None,
                outcome.status_code if isinstance(outcome, HttpFailure) else None,
            )
            self._transition(RetryState.RETRY_WAIT, method, url, attempt)
            await self.sleep(delay)
            attempt += 1

    async def _attempt(
        self,
        method: str,
        url: str,
        send: Sender,
        headers: Mapping[str, str] | None,
        content: bytes | None,
        timeout: float,
    ) -> AttemptOutcome:
        try:
            response = await send(method, url, headers, content, timeout)
        except httpx.RequestError as exc:
            logger.debug(
                f"{method} request to {url} encountered {type(exc).__name__}: {exc}"
            )
            return NetworkFailure(error=exc)
        return classify_response(response)

    def _transition(self, state: RetryState, method: str, url: str, attempt: int) -> None:
        logger.debug(
            f"{method} to {url}: {state.value} "
            f"(attempt {attempt + 1}/{self.config.max_retries + 1})"
        )
