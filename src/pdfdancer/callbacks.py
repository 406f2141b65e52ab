r"""Lifecycle hooks of a retried request.

The retry executor exposes four lifecycle hooks:
- on_request: Called before each attempt
- on_retry: Called before each wait between attempts
- on_success: Called when an attempt succeeds
- on_failure: Called once with the terminal error

The ``invoke_*`` helpers take the executor's 0-indexed attempt and hand
1-indexed attempt numbers to the callbacks.

Example:
    ```pycon
    >>> from pdfdancer.callbacks import RetryInfo
    >>> from pdfdancer.retry import CallbackConfig
    >>> def log_retry(retry_info: RetryInfo) -> None:
    ...     print(f"Retry {retry_info.attempt}/{retry_info.max_retries + 1}")
    ...
    >>> callbacks = CallbackConfig(on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = [
    "FailureInfo",
    "RequestInfo",
    "ResponseInfo",
    "RetryInfo",
    "invoke_on_failure",
    "invoke_on_request",
    "invoke_on_retry",
    "invoke_on_success",
]

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx


@dataclass
class RequestInfo:
    """Snapshot handed to ``on_request`` before an attempt is sent.

    Attributes:
        url: The target URL.
        method: The upper-cased HTTP method.
        attempt: The number of the attempt about to be sent, starting at 1.
        max_retries: The retry budget of the call.
    """

    url: str
    method: str
    attempt: int
    max_retries: int


@dataclass
class RetryInfo:
    """Snapshot handed to ``on_retry`` before the executor waits.

    Attributes:
        url: The target URL.
        method: The upper-cased HTTP method.
        attempt: The number of the upcoming attempt (1-indexed). The first
            retry is attempt 2.
        max_retries: The retry budget of the call.
        wait_time: The delay in seconds before the upcoming attempt.
        error: The transport exception that triggered the retry (if any).
        status_code: The failure status, or None after a transport error.
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    wait_time: float
    error: Exception | None
    status_code: int | None


@dataclass
class ResponseInfo:
    """Snapshot handed to ``on_success`` once an attempt succeeded.

    Attributes:
        url: The target URL.
        method: The upper-cased HTTP method.
        attempt: The number of the successful attempt, starting at 1.
        max_retries: The retry budget of the call.
        response: The response returned to the caller.
        total_time: Total time spent on all attempts including waits (seconds).
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    response: httpx.Response
    total_time: float


@dataclass
class FailureInfo:
    """Snapshot handed to ``on_failure`` with the terminal error.

    Attributes:
        url: The target URL.
        method: The upper-cased HTTP method.
        attempt: The number of the last attempt made, starting at 1.
        max_retries: The retry budget of the call.
        error: The terminal error raised to the caller.
        status_code: The status of the last response, or None without one.
        total_time: Total time spent on all attempts including waits (seconds).
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    error: Exception
    status_code: int | None
    total_time: float


def invoke_on_request(
    on_request: Callable[[RequestInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
) -> None:
    """Call ``on_request`` unless it is None."""
    if on_request is not None:
        on_request(RequestInfo(url=url, method=method, attempt=attempt + 1, max_retries=max_retries))


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
    wait_time: float,
    error: Exception | None,
    status_code: int | None,
) -> None:
    """Call ``on_retry`` unless it is None."""
    if on_retry is not None:
        on_retry(
            RetryInfo(
                url=url,
                method=method,
                attempt=attempt + 2,
                max_retries=max_retries,
                wait_time=wait_time,
                error=error,
                status_code=status_code,
            )
        )


def invoke_on_success(
    on_success: Callable[[ResponseInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
    response: httpx.Response,
    start_time: float,
) -> None:
    """Call ``on_success`` unless it is None."""
    if on_success is not None:
        on_success(
            ResponseInfo(
                url=url,
                method=method,
                attempt=attempt + 1,
                max_retries=max_retries,
                response=response,
                total_time=time.monotonic() - start_time,
            )
        )


def invoke_on_failure(
    on_failure: Callable[[FailureInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
    error: Exception,
    status_code: int | None,
    start_time: float,
) -> None:
    """Call ``on_failure`` unless it is None."""
    if on_failure is not None:
        on_failure(
            FailureInfo(
                url=url,
                method=method,
                attempt=attempt + 1,
                max_retries=max_retries,
                error=error,
                status_code=status_code,
                total_time=time.monotonic() - start_time,
            )
        )
