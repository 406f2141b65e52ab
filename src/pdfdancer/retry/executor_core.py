r"""Shared helpers for the retry executor.

These functions turn a failed attempt outcome into the error raised to
the caller.
"""

from __future__ import annotations

__all__ = ["RetryState", "create_exhausted_error", "create_outcome_error"]

from enum import Enum
from typing import TYPE_CHECKING

import httpx

from pdfdancer.exceptions import (
    HttpRequestError,
    HttpStatusError,
    NetworkError,
    RetryExhaustedError,
)
from pdfdancer.retry.outcome import HttpFailure

if TYPE_CHECKING:
    from pdfdancer.retry.outcome import NetworkFailure


class RetryState(Enum):
    r"""States of a single call's attempt loop.

    ``ATTEMPTING`` moves to ``SUCCESS``, ``RETRY_WAIT`` or ``FAILED``;
    ``RETRY_WAIT`` moves back to ``ATTEMPTING``. ``SUCCESS`` and ``FAILED``
    are terminal.
    """

    ATTEMPTING = "attempting"
    RETRY_WAIT = "retry_wait"
    SUCCESS = "success"
    FAILED = "failed"


def create_outcome_error(
    outcome: HttpFailure | NetworkFailure,
    url: str,
    method: str,
    attempt: int,
) -> HttpRequestError:
    """Create the error describing a failed attempt.

    Args:
        outcome: The failed attempt outcome.
        url: The URL being requested.
        method: The HTTP method being used.
        attempt: Current attempt number (0-indexed).

    Returns:
        ``HttpStatusError`` for a failure status, ``NetworkError`` for a
        transport failure.
    """
    if isinstance(outcome, HttpFailure):
        return HttpStatusError(
            method=method,
            url=url,
            message=f"{method} request to {url} failed with status {outcome.status_code}",
            status_code=outcome.status_code,
            response=outcome.response,
        )
    exc = outcome.error
    if isinstance(exc, httpx.TimeoutException):
        return NetworkError(
            method=method,
            url=url,
            message=f"{method} request to {url} timed out on attempt {attempt + 1}: {exc}",
            cause=exc,
        )
    return NetworkError(
        method=method,
        url=url,
        message=f"{method} request to {url} failed on attempt {attempt + 1}: {exc}",
        cause=exc,
    )


def create_exhausted_error(
    outcome: HttpFailure | NetworkFailure,
    url: str,
    method: str,
    attempt: int,
) -> RetryExhaustedError:
    """Create the error raised when the retry budget is spent.

    Args:
        outcome: The outcome of the final attempt.
        url: The URL being requested.
        method: The HTTP method being used.
        attempt: Final attempt number (0-indexed).

    Returns:
        ``RetryExhaustedError`` wrapping the error of the final attempt.
    """
    return RetryExhaustedError(
        last_error=create_outcome_error(outcome, url=url, method=method, attempt=attempt),
        attempts=attempt + 1,
    )
