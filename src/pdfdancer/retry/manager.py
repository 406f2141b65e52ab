r"""Callback manager for the retry lifecycle events."""

from __future__ import annotations

__all__ = ["CallbackManager"]

from typing import TYPE_CHECKING

from pdfdancer.callbacks import (
    invoke_on_failure,
    invoke_on_request,
    invoke_on_retry,
    invoke_on_success,
)
from pdfdancer.retry.config import CallbackConfig

if TYPE_CHECKING:
    import httpx


class CallbackManager:
    """Manages callback invocations during the retry lifecycle.

    Attributes:
        callbacks: Configuration containing callback functions for lifecycle events.
    """

    def __init__(self, callbacks: CallbackConfig | None = None) -> None:
        self.callbacks = callbacks if callbacks is not None else CallbackConfig()

    def on_request(self, url: str, method: str, attempt: int, max_retries: int) -> None:
        invoke_on_request(
            self.callbacks.on_request,
            url=url,
            method=method,
            attempt=attempt,
            max_retries=max_retries,
        )

    def on_retry(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        wait_time: float,
        error: Exception | None,
        status_code: int | None,
    ) -> None:
        invoke_on_retry(
            self.callbacks.on_retry,
            url=url,
            method=method,
            attempt=attempt,
            max_retries=max_retries,
            wait_time=wait_time,
            error=error,
            status_code=status_code,
        )

    def on_success(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        response: httpx.Response,
        start_time: float,
    ) -> None:
        invoke_on_success(
            self.callbacks.on_success,
            url=url,
            method=method,
            attempt=attempt,
            max_retries=max_retries,
            response=response,
            start_time=start_time,
        )

    def on_failure(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        error: Exception,
        status_code: int | None,
        start_time: float,
    ) -> None:
        invoke_on_failure(
            self.callbacks.on_failure,
            url=url,
            method=method,
            attempt=attempt,
            max_retries=max_retries,
            error=error,
            status_code=status_code,
            start_time=start_time,
        )
