r"""Asynchronous HTTP request function with automatic retry logic."""

from __future__ import annotations

__all__ = ["request_async"]

import json as jsonlib
from typing import TYPE_CHECKING, Any

import httpx

from pdfdancer.core.config import DEFAULT_TIMEOUT, RetryConfig
from pdfdancer.exceptions import ValidationError
from pdfdancer.retry import AsyncRetryExecutor
from pdfdancer.transport import HttpxSender

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pdfdancer.retry import CallbackConfig


async def request_async(
    method: str,
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    config: RetryConfig | None = None,
    callbacks: CallbackConfig | None = None,
    headers: Mapping[str, str] | None = None,
    content: bytes | None = None,
    json: Any = None,
    timeout: float = DEFAULT_TIMEOUT,
    **overrides: Any,
) -> httpx.Response:
    """Send an HTTP request asynchronously with automatic retry logic.

    Args:
        method: The HTTP method name (e.g., "GET", "POST").
        url: The URL to send the request to.
        client: Optional ``httpx.AsyncClient``. If None, a temporary client
            is created and closed after the call.
        config: Optional retry configuration. Defaults to ``RetryConfig()``.
        callbacks: Optional lifecycle callbacks.
        headers: Headers sent with every attempt.
        content: Raw request body. Mutually exclusive with ``json``.
        json: JSON-serializable request body.
        timeout: Maximum seconds to wait for a single attempt.
        **overrides: ``RetryConfig`` fields overriding ``config`` for this
            call only (e.g., ``max_retries=0``).

    Returns:
        The successful HTTP response.

    Raises:
        ValidationError: If the request or the configuration is malformed.
        HttpStatusError: If a non-retryable status code is received.
        NetworkError: If a transport failure is not retried.
        RetryExhaustedError: If every allowed attempt failed.

    Example:
        ```pycon
        >>> import asyncio
        >>> from pdfdancer import request_async
        >>> asyncio.run(
        ...     request_async("GET", "https://api.pdfdancer.com/version", max_retries=5)
        ... )  # doctest: +SKIP

        ```
    """
    call_config = (config if config is not None else RetryConfig()).merge(**overrides)
    if json is not None:
        if content is not None:
            msg = "content and json cannot be used together"
            raise ValidationError(msg)
        content = jsonlib.dumps(json).encode("utf-8")
        headers = {"Content-Type": "application/json", **(headers or {})}

    executor = AsyncRetryExecutor(call_config, callbacks)
    if client is not None:
        return await executor.execute(
            method, url, HttpxSender(client), headers=headers, content=content, timeout=timeout
        )
    async with httpx.AsyncClient() as owned_client:
        return await executor.execute(
            method,
            url,
            HttpxSender(owned_client),
            headers=headers,
            content=content,
            timeout=timeout,
        )
