r"""pdfdancer - Resilient async client for the PDFDancer service.

The PDF manipulation happens server-side. This package makes every call
to the service resilient: transient failures (rate limiting, overload,
transport errors) are retried with exponential backoff, while client
errors fail on first occurrence.

Key Features:
    - Automatic retry for transient HTTP errors (429, 500, 502, 503, 504)
    - Exponential backoff capped by a maximum delay, with optional jitter
    - Retry-After header support (both integer seconds and HTTP-date formats)
    - Non-blocking waits between attempts built on asyncio and httpx
    - Callback system for observability (logging, metrics, alerting)
    - Session client with token resolution from the environment

Example:
    ```pycon
    >>> import asyncio
    >>> from pdfdancer import AsyncPdfDancerClient, RetryConfig
    >>> async def main():  # doctest: +SKIP
    ...     config = RetryConfig(max_retries=5, max_delay=5.0)
    ...     async with await AsyncPdfDancerClient.open("document.pdf", config=config) as pdf:
    ...         response = await pdf.request("POST", "/pdf/find", json={})
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncPdfDancerClient",
    "AsyncRetryExecutor",
    "CallbackConfig",
    "FontNotFoundError",
    "HttpRequestError",
    "HttpStatusError",
    "NetworkError",
    "PdfDancerError",
    "RetryConfig",
    "RetryExhaustedError",
    "SessionError",
    "ValidationError",
    "__version__",
    "request_async",
]

from importlib.metadata import PackageNotFoundError, version

from pdfdancer.client_async import AsyncPdfDancerClient
from pdfdancer.core.config import RetryConfig
from pdfdancer.exceptions import (
    FontNotFoundError,
    HttpRequestError,
    HttpStatusError,
    NetworkError,
    PdfDancerError,
    RetryExhaustedError,
    SessionError,
    ValidationError,
)
from pdfdancer.request_async import request_async
from pdfdancer.retry import AsyncRetryExecutor, CallbackConfig

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
