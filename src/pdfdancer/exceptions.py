r"""Exceptions raised by the pdfdancer client.

The hierarchy separates errors raised before any request is sent
(``ValidationError``), errors tied to a single HTTP exchange
(``HttpRequestError`` and its subclasses), and session level errors.
"""

from __future__ import annotations

__all__ = [
    "FontNotFoundError",
    "HttpRequestError",
    "HttpStatusError",
    "NetworkError",
    "PdfDancerError",
    "RetryExhaustedError",
    "SessionError",
    "ValidationError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class PdfDancerError(Exception):
    r"""Base class for all the pdfdancer client errors."""


class ValidationError(PdfDancerError, ValueError):
    r"""Raised when a request or a configuration is malformed.

    It is always raised before the first attempt is sent, so it never
    enters the retry loop.
    """


class HttpRequestError(PdfDancerError):
    r"""Raised when an HTTP request fails.

    Args:
        method: The HTTP method name (e.g., "GET", "POST").
        url: The URL that was requested.
        message: The error message.
        status_code: The HTTP status code of the response, if a response
            was received.
        response: The HTTP response object, if a response was received.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from pdfdancer.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET", url="https://api.pdfdancer.com", message="boom", status_code=500
        ... )
        >>> error.status_code
        500
        >>> str(error)
        'boom'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.message = message
        self.status_code = status_code
        self.response = response
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class HttpStatusError(HttpRequestError):
    r"""Raised when the server answers with a non-success status code."""


class NetworkError(HttpRequestError):
    r"""Raised when no response was obtained (DNS, connection, timeout)."""


class RetryExhaustedError(HttpRequestError):
    r"""Raised when every attempt allowed by the retry budget failed.

    Args:
        last_error: The error built from the final attempt outcome.
        attempts: The number of attempts that were made.

    Example:
        ```pycon
        >>> from pdfdancer.exceptions import HttpStatusError, RetryExhaustedError
        >>> last = HttpStatusError(
        ...     method="GET", url="https://api.pdfdancer.com", message="boom", status_code=503
        ... )
        >>> error = RetryExhaustedError(last_error=last, attempts=4)
        >>> error.attempts, error.status_code
        (4, 503)

        ```
    """

    def __init__(self, last_error: HttpRequestError, attempts: int) -> None:
        super().__init__(
            method=last_error.method,
            url=last_error.url,
            message=f"{last_error.message} (gave up after {attempts} attempts)",
            status_code=last_error.status_code,
            response=last_error.response,
            cause=last_error,
        )
        self.last_error = last_error
        self.attempts = attempts


class SessionError(PdfDancerError):
    r"""Raised when a session cannot be created or is invalid."""


class FontNotFoundError(PdfDancerError):
    r"""Raised when the server reports that a requested font is not
    available."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Font not found: {message}")
