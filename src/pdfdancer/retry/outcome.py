r"""Attempt outcomes.

An attempt ends in exactly one of three outcomes: the server answered with
a success status, the server answered with a failure status, or no response
was obtained. They form a closed union so that every consumer handles the
three cases explicitly.
"""

from __future__ import annotations

__all__ = ["AttemptOutcome", "HttpFailure", "NetworkFailure", "Success", "classify_response"]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from pdfdancer.utils.retry_after import RETRY_AFTER_HEADER

if TYPE_CHECKING:
    import httpx


@dataclass(frozen=True)
class Success:
    """The server answered with a success status.

    Attributes:
        response: The HTTP response.
    """

    response: httpx.Response


@dataclass(frozen=True)
class HttpFailure:
    """The server answered with a failure status.

    Attributes:
        status_code: The HTTP status code.
        headers: The response headers.
        response: The HTTP response.
    """

    status_code: int
    headers: httpx.Headers
    response: httpx.Response

    @property
    def retry_after(self) -> str | None:
        r"""The raw Retry-After header value, or None if absent."""
        return self.headers.get(RETRY_AFTER_HEADER)


@dataclass(frozen=True)
class NetworkFailure:
    """No response was obtained (DNS, connection, timeout).

    Attributes:
        error: The transport exception raised by the send primitive.
    """

    error: Exception


AttemptOutcome = Union[Success, HttpFailure, NetworkFailure]


def classify_response(response: httpx.Response) -> Success | HttpFailure:
    """Classify a received response into an outcome.

    Args:
        response: The HTTP response.

    Returns:
        ``Success`` for a status code below 400, ``HttpFailure`` otherwise.

    Example:
        ```pycon
        >>> import httpx
        >>> from pdfdancer.retry.outcome import classify_response
        >>> classify_response(httpx.Response(200))
        Success(response=<Response [200 OK]>)
        >>> classify_response(httpx.Response(503)).status_code
        503

        ```
    """
    if response.status_code < 400:
        return Success(response=response)
    return HttpFailure(
        status_code=response.status_code,
        headers=response.headers,
        response=response,
    )
