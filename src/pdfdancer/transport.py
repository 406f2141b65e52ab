r"""Send primitive performing a single HTTP attempt.

The retry executor never talks to the network directly. It calls a
``Sender``, which performs exactly one attempt and either returns the
response or raises ``httpx.RequestError`` when no response was obtained.
"""

from __future__ import annotations

__all__ = ["HttpxSender", "Sender"]

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

logger: logging.Logger = logging.getLogger(__name__)


class Sender(Protocol):
    r"""Callable performing one HTTP attempt."""

    async def __call__(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None,
        content: bytes | None,
        timeout: float,
    ) -> httpx.Response: ...


class HttpxSender:
    """Send primitive backed by an ``httpx.AsyncClient``.

    Each call is a fresh request. The client lifecycle is owned by the
    caller.

    Args:
        client: The async client used to send the requests.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from pdfdancer.transport import HttpxSender
        >>> async def main():
        ...     async with httpx.AsyncClient() as client:
        ...         send = HttpxSender(client)
        ...         return await send("GET", "https://api.pdfdancer.com", None, None, 10.0)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def __call__(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None,
        content: bytes | None,
        timeout: float,
    ) -> httpx.Response:
        logger.debug(f"Sending {method} request to {url} (timeout={timeout}s)")
        return await self._client.request(
            method,
            url,
            headers=headers,
            content=content,
            timeout=timeout,
        )
