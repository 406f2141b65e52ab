r"""Asynchronous session client for the PDFDancer service.

This module provides an async context manager that uploads a PDF to open
a server-side session and then sends authenticated requests bound to that
session. Every request goes through the retry executor.
"""

from __future__ import annotations

__all__ = ["AsyncPdfDancerClient"]

import json as jsonlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

import httpx

from pdfdancer.core.config import DEFAULT_TIMEOUT, RetryConfig
from pdfdancer.core.validation import validate_timeout
from pdfdancer.env import resolve_base_url, resolve_token
from pdfdancer.exceptions import (
    FontNotFoundError,
    HttpStatusError,
    RetryExhaustedError,
    SessionError,
    ValidationError,
)
from pdfdancer.retry import AsyncRetryExecutor
from pdfdancer.transport import HttpxSender
from pdfdancer.utils.response import extract_error_message, font_not_found_message

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from pdfdancer.retry import CallbackConfig

logger: logging.Logger = logging.getLogger(__name__)

PdfData = bytes | bytearray | memoryview | Path | str

SESSION_HEADER = "X-Session-Id"


def _read_pdf_data(pdf_data: PdfData | None) -> bytes:
    if pdf_data is None:
        msg = "PDF data cannot be null"
        raise ValidationError(msg)
    if isinstance(pdf_data, (bytes, bytearray, memoryview)):
        data = bytes(pdf_data)
    elif isinstance(pdf_data, (Path, str)):
        path = Path(pdf_data)
        if not path.is_file():
            msg = f"PDF file not found: {path}"
            raise ValidationError(msg)
        data = path.read_bytes()
    else:
        msg = f"Unsupported PDF data type: {type(pdf_data).__name__}"
        raise ValidationError(msg)
    if not data:
        msg = "PDF data cannot be empty"
        raise ValidationError(msg)
    return data


class AsyncPdfDancerClient:
    r"""Asynchronous context manager bound to one PDFDancer session.

    Entering the context opens the underlying ``httpx.AsyncClient`` (unless
    one was supplied) and creates the session by uploading the PDF. The
    bearer token is attached unchanged to every attempt.

    Args:
        token: The API token. Must not be blank.
        pdf_data: The PDF as bytes, or a path to a PDF file.
        base_url: The service base URL. Defaults to ``PDFDANCER_BASE_URL``
            or ``https://api.pdfdancer.com``.
        timeout: Maximum seconds to wait for a single attempt. Must be > 0.
        config: Optional retry configuration shared by every request.
        callbacks: Optional lifecycle callbacks shared by every request.
        client: Optional ``httpx.AsyncClient``. A supplied client is not
            closed by this object.

    Example:
        ```pycon
        >>> import asyncio
        >>> from pdfdancer import AsyncPdfDancerClient
        >>> async def main():  # doctest: +SKIP
        ...     async with await AsyncPdfDancerClient.open("document.pdf") as pdf:
        ...         response = await pdf.request("POST", "/pdf/find", json={})
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        token: str,
        pdf_data: PdfData,
        *,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        config: RetryConfig | None = None,
        callbacks: CallbackConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not token or not token.strip():
            msg = "Authentication token cannot be null or empty"
            raise ValidationError(msg)
        validate_timeout(timeout)

        self._token = token.strip()
        self._pdf_bytes = _read_pdf_data(pdf_data)
        self._base_url = resolve_base_url(base_url)
        self._timeout = timeout
        self._config = config if config is not None else RetryConfig()
        self._callbacks = callbacks

        self._client = client
        self._owns_client = client is None
        self._entered = False
        self._session_id: str | None = None

    @classmethod
    async def open(
        cls,
        pdf_data: PdfData,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        config: RetryConfig | None = None,
        callbacks: CallbackConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> Self:
        """Create a client and open its session.

        The token falls back to the ``PDFDANCER_TOKEN`` environment
        variable (a ``.env`` file is honored).

        Args:
            pdf_data: The PDF as bytes, or a path to a PDF file.
            token: Optional API token.
            base_url: Optional service base URL.
            timeout: Optional per-attempt timeout in seconds.
            config: Optional retry configuration.
            callbacks: Optional lifecycle callbacks.
            client: Optional ``httpx.AsyncClient``.

        Returns:
            The client with an active session. It can be used directly or
            as an async context manager.

        Raises:
            ValidationError: If no token is available or the inputs are
                malformed. No request is sent.
            SessionError: If the server returns an empty session id.
            HttpRequestError: If the session creation request fails.
        """
        resolved_token = resolve_token(token)
        if not resolved_token:
            msg = (
                "Missing PDFDancer token (pass it explicitly or set PDFDANCER_TOKEN "
                "in environment)."
            )
            raise ValidationError(msg)
        pdf = cls(
            resolved_token,
            pdf_data,
            base_url=base_url,
            timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
            config=config,
            callbacks=callbacks,
            client=client,
        )
        return await pdf.__aenter__()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session_id(self) -> str | None:
        r"""The id of the active session, or None before it is created."""
        return self._session_id

    async def __aenter__(self) -> Self:
        """Enter the async context manager, open the httpx client and
        create the session.

        Entering an already entered client is a no-op, so the result of
        ``open`` can be used in an ``async with`` statement.

        Returns:
            The client instance.
        """
        if self._entered:
            return self
        if self._client is None:
            self._client = httpx.AsyncClient()
        self._entered = True
        try:
            await self.create_session()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        r"""Close the underlying httpx client if this object created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        self._entered = False
        self._session_id = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if not self._entered or self._client is None:
            msg = "AsyncPdfDancerClient must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._client

    def _executor(self) -> AsyncRetryExecutor:
        return AsyncRetryExecutor(self._config, self._callbacks)

    async def create_session(self) -> str:
        """Upload the PDF to create a new processing session.

        Returns:
            The session id returned by the server.

        Raises:
            SessionError: If the server returns an empty session id.
            HttpStatusError: If the server rejects the upload.
            NetworkError: If a transport failure is not retried.
            RetryExhaustedError: If every allowed attempt failed.
        """
        client = self._ensure_client()
        url = f"{self._base_url}/session/create"
        upload = client.build_request(
            "POST",
            url,
            files={"pdf": ("document.pdf", self._pdf_bytes, "application/pdf")},
        )
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": upload.headers["Content-Type"],
        }
        try:
            response = await self._executor().execute(
                "POST",
                url,
                HttpxSender(client),
                headers=headers,
                content=upload.read(),
                timeout=self._timeout,
            )
        except (HttpStatusError, RetryExhaustedError) as exc:
            self._raise_api_error(exc, "Failed to create session")

        session_id = response.text.strip()
        if not session_id:
            msg = "Server returned empty session ID"
            raise SessionError(msg)
        logger.debug(f"Created session {session_id} on {self._base_url}")
        self._session_id = session_id
        return session_id

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send an authenticated request bound to the active session.

        Args:
            method: The HTTP method name (e.g., "GET", "POST").
            path: The API path relative to the base URL (e.g., "/pdf/find").
            json: Optional JSON-serializable request body.
            params: Optional query parameters.

        Returns:
            The successful HTTP response.

        Raises:
            RuntimeError: If called outside of a context manager.
            SessionError: If no session is active.
            FontNotFoundError: If the server reports a missing font.
            HttpStatusError: If a non-retryable status code is received.
            NetworkError: If a transport failure is not retried.
            RetryExhaustedError: If every allowed attempt failed.
        """
        client = self._ensure_client()
        if self._session_id is None:
            msg = "No active session"
            raise SessionError(msg)

        url = str(httpx.URL(f"{self._base_url}{path}", params=params))
        headers = {
            "Authorization": f"Bearer {self._token}",
            SESSION_HEADER: self._session_id,
            "Content-Type": "application/json",
        }
        content = jsonlib.dumps(json).encode("utf-8") if json is not None else None
        try:
            return await self._executor().execute(
                method,
                url,
                HttpxSender(client),
                headers=headers,
                content=content,
                timeout=self._timeout,
            )
        except (HttpStatusError, RetryExhaustedError) as exc:
            self._raise_api_error(exc, "API request failed")

    @staticmethod
    def _raise_api_error(exc: HttpStatusError | RetryExhaustedError, prefix: str) -> NoReturn:
        if exc.response is None:
            raise exc
        font_message = font_not_found_message(exc.response)
        if font_message is not None:
            raise FontNotFoundError(font_message) from exc
        error = HttpStatusError(
            method=exc.method,
            url=exc.url,
            message=f"{prefix}: {extract_error_message(exc.response)}",
            status_code=exc.status_code,
            response=exc.response,
        )
        if isinstance(exc, RetryExhaustedError):
            raise RetryExhaustedError(last_error=error, attempts=exc.attempts) from exc
        raise error from exc
