r"""HTTP response helpers.

This module provides functions for reading the error payloads returned
by the PDFDancer service.
"""

from __future__ import annotations

__all__ = ["extract_error_message", "font_not_found_message"]

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx

logger: logging.Logger = logging.getLogger(__name__)

FONT_NOT_FOUND_ERROR = "FontNotFoundException"


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def extract_error_message(response: httpx.Response | None) -> str:
    """Extract a meaningful error message from an error response.

    The message is looked up in this order:
    1. the ``message`` of every entry of ``_embedded.errors``, joined by "; "
    2. the top-level ``message`` field
    3. the raw response text
    4. ``HTTP <status>``

    Args:
        response: The HTTP response, or None if no response was received.

    Returns:
        The error message.

    Example:
        ```pycon
        >>> import httpx
        >>> from pdfdancer.utils import extract_error_message
        >>> response = httpx.Response(
        ...     400, json={"_embedded": {"errors": [{"message": "a"}, {"message": "b"}]}}
        ... )
        >>> extract_error_message(response)
        'a; b'
        >>> extract_error_message(httpx.Response(502))
        'HTTP 502'

        ```
    """
    if response is None:
        return "Unknown error"

    payload = _json_body(response)
    if isinstance(payload, dict):
        embedded = payload.get("_embedded")
        errors = embedded.get("errors") if isinstance(embedded, dict) else None
        if isinstance(errors, list):
            messages = [
                str(error["message"])
                for error in errors
                if isinstance(error, dict) and error.get("message")
            ]
            if messages:
                return "; ".join(messages)
        if payload.get("message"):
            return str(payload["message"])

    return response.text or f"HTTP {response.status_code}"


def font_not_found_message(response: httpx.Response) -> str | None:
    """Check whether a 404 response reports a missing font.

    Args:
        response: The HTTP response.

    Returns:
        The server message if the response reports a missing font,
        otherwise None.
    """
    if response.status_code != 404:
        return None
    payload = _json_body(response)
    if isinstance(payload, dict) and payload.get("error") == FONT_NOT_FOUND_ERROR:
        logger.debug(f"Server reported a missing font: {payload.get('message')!r}")
        return str(payload.get("message") or "Font not found")
    return None
