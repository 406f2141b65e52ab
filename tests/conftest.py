from __future__ import annotations

import os
import random
from datetime import datetime, timezone
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from pdfdancer.env import BASE_URL_ENV_VAR, TOKEN_ENV_VAR, reset_env_loader

if TYPE_CHECKING:
    from collections.abc import Generator

FIXED_NOW = datetime(2015, 10, 21, 7, 28, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_asleep() -> AsyncMock:
    """Create an async sleep replacement recording the requested
    delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def fixed_now() -> Mock:
    """Create a clock frozen at 2015-10-21 07:28:00 UTC."""
    return Mock(return_value=FIXED_NOW)


@pytest.fixture
def rng() -> random.Random:
    """Create a seeded random source for deterministic jitter."""
    return random.Random(42)  # noqa: S311


@pytest.fixture
def ok_response() -> httpx.Response:
    """Create a successful httpx.Response for testing."""
    return httpx.Response(200, text="ok")


@pytest.fixture
def mock_send(ok_response: httpx.Response) -> AsyncMock:
    """Create a mock send primitive returning a successful response."""
    return AsyncMock(return_value=ok_response)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate the tests from the PDFDancer environment variables."""
    for name in (TOKEN_ENV_VAR, BASE_URL_ENV_VAR):
        monkeypatch.delenv(name, raising=False)
    reset_env_loader()
    yield
    # values loaded from a .env file are not tracked by monkeypatch
    for name in (TOKEN_ENV_VAR, BASE_URL_ENV_VAR):
        os.environ.pop(name, None)
    reset_env_loader()
