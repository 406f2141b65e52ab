r"""Environment resolution for the client credentials and endpoint.

A ``.env`` file in the working directory is loaded once per process with
python-dotenv. Variables already set in the environment take precedence
over the file.
"""

from __future__ import annotations

__all__ = [
    "BASE_URL_ENV_VAR",
    "TOKEN_ENV_VAR",
    "load_env",
    "reset_env_loader",
    "resolve_base_url",
    "resolve_token",
]

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from pdfdancer.core.config import DEFAULT_BASE_URL

logger: logging.Logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "PDFDANCER_TOKEN"
BASE_URL_ENV_VAR = "PDFDANCER_BASE_URL"

_ENV_LOADED = False


def load_env() -> None:
    """Load the ``.env`` file of the working directory, at most once.

    Subsequent calls are no-ops until ``reset_env_loader`` is called.
    """
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    env_path = Path.cwd() / ".env"
    if env_path.is_file():
        logger.debug(f"Loading environment from {env_path}")
        load_dotenv(dotenv_path=env_path, override=False)
    _ENV_LOADED = True


def reset_env_loader() -> None:
    r"""Allow the next ``load_env`` call to read the ``.env`` file again."""
    global _ENV_LOADED
    _ENV_LOADED = False


def resolve_token(token: str | None = None) -> str | None:
    """Resolve the API token.

    Args:
        token: The explicit token. It takes precedence over the environment.

    Returns:
        The explicit token, else the ``PDFDANCER_TOKEN`` variable, else None.
    """
    if token is not None:
        return token
    load_env()
    return os.environ.get(TOKEN_ENV_VAR)


def resolve_base_url(base_url: str | None = None) -> str:
    """Resolve the service base URL.

    Args:
        base_url: The explicit base URL. It takes precedence over the
            environment.

    Returns:
        The base URL without trailing slash.

    Example:
        ```pycon
        >>> from pdfdancer.env import resolve_base_url
        >>> resolve_base_url("http://localhost:8080/")
        'http://localhost:8080'

        ```
    """
    if base_url is None:
        load_env()
        base_url = os.environ.get(BASE_URL_ENV_VAR) or DEFAULT_BASE_URL
    return base_url.rstrip("/")
