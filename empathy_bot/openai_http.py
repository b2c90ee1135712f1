"""Shared httpx client construction for the hosted OpenAI endpoints."""

from typing import Optional

import httpx

from empathy_bot.config import Config
from empathy_bot.errors import UpstreamError


def openai_client(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build an AsyncClient pointed at the OpenAI REST API.

    Args:
        api_key: Bearer token (defaults to Config.OPENAI_API_KEY)
        base_url: API root (defaults to Config.OPENAI_BASE_URL)
        transport: Optional transport override, used by tests

    Returns:
        An unopened httpx.AsyncClient; use it as an async context manager
    """
    api_key = api_key or Config.OPENAI_API_KEY
    if not api_key:
        raise UpstreamError("OPENAI_API_KEY is not set. Add it to your .env file.")
    return httpx.AsyncClient(
        base_url=(base_url or Config.OPENAI_BASE_URL).rstrip("/"),
        headers={"Authorization": f"Bearer {api_key}"},
        timeout=Config.REQUEST_TIMEOUT_SECONDS,
        transport=transport,
    )


def error_message(response: httpx.Response) -> str:
    """Pull the API's own error message out of a failed response, if it sent one."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:400]
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        return str(data["error"].get("message", "unknown error"))
    return response.text[:400]
