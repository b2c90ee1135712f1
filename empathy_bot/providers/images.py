"""Persona portrait generation with an ordered fallback chain.

Each strategy makes exactly one request and reports a PortraitAttempt.
The generator walks the strategies in order and stops at the first success;
when every strategy fails it returns the static placeholder image.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from empathy_bot.config import Config
from empathy_bot.errors import EmpathyBotError
from empathy_bot.openai_http import error_message, openai_client

PLACEHOLDER_SOURCE = "placeholder"


@dataclass
class PortraitAttempt:
    """Uniform result of one strategy: a usable URL, or an error to fall through on."""
    strategy: str
    url: Optional[str] = None
    error: Optional[str] = None
    status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return bool(self.url)


@dataclass
class PortraitResult:
    url: str
    source: str
    error: Optional[str] = None
    attempts: List[PortraitAttempt] = field(default_factory=list)

    @property
    def is_placeholder(self) -> bool:
        return self.source == PLACEHOLDER_SOURCE


def _first_image(data: Any) -> Dict[str, Any]:
    items = data.get("data") if isinstance(data, dict) else None
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


class ImageStrategy:
    """One request encoding for POST /images/generations."""

    name = "base"

    def request_body(self, prompt: str, model: str, size: str) -> Dict[str, Any]:
        return {"model": model, "prompt": prompt, "n": 1, "size": size}

    def extract_url(self, image: Dict[str, Any]) -> Optional[str]:
        return image.get("url") or None

    async def attempt(self, client: httpx.AsyncClient, prompt: str, model: str, size: str) -> PortraitAttempt:
        try:
            r = await client.post("/images/generations", json=self.request_body(prompt, model, size))
        except httpx.HTTPError as e:
            return PortraitAttempt(self.name, error=str(e))

        if r.is_error:
            return PortraitAttempt(self.name, error=error_message(r), status=r.status_code)
        try:
            data = r.json()
        except ValueError:
            return PortraitAttempt(self.name, error="invalid JSON", status=r.status_code)

        url = self.extract_url(_first_image(data))
        if url is None:
            return PortraitAttempt(self.name, error="no image in response", status=r.status_code)
        return PortraitAttempt(self.name, url=url, status=r.status_code)


class Base64Strategy(ImageStrategy):
    """Ask for inline base64 and turn it into a data URL."""

    name = "b64_json"

    def request_body(self, prompt: str, model: str, size: str) -> Dict[str, Any]:
        body = super().request_body(prompt, model, size)
        body["response_format"] = "b64_json"
        return body

    def extract_url(self, image: Dict[str, Any]) -> Optional[str]:
        if image.get("b64_json"):
            return f"data:image/png;base64,{image['b64_json']}"
        # some models ignore response_format and hand back a URL anyway
        return super().extract_url(image)


class UrlStrategy(ImageStrategy):
    """Default response encoding: a hosted image URL."""

    name = "url"


DEFAULT_STRATEGIES: List[ImageStrategy] = [Base64Strategy(), UrlStrategy()]


class PortraitGenerator:
    """Generates a persona portrait, never failing the persona display."""

    def __init__(
        self,
        api_key: str = None,
        model: str = None,
        size: str = None,
        placeholder_url: str = None,
        strategies: Optional[List[ImageStrategy]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or Config.OPENAI_API_KEY
        self.model = model or Config.IMAGE_MODEL
        self.size = size or Config.IMAGE_SIZE
        self.placeholder_url = placeholder_url or Config.PERSONA_IMAGE_URL
        self.strategies = list(strategies) if strategies is not None else list(DEFAULT_STRATEGIES)
        self.transport = transport

    def placeholder(self, error: Optional[str] = None, attempts: List[PortraitAttempt] = None) -> PortraitResult:
        return PortraitResult(self.placeholder_url, PLACEHOLDER_SOURCE, error=error, attempts=attempts or [])

    async def generate(self, prompt: str) -> PortraitResult:
        attempts: List[PortraitAttempt] = []
        try:
            async with openai_client(self.api_key, transport=self.transport) as client:
                for strategy in self.strategies:
                    logger.info(f"[IMAGE] Attempting {strategy.name} portrait request")
                    attempt = await strategy.attempt(client, prompt, self.model, self.size)
                    attempts.append(attempt)
                    if attempt.ok:
                        return PortraitResult(attempt.url, attempt.strategy, attempts=attempts)
                    logger.warning(f"[IMAGE] {strategy.name} attempt failed: {attempt.error}")
        except EmpathyBotError as e:
            logger.warning(f"[IMAGE] Portrait generation unavailable: {e}")
            return self.placeholder(str(e), attempts)

        error = next((a.error for a in attempts if a.error), "unknown error")
        logger.warning("[IMAGE] All portrait attempts failed, using placeholder")
        return self.placeholder(error, attempts)
