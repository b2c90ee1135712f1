"""Ollama backend for running the persona against a local model."""

from typing import List, Optional

import httpx
from loguru import logger

from empathy_bot.backends.base import BaseCompletionBackend, Message
from empathy_bot.errors import UpstreamError


class OllamaBackend(BaseCompletionBackend):
    """Calls POST {OLLAMA_URL}/api/chat with streaming disabled."""

    name = "ollama"

    def __init__(
        self,
        ollama_url: str = None,
        model: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        from empathy_bot.config import Config
        super().__init__(model or Config.OLLAMA_MODEL)
        self.ollama_url = (ollama_url or Config.OLLAMA_URL).rstrip("/")
        self.timeout = Config.REQUEST_TIMEOUT_SECONDS
        self.transport = transport

    async def complete(
        self,
        messages: List[Message],
        *,
        model: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        payload = {
            "model": model or self.chat_model,
            "messages": messages,
            "stream": False,
        }
        if json_mode:
            payload["format"] = "json"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(f"{self.ollama_url}/api/chat", json=payload)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                message = (
                    f"Model '{payload['model']}' not found. Check OLLAMA_MODEL or run: "
                    f"ollama pull {payload['model']}"
                )
            else:
                message = f"HTTP Error {e.response.status_code}: {e}"
            logger.error(f"[OLLAMA] {message}")
            raise UpstreamError(message) from e
        except httpx.HTTPError as e:
            logger.error(f"[OLLAMA] Cannot connect to {self.ollama_url}: {e}")
            raise UpstreamError(f"Cannot connect to Ollama at {self.ollama_url}. Is it running?") from e
        except ValueError as e:
            raise UpstreamError("Ollama returned invalid JSON") from e

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict):
            logger.error(f"[OLLAMA] Unexpected response body: {data!r:.200}")
            raise UpstreamError("Ollama returned a malformed response")
        content = message.get("content")
        return content if isinstance(content, str) else ""
