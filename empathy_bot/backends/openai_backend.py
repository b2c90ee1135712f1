"""OpenAI chat completions backend over plain REST."""

from typing import List, Optional

import httpx
from loguru import logger

from empathy_bot.backends.base import BaseCompletionBackend, Message
from empathy_bot.errors import UpstreamError
from empathy_bot.openai_http import error_message, openai_client


class OpenAIBackend(BaseCompletionBackend):
    """Calls POST /chat/completions."""

    name = "openai"

    def __init__(
        self,
        api_key: str = None,
        chat_model: str = None,
        analysis_model: str = None,
        base_url: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        from empathy_bot.config import Config
        super().__init__(chat_model or Config.CHAT_MODEL, analysis_model or Config.ANALYSIS_MODEL)
        self.api_key = api_key or Config.OPENAI_API_KEY
        self.base_url = base_url
        self.transport = transport

    async def complete(
        self,
        messages: List[Message],
        *,
        model: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        body = {"model": model or self.chat_model, "messages": messages}
        if json_mode:
            body["response_format"] = {"type": "json_object"}

        async with openai_client(self.api_key, self.base_url, self.transport) as client:
            try:
                r = await client.post("/chat/completions", json=body)
            except httpx.HTTPError as e:
                logger.error(f"[OPENAI] Request failed: {e}")
                raise UpstreamError(f"Completion backend unreachable: {e}") from e

        if r.is_error:
            message = error_message(r)
            logger.error(f"[OPENAI] HTTP {r.status_code}: {message}")
            raise UpstreamError(f"Completion backend error ({r.status_code}): {message}")

        try:
            data = r.json()
        except ValueError as e:
            raise UpstreamError("Completion backend returned invalid JSON") from e

        choices = data.get("choices") if isinstance(data, dict) else None
        if choices is not None and not isinstance(choices, list):
            choices = None
        if choices is None:
            logger.error(f"[OPENAI] Unexpected response body: {data!r:.200}")
            raise UpstreamError("Completion backend returned a malformed response")
        if not choices:
            return ""

        choice = choices[0]
        message = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            logger.error(f"[OPENAI] Unexpected choice: {choice!r:.200}")
            raise UpstreamError("Completion backend returned a malformed response")
        content = message.get("content")
        return content if isinstance(content, str) else ""
