"""Text-to-speech via the OpenAI speech endpoint."""

from typing import Optional

import httpx
from loguru import logger

from empathy_bot.config import Config
from empathy_bot.errors import InputError, UpstreamError
from empathy_bot.openai_http import error_message, openai_client

AUDIO_MEDIA_TYPE = "audio/mpeg"


class OpenAISpeech:
    """Synthesizes persona replies to mp3 audio."""

    def __init__(
        self,
        api_key: str = None,
        model: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or Config.OPENAI_API_KEY
        self.model = model or Config.TTS_MODEL
        self.transport = transport

    async def synthesize(self, text: str, voice: str = None) -> bytes:
        if not text or not text.strip():
            raise InputError("Missing text")

        body = {
            "model": self.model,
            "voice": voice or Config.TTS_VOICE,
            "input": text,
        }
        async with openai_client(self.api_key, transport=self.transport) as client:
            try:
                r = await client.post("/audio/speech", json=body)
            except httpx.HTTPError as e:
                logger.error(f"[TTS] Request failed: {e}")
                raise UpstreamError(f"Speech backend unreachable: {e}") from e

        if r.is_error:
            message = error_message(r)
            logger.error(f"[TTS] HTTP {r.status_code}: {message}")
            raise UpstreamError(f"Speech backend error ({r.status_code}): {message}")
        return r.content
