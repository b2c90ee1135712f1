"""Speech-to-text via the OpenAI transcription endpoint."""

from typing import Optional

import httpx
from loguru import logger

from empathy_bot.config import Config
from empathy_bot.errors import EmpathyBotError
from empathy_bot.openai_http import error_message, openai_client

DEFAULT_FILENAME = "input.webm"
DEFAULT_MIME_TYPE = "audio/webm"


class OpenAITranscriber:
    """Best-effort transcription: any failure yields an empty string."""

    def __init__(
        self,
        api_key: str = None,
        model: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or Config.OPENAI_API_KEY
        self.model = model or Config.TRANSCRIBE_MODEL
        self.transport = transport

    async def transcribe(self, audio: bytes, filename: str = None, mime_type: str = None) -> str:
        """Transcribe a recorded audio blob.

        Args:
            audio: Raw bytes as recorded by the client
            filename: Upload name; the extension hints the container format
            mime_type: Content type of the blob

        Returns:
            The transcribed text, or "" if nothing could be produced
        """
        files = {
            "file": (filename or DEFAULT_FILENAME, audio, mime_type or DEFAULT_MIME_TYPE),
        }
        data = {"model": self.model, "response_format": "json"}

        try:
            async with openai_client(self.api_key, transport=self.transport) as client:
                r = await client.post("/audio/transcriptions", data=data, files=files)
        except (httpx.HTTPError, EmpathyBotError) as e:
            logger.warning(f"[STT] Transcription request failed: {e}")
            return ""

        if r.is_error:
            logger.warning(f"[STT] HTTP {r.status_code}: {error_message(r)}")
            return ""

        try:
            text = r.json().get("text", "")
        except (ValueError, AttributeError):
            logger.warning("[STT] Unparsable transcription response")
            return ""
        return text if isinstance(text, str) else ""
