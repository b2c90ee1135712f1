"""Gemini backend using the google-generativeai SDK."""

from typing import Any, Dict, List, Optional

from loguru import logger

from empathy_bot.backends.base import BaseCompletionBackend, Message
from empathy_bot.errors import UpstreamError


def to_gemini_contents(messages: List[Message]) -> tuple:
    """Split an OpenAI-style message list into (system_instruction, contents).

    Gemini takes the system prompt separately and calls the assistant role "model".
    """
    system_parts = []
    contents: List[Dict[str, Any]] = []
    for message in messages:
        role = message["role"]
        if role == "system":
            system_parts.append(message["content"])
            continue
        contents.append({
            "role": "model" if role == "assistant" else "user",
            "parts": [message["content"]],
        })
    system_instruction = "\n\n".join(system_parts) or None
    return system_instruction, contents


class GeminiBackend(BaseCompletionBackend):
    """Google Gemini completion backend."""

    name = "gemini"

    def __init__(self, api_key: str = None, model: str = None):
        """Initialize Gemini backend.

        Args:
            api_key: Gemini API key (defaults to Config.GEMINI_API_KEY)
            model: Model name to use (defaults to Config.GEMINI_MODEL)
        """
        from empathy_bot.config import Config
        super().__init__(model or Config.GEMINI_MODEL)

        self.api_key = api_key or Config.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError(
                "GEMINI_API_KEY is required. Please set it in your .env file or environment variables. "
                "Get your API key from: https://aistudio.google.com/app/apikey"
            )

        import google.generativeai as genai
        genai.configure(api_key=self.api_key)
        self.genai = genai

    async def complete(
        self,
        messages: List[Message],
        *,
        model: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        system_instruction, contents = to_gemini_contents(messages)
        generative_model = self.genai.GenerativeModel(
            model or self.chat_model,
            system_instruction=system_instruction,
        )
        generation_config = {"temperature": 0.7, "max_output_tokens": 2048}
        if json_mode:
            generation_config["response_mime_type"] = "application/json"

        try:
            response = await generative_model.generate_content_async(
                contents,
                generation_config=generation_config,
            )
        except Exception as e:
            logger.error(f"[GEMINI] API error: {e}")
            raise UpstreamError(f"Gemini API error: {e}") from e

        # .text raises when the candidate was blocked or empty
        try:
            return response.text or ""
        except ValueError as e:
            logger.warning(f"[GEMINI] No text in response: {e}")
            return ""
