"""Configuration management for API keys and settings."""

import os
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

# config.py is in empathy_bot/, .env is in project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration from environment variables."""

    # OpenAI (completion, transcription, speech, images)
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")

    # Completion backend: "openai", "gemini" or "ollama"
    COMPLETION_BACKEND: str = os.getenv("COMPLETION_BACKEND", "openai")
    CHAT_MODEL: str = os.getenv("CHAT_MODEL", "gpt-5-mini")
    ANALYSIS_MODEL: str = os.getenv("ANALYSIS_MODEL", "gpt-4o")

    # Audio
    TRANSCRIBE_MODEL: str = os.getenv("TRANSCRIBE_MODEL", "gpt-4o-mini-transcribe")
    TTS_MODEL: str = os.getenv("TTS_MODEL", "gpt-4o-mini-tts")
    TTS_VOICE: str = os.getenv("TTS_VOICE", "echo")

    # Persona portrait
    IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "dall-e-3")
    IMAGE_SIZE: str = os.getenv("IMAGE_SIZE", "1024x1024")
    PERSONA_IMAGE_URL: str = os.getenv("PERSONA_IMAGE_URL", "/mateo.png")
    GENERATE_PORTRAIT: bool = _env_bool("GENERATE_PORTRAIT")

    # Gemini settings
    GEMINI_API_KEY: Optional[str] = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

    # Ollama settings (no API key needed, it's local)
    OLLAMA_URL: str = os.getenv("OLLAMA_URL", "http://localhost:11434")
    OLLAMA_MODEL: str = os.getenv("OLLAMA_MODEL", "gemma3:4b")

    REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "90"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Terminal client mirror directory
    SESSION_DIR: Path = Path(os.getenv("SESSION_DIR", str(Path.home() / ".empathy_bot")))

    # Server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8010"))

    @classmethod
    def validate(cls) -> list[str]:
        """Validate configuration and return list of missing required settings."""
        missing = []

        backend = cls.COMPLETION_BACKEND.lower()
        if backend == "openai" and not cls.OPENAI_API_KEY:
            missing.append("OPENAI_API_KEY (required when COMPLETION_BACKEND=openai)")
        if backend == "gemini" and not cls.GEMINI_API_KEY:
            missing.append("GEMINI_API_KEY (required when COMPLETION_BACKEND=gemini)")

        # Audio and portraits always go through OpenAI
        if backend != "openai" and not cls.OPENAI_API_KEY:
            missing.append("OPENAI_API_KEY (required for speech, transcription and portraits)")

        return missing
