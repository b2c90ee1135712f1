"""Media collaborators: transcription, speech synthesis and persona portraits."""

from empathy_bot.providers.images import PortraitGenerator, PortraitResult
from empathy_bot.providers.speech import OpenAISpeech
from empathy_bot.providers.transcription import OpenAITranscriber

__all__ = ["OpenAISpeech", "OpenAITranscriber", "PortraitGenerator", "PortraitResult"]
