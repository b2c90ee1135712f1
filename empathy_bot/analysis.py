"""Session analysis: structured strengths/weaknesses feedback from a transcript."""
from __future__ import annotations

from typing import Sequence

from loguru import logger

from empathy_bot.backends.base import BaseCompletionBackend
from empathy_bot.errors import InsufficientTranscriptError
from empathy_bot.models import AnalysisResult, Turn, trainee_turn_count
from empathy_bot.prompt import build_analysis_messages
from empathy_bot.schema import normalize_analysis_output, try_parse_json


async def analyze_transcript(backend: BaseCompletionBackend, transcript: Sequence[Turn]) -> AnalysisResult:
    """Critique the trainee's interviewing technique.

    Raises:
        InsufficientTranscriptError: the transcript has no trainee turns
        AnalysisFailedError: the backend reply was empty or not a valid critique
        UpstreamError: the backend could not be reached
    """
    snapshot = tuple(transcript)
    if trainee_turn_count(snapshot) == 0:
        raise InsufficientTranscriptError()

    logger.info(f"[ANALYZE] Analyzing {len(snapshot)} turns with {backend.name}")
    text = await backend.complete(
        build_analysis_messages(snapshot),
        model=backend.analysis_model,
        json_mode=True,
    )
    result = normalize_analysis_output(try_parse_json(text))
    logger.info(f"[ANALYZE] {len(result.strengths)} strengths, {len(result.weaknesses)} weaknesses")
    return result
