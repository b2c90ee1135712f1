"""Turn exchange: the next persona reply from persona + transcript + new utterance."""
from __future__ import annotations

from typing import Sequence, Tuple

from loguru import logger

from empathy_bot.backends.base import BaseCompletionBackend
from empathy_bot.errors import InputError
from empathy_bot.models import Persona, Turn
from empathy_bot.prompt import build_turn_messages


async def exchange_turn(
    backend: BaseCompletionBackend,
    persona: Persona,
    transcript: Sequence[Turn],
    utterance: str,
) -> Turn:
    """Produce the persona's reply to ``utterance``.

    ``transcript`` holds every prior turn and is sent as-is. An empty reply from the
    backend still yields a persona turn with empty text. Backend failures propagate
    as UpstreamError; nothing is retried.
    """
    if not isinstance(utterance, str) or not utterance.strip():
        raise InputError("Missing user message")

    messages = build_turn_messages(persona, transcript, utterance)
    logger.info(f"[CHAT] Sending {len(messages)} messages to {backend.name}")
    reply = await backend.complete(messages)

    if not reply:
        logger.warning("[CHAT] Backend returned no text; appending empty persona turn")
        reply = ""
    return Turn(role="persona", text=reply)


def split_pending_utterance(history: Sequence[Turn], utterance: str) -> Tuple[Turn, ...]:
    """Drop a trailing copy of ``utterance`` from a client-supplied history.

    Browser clients post the history with the new message already appended,
    and the exchange appends it again as the final element.
    """
    prior = tuple(history)
    if prior and prior[-1].role == "trainee" and prior[-1].text == utterance:
        return prior[:-1]
    return prior
