"""Shared fixtures: a scripted completion backend and a fresh session."""

import asyncio
import json
from typing import List, Optional

import pytest

from empathy_bot.backends.base import BaseCompletionBackend
from empathy_bot.persona import MATEO
from empathy_bot.session import InterviewSession
from empathy_bot.store import MemoryMirror


class ScriptedBackend(BaseCompletionBackend):
    """Returns queued replies in order and records every call.

    A queued Exception instance is raised instead of returned. When ``gate`` is
    set, each call waits for it before answering.
    """

    name = "scripted"

    def __init__(self, replies: Optional[list] = None, default: str = "ok"):
        super().__init__("chat-model", "analysis-model")
        self.replies = list(replies or [])
        self.default = default
        self.calls: List[dict] = []
        self.gate: Optional[asyncio.Event] = None

    async def complete(self, messages, *, model=None, json_mode=False):
        self.calls.append({"messages": messages, "model": model, "json_mode": json_mode})
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        return reply


SIX_TURN_TRANSCRIPT = [
    {"role": "user", "content": "How's school going?"},
    {"role": "assistant", "content": "It's fine, just busy."},
    {"role": "user", "content": "Tell me about the last time you did homework late."},
    {"role": "assistant", "content": "Last Thursday I started my History essay at 11pm."},
    {"role": "user", "content": "How did that make you feel?"},
    {"role": "assistant", "content": "Honestly? I felt like I was drowning."},
]

GOOD_ANALYSIS = json.dumps({
    "strengths": [
        "You asked for a specific recent story instead of a generality.",
        "You followed up on feelings, which surfaced real emotion.",
    ],
    "weaknesses": [
        "You opened with a broad question that invited a vague answer.",
    ],
    "score": 7,
})


@pytest.fixture
def backend():
    return ScriptedBackend()


@pytest.fixture
def mirror():
    return MemoryMirror()


@pytest.fixture
def session(backend, mirror):
    s = InterviewSession(backend, mirror)
    s.new_persona(MATEO)
    return s
