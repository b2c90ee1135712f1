import pytest

from empathy_bot.errors import InputError, UpstreamError
from empathy_bot.exchange import exchange_turn, split_pending_utterance
from empathy_bot.models import Turn
from empathy_bot.persona import MATEO

from tests.conftest import ScriptedBackend


async def test_persona_script_leads_and_history_is_forwarded_untouched():
    backend = ScriptedBackend(["It's fine, just busy."])
    history = (Turn("trainee", "Hi Mateo"), Turn("persona", "Hey."))

    reply = await exchange_turn(backend, MATEO, history, "How's school going?")

    assert reply == Turn("persona", "It's fine, just busy.")
    messages = backend.calls[0]["messages"]
    assert messages[0] == {"role": "system", "content": MATEO.script}
    assert messages[1:3] == [
        {"role": "user", "content": "Hi Mateo"},
        {"role": "assistant", "content": "Hey."},
    ]
    assert messages[-1] == {"role": "user", "content": "How's school going?"}
    assert backend.calls[0]["json_mode"] is False


async def test_long_history_is_not_truncated():
    backend = ScriptedBackend()
    history = tuple(Turn("trainee" if i % 2 == 0 else "persona", f"turn {i}") for i in range(60))

    await exchange_turn(backend, MATEO, history, "next")

    assert len(backend.calls[0]["messages"]) == 62


@pytest.mark.parametrize("reply", ["", None])
async def test_empty_reply_becomes_empty_persona_turn(reply):
    backend = ScriptedBackend([reply])
    assert await exchange_turn(backend, MATEO, (), "Hello?") == Turn("persona", "")


async def test_blank_utterance_is_rejected_before_dispatch():
    backend = ScriptedBackend()
    with pytest.raises(InputError):
        await exchange_turn(backend, MATEO, (), "   ")
    assert backend.calls == []


async def test_backend_failure_propagates():
    backend = ScriptedBackend([UpstreamError("down")])
    with pytest.raises(UpstreamError):
        await exchange_turn(backend, MATEO, (), "Hello?")


def test_split_pending_utterance_drops_trailing_copy():
    history = (Turn("persona", "Hey."), Turn("trainee", "Why?"))
    assert split_pending_utterance(history, "Why?") == (Turn("persona", "Hey."),)
    assert split_pending_utterance(history, "How?") == history
    assert split_pending_utterance((), "Why?") == ()
