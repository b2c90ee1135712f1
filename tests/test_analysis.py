import json

import pytest

from empathy_bot.analysis import analyze_transcript
from empathy_bot.errors import AnalysisFailedError, InsufficientTranscriptError
from empathy_bot.models import Turn, turns_from_dicts
from empathy_bot.prompt import ANALYSIS_PROMPT
from empathy_bot.schema import normalize_analysis_output, try_parse_json

from tests.conftest import GOOD_ANALYSIS, SIX_TURN_TRANSCRIPT, ScriptedBackend


async def test_six_turn_transcript_yields_second_person_feedback():
    backend = ScriptedBackend([GOOD_ANALYSIS])
    transcript = turns_from_dicts(SIX_TURN_TRANSCRIPT)

    result = await analyze_transcript(backend, transcript)

    assert result.strengths and result.weaknesses
    assert all(s.startswith("You ") for s in result.strengths + result.weaknesses)
    assert result.score == 7.0

    call = backend.calls[0]
    assert call["json_mode"] is True
    assert call["model"] == "analysis-model"
    assert call["messages"][0] == {"role": "system", "content": ANALYSIS_PROMPT}
    assert "USER: How's school going?" in call["messages"][1]["content"]
    assert "ASSISTANT: Honestly? I felt like I was drowning." in call["messages"][1]["content"]


@pytest.mark.parametrize("transcript", [(), (Turn("persona", "Hello?"),)])
async def test_no_trainee_turns_is_refused_without_calling_backend(transcript):
    backend = ScriptedBackend([GOOD_ANALYSIS])
    with pytest.raises(InsufficientTranscriptError):
        await analyze_transcript(backend, transcript)
    assert backend.calls == []


@pytest.mark.parametrize("reply", [
    "",
    None,
    "I can't do that.",
    '{"strengths": ["You listened."]}',
    '{"strengths": "oops", "weaknesses": 4}',
    "{broken json}",
])
async def test_unusable_reply_is_an_explicit_failure(reply):
    backend = ScriptedBackend([reply])
    with pytest.raises(AnalysisFailedError):
        await analyze_transcript(backend, turns_from_dicts(SIX_TURN_TRANSCRIPT))


async def test_analysis_does_not_touch_the_transcript():
    transcript = list(turns_from_dicts(SIX_TURN_TRANSCRIPT))
    before = list(transcript)
    await analyze_transcript(ScriptedBackend([GOOD_ANALYSIS]), transcript)
    assert transcript == before


def test_json_extracted_from_fenced_reply():
    text = "```json\n" + GOOD_ANALYSIS + "\n```"
    assert try_parse_json(text) == json.loads(GOOD_ANALYSIS)


@pytest.mark.parametrize("score,expected", [(8, 8.0), ("6.5", 6.5), (11, None), (-1, None), ("high", None), (True, None)])
def test_score_is_optional_and_bounded(score, expected):
    result = normalize_analysis_output({"strengths": ["You a"], "weaknesses": ["You b"], "score": score})
    assert result.score == expected


def test_blank_entries_dropped():
    result = normalize_analysis_output({"strengths": [], "weaknesses": ["  ", "You rushed."]})
    assert result.strengths == []
    assert result.weaknesses == ["You rushed."]


@pytest.mark.parametrize("reply", [
    '{"strengths": [], "weaknesses": []}',
    '{"strengths": ["  "], "weaknesses": [""]}',
])
async def test_empty_critique_is_a_failure(reply):
    backend = ScriptedBackend([reply])
    with pytest.raises(AnalysisFailedError):
        await analyze_transcript(backend, turns_from_dicts(SIX_TURN_TRANSCRIPT))
