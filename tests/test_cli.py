import json

from empathy_bot import cli
from empathy_bot.persona import MATEO
from empathy_bot.session import InterviewSession
from empathy_bot.store import JsonFileMirror

from tests.conftest import GOOD_ANALYSIS, ScriptedBackend


def make_session(tmp_path, replies=None):
    session = InterviewSession(ScriptedBackend(replies), JsonFileMirror(tmp_path / "mirror"))
    session.new_persona(MATEO)
    return session


async def test_plain_line_is_submitted(tmp_path):
    session = make_session(tmp_path, ["It's fine, just busy."])
    out = []

    assert await cli.handle_line(session, "How's school going?", out.append)

    assert out == ["Mateo Alvarez: It's fine, just busy."]
    assert len(session.turns) == 2


async def test_analyze_command_prints_feedback(tmp_path):
    session = make_session(tmp_path, ["Fine.", GOOD_ANALYSIS])
    out = []
    await cli.handle_line(session, "How's school going?", out.append)

    await cli.handle_line(session, "/analyze", out.append)

    assert out[-1].startswith("Strengths:\n  + You asked")
    assert "Score: 7/10" in out[-1]


async def test_export_writes_file(tmp_path):
    session = make_session(tmp_path, ["Fine."])
    out = []
    await cli.handle_line(session, "Hi", out.append)

    await cli.handle_line(session, f"/export txt {tmp_path}", out.append)

    saved = list(tmp_path.glob("empathy-interview-mateo-alvarez-*.txt"))
    assert len(saved) == 1
    assert "Student: Hi" in saved[0].read_text(encoding="utf-8")


async def test_new_and_quit(tmp_path):
    session = make_session(tmp_path)
    out = []
    await cli.handle_line(session, "Hi", out.append)

    assert await cli.handle_line(session, "/new", out.append)
    assert session.turns == ()
    assert out[-1].startswith("Mateo Alvarez, age 15")
    assert not await cli.handle_line(session, "/quit", out.append)


async def test_transcript_is_mirrored_between_runs(tmp_path):
    session = make_session(tmp_path, ["Fine."])
    await cli.handle_line(session, "Hi", lambda s: None)

    stored = json.loads((tmp_path / "mirror" / "transcript.json").read_text(encoding="utf-8"))
    assert stored == [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Fine."}]


async def test_bare_slash_shows_help(tmp_path):
    session = make_session(tmp_path)
    out = []

    for line in ("/", "/   "):
        assert await cli.handle_line(session, line, out.append)

    assert out == [cli.HELP, cli.HELP]
    assert session.turns == ()


def test_session_dir_is_sanitized():
    assert cli.session_dir("my session/../x").name == "my-session-..-x"
