"""Terminal client: one interview session, mirrored to disk between runs."""

import argparse
import asyncio
import re
import sys
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from empathy_bot.backends import create_backend
from empathy_bot.config import Config
from empathy_bot.errors import EmpathyBotError
from empathy_bot.export import export_filename, render_pdf, render_text
from empathy_bot.logging_setup import configure_logging
from empathy_bot.models import AnalysisResult, Persona
from empathy_bot.persona import get_persona
from empathy_bot.session import InterviewSession
from empathy_bot.store import JsonFileMirror

HELP = """Commands:
  /analyze             critique your questioning so far
  /export txt|pdf [P]  save the transcript (default: current directory)
  /history             show the transcript
  /new [PERSONA]       start over with a fresh persona
  /help                show this message
  /quit                leave (the transcript is kept for next time)"""


def session_dir(name: str) -> Path:
    safe = re.sub(r"[^A-Za-z0-9_.-]+", "-", name).strip("-") or "default"
    return Config.SESSION_DIR / safe


def persona_card(persona: Persona) -> str:
    return "\n".join([
        f"{persona.name}, age {persona.age}",
        f"  City: {persona.city}",
        f"  School: {persona.school}",
        f"  Language: {persona.languages}",
        f"  Hobbies: {persona.hobbies}",
        f"  Personality: {persona.personality}",
    ])


def format_analysis(result: AnalysisResult) -> str:
    lines = ["Strengths:"]
    lines += [f"  + {s}" for s in result.strengths] or ["  (none)"]
    lines.append("Areas to improve:")
    lines += [f"  - {w}" for w in result.weaknesses] or ["  (none)"]
    if result.score is not None:
        lines.append(f"Score: {result.score:g}/10")
    return "\n".join(lines)


def format_history(session: InterviewSession) -> str:
    if not session.turns:
        return "(no conversation yet)"
    persona_name = session.persona.name if session.persona else "Persona"
    return "\n".join(
        f"{'You' if t.role == 'trainee' else persona_name}: {t.text}" for t in session.turns
    )


def export(session: InterviewSession, args: List[str]) -> str:
    fmt = (args[0] if args else "txt").lower()
    if fmt not in ("txt", "pdf"):
        return "Usage: /export txt|pdf [PATH]"
    target = Path(args[1]) if len(args) > 1 else Path.cwd()
    if target.is_dir():
        target = target / export_filename(session.persona, fmt)

    try:
        if fmt == "txt":
            target.write_text(render_text(session.persona, session.turns), encoding="utf-8")
        else:
            target.write_bytes(render_pdf(session.persona, session.turns))
    except OSError as e:
        return f"Could not save {target}: {e}"
    return f"Saved {target}"


async def handle_line(session: InterviewSession, line: str, out: Callable[[str], None] = print) -> bool:
    """Process one line of input. Returns False when the user wants to leave."""
    line = line.strip()
    if not line:
        return True

    if not line.startswith("/"):
        reply = await session.submit(line)
        if reply is not None:
            out(f"{session.persona.name}: {reply.text or '[no response]'}")
        return True

    words = line[1:].split()
    if not words:
        out(HELP)
        return True
    command, args = words[0].lower(), words[1:]
    if command in ("quit", "exit"):
        return False
    if command == "help":
        out(HELP)
    elif command == "history":
        out(format_history(session))
    elif command == "analyze":
        result = await session.analyze()
        if result is not None:
            out(format_analysis(result))
    elif command == "export":
        out(export(session, args))
    elif command == "new":
        persona = session.new_persona(get_persona(args[0] if args else None))
        out(persona_card(persona))
    else:
        out(f"Unknown command: /{command}. Type /help for a list.")
    return True


async def run(session: InterviewSession, read_line: Callable[[str], str] = input) -> None:
    print(persona_card(session.persona))
    if session.turns:
        print(f"(resuming: {len(session.turns)} turns so far, /history to review)")
    print(HELP)

    while True:
        try:
            line = await asyncio.to_thread(read_line, "You: ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        try:
            if not await handle_line(session, line):
                break
        except EmpathyBotError as e:
            # the trainee's utterance stays in the transcript
            print(f"Error: {e}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Practice empathy interviewing in the terminal.")
    parser.add_argument("--session", default="default", help="session name (one mirror per name)")
    parser.add_argument("--backend", default=Config.COMPLETION_BACKEND, help="openai, gemini or ollama")
    parser.add_argument("--fresh", action="store_true", help="discard any saved transcript")
    parser.add_argument("--log-level", default=None, help="loguru level (default: WARNING)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level or "WARNING")

    try:
        backend = create_backend(args.backend)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    mirror = JsonFileMirror(session_dir(args.session))
    session = InterviewSession.restore(backend, mirror)
    if args.fresh:
        session.new_persona(session.persona)
    logger.debug(f"Session '{args.session}' mirrored at {mirror.directory}")

    asyncio.run(run(session))
    return 0


if __name__ == "__main__":
    sys.exit(main())
