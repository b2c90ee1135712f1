"""Transcript export to plain text and PDF."""

import io
import re
from datetime import datetime
from typing import Optional, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from empathy_bot.errors import InputError
from empathy_bot.models import Persona, Turn

TITLE = "Empathy Interview Transcript"
TRAINEE_LABEL = "Student"
EMPTY_TRANSCRIPT = "No conversation to download yet!"

# Speaker label colours (RGB 0-255)
TRAINEE_COLOR = (184, 134, 11)
PERSONA_COLOR = (194, 65, 12)
TITLE_COLOR = (139, 69, 19)


def _speaker(turn: Turn, persona: Optional[Persona]) -> str:
    if turn.role == "trainee":
        return TRAINEE_LABEL
    return persona.name if persona else "Persona"


def _persona_line(persona: Optional[Persona]) -> str:
    name = persona.name if persona else "Unknown"
    age = persona.age if persona else "Unknown"
    return f"Persona: {name} (Age {age})"


def _require_turns(turns: Sequence[Turn]) -> None:
    if not turns:
        raise InputError(EMPTY_TRANSCRIPT)


def export_filename(persona: Optional[Persona], ext: str, now: Optional[datetime] = None) -> str:
    """empathy-interview-<name-slug>-<YYYY-MM-DD>.<ext>"""
    now = now or datetime.now()
    slug = re.sub(r"\s+", "-", persona.name).lower() if persona else "transcript"
    return f"empathy-interview-{slug}-{now.strftime('%Y-%m-%d')}.{ext}"


def render_text(persona: Optional[Persona], turns: Sequence[Turn], now: Optional[datetime] = None) -> str:
    _require_turns(turns)
    now = now or datetime.now()
    header = (
        f"{TITLE}\n"
        f"Generated: {now.strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"{_persona_line(persona)}\n"
        f"{'=' * 50}\n\n"
    )
    body = "\n\n".join(f"{_speaker(turn, persona)}: {turn.text}" for turn in turns)
    return header + body


def render_pdf(persona: Optional[Persona], turns: Sequence[Turn], now: Optional[datetime] = None) -> bytes:
    """Render the transcript as an A4 PDF and return the document bytes."""
    _require_turns(turns)
    now = now or datetime.now()

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4
    margin = 20 * mm
    max_width = width - 2 * margin
    line_height = 5 * mm

    c.setTitle(TITLE)
    c.setFont("Helvetica-Bold", 20)
    c.setFillColorRGB(*(v / 255 for v in TITLE_COLOR))
    y = height - 30 * mm
    c.drawString(margin, y, TITLE)

    c.setFont("Helvetica", 12)
    c.setFillColorRGB(0, 0, 0)
    y -= 15 * mm
    c.drawString(margin, y, f"Generated: {now.strftime('%Y-%m-%d %H:%M:%S')}")
    y -= 10 * mm
    c.drawString(margin, y, _persona_line(persona))
    y -= 10 * mm
    c.setLineWidth(0.5)
    c.line(margin, y, width - margin, y)
    y -= 15 * mm

    def new_page() -> float:
        c.showPage()
        return height - 30 * mm

    for turn in turns:
        if y < 40 * mm:
            y = new_page()

        color = TRAINEE_COLOR if turn.role == "trainee" else PERSONA_COLOR
        c.setFont("Helvetica-Bold", 12)
        c.setFillColorRGB(*(v / 255 for v in color))
        c.drawString(margin, y, f"{_speaker(turn, persona)}:")
        y -= line_height

        c.setFillColorRGB(0, 0, 0)
        lines = []
        for paragraph in turn.text.splitlines() or [""]:
            lines.extend(simpleSplit(paragraph, "Helvetica", 10, max_width) or [""])
        for line in lines:
            if y < 20 * mm:
                y = new_page()
            # font state does not survive showPage
            c.setFont("Helvetica", 10)
            c.drawString(margin, y, line)
            y -= line_height

        y -= 3.5 * mm

    c.save()
    return buf.getvalue()
