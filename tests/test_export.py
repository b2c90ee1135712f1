from datetime import datetime

import pytest

from empathy_bot.errors import InputError
from empathy_bot.export import export_filename, render_pdf, render_text
from empathy_bot.models import Turn
from empathy_bot.persona import MATEO

WHEN = datetime(2026, 3, 14, 9, 30, 0)
TURNS = [
    Turn("trainee", "How's school going?"),
    Turn("persona", "It's fine, just busy. [shrugs]"),
]


def test_text_layout():
    text = render_text(MATEO, TURNS, now=WHEN)
    assert text == (
        "Empathy Interview Transcript\n"
        "Generated: 2026-03-14 09:30:00\n"
        "Persona: Mateo Alvarez (Age 15)\n"
        + "=" * 50 + "\n\n"
        "Student: How's school going?\n\n"
        "Mateo Alvarez: It's fine, just busy. [shrugs]"
    )


def test_text_without_persona():
    assert "Persona: Unknown (Age Unknown)" in render_text(None, TURNS, now=WHEN)


def test_filename():
    assert export_filename(MATEO, "pdf", now=WHEN) == "empathy-interview-mateo-alvarez-2026-03-14.pdf"
    assert export_filename(None, "txt", now=WHEN) == "empathy-interview-transcript-2026-03-14.txt"


def test_pdf_spans_pages_for_long_transcripts():
    long_turns = [Turn("trainee" if i % 2 == 0 else "persona", "word " * 120) for i in range(40)]
    pdf = render_pdf(MATEO, long_turns, now=WHEN)
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > len(render_pdf(MATEO, TURNS, now=WHEN))


@pytest.mark.parametrize("render", [render_text, render_pdf])
def test_empty_transcript_refused(render):
    with pytest.raises(InputError):
        render(MATEO, [])
