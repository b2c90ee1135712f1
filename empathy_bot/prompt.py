"""Message builders shared by every completion backend.

Keeping them here prevents prompt logic from getting scattered across the codebase.
"""
from __future__ import annotations

from typing import Dict, List, Sequence

from empathy_bot.models import Persona, Turn

ANALYSIS_PROMPT = """You are an expert Design Thinking coach specialized in Empathy Interviewing for entrepreneurship.
Your job is to analyze an interview transcript and provide constructive, specific feedback directly to the interviewer.

**Important:** Address the interviewer directly using "You" (e.g., "You asked great follow-up questions" not "The student asked...").

**Evaluation Criteria:**
1. **Open-Ended Questions:** Did you ask "Why" and "How" instead of Yes/No questions?
2. **Behavioral Digging:** Did you ask for specific stories ("Tell me about the last time...") instead of generalities?
3. **Neutrality:** Did you avoid leading questions or suggesting solutions (e.g., "Have you tried X?")?
4. **Depth:** Did you uncover the emotional root causes (guilt, feeling overwhelmed, transition struggles) or stay on the surface (laziness, phone addiction)?
5. **Rapport:** Did you build trust and make the interviewee feel heard?

**Output Format:**
Return a JSON object with these fields:
- "strengths": An array of strings highlighting good techniques you used. Address the interviewer as "You".
- "weaknesses": An array of strings highlighting missed opportunities or areas to improve. Address the interviewer as "You".
- "score" (optional): A number from 0 to 10 rating the overall interviewing technique.
Output JSON only. No markdown.
"""


def build_turn_messages(persona: Persona, transcript: Sequence[Turn], utterance: str) -> List[Dict[str, str]]:
    """
    Persona script first, then the whole transcript in order, then the new utterance.
    Nothing is truncated or rewritten.
    """
    messages = [{"role": "system", "content": persona.script}]
    messages.extend(turn.to_message() for turn in transcript)
    messages.append({"role": "user", "content": utterance})
    return messages


def render_transcript(transcript: Sequence[Turn]) -> str:
    return "\n".join(f"{turn.wire_role.upper()}: {turn.text}" for turn in transcript)


def build_analysis_messages(transcript: Sequence[Turn]) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": ANALYSIS_PROMPT},
        {"role": "user", "content": f"Here is the interview transcript:\n\n{render_transcript(transcript)}"},
    ]
