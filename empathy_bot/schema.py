from __future__ import annotations
from typing import Any, Dict, List, Optional
import json

from empathy_bot.errors import AnalysisFailedError
from empathy_bot.models import AnalysisResult

REQUIRED_KEYS = ["strengths", "weaknesses"]
SCORE_RANGE = (0.0, 10.0)


def try_parse_json(text: Optional[str]) -> Dict[str, Any]:
    """
    Best-effort JSON extraction (handles occasional extra text or code fences around JSON).
    """
    if text is None or not text.strip():
        raise AnalysisFailedError()
    s = text.strip()

    try:
        # direct JSON
        if s.startswith("{") and s.endswith("}"):
            return json.loads(s)

        # try to extract first {...last}
        start = s.find("{")
        end = s.rfind("}")
        if start != -1 and end != -1 and end > start:
            return json.loads(s[start:end + 1])
    except json.JSONDecodeError as e:
        raise AnalysisFailedError(f"Failed to generate analysis: {e}") from e

    raise AnalysisFailedError("Failed to generate analysis: no JSON object in reply")


def _as_string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise AnalysisFailedError("Failed to generate analysis: expected a list of strings")
    return [str(x).strip() for x in value if str(x).strip()]


def _coerce_score(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None
    low, high = SCORE_RANGE
    if score != score or score < low or score > high:
        return None
    return score


def normalize_analysis_output(obj: Dict[str, Any]) -> AnalysisResult:
    """
    Ensure a stable schema so the UI never depends on backend-specific formatting.
    Missing lists, or two empty ones, are a failure; a missing or out-of-range
    score is simply dropped.
    """
    if not isinstance(obj, dict):
        raise AnalysisFailedError("Failed to generate analysis: reply is not an object")
    missing = [key for key in REQUIRED_KEYS if key not in obj]
    if missing:
        raise AnalysisFailedError(f"Failed to generate analysis: missing {', '.join(missing)}")

    strengths = _as_string_list(obj["strengths"])
    weaknesses = _as_string_list(obj["weaknesses"])
    if not strengths and not weaknesses:
        raise AnalysisFailedError("Failed to generate analysis: empty critique")

    return AnalysisResult(
        strengths=strengths,
        weaknesses=weaknesses,
        score=_coerce_score(obj.get("score")),
    )
