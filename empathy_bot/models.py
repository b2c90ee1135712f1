"""Data models for Empathy Interview Bot."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from empathy_bot.errors import InputError

Role = Literal["trainee", "persona"]

# Completion APIs and the original browser client speak user/assistant
_WIRE_ROLES = {"trainee": "user", "persona": "assistant"}
_ROLE_ALIASES = {
    "user": "trainee",
    "trainee": "trainee",
    "assistant": "persona",
    "persona": "persona",
}


@dataclass(frozen=True)
class Persona:
    """The simulated interviewee. Never mutated once a session starts."""
    id: str
    name: str
    age: int
    script: str  # behavioural system prompt
    city: str = ""
    school: str = ""
    languages: str = ""
    hobbies: str = ""
    personality: str = ""
    portrait_prompt: str = ""

    def public_dict(self) -> Dict[str, Any]:
        """Fields the client may display (the script stays server-side)."""
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "city": self.city,
            "school": self.school,
            "languages": self.languages,
            "hobbies": self.hobbies,
            "personality": self.personality,
        }


@dataclass(frozen=True)
class Turn:
    """One role-tagged utterance in the transcript."""
    role: Role
    text: str

    @property
    def wire_role(self) -> str:
        return _WIRE_ROLES[self.role]

    def to_message(self) -> Dict[str, str]:
        return {"role": self.wire_role, "content": self.text}

    def to_dict(self) -> Dict[str, str]:
        return self.to_message()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Turn":
        if not isinstance(data, dict):
            raise InputError(f"Turn must be an object, got {type(data).__name__}")
        role = _ROLE_ALIASES.get(str(data.get("role", "")).strip().lower())
        if role is None:
            raise InputError(f"Unknown turn role: {data.get('role')!r}")
        text = data.get("content", data.get("text"))
        if not isinstance(text, str):
            raise InputError("Turn content must be a string")
        return cls(role=role, text=text)


@dataclass
class AnalysisResult:
    """Structured critique of one transcript snapshot. Never persisted."""
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
        }
        if self.score is not None:
            out["score"] = self.score
        return out


def turns_from_dicts(items: List[Dict[str, Any]]) -> Tuple[Turn, ...]:
    return tuple(Turn.from_dict(item) for item in items)


def trainee_turn_count(turns) -> int:
    return sum(1 for t in turns if t.role == "trainee")
