"""Transcript store and its durable key-value mirrors."""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from empathy_bot.errors import InputError
from empathy_bot.models import Turn

TRANSCRIPT_KEY = "transcript"


class Mirror(ABC):
    """Client-local key-value storage holding JSON-serializable values."""

    @abstractmethod
    def read(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when the key is absent."""
        pass

    @abstractmethod
    def write(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class MemoryMirror(Mirror):
    """Dict-backed mirror. Values are stored as JSON text, like a browser's localStorage."""

    def __init__(self):
        self.data: Dict[str, str] = {}

    def read(self, key: str) -> Optional[Any]:
        raw = self.data.get(key)
        return None if raw is None else json.loads(raw)

    def write(self, key: str, value: Any) -> None:
        self.data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileMirror(Mirror):
    """One JSON file per key under ``directory``."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def write(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(value, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class TranscriptStore:
    """Ordered, append-only turn sequence for one session, mirrored after every mutation.

    The in-memory list is authoritative. A failed mirror write is logged and
    never fails the append or reset that triggered it.
    """

    def __init__(self, mirror: Mirror, key: str = TRANSCRIPT_KEY):
        self.mirror = mirror
        self.key = key
        self._turns: List[Turn] = []

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self):
        return iter(tuple(self._turns))

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)
        self._sync()

    def reset(self) -> None:
        self._turns = []
        try:
            self.mirror.delete(self.key)
        except OSError as e:
            logger.warning(f"[STORE] Failed to clear mirror '{self.key}': {e}")

    def load(self) -> Tuple[Turn, ...]:
        """Hydrate from the mirror. A missing or unreadable mirror starts empty."""
        try:
            raw = self.mirror.read(self.key)
            turns = [] if raw is None else self._decode(raw)
        except (OSError, ValueError, InputError) as e:
            logger.warning(f"[STORE] Ignoring unreadable mirror '{self.key}': {e}")
            turns = []
        self._turns = turns
        logger.debug(f"[STORE] Loaded {len(turns)} turns from mirror")
        return self.turns

    def snapshot(self) -> List[Dict[str, str]]:
        return [turn.to_dict() for turn in self._turns]

    @staticmethod
    def _decode(raw: Any) -> List[Turn]:
        if not isinstance(raw, list):
            raise ValueError(f"expected a list of turns, got {type(raw).__name__}")
        return [Turn.from_dict(item) for item in raw]

    def _sync(self) -> None:
        try:
            self.mirror.write(self.key, self.snapshot())
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"[STORE] Mirror write failed for '{self.key}': {e}")
