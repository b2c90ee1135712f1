"""Session context: the single owner of one trainee's persona and transcript."""
from __future__ import annotations

from typing import Optional, Tuple

from loguru import logger

from empathy_bot.analysis import analyze_transcript
from empathy_bot.backends.base import BaseCompletionBackend
from empathy_bot.errors import EmpathyBotError, InputError, SessionBusyError
from empathy_bot.exchange import exchange_turn
from empathy_bot.models import AnalysisResult, Persona, Turn
from empathy_bot.persona import get_persona
from empathy_bot.store import MemoryMirror, Mirror, TranscriptStore

PERSONA_KEY = "persona"


class InterviewSession:
    """Persona, transcript store and request bookkeeping for one client session.

    Only one exchange or analysis may be outstanding at a time. Every new persona
    or reset starts a new epoch; a reply that arrives for an older epoch is
    discarded instead of being appended to the fresh transcript.
    """

    def __init__(
        self,
        backend: BaseCompletionBackend,
        mirror: Optional[Mirror] = None,
        persona: Optional[Persona] = None,
    ):
        self.backend = backend
        self.mirror = mirror if mirror is not None else MemoryMirror()
        self.store = TranscriptStore(self.mirror)
        self.persona: Optional[Persona] = persona
        self._epoch = 0
        self._pending_epoch: Optional[int] = None

    @classmethod
    def restore(cls, backend: BaseCompletionBackend, mirror: Mirror) -> "InterviewSession":
        """Rebuild a session from its mirror, starting fresh if nothing usable is stored."""
        session = cls(backend, mirror)
        try:
            persona_id = mirror.read(PERSONA_KEY)
        except (OSError, ValueError) as e:
            logger.warning(f"[SESSION] Ignoring unreadable persona mirror: {e}")
            persona_id = None

        if isinstance(persona_id, str):
            session.persona = get_persona(persona_id)
            session.store.load()
        else:
            session.new_persona()
        return session

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return self.store.turns

    @property
    def busy(self) -> bool:
        return self._pending_epoch == self._epoch

    def new_persona(self, persona: Optional[Persona] = None) -> Persona:
        """Establish a persona and start an empty transcript."""
        self.persona = persona or get_persona()
        self._epoch += 1
        self.store.reset()
        try:
            self.mirror.write(PERSONA_KEY, self.persona.id)
        except OSError as e:
            logger.warning(f"[SESSION] Failed to mirror persona: {e}")
        logger.info(f"[SESSION] Persona established: {self.persona.name}")
        return self.persona

    def end(self) -> None:
        """Close the session: clear the transcript and drop any in-flight reply."""
        self._epoch += 1
        self.store.reset()
        logger.info("[SESSION] Session ended")

    def _begin(self) -> int:
        if self.persona is None:
            raise InputError("No persona established")
        if self.busy:
            raise SessionBusyError("A request is already in progress for this session")
        self._pending_epoch = self._epoch
        return self._epoch

    def _finish(self, epoch: int) -> None:
        if self._pending_epoch == epoch:
            self._pending_epoch = None

    async def submit(self, utterance: str) -> Optional[Turn]:
        """Commit a trainee utterance and append the persona's reply.

        Returns:
            The persona turn, or None when the session moved on before the reply arrived

        Raises:
            InputError: empty utterance or no persona
            SessionBusyError: another request is outstanding
            UpstreamError: the backend failed; the trainee turn stays committed
        """
        if not isinstance(utterance, str) or not utterance.strip():
            raise InputError("Missing user message")

        epoch = self._begin()
        try:
            prior = self.store.turns
            self.store.append(Turn(role="trainee", text=utterance))
            reply = await exchange_turn(self.backend, self.persona, prior, utterance)
        except EmpathyBotError as e:
            if epoch != self._epoch:
                logger.info(f"[SESSION] Discarding stale failure for a previous transcript: {e}")
                return None
            raise
        finally:
            self._finish(epoch)

        if epoch != self._epoch:
            logger.info("[SESSION] Discarding stale reply for a previous transcript")
            return None
        self.store.append(reply)
        return reply

    async def analyze(self) -> Optional[AnalysisResult]:
        """Run session analysis on the current transcript. The transcript is not modified.

        Returns:
            The critique, or None when the session was reset while it was computed
        """
        epoch = self._begin()
        try:
            result = await analyze_transcript(self.backend, self.store.turns)
        except EmpathyBotError as e:
            if epoch != self._epoch:
                logger.info(f"[SESSION] Discarding stale analysis failure: {e}")
                return None
            raise
        finally:
            self._finish(epoch)

        if epoch != self._epoch:
            logger.info("[SESSION] Discarding stale analysis for a previous transcript")
            return None
        return result
