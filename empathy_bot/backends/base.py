"""Abstract base class for chat completion backends."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

Message = Dict[str, str]


class BaseCompletionBackend(ABC):
    """One role-tagged message list in, one text reply (possibly empty) out.

    Backends never retry. Transport and API failures surface as UpstreamError.
    """

    name: str = "base"

    def __init__(self, chat_model: str, analysis_model: Optional[str] = None):
        self.chat_model = chat_model
        self.analysis_model = analysis_model or chat_model

    @abstractmethod
    async def complete(
        self,
        messages: List[Message],
        *,
        model: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        """Send messages to the model and return its reply.

        Args:
            messages: System message first, then history in order
            model: Model override (defaults to self.chat_model)
            json_mode: Ask the model for a single JSON object

        Returns:
            Reply text, or "" when the model produced nothing
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(chat_model={self.chat_model!r}, analysis_model={self.analysis_model!r})"
