"""Backend factory for creating completion backends."""

from empathy_bot.backends.base import BaseCompletionBackend


def create_backend(backend_type: str = "openai", **kwargs) -> BaseCompletionBackend:
    """Factory function to create a completion backend based on type.

    Args:
        backend_type: Type of backend to create ("openai", "gemini" or "ollama")
        **kwargs: Passed through to the backend constructor

    Returns:
        BaseCompletionBackend instance

    Raises:
        ValueError: If backend_type is not supported
    """
    backend_type = backend_type.lower()

    if backend_type == "openai":
        from empathy_bot.backends.openai_backend import OpenAIBackend
        return OpenAIBackend(**kwargs)
    elif backend_type == "gemini":
        from empathy_bot.backends.gemini_backend import GeminiBackend
        return GeminiBackend(**kwargs)
    elif backend_type == "ollama":
        from empathy_bot.backends.ollama_backend import OllamaBackend
        return OllamaBackend(**kwargs)
    else:
        raise ValueError(
            f"Unsupported backend type: '{backend_type}'. "
            f"Supported types are: 'openai', 'gemini', 'ollama'"
        )


__all__ = ["create_backend", "BaseCompletionBackend"]
