from __future__ import annotations

"""
Base Definitions for Translation Backends.

Provides the abstract interface every LLM provider implements. The batcher
and the scorer only see this interface and own all retry and fallback logic.
"""

from abc import ABC, abstractmethod


class TranslationBackend(ABC):
    """
    Abstract text-completion backend.
    """

    @abstractmethod
    def complete(self, prompt: str, *, model: str, max_tokens: int) -> str:
        """
        Send a single-turn prompt and return the raw text answer.

        Args:
            prompt: Full user prompt.
            model: Provider model identifier.
            max_tokens: Upper bound on generated tokens.

        Returns:
            str: Raw model output.

        Raises:
            AuthenticationError: Credentials were rejected.
            RateLimitError: The provider throttled the request.
            TransientBackendError: Timeout, connection or server failure.
        """
        pass
