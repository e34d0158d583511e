from __future__ import annotations

"""
Anthropic Claude Translation Backend.

Utilizes the Anthropic SDK Messages endpoint. Provider exceptions are mapped
onto the pipeline's error taxonomy so callers never depend on SDK types.
"""

import logging
from typing import Any, Optional

import anthropic

from figma_i18n.core.translation.backends.base import TranslationBackend
from figma_i18n.domain.errors import (
    AuthenticationError,
    I18nSyncError,
    RateLimitError,
    TransientBackendError,
)

logger = logging.getLogger(__name__)

AUTH_GUIDANCE = (
    "The Anthropic API key is invalid.\n"
    "   -> Check ANTHROPIC_API_KEY in your .env file.\n"
    "   -> Issue a new key at https://console.anthropic.com and paste it there."
)
RATE_LIMIT_GUIDANCE = "Anthropic API rate limit exceeded. Wait a moment and run the command again."


class AnthropicBackend(TranslationBackend):
    """
    Claude backend built on the official SDK.
    """

    def __init__(self, api_key: str, client: Optional[Any] = None) -> None:
        """
        Args:
            api_key: Anthropic API key.
            client: Pre-built SDK client (tests); created from `api_key` when omitted.
        """
        self._client = client if client is not None else anthropic.Anthropic(api_key=api_key)

    def complete(self, prompt: str, *, model: str, max_tokens: int) -> str:
        try:
            message = self._client.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise map_api_error(e) from e

        text = "".join(
            getattr(block, "text", "")
            for block in message.content
            if getattr(block, "type", "text") == "text"
        )
        return text.strip()


def map_api_error(error: anthropic.APIError) -> I18nSyncError:
    """
    Translate an SDK exception into the pipeline error taxonomy.

    Args:
        error: Exception raised by the SDK.

    Returns:
        I18nSyncError: Fatal for credential and quota problems, retryable for
                       everything else.
    """
    if isinstance(error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        logger.error(f"Anthropic API rejected credentials: {error}")
        return AuthenticationError(AUTH_GUIDANCE)
    if isinstance(error, anthropic.RateLimitError):
        logger.error(f"Anthropic API rate limited: {error}")
        return RateLimitError(RATE_LIMIT_GUIDANCE)
    if isinstance(error, anthropic.APITimeoutError):
        return TransientBackendError(f"Anthropic API request timed out: {error}")
    if isinstance(error, anthropic.APIConnectionError):
        return TransientBackendError(f"Anthropic API connection failed: {error}")

    status = getattr(error, "status_code", None)
    return TransientBackendError(f"Anthropic API error (status {status}): {error}")
