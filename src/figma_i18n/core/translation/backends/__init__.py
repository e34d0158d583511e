from __future__ import annotations

from .anthropic import AnthropicBackend, map_api_error
from .base import TranslationBackend

__all__ = [
    "TranslationBackend",
    "AnthropicBackend",
    "map_api_error",
]
