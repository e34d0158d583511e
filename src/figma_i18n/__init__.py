from __future__ import annotations

"""
Figma i18n Sync.

Extracts UI copy from Figma designs, derives stable i18n keys and keeps
per-language locale documents in sync through LLM translation.
"""

__version__ = "0.1.0"
