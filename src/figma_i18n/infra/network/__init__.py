from __future__ import annotations

"""
Network Communication Infrastructure.

Orchestrates external HTTP interactions via specialized domain clients.
"""

from figma_i18n.infra.network.common import USER_AGENT
from figma_i18n.infra.network.figma_client import FIGMA_API, fetch_figma_document

__all__ = [
    "fetch_figma_document",
    "FIGMA_API",
    "USER_AGENT",
]
