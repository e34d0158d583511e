from __future__ import annotations

"""
Figma Document Text Extraction.

Walks the node tree returned by the Figma files API and collects the English
TEXT layers worth translating, together with the names of the frames and
components that contain them. Text containing Hangul is treated as a
designer's annotation and skipped.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from figma_i18n.domain.models import ExtractionStats, TextNode

logger = logging.getLogger(__name__)

# Node types whose names describe screen structure
PATH_NODE_TYPES = frozenset({"FRAME", "COMPONENT", "COMPONENT_SET", "SECTION"})

TEXT_NODE_TYPE = "TEXT"
MAX_TRAVERSAL_DEPTH = 20

_ICON_ONLY = re.compile(r"^[^\w\s가-힣ぁ-ヺ一-龥]+$", re.ASCII)
_NUMBER_ONLY = re.compile(r"^\d+(\.\d+)?%?$", re.ASCII)
_URL = re.compile(r"^https?://")
_HANGUL = re.compile(r"[가-힣ㄱ-ㅎㅏ-ㅣ]")
_LATIN = re.compile(r"[a-zA-Z]")

# -----------------------------------------------------------------------------
# TEXT CLASSIFIERS
# -----------------------------------------------------------------------------

def is_noise(text: str) -> bool:
    """Icons, bare numbers and URLs need no translation."""
    if len(text) <= 2 and _ICON_ONLY.match(text):
        return True
    if _NUMBER_ONLY.match(text):
        return True
    return bool(_URL.match(text))


def contains_hangul(text: str) -> bool:
    return bool(_HANGUL.search(text))


def has_latin(text: str) -> bool:
    return bool(_LATIN.search(text))

# -----------------------------------------------------------------------------
# NODE CLASSIFIERS
# -----------------------------------------------------------------------------

def is_text_leaf(node: Dict[str, Any]) -> bool:
    return node.get("type") == TEXT_NODE_TYPE


def contributes_to_path(node: Dict[str, Any]) -> bool:
    return node.get("type") in PATH_NODE_TYPES

# -----------------------------------------------------------------------------
# TRAVERSAL
# -----------------------------------------------------------------------------

def extract_text_nodes(
        document: Dict[str, Any],
        page_filter: Optional[str] = None,
) -> Tuple[List[TextNode], ExtractionStats]:
    """
    Collect translatable text layers from a Figma document node.

    Args:
        document: The `document` node of a Figma file.
        page_filter: Optional page (CANVAS) name restricting the walk.

    Returns:
        Tuple[List[TextNode], ExtractionStats]: Nodes in traversal order and
        skip counters.
    """
    nodes: List[TextNode] = []
    stats = ExtractionStats()
    pages: List[Dict[str, Any]] = list(document.get("children") or [])

    if page_filter:
        selected = [p for p in pages if p.get("name") == page_filter]
        if not selected:
            available = ", ".join(str(p.get("name", "")) for p in pages)
            logger.warning(f"Figma: page '{page_filter}' not found. Available pages: {available}")
        pages = selected

    for page in pages:
        _traverse(page, (), nodes, stats, 0)

    logger.info(
        f"Figma: {len(nodes)} text nodes extracted "
        f"({stats.skipped_korean} annotation, {stats.skipped_noise} noise skipped)."
    )
    return nodes, stats


def _traverse(
        node: Dict[str, Any],
        parent_path: Tuple[str, ...],
        nodes: List[TextNode],
        stats: ExtractionStats,
        depth: int,
) -> None:
    if depth > MAX_TRAVERSAL_DEPTH:
        return

    if is_text_leaf(node):
        _collect_text(node, parent_path, nodes, stats)
        return

    path = parent_path
    if contributes_to_path(node):
        path = parent_path + (str(node.get("name", "")),)

    children: Sequence[Dict[str, Any]] = node.get("children") or []
    for child in children:
        _traverse(child, path, nodes, stats, depth + 1)


def _collect_text(
        node: Dict[str, Any],
        path: Tuple[str, ...],
        nodes: List[TextNode],
        stats: ExtractionStats,
) -> None:
    text = (node.get("characters") or "").strip()
    if not text:
        return
    if is_noise(text):
        stats.skipped_noise += 1
        return
    if contains_hangul(text):
        stats.skipped_korean += 1
        return
    if not has_latin(text):
        stats.skipped_noise += 1
        return
    nodes.append(TextNode(text=text, path=path, node_id=str(node.get("id", ""))))
