from __future__ import annotations

"""
i18n Key Generator.

Derives dotted, snake_case keys from a text layer's ancestor path and its
content, e.g. path ("Header", "Navigation") with text "Get Started" becomes
`header.navigation.get_started`. Duplicate keys are numbered in encounter
order through an explicit registry owned by a single extraction run.
"""

import re
from typing import Dict, Iterable, Optional, Sequence, Set

from figma_i18n.domain.constants import (
    FALLBACK_TEXT_KEY,
    MAX_KEY_LENGTH,
    MAX_PATH_DEPTH,
    MAX_TEXT_PREFIX_LENGTH,
    UNKNOWN_SEGMENT,
)
from figma_i18n.domain.models import FlatMap, TextNode

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RUN = re.compile(r"\s+")


# -----------------------------------------------------------------------------
# NORMALIZATION
# -----------------------------------------------------------------------------

def name_to_key(name: str) -> str:
    """
    Normalize a node name into a restricted snake_case token.

    Args:
        name: Raw layer or text name.

    Returns:
        str: Token of at most MAX_KEY_LENGTH chars, or "unknown" when empty.
    """
    token = _DISALLOWED_CHARS.sub(" ", name.lower().strip())
    token = _WHITESPACE_RUN.sub("_", token).strip("_")
    return token[:MAX_KEY_LENGTH] or UNKNOWN_SEGMENT


def text_to_key(text: str) -> str:
    """Normalize the first line of a text layer into the leaf token."""
    first_line = text.split("\n")[0].strip()[:MAX_TEXT_PREFIX_LENGTH]
    token = name_to_key(first_line)
    if not token or token == UNKNOWN_SEGMENT:
        return FALLBACK_TEXT_KEY
    return token


def path_to_prefix(path: Sequence[str]) -> str:
    """Join the closest MAX_PATH_DEPTH meaningful ancestors with dots."""
    segments = [name_to_key(name) for name in list(path)[-MAX_PATH_DEPTH:]]
    return ".".join(s for s in segments if s and s != UNKNOWN_SEGMENT)


# -----------------------------------------------------------------------------
# COLLISION TRACKING
# -----------------------------------------------------------------------------

class KeyRegistry:
    """
    Counts how many times each base key was produced during one run.

    The first occurrence keeps the base key, the Nth one receives `_N`.
    A numbered key that was already issued verbatim (a layer literally named
    "Save 2") is skipped so keys stay unique.
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}
        self._issued: Set[str] = set()

    def claim(self, base_key: str) -> str:
        count = self._counts.get(base_key, 0) + 1
        candidate = base_key if count == 1 else f"{base_key}_{count}"
        while candidate in self._issued:
            count += 1
            candidate = f"{base_key}_{count}"
        self._counts[base_key] = count
        self._issued.add(candidate)
        return candidate

    def count(self, base_key: str) -> int:
        return self._counts.get(base_key, 0)

    def __len__(self) -> int:
        return len(self._counts)


def base_key(path: Sequence[str], text: str) -> str:
    """Compute the un-numbered key for a path and text."""
    prefix = path_to_prefix(path)
    leaf = text_to_key(text)
    return f"{prefix}.{leaf}" if prefix else leaf


def derive_key(path: Sequence[str], text: str, registry: KeyRegistry) -> str:
    """
    Derive the unique key of a text layer within an extraction run.

    Args:
        path: Ancestor names, root first.
        text: Text layer content.
        registry: Collision state of the current run.

    Returns:
        str: Dotted key, suffixed with `_N` on the Nth collision.
    """
    return registry.claim(base_key(path, text))


def build_flat_map(nodes: Iterable[TextNode], registry: Optional[KeyRegistry] = None) -> FlatMap:
    """
    Assign keys to text nodes in traversal order.

    Args:
        nodes: Extracted text nodes.
        registry: Optional registry; a fresh one is used when omitted.

    Returns:
        FlatMap: Dotted key -> source text, in encounter order.
    """
    registry = registry if registry is not None else KeyRegistry()
    flat: FlatMap = {}
    for node in nodes:
        flat[derive_key(node.path, node.text, registry)] = node.text
    return flat
