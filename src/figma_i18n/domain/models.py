from __future__ import annotations

"""
Sync Domain Data Models.

Plain data structures exchanged between extraction, diffing, translation and
persistence. Every model is rebuilt from disk at the start of a run; none of
them carries state across runs.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

# Dotted key -> source or translated string
FlatMap = Dict[str, str]

# Dotted key -> 0-100 quality estimate, None when scoring failed
ScoreMap = Dict[str, Optional[int]]

# -----------------------------------------------------------------------------
# EXTRACTION
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TextNode:
    """
    A translatable text leaf found in the design tree.

    Attributes:
        text: Trimmed characters of the text layer.
        path: Names of the path-contributing ancestors, root first.
        node_id: Figma node identifier.
    """
    text: str
    path: Tuple[str, ...] = ()
    node_id: str = ""


@dataclass
class ExtractionStats:
    """Counters for text layers skipped during extraction."""
    skipped_korean: int = 0
    skipped_noise: int = 0

# -----------------------------------------------------------------------------
# DIFFING
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DiffResult:
    """
    Partition of keys between the current extraction and the cached snapshot.

    Attributes:
        added: Keys absent from the snapshot.
        changed: Keys whose source text differs from the snapshot.
        removed: Snapshot keys no longer present.
    """
    added: FlatMap = field(default_factory=dict)
    changed: FlatMap = field(default_factory=dict)
    removed: List[str] = field(default_factory=list)

    @property
    def to_translate(self) -> FlatMap:
        """Entries requiring translation: additions first, then changes."""
        merged: FlatMap = dict(self.added)
        merged.update(self.changed)
        return merged

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.changed or self.removed)

    def counts(self) -> Dict[str, int]:
        return {
            "added": len(self.added),
            "changed": len(self.changed),
            "removed": len(self.removed),
        }

# -----------------------------------------------------------------------------
# TRANSLATION
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BatchOutcome:
    """
    Result metadata of a single translation batch.

    Attributes:
        index: 1-based position of the batch.
        size: Number of entries in the batch.
        attempts: Backend calls performed for the batch.
        fallback: True when the English source was kept after retries ran out.
        error: Last validation or transport error for fallback batches.
    """
    index: int
    size: int
    attempts: int
    fallback: bool = False
    error: str = ""


@dataclass
class TranslationReport:
    """Translated entries plus per-batch diagnostics for one language."""
    language: str
    translated: FlatMap = field(default_factory=dict)
    batches: List[BatchOutcome] = field(default_factory=list)

    @property
    def fallback_batches(self) -> int:
        return sum(1 for b in self.batches if b.fallback)

    @property
    def fallback_keys(self) -> int:
        return sum(b.size for b in self.batches if b.fallback)
