from __future__ import annotations

"""
Extraction Snapshot Cache.

Persists the flat record produced by the last successful run so the next
run only translates what changed. The snapshot is always replaced as a
whole; it is never merged.
"""

import logging
import os
from typing import Dict

from figma_i18n.domain.constants import CACHE_FILENAME, DEFAULT_CACHE_DIR
from figma_i18n.domain.models import DiffResult, FlatMap
from figma_i18n.infra.fs import read_json_object, write_json_object

logger = logging.getLogger(__name__)


class SnapshotCache:
    """
    File-backed store for the previous extraction snapshot.

    The file holds a single flat JSON object mapping dotted keys to English
    source strings.
    """

    def __init__(self, cache_dir: str = DEFAULT_CACHE_DIR) -> None:
        self._path = os.path.join(cache_dir, CACHE_FILENAME)

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> FlatMap:
        """
        Read the previous snapshot.

        Returns:
            FlatMap: Cached record; empty when absent or unreadable. Non-string
                     values are dropped.
        """
        raw = read_json_object(self._path)
        snapshot: Dict[str, str] = {k: v for k, v in raw.items() if isinstance(v, str)}
        if len(snapshot) != len(raw):
            logger.warning(f"CacheService: Ignored {len(raw) - len(snapshot)} non-text snapshot entries.")
        logger.debug(f"CacheService: Loaded {len(snapshot)} cached keys from {self._path}")
        return snapshot

    def save(self, flat: FlatMap) -> None:
        """Overwrite the snapshot with the full current record."""
        write_json_object(self._path, dict(flat), trailing_newline=False)
        logger.info(f"CacheService: Snapshot updated ({len(flat)} keys).")


def diff_flat_maps(current: FlatMap, cached: FlatMap) -> DiffResult:
    """
    Compare the current extraction with the cached snapshot.

    Args:
        current: Freshly extracted record.
        cached: Snapshot of the previous run.

    Returns:
        DiffResult: Added and changed entries in current order, removed keys
                    in snapshot order. Unchanged keys are omitted.
    """
    added: FlatMap = {}
    changed: FlatMap = {}

    for key, value in current.items():
        if key not in cached:
            added[key] = value
        elif cached[key] != value:
            changed[key] = value

    removed = [key for key in cached if key not in current]
    return DiffResult(added=added, changed=changed, removed=removed)
