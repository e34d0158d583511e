from __future__ import annotations

"""
Confidence Score Repository.

Stores per-language translation quality scores in a single JSON file shaped
as `{lang: {dotted_key: score}}`. Scores are merged into what was stored by
earlier runs; missing (None) scores are never written.
"""

import logging
import os
from typing import Dict

from figma_i18n.domain.constants import CONFIDENCE_FILENAME, DEFAULT_CACHE_DIR
from figma_i18n.domain.models import ScoreMap
from figma_i18n.infra.fs import read_json_object, write_json_object

logger = logging.getLogger(__name__)

ConfidenceStore = Dict[str, Dict[str, int]]


def filter_scores(scores: ScoreMap) -> Dict[str, int]:
    """Drop keys whose score is missing."""
    return {key: score for key, score in scores.items() if score is not None}


class ConfidenceRepository:
    """File-backed ConfidenceStore."""

    def __init__(self, cache_dir: str = DEFAULT_CACHE_DIR) -> None:
        self._path = os.path.join(cache_dir, CONFIDENCE_FILENAME)

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> ConfidenceStore:
        raw = read_json_object(self._path)
        return {lang: scores for lang, scores in raw.items() if isinstance(scores, dict)}

    def scores_for(self, lang: str) -> Dict[str, int]:
        return dict(self.load().get(lang, {}))

    def merge(self, lang: str, scores: ScoreMap) -> Dict[str, int]:
        """
        Merge new scores for one language over the stored ones and persist.

        Args:
            lang: Target language code.
            scores: Freshly computed scores, possibly containing None.

        Returns:
            Dict[str, int]: The stored scores for `lang` after the merge.
        """
        store = self.load()
        kept = filter_scores(scores)
        merged = dict(store.get(lang, {}))
        merged.update(kept)
        store[lang] = merged

        write_json_object(self._path, store, trailing_newline=False)
        skipped = len(scores) - len(kept)
        if skipped:
            logger.info(f"Confidence: {lang} stored {len(kept)} scores, {skipped} unscored.")
        return merged
