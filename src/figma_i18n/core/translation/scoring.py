from __future__ import annotations

"""
Confidence Scorer.

Second, independent pass that asks the backend to grade each translation
from 0 to 100. Any failure degrades to None scores for the affected batch and
never touches the translations themselves.
"""

import logging
import math
from typing import Any, Optional

from figma_i18n.core.translation.backends.base import TranslationBackend
from figma_i18n.core.translation.batcher import chunk_entries, language_name
from figma_i18n.core.translation.prompts import build_scoring_prompt, parse_json_object
from figma_i18n.domain.constants import (
    CONFIDENCE_BATCH_SIZE,
    CONFIDENCE_MAX_TOKENS,
    CONFIDENCE_MODEL,
)
from figma_i18n.domain.errors import I18nSyncError
from figma_i18n.domain.models import FlatMap, ScoreMap

logger = logging.getLogger(__name__)


def coerce_score(value: Any) -> Optional[int]:
    """Convert a raw score to an int clamped to 0-100; None when not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or math.isnan(value):
        return None
    return max(0, min(100, int(round(value))))


class ConfidenceScorer:
    """
    Batch quality scorer bound to one backend.
    """

    def __init__(
            self,
            backend: TranslationBackend,
            *,
            batch_size: int = CONFIDENCE_BATCH_SIZE,
            model: str = CONFIDENCE_MODEL,
    ) -> None:
        self._backend = backend
        self._batch_size = batch_size
        self._model = model

    def score(self, source: FlatMap, translated: FlatMap, target_language: str) -> ScoreMap:
        """
        Score every source key.

        Args:
            source: English entries.
            translated: Translated entries (fallback values included).
            target_language: Language code.

        Returns:
            ScoreMap: One entry per source key; None where scoring failed.
        """
        name = language_name(target_language)
        scores: ScoreMap = {}

        for batch in chunk_entries(source, self._batch_size):
            scores.update(self._score_batch(batch, translated, name))

        missing = sum(1 for s in scores.values() if s is None)
        if missing:
            logger.warning(
                f"[{target_language}] Confidence unavailable for {missing}/{len(scores)} keys "
                f"(translations unaffected)."
            )
        return scores

    def _score_batch(self, batch: FlatMap, translated: FlatMap, name: str) -> ScoreMap:
        prompt = build_scoring_prompt(batch, translated, name)
        try:
            raw = self._backend.complete(prompt, model=self._model, max_tokens=CONFIDENCE_MAX_TOKENS)
            data = parse_json_object(raw)
        except I18nSyncError as e:
            logger.debug(f"Confidence: batch of {len(batch)} unscored: {e}")
            return {key: None for key in batch}

        return {key: coerce_score(data.get(key)) for key in batch}
