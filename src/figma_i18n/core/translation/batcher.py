from __future__ import annotations

"""
Translation Batcher.

Splits a flat record into fixed-size batches and translates them one at a
time. Each batch is validated and retried a bounded number of times; a batch
that never validates keeps its English source so the run always completes.
Credential and rate-limit failures are fatal and abort the run.
"""

import logging
import time
from itertools import islice
from typing import Callable, Iterator, List, Tuple

from figma_i18n.core.translation.backends.base import TranslationBackend
from figma_i18n.core.translation.prompts import (
    build_translation_prompt,
    parse_translation,
    unchanged_ratio,
)
from figma_i18n.domain.constants import (
    BATCH_RETRY_DELAY,
    LANGUAGES,
    MAX_BATCH_RETRIES,
    TRANSLATE_BATCH_SIZE,
    TRANSLATE_MAX_TOKENS,
    TRANSLATE_MODEL,
    UNCHANGED_RATIO_THRESHOLD,
)
from figma_i18n.domain.errors import (
    ConfigurationError,
    MalformedResponseError,
    RetriesExhaustedError,
    RetryableError,
    TransientBackendError,
)
from figma_i18n.domain.models import BatchOutcome, FlatMap, TranslationReport
from figma_i18n.infra.retry import run_with_retries

logger = logging.getLogger(__name__)


def chunk_entries(flat: FlatMap, size: int) -> Iterator[FlatMap]:
    """Yield consecutive sub-records of at most `size` entries, in order."""
    if size < 1:
        raise ValueError("Batch size must be positive.")
    items = iter(flat.items())
    while True:
        chunk = dict(islice(items, size))
        if not chunk:
            return
        yield chunk


def language_name(code: str) -> str:
    """Resolve the prompt-facing name of a target language."""
    try:
        return LANGUAGES[code]
    except KeyError:
        raise ConfigurationError(f"Unsupported target language: {code}") from None


class Translator:
    """
    Batch translator bound to one backend.
    """

    def __init__(
            self,
            backend: TranslationBackend,
            *,
            batch_size: int = TRANSLATE_BATCH_SIZE,
            max_retries: int = MAX_BATCH_RETRIES,
            model: str = TRANSLATE_MODEL,
            unchanged_threshold: float = UNCHANGED_RATIO_THRESHOLD,
            retry_delay: float = BATCH_RETRY_DELAY,
            sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._backend = backend
        self._batch_size = batch_size
        self._max_retries = max_retries
        self._model = model
        self._unchanged_threshold = unchanged_threshold
        self._retry_delay = retry_delay
        self._sleep = sleep

    def translate(self, flat: FlatMap, target_language: str) -> FlatMap:
        """
        Translate every value of a flat record.

        Returns:
            FlatMap: Same keys in the same order; fallback batches keep English.
        """
        return self.translate_with_report(flat, target_language).translated

    def translate_with_report(self, flat: FlatMap, target_language: str) -> TranslationReport:
        """
        Translate a flat record and report per-batch outcomes.

        Args:
            flat: Source entries.
            target_language: Language code from LANGUAGES.

        Returns:
            TranslationReport: Translated record and batch diagnostics.

        Raises:
            AuthenticationError, RateLimitError: Propagated from the backend.
        """
        name = language_name(target_language)
        report = TranslationReport(language=target_language)
        batches: List[FlatMap] = list(chunk_entries(flat, self._batch_size))
        total = len(batches)

        for index, batch in enumerate(batches, start=1):
            logger.info(f"Translating [{target_language}] batch {index}/{total} ({len(batch)} keys)...")
            translated, outcome = self._translate_batch(batch, name, index)
            report.translated.update(translated)
            report.batches.append(outcome)

        if report.fallback_batches:
            logger.warning(
                f"[{target_language}] {report.fallback_keys} keys in {report.fallback_batches} "
                f"batch(es) kept their English source."
            )
        return report

    def _translate_batch(self, batch: FlatMap, name: str, index: int) -> Tuple[FlatMap, BatchOutcome]:
        attempts = 0

        def attempt(number: int) -> FlatMap:
            nonlocal attempts
            attempts = number
            return self.attempt(batch, name)

        def on_retry(number: int, error: RetryableError) -> None:
            logger.warning(f"Batch {index}: {error} Retrying ({number}/{self._max_retries})...")

        try:
            translated = run_with_retries(
                attempt,
                max_retries=self._max_retries,
                backoff_seconds=self._retry_delay,
                backoff_on=(TransientBackendError,),
                sleep=self._sleep,
                on_retry=on_retry,
            )
        except RetriesExhaustedError as e:
            raw = getattr(e.last_error, "raw", "")
            logger.error(f"Batch {index}: giving up, keeping English source. {e.last_error}")
            if raw:
                logger.debug(f"Batch {index}: response preview: {raw[:150]}")
            outcome = BatchOutcome(index, len(batch), attempts, fallback=True, error=str(e.last_error))
            return dict(batch), outcome

        return translated, BatchOutcome(index, len(batch), attempts)

    def attempt(self, batch: FlatMap, name: str) -> FlatMap:
        """
        Perform one validated translation call for a batch.

        Raises:
            MalformedResponseError: Unparseable or mostly untranslated output.
            TransientBackendError: Propagated from the backend.
        """
        prompt = build_translation_prompt(batch, name)
        raw = self._backend.complete(prompt, model=self._model, max_tokens=TRANSLATE_MAX_TOKENS)
        translated = parse_translation(raw, batch)

        ratio = unchanged_ratio(batch, translated)
        if ratio > self._unchanged_threshold:
            done = len(batch) - round(ratio * len(batch))
            raise MalformedResponseError(
                f"Low translation ratio ({done}/{len(batch)} translated).", raw=raw
            )
        return translated
