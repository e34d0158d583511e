from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates the sync workflows:
1. extract   - Figma document -> keys -> `en.json` + snapshot.
2. translate - `en.json` -> every target language, written wholesale.
3. update    - Figma document -> diff against the snapshot -> merge only
               the added, changed and removed keys into every document.
4. sync      - extract followed by translate.

Stages run sequentially. Each locale document is written as soon as its
language is done, and the snapshot is replaced last, so an aborted run
leaves finished languages updated and the rest untouched.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from figma_i18n.core.extraction.figma_parser import extract_text_nodes
from figma_i18n.core.keys.generator import KeyRegistry, build_flat_map
from figma_i18n.core.services.cache import SnapshotCache, diff_flat_maps
from figma_i18n.core.services.confidence import ConfidenceRepository
from figma_i18n.core.services.locale_store import LocaleStore
from figma_i18n.core.translation.backends.anthropic import AnthropicBackend
from figma_i18n.core.translation.backends.base import TranslationBackend
from figma_i18n.core.translation.batcher import Translator
from figma_i18n.core.translation.scoring import ConfidenceScorer
from figma_i18n.domain.config import Settings
from figma_i18n.domain.constants import DEFAULT_CACHE_DIR, DEFAULT_LOCALES_DIR, SOURCE_LANGUAGE
from figma_i18n.domain.models import ExtractionStats, FlatMap, TranslationReport
from figma_i18n.domain.pipeline_models import (
    PipelineResult,
    create_error_result,
    create_success_result,
)
from figma_i18n.infra.fs import normalize_path
from figma_i18n.infra.network.figma_client import fetch_figma_document

logger = logging.getLogger(__name__)

DocumentFetcher = Callable[[str, str], Dict[str, Any]]

COMMANDS = ("extract", "translate", "update", "sync")


# -----------------------------------------------------------------------------
# SERVICE WIRING
# -----------------------------------------------------------------------------

@dataclass
class PipelineServices:
    """
    Collaborators used by one pipeline run.

    Attributes:
        settings: Resolved runtime settings.
        locales: Locale document store.
        cache: Snapshot cache.
        confidence: Confidence score repository.
        fetch_document: Callable returning a Figma document for (file_id, token).
        backend: Translation backend; built lazily from the API key when None.
    """
    settings: Settings
    locales: LocaleStore
    cache: SnapshotCache
    confidence: ConfidenceRepository
    fetch_document: DocumentFetcher = fetch_figma_document
    backend: Optional[TranslationBackend] = None
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_settings(
            cls,
            settings: Settings,
            *,
            fetch_document: Optional[DocumentFetcher] = None,
            backend: Optional[TranslationBackend] = None,
    ) -> "PipelineServices":
        locales_dir = normalize_path(settings.locales_dir, DEFAULT_LOCALES_DIR)
        cache_dir = normalize_path(settings.cache_dir, DEFAULT_CACHE_DIR)
        return cls(
            settings=settings,
            locales=LocaleStore(locales_dir),
            cache=SnapshotCache(cache_dir),
            confidence=ConfidenceRepository(cache_dir),
            fetch_document=fetch_document or fetch_figma_document,
            backend=backend,
        )

    def translation_backend(self) -> TranslationBackend:
        if self.backend is None:
            self.backend = AnthropicBackend(self.settings.anthropic_api_key)
        return self.backend


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def run_pipeline(
        command: str,
        settings: Settings,
        *,
        fetch_document: Optional[DocumentFetcher] = None,
        backend: Optional[TranslationBackend] = None,
) -> PipelineResult:
    """
    Execute one sync command.

    Args:
        command: One of COMMANDS.
        settings: Validated runtime settings.
        fetch_document: Optional Figma fetcher override.
        backend: Optional translation backend override.

    Returns:
        PipelineResult: Outcome and statistics.

    Raises:
        FatalError: Authentication, not-found, rate-limit or unreachable
                    backend errors abort the run.
    """
    if command not in COMMANDS:
        return create_error_result(command, f"Unknown command: {command}")

    services = PipelineServices.from_settings(settings, fetch_document=fetch_document, backend=backend)
    logger.info(f"Pipeline '{command}' started.")

    runners: Dict[str, Callable[[PipelineServices], PipelineResult]] = {
        "extract": run_extract,
        "translate": run_translate,
        "update": run_update,
        "sync": run_sync,
    }
    result = runners[command](services)
    logger.info(f"Pipeline '{command}' finished (ok={result.ok}).")
    return result


def run_extract(services: PipelineServices) -> PipelineResult:
    """Extract the design text and write the source document and snapshot."""
    flat, stats = _extract_flat_map(services)

    services.locales.ensure_dir()
    path = services.locales.replace(SOURCE_LANGUAGE, flat)
    services.cache.save(flat)

    logger.info(f"Extract: {path} written ({len(flat)} keys).")
    return create_success_result(
        "extract",
        key_count=len(flat),
        warnings=services.warnings,
        summary_extra={
            "source_path": path,
            "skipped_korean": stats.skipped_korean,
            "skipped_noise": stats.skipped_noise,
        },
    )


def run_translate(services: PipelineServices) -> PipelineResult:
    """Translate the whole source document into every target language."""
    flat = services.locales.read_flat(SOURCE_LANGUAGE)
    if not flat:
        path = services.locales.path_for(SOURCE_LANGUAGE)
        msg = f"{path} is missing or empty. Run 'extract' first."
        logger.error(msg)
        return create_error_result("translate", msg)

    languages: Dict[str, Any] = {}
    for lang in services.settings.target_languages:
        logger.info(f"Translate: starting {lang} ({len(flat)} keys)...")
        report, scored = _translate_language(services, flat, lang)
        path = services.locales.replace(lang, report.translated)
        languages[lang] = _language_summary(report, scored, path)
        logger.info(f"Translate: {path} saved.")

    return create_success_result(
        "translate",
        key_count=len(flat),
        languages=list(languages),
        warnings=services.warnings,
        summary_extra={"languages": languages},
    )


def run_update(services: PipelineServices) -> PipelineResult:
    """Apply only what changed in the design since the last snapshot."""
    current, stats = _extract_flat_map(services)
    cached = services.cache.load()
    diff = diff_flat_maps(current, cached)
    counts = diff.counts()
    logger.info(
        f"Update: {counts['added']} added, {counts['changed']} changed, {counts['removed']} removed."
    )

    if diff.is_empty:
        logger.info("Update: no text changes detected.")
        return create_success_result(
            "update", key_count=len(current), diff=diff, summary_extra={"changes": counts}
        )

    to_translate = diff.to_translate
    services.locales.ensure_dir()
    services.locales.apply_changes(SOURCE_LANGUAGE, to_translate, diff.removed)

    languages: Dict[str, Any] = {}
    for lang in services.settings.target_languages:
        if to_translate:
            logger.info(f"Update: translating {len(to_translate)} keys into {lang}...")
            report, scored = _translate_language(services, to_translate, lang)
            services.locales.apply_changes(lang, report.translated, diff.removed)
            languages[lang] = _language_summary(report, scored, services.locales.path_for(lang))
        else:
            services.locales.apply_changes(lang, {}, diff.removed)
            languages[lang] = {"removed": len(diff.removed), "path": services.locales.path_for(lang)}
        logger.info(f"Update: {lang}.json updated.")

    services.cache.save(current)
    return create_success_result(
        "update",
        key_count=len(current),
        diff=diff,
        languages=list(languages),
        warnings=services.warnings,
        summary_extra={
            "changes": counts,
            "languages": languages,
            "skipped_korean": stats.skipped_korean,
            "skipped_noise": stats.skipped_noise,
        },
    )


def run_sync(services: PipelineServices) -> PipelineResult:
    """Run extract and then translate with the same services."""
    extracted = run_extract(services)
    translated = run_translate(services)
    if not translated.ok:
        return create_error_result("sync", translated.error, summary_extra=dict(extracted.summary))

    summary = dict(extracted.summary)
    summary.update(translated.summary)
    return create_success_result(
        "sync",
        key_count=translated.key_count,
        languages=translated.languages,
        warnings=services.warnings,
        summary_extra=summary,
    )


# -----------------------------------------------------------------------------
# STAGE HELPERS
# -----------------------------------------------------------------------------

def _extract_flat_map(services: PipelineServices) -> Tuple[FlatMap, ExtractionStats]:
    settings = services.settings
    logger.info("Loading Figma file...")
    document = services.fetch_document(settings.figma_file_id, settings.figma_token)
    nodes, stats = extract_text_nodes(document, settings.page_name)
    if stats.skipped_korean:
        logger.info(f"Skipped {stats.skipped_korean} Korean text nodes (design annotations).")
    return build_flat_map(nodes, KeyRegistry()), stats


def _translate_language(
        services: PipelineServices,
        flat: FlatMap,
        lang: str,
) -> Tuple[TranslationReport, int]:
    """
    Translate then score one language and persist its confidence scores.

    Returns:
        Tuple[TranslationReport, int]: The report and the number of keys
        that received a score.
    """
    backend = services.translation_backend()
    report = Translator(backend).translate_with_report(flat, lang)
    if report.fallback_batches:
        services.warnings.append(
            f"{lang}: {report.fallback_keys} keys kept English after failed batches."
        )

    scores = ConfidenceScorer(backend).score(flat, report.translated, lang)
    services.confidence.merge(lang, scores)
    scored = sum(1 for s in scores.values() if s is not None)
    if scored < len(scores):
        services.warnings.append(f"{lang}: {len(scores) - scored} keys without confidence score.")
    return report, scored


def _language_summary(report: TranslationReport, scored: int, path: str) -> Dict[str, Any]:
    return {
        "translated": len(report.translated) - report.fallback_keys,
        "fallback_keys": report.fallback_keys,
        "fallback_batches": report.fallback_batches,
        "scored": scored,
        "path": path,
    }
