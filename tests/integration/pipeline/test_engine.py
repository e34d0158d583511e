from __future__ import annotations

"""
Integration tests for the sync pipeline.

Runs the real extraction, key generation, diffing, batching and persistence
against a temporary directory. Only the Figma fetch and the LLM backend are
replaced.
"""

import copy
import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from conftest import ScriptedBackend, echo_translation, fixed_scores, routed
from figma_i18n.core.pipeline.engine import run_pipeline
from figma_i18n.domain.config import Settings
from figma_i18n.domain.errors import AuthenticationError

Document = Dict[str, Any]


def _fetcher(document: Document) -> Callable[[str, str], Document]:
    def fetch(file_id: str, token: str) -> Document:
        assert (file_id, token) == ("FILE123", "figd_test")
        return copy.deepcopy(document)
    return fetch


def _read(path: Path) -> Dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend([routed(echo_translation("ko:"), fixed_scores(90))])


@pytest.fixture
def paths(settings: Settings) -> Dict[str, Path]:
    locales = Path(settings.locales_dir)
    cache = Path(settings.cache_dir)
    return {
        "en": locales / "en.json",
        "ko": locales / "ko.json",
        "ja": locales / "ja.json",
        "cache": cache / "translation-cache.json",
        "confidence": cache / "confidence.json",
    }


def _edited(document: Document) -> Document:
    """Drop the second Save, add Cancel and edit the draft note's second line."""
    edited = copy.deepcopy(document)
    footer = edited["children"][0]["children"][0]["children"]
    footer.pop(1)
    footer.append({"id": "1:4", "type": "TEXT", "characters": "Cancel"})
    edited["children"][1]["children"][0]["characters"] = "Draft copy\nMore"
    return edited

# -----------------------------------------------------------------------------
# EXTRACT & SYNC
# -----------------------------------------------------------------------------

def test_extract_writes_source_and_snapshot(
        settings: Settings, figma_document: Document, paths: Dict[str, Path]
) -> None:
    result = run_pipeline("extract", settings, fetch_document=_fetcher(figma_document))

    assert result.ok
    assert result.key_count == 4
    assert result.summary["skipped_korean"] == 1
    assert _read(paths["en"]) == {
        "footer": {"save": "Save", "save_2": "Save"},
        "header": {"get_started": "Get Started"},
        "draft_copy": "Draft copy",
    }
    assert _read(paths["cache"]) == {
        "footer.save": "Save",
        "footer.save_2": "Save",
        "header.get_started": "Get Started",
        "draft_copy": "Draft copy",
    }


def test_sync_translates_and_scores_every_key(
        settings: Settings, figma_document: Document, backend: ScriptedBackend, paths: Dict[str, Path]
) -> None:
    result = run_pipeline("sync", settings, fetch_document=_fetcher(figma_document), backend=backend)

    assert result.ok
    assert result.languages == ["ko"]
    assert _read(paths["ko"])["footer"] == {"save": "ko:Save", "save_2": "ko:Save"}
    assert _read(paths["confidence"]) == {"ko": {
        "footer.save": 90,
        "footer.save_2": 90,
        "header.get_started": 90,
        "draft_copy": 90,
    }}
    assert result.summary["languages"]["ko"]["translated"] == 4
    assert result.summary["source_path"].endswith("en.json")


def test_translate_without_source_fails(settings: Settings, backend: ScriptedBackend) -> None:
    result = run_pipeline("translate", settings, backend=backend)

    assert not result.ok
    assert "Run 'extract' first" in result.error
    assert backend.prompts == []


def test_sync_of_empty_design_reports_sync_failure(
        settings: Settings, backend: ScriptedBackend, paths: Dict[str, Path]
) -> None:
    result = run_pipeline("sync", settings, fetch_document=_fetcher({"children": []}), backend=backend)

    assert not result.ok
    assert result.command == "sync"
    assert "Run 'extract' first" in result.error
    assert result.summary["skipped_korean"] == 0
    assert _read(paths["en"]) == {}
    assert backend.prompts == []


def test_scoring_failure_keeps_translations(
        settings: Settings, figma_document: Document, paths: Dict[str, Path]
) -> None:
    backend = ScriptedBackend([routed(echo_translation("ko:"), "not json")])

    result = run_pipeline("sync", settings, fetch_document=_fetcher(figma_document), backend=backend)

    assert result.ok
    assert _read(paths["ko"])["header"] == {"get_started": "ko:Get Started"}
    assert _read(paths["confidence"]) == {"ko": {}}
    assert any("without confidence score" in w for w in result.warnings)


def test_failed_batch_keeps_english_and_warns(
        settings: Settings, figma_document: Document, paths: Dict[str, Path]
) -> None:
    backend = ScriptedBackend([routed("I cannot help with that.", fixed_scores(50))])

    result = run_pipeline("sync", settings, fetch_document=_fetcher(figma_document), backend=backend)

    assert result.ok
    assert _read(paths["ko"]) == _read(paths["en"])
    assert result.summary["languages"]["ko"]["fallback_keys"] == 4
    assert any("kept English" in w for w in result.warnings)

# -----------------------------------------------------------------------------
# UPDATE
# -----------------------------------------------------------------------------

def test_update_applies_only_changes(
        settings: Settings, figma_document: Document, backend: ScriptedBackend, paths: Dict[str, Path]
) -> None:
    run_pipeline("sync", settings, fetch_document=_fetcher(figma_document), backend=backend)
    calls_after_sync = len(backend.prompts)

    result = run_pipeline("update", settings, fetch_document=_fetcher(_edited(figma_document)), backend=backend)

    assert result.ok
    assert result.diff.added == {"footer.cancel": "Cancel"}
    assert result.diff.changed == {"draft_copy": "Draft copy\nMore"}
    assert result.diff.removed == ["footer.save_2"]

    assert _read(paths["ko"]) == {
        "footer": {"save": "ko:Save", "cancel": "ko:Cancel"},
        "header": {"get_started": "ko:Get Started"},
        "draft_copy": "ko:Draft copy\nMore",
    }
    assert _read(paths["en"])["footer"] == {"save": "Save", "cancel": "Cancel"}
    assert "footer.save_2" not in _read(paths["cache"])

    # One translation batch plus one scoring batch for the two changed keys
    assert len(backend.prompts) == calls_after_sync + 2
    assert _read(paths["confidence"])["ko"]["footer.save_2"] == 90


def test_update_turning_text_into_frame_keeps_new_children(
        settings: Settings, figma_document: Document, backend: ScriptedBackend, paths: Dict[str, Path]
) -> None:
    run_pipeline("sync", settings, fetch_document=_fetcher(figma_document), backend=backend)
    reshaped = copy.deepcopy(figma_document)
    reshaped["children"][0]["children"][0]["children"] = [{
        "id": "1:5",
        "name": "Save",
        "type": "FRAME",
        "children": [{"id": "1:6", "type": "TEXT", "characters": "Now"}],
    }]

    result = run_pipeline("update", settings, fetch_document=_fetcher(reshaped), backend=backend)

    assert result.ok
    assert result.diff.added == {"footer.save.now": "Now"}
    assert sorted(result.diff.removed) == ["footer.save", "footer.save_2"]
    assert _read(paths["en"])["footer"] == {"save": {"now": "Now"}}
    assert _read(paths["ko"])["footer"] == {"save": {"now": "ko:Now"}}
    assert _read(paths["cache"])["footer.save.now"] == "Now"
    assert "footer.save" not in _read(paths["cache"])


def test_update_without_changes_is_a_noop(
        settings: Settings, figma_document: Document, backend: ScriptedBackend, paths: Dict[str, Path]
) -> None:
    run_pipeline("sync", settings, fetch_document=_fetcher(figma_document), backend=backend)
    before = {name: p.read_text(encoding="utf-8") for name, p in paths.items() if p.exists()}
    calls = len(backend.prompts)

    result = run_pipeline("update", settings, fetch_document=_fetcher(figma_document), backend=backend)

    assert result.ok
    assert result.diff.is_empty
    assert len(backend.prompts) == calls
    assert {name: p.read_text(encoding="utf-8") for name, p in paths.items() if p.exists()} == before


def test_update_with_only_removals_skips_translation(
        settings: Settings, figma_document: Document, backend: ScriptedBackend, paths: Dict[str, Path]
) -> None:
    run_pipeline("sync", settings, fetch_document=_fetcher(figma_document), backend=backend)
    calls = len(backend.prompts)
    trimmed = copy.deepcopy(figma_document)
    trimmed["children"].pop(1)

    result = run_pipeline("update", settings, fetch_document=_fetcher(trimmed), backend=backend)

    assert result.diff.removed == ["draft_copy"]
    assert len(backend.prompts) == calls
    assert "draft_copy" not in _read(paths["ko"])
    assert result.summary["languages"]["ko"] == {"removed": 1, "path": str(paths["ko"])}


def test_aborted_update_keeps_finished_languages_and_old_snapshot(
        settings: Settings, figma_document: Document, backend: ScriptedBackend, paths: Dict[str, Path]
) -> None:
    run_pipeline("sync", settings, fetch_document=_fetcher(figma_document), backend=backend)
    snapshot_before = paths["cache"].read_text(encoding="utf-8")

    def reject_japanese(prompt: str) -> str:
        if "Japanese" in prompt:
            raise AuthenticationError("bad key")
        return routed(echo_translation("ko:"), fixed_scores(80))(prompt)

    two_languages = replace(settings, target_languages=["ko", "ja"])
    failing = ScriptedBackend([reject_japanese])

    with pytest.raises(AuthenticationError):
        run_pipeline("update", two_languages, fetch_document=_fetcher(_edited(figma_document)), backend=failing)

    assert _read(paths["ko"])["footer"]["cancel"] == "ko:Cancel"
    assert not paths["ja"].exists()
    assert paths["cache"].read_text(encoding="utf-8") == snapshot_before


def test_unknown_command_returns_error(settings: Settings) -> None:
    result = run_pipeline("deploy", settings)
    assert not result.ok
    assert "Unknown command" in result.error
