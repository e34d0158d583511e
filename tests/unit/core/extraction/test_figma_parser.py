from __future__ import annotations

"""
Unit tests for Figma text extraction.

Verifies:
1. Path construction from structural ancestors only.
2. Filtering of noise, Korean annotations and non-Latin text.
3. Page selection and traversal depth limits.
"""

from typing import Any, Dict

import pytest

from figma_i18n.core.extraction.figma_parser import (
    MAX_TRAVERSAL_DEPTH,
    contains_hangul,
    contributes_to_path,
    extract_text_nodes,
    has_latin,
    is_noise,
)


@pytest.mark.parametrize("node_type, expected", [
    ("FRAME", True),
    ("COMPONENT", True),
    ("COMPONENT_SET", True),
    ("SECTION", True),
    ("GROUP", False),
    ("INSTANCE", False),
    ("CANVAS", False),
    ("DOCUMENT", False),
])
def test_only_structural_nodes_contribute_to_path(node_type: str, expected: bool) -> None:
    assert contributes_to_path({"type": node_type, "name": "Screen"}) is expected


@pytest.mark.parametrize("text", ["→", "•", "42", "3.5", "100%", "https://example.com"])
def test_noise_detection(text: str) -> None:
    assert is_noise(text)


@pytest.mark.parametrize("text", ["OK", "Save", "x2", "1st place", "★ Favorites"])
def test_real_text_is_not_noise(text: str) -> None:
    assert not is_noise(text)


def test_script_detection() -> None:
    assert contains_hangul("디자인 메모")
    assert contains_hangul("Note: 수정")
    assert not contains_hangul("Save")
    assert has_latin("Save")
    assert not has_latin("保存")


def test_extract_collects_text_with_structural_path(figma_document: Dict[str, Any]) -> None:
    nodes, _ = extract_text_nodes(figma_document)

    assert [(n.text, n.path) for n in nodes] == [
        ("Save", ("Footer",)),
        ("Save", ("Footer",)),
        ("Get Started", ("Header",)),
        ("Draft copy", ()),
    ]
    assert nodes[0].node_id == "1:2"


def test_extract_counts_skipped_nodes(figma_document: Dict[str, Any]) -> None:
    _, stats = extract_text_nodes(figma_document)

    assert stats.skipped_korean == 1
    assert stats.skipped_noise == 1


def test_extract_filters_by_page(figma_document: Dict[str, Any]) -> None:
    nodes, _ = extract_text_nodes(figma_document, page_filter="Notes")
    assert [n.text for n in nodes] == ["Draft copy"]


def test_unknown_page_yields_nothing(figma_document: Dict[str, Any], caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        nodes, _ = extract_text_nodes(figma_document, page_filter="Missing")

    assert nodes == []
    assert "Page 1, Notes" in caplog.text


def test_non_latin_text_is_skipped_as_noise() -> None:
    document = {"children": [{"type": "CANVAS", "name": "P", "children": [
        {"type": "TEXT", "characters": "保存"},
        {"type": "TEXT", "characters": "   "},
    ]}]}

    nodes, stats = extract_text_nodes(document)

    assert nodes == []
    assert stats.skipped_noise == 1
    assert stats.skipped_korean == 0


def test_traversal_stops_below_max_depth() -> None:
    def nest(depth: int) -> Dict[str, Any]:
        if depth == 0:
            return {"type": "TEXT", "characters": "Deep"}
        return {"type": "GROUP", "name": "g", "children": [nest(depth - 1)]}

    shallow = {"children": [{"type": "CANVAS", "children": [nest(MAX_TRAVERSAL_DEPTH - 1)]}]}
    deep = {"children": [{"type": "CANVAS", "children": [nest(MAX_TRAVERSAL_DEPTH + 1)]}]}

    assert len(extract_text_nodes(shallow)[0]) == 1
    assert extract_text_nodes(deep)[0] == []
