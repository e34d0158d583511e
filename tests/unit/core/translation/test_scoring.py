from __future__ import annotations

"""
Unit tests for the Confidence Scorer.
"""

import json
from typing import Any, Optional

import pytest

from conftest import ScriptedBackend, fixed_scores
from figma_i18n.core.translation.scoring import ConfidenceScorer, coerce_score
from figma_i18n.domain.errors import AuthenticationError, TransientBackendError


@pytest.mark.parametrize("raw, expected", [
    (92, 92),
    (87.6, 88),
    ("75", 75),
    (140, 100),
    (-5, 0),
    (True, None),
    ("high", None),
    (None, None),
    (float("nan"), None),
])
def test_coerce_score(raw: Any, expected: Optional[int]) -> None:
    assert coerce_score(raw) == expected


def test_score_returns_one_entry_per_key() -> None:
    backend = ScriptedBackend([fixed_scores(90)])
    source = {"a": "Save", "b": "Cancel"}

    scores = ConfidenceScorer(backend).score(source, {"a": "저장", "b": "취소"}, "ko")

    assert scores == {"a": 90, "b": 90}


def test_missing_key_in_response_is_unscored() -> None:
    backend = ScriptedBackend([json.dumps({"a": 80})])
    scores = ConfidenceScorer(backend).score({"a": "Save", "b": "Cancel"}, {}, "ko")
    assert scores == {"a": 80, "b": None}


@pytest.mark.parametrize("reply", [
    "no scores today",
    TransientBackendError("timeout"),
    AuthenticationError("bad key"),
])
def test_failure_degrades_to_none(reply: Any) -> None:
    backend = ScriptedBackend([reply])
    translated = {"a": "저장"}

    scores = ConfidenceScorer(backend).score({"a": "Save"}, translated, "ko")

    assert scores == {"a": None}
    assert translated == {"a": "저장"}


def test_failure_is_scoped_to_one_batch() -> None:
    backend = ScriptedBackend([fixed_scores(70), "garbage"])
    source = {"a": "Save", "b": "Cancel", "c": "Next"}

    scores = ConfidenceScorer(backend, batch_size=2).score(source, {}, "ja")

    assert scores == {"a": 70, "b": 70, "c": None}
    assert len(backend.prompts) == 2
