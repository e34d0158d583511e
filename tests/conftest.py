from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A scripted translation backend replacing the LLM provider.
3. Shared settings and Figma document fixtures.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from figma_i18n.core.translation.backends.base import TranslationBackend  # noqa: E402
from figma_i18n.domain.config import Settings  # noqa: E402

Reply = Union[str, Exception, Callable[[str], str]]


class ScriptedBackend(TranslationBackend):
    """
    Backend replaying a fixed list of replies.

    Each reply is returned as-is, raised when it is an exception, or called
    with the prompt when it is a callable. The last reply repeats once the
    script is exhausted.
    """

    def __init__(self, replies: List[Reply]) -> None:
        self._replies = list(replies)
        self.prompts: List[str] = []
        self.models: List[str] = []

    def complete(self, prompt: str, *, model: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        self.models.append(model)
        index = min(len(self.prompts), len(self._replies)) - 1
        reply = self._replies[index]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


def payload_of(prompt: str) -> Any:
    """Extract the trailing JSON payload embedded in a prompt."""
    starts = [i for i in (prompt.rfind("\n{"), prompt.rfind("\n[")) if i >= 0]
    return json.loads(prompt[max(starts) + 1:])


def echo_translation(prefix: str) -> Callable[[str], str]:
    """Reply translating every value of a translation prompt as `prefix + value`."""
    def reply(prompt: str) -> str:
        batch: Dict[str, str] = payload_of(prompt)
        return json.dumps({k: f"{prefix}{v}" for k, v in batch.items()}, ensure_ascii=False)
    return reply


def fixed_scores(score: int) -> Callable[[str], str]:
    """Reply scoring every item of a scoring prompt with the same value."""
    def reply(prompt: str) -> str:
        items: List[Dict[str, str]] = payload_of(prompt)
        return json.dumps({item["key"]: score for item in items})
    return reply


def routed(translate: Reply, score: Reply) -> Callable[[str], str]:
    """Dispatch on the prompt kind so one backend serves both passes."""
    def reply(prompt: str) -> str:
        chosen = score if prompt.startswith("Rate translation quality") else translate
        if isinstance(chosen, Exception):
            raise chosen
        return chosen(prompt) if callable(chosen) else chosen
    return reply


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def scripted_backend() -> Callable[[List[Reply]], ScriptedBackend]:
    """Factory building a ScriptedBackend from a list of replies."""
    return ScriptedBackend


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """
    Complete settings pointing every file location into a temporary directory.
    """
    return Settings(
        figma_token="figd_test",
        figma_file_id="FILE123",
        anthropic_api_key="sk-ant-test",
        page_name=None,
        locales_dir=str(tmp_path / "locales"),
        cache_dir=str(tmp_path / ".cache"),
        target_languages=["ko"],
    )


@pytest.fixture
def figma_document() -> Dict[str, Any]:
    """
    A small Figma `document` node.

    Structure:
    Document
      Page 1 (CANVAS)
        Footer (FRAME)
          Save (TEXT)
          Save (TEXT)
        Group (GROUP)
          Header (COMPONENT)
            "Get Started" (TEXT)
            "디자인 메모" (TEXT, annotation)
            "42%" (TEXT, noise)
      Notes (CANVAS)
        "Draft copy" (TEXT)
    """
    return {
        "id": "0:0",
        "name": "Document",
        "type": "DOCUMENT",
        "children": [
            {
                "id": "0:1",
                "name": "Page 1",
                "type": "CANVAS",
                "children": [
                    {
                        "id": "1:1",
                        "name": "Footer",
                        "type": "FRAME",
                        "children": [
                            {"id": "1:2", "name": "btn", "type": "TEXT", "characters": "Save"},
                            {"id": "1:3", "name": "btn", "type": "TEXT", "characters": "Save"},
                        ],
                    },
                    {
                        "id": "2:1",
                        "name": "Group",
                        "type": "GROUP",
                        "children": [
                            {
                                "id": "2:2",
                                "name": "Header",
                                "type": "COMPONENT",
                                "children": [
                                    {"id": "2:3", "type": "TEXT", "characters": "Get Started"},
                                    {"id": "2:4", "type": "TEXT", "characters": "디자인 메모"},
                                    {"id": "2:5", "type": "TEXT", "characters": "42%"},
                                ],
                            }
                        ],
                    },
                ],
            },
            {
                "id": "0:2",
                "name": "Notes",
                "type": "CANVAS",
                "children": [
                    {"id": "3:1", "type": "TEXT", "characters": "Draft copy"},
                ],
            },
        ],
    }
