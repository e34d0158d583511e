from __future__ import annotations

"""
Prompt Construction and Response Parsing.

Builds the translation and scoring prompts and turns raw model output back
into validated Python mappings.
"""

import json
import re
from typing import Any, Dict, List

from figma_i18n.domain.constants import KEEP_IN_ENGLISH, PRODUCT_CONTEXT
from figma_i18n.domain.errors import MalformedResponseError
from figma_i18n.domain.models import FlatMap

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")

# -----------------------------------------------------------------------------
# PROMPTS
# -----------------------------------------------------------------------------

def build_translation_prompt(batch: FlatMap, language_name: str) -> str:
    input_json = json.dumps(batch, ensure_ascii=False, indent=2)
    return f"""Translate all English values in this JSON to {language_name}.
This is {PRODUCT_CONTEXT}.

IMPORTANT: You MUST translate EVERY value into {language_name}. Do not leave values in English.
Exception - keep in English only: {KEEP_IN_ENGLISH}

Rules:
- Keep all JSON keys exactly the same
- Preserve template variables as-is: {{variable}}, {{{{var}}}}, %s, %d, :var
- Use natural, concise language suitable for the UI
- Return ONLY the translated JSON object. No markdown, no explanation, nothing else.

{input_json}"""


def build_scoring_prompt(source: FlatMap, translated: FlatMap, language_name: str) -> str:
    pairs: List[Dict[str, str]] = [
        {"key": key, "en": en, "translated": translated.get(key, "")}
        for key, en in source.items()
    ]
    input_json = json.dumps(pairs, ensure_ascii=False, indent=2)
    return f"""Rate translation quality for each item (0-100).
Source language: English, Target language: {language_name}
Context: {PRODUCT_CONTEXT}

Scoring guide:
- 90-100: Perfect translation, common short UI text (Save, Cancel, Submit)
- 75-89: Good translation, standard financial/UI phrases
- 60-74: Acceptable but may need review (long sentences, marketing copy)
- 40-59: Uncertain - financial jargon, ambiguous context
- Below 40: Likely mistranslation or unclear source

Return ONLY a JSON object mapping each key to its score (number).
Example: {{"header.title": 92, "footer.disclaimer": 55}}

Items to score:
{input_json}"""

# -----------------------------------------------------------------------------
# PARSING
# -----------------------------------------------------------------------------

def strip_code_fences(raw: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    cleaned = _FENCE_OPEN.sub("", raw.strip())
    return _FENCE_CLOSE.sub("", cleaned).strip()


def parse_json_object(raw: str) -> Dict[str, Any]:
    """
    Parse model output as a JSON object.

    Raises:
        MalformedResponseError: On invalid JSON or a non-object root.
    """
    try:
        data = json.loads(strip_code_fences(raw))
    except ValueError as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}", raw=raw) from e
    if not isinstance(data, dict):
        raise MalformedResponseError("Response JSON root is not an object.", raw=raw)
    return data


def parse_translation(raw: str, batch: FlatMap) -> FlatMap:
    """
    Parse a translation answer into exactly the batch's keys.

    Keys the model dropped keep their English source; extra keys are ignored.

    Raises:
        MalformedResponseError: On unparseable output or non-string values.
    """
    data = parse_json_object(raw)
    result: FlatMap = {}
    for key, source in batch.items():
        value = data.get(key, source)
        if not isinstance(value, str):
            raise MalformedResponseError(f"Value for '{key}' is not a string.", raw=raw)
        result[key] = value
    return result


def unchanged_ratio(batch: FlatMap, translated: FlatMap) -> float:
    """Fraction of batch entries whose output equals the English source."""
    if not batch:
        return 0.0
    unchanged = sum(1 for key, source in batch.items() if translated.get(key) == source)
    return unchanged / len(batch)
