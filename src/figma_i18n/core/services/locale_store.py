from __future__ import annotations

"""
Locale Document Store.

Reads and writes one nested JSON document per language and applies partial
updates (set or remove a dotted key) without disturbing untouched keys.
"""

import logging
import os
from typing import Iterable, List

from figma_i18n.core.keys import tree as tree_ops
from figma_i18n.core.keys.tree import NestedTree
from figma_i18n.domain.constants import DEFAULT_LOCALES_DIR
from figma_i18n.domain.models import FlatMap
from figma_i18n.infra.fs import read_json_object, safe_mkdir, write_json_object

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# STRUCTURAL EDITS
# -----------------------------------------------------------------------------

def set_nested_key(tree: NestedTree, dotted_key: str, value: str) -> None:
    """
    Assign a leaf at a dotted path, in place.

    Intermediate objects are created as needed; an intermediate string is
    demoted to `{"_value": <string>}` before descending.
    """
    tree_ops.assign(tree, dotted_key, value)


def remove_nested_key(tree: NestedTree, dotted_key: str) -> None:
    """
    Delete the node at a dotted path, in place.

    Missing or non-object parents make this a silent no-op. A demoted key
    only loses its `_value` entry. Parents left empty by the removal are kept.
    """
    if not tree_ops.delete(tree, dotted_key):
        logger.debug(f"LocaleStore: Key '{dotted_key}' not present, nothing removed.")

# -----------------------------------------------------------------------------
# PERSISTENCE
# -----------------------------------------------------------------------------

class LocaleStore:
    """
    File-backed collection of `<lang>.json` documents.

    Documents are UTF-8, indented by two spaces and end with a newline.
    """

    def __init__(self, locales_dir: str = DEFAULT_LOCALES_DIR) -> None:
        self._dir = locales_dir

    @property
    def directory(self) -> str:
        return self._dir

    def ensure_dir(self) -> None:
        safe_mkdir(self._dir)

    def path_for(self, lang: str) -> str:
        return os.path.join(self._dir, f"{lang}.json")

    def read(self, lang: str) -> NestedTree:
        return read_json_object(self.path_for(lang))

    def read_flat(self, lang: str) -> FlatMap:
        return tree_ops.to_flat(self.read(lang))

    def write(self, lang: str, tree: NestedTree) -> str:
        path = self.path_for(lang)
        write_json_object(path, tree, trailing_newline=True)
        return path

    def replace(self, lang: str, flat: FlatMap) -> str:
        """Write a document built from a flat record, discarding the old one."""
        return self.write(lang, tree_ops.to_nested(flat))

    def apply_changes(self, lang: str, updates: FlatMap, removed: Iterable[str] = ()) -> NestedTree:
        """
        Merge deletions and updates into an existing document and persist it.

        Deletions run first, so a key removed in the same change set as a new
        key below it (a text layer turned into a frame) cannot take the new
        key with it.

        Args:
            lang: Language code of the document.
            updates: Dotted keys to set, in order.
            removed: Dotted keys to delete.

        Returns:
            NestedTree: The document as written.
        """
        document = self.read(lang)
        removed_keys: List[str] = list(removed)
        for key in removed_keys:
            remove_nested_key(document, key)

        for key, value in updates.items():
            set_nested_key(document, key, value)

        self.write(lang, document)
        logger.debug(
            f"LocaleStore: {lang}.json merged ({len(updates)} set, {len(removed_keys)} removed)."
        )
        return document
