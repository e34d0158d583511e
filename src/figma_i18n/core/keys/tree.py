from __future__ import annotations

"""
Flat/Nested Key Conversion.

Maps dotted flat records (`{"common.button.save": "Save"}`) to the nested
JSON documents stored on disk (`{"common": {"button": {"save": "Save"}}}`)
and back.

Nodes of a nested document are classified as `Leaf` (a string) or `Branch`
(an object). A branch wraps the underlying dict without copying, so every
edit made through it lands in the caller's document. When a deeper key must
descend through a leaf, the leaf is demoted into a branch holding the old
value under `_value`, so no text is silently dropped.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from figma_i18n.domain.constants import VALUE_KEY
from figma_i18n.domain.models import FlatMap

NestedTree = Dict[str, Any]


# -----------------------------------------------------------------------------
# NODE VARIANTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Leaf:
    value: str


@dataclass(frozen=True)
class Branch:
    children: NestedTree

    def child(self, name: str) -> Optional[Node]:
        return classify(self.children.get(name))

    def ensure_branch(self, name: str) -> Branch:
        """
        Return the child branch `name`, creating or demoting it as needed.

        A missing or non-JSON child becomes an empty branch; a leaf child is
        demoted so its text survives under `_value`.
        """
        node = self.child(name)
        if isinstance(node, Branch):
            return node
        branch = demote(node) if isinstance(node, Leaf) else Branch({})
        self.children[name] = branch.children
        return branch


Node = Union[Leaf, Branch]


def classify(value: Any) -> Optional[Node]:
    """Wrap a raw JSON value as a node; other types (numbers, lists) are None."""
    if isinstance(value, dict):
        return Branch(value)
    if isinstance(value, str):
        return Leaf(value)
    return None


def demote(leaf: Leaf) -> Branch:
    """Turn a leaf into a branch that keeps the leaf text under `_value`."""
    return Branch({VALUE_KEY: leaf.value})


# -----------------------------------------------------------------------------
# PATH OPERATIONS
# -----------------------------------------------------------------------------

def split_key(dotted_key: str) -> List[str]:
    return dotted_key.split(".")


def assign(tree: NestedTree, dotted_key: str, value: str) -> None:
    """Set a leaf at a dotted path, creating and demoting parents in place."""
    *parents, last = split_key(dotted_key)
    current = Branch(tree)
    for segment in parents:
        current = current.ensure_branch(segment)
    current.children[last] = value


def delete(tree: NestedTree, dotted_key: str) -> bool:
    """
    Remove the node at a dotted path in place.

    A key whose leaf was demoted only loses its `_value` entry; the deeper
    keys sharing its prefix are kept.

    Returns:
        bool: False when a parent is missing or is not an object. Emptied
              parents are left in place.
    """
    *parents, last = split_key(dotted_key)
    current = Branch(tree)
    for segment in parents:
        node = current.child(segment)
        if not isinstance(node, Branch):
            return False
        current = node

    target = current.child(last)
    if isinstance(target, Branch):
        if VALUE_KEY not in target.children:
            return False
        del target.children[VALUE_KEY]
        return True
    if last not in current.children:
        return False
    del current.children[last]
    return True


def iter_leaves(tree: NestedTree, prefix: str = "") -> Iterator[Tuple[str, str]]:
    """Yield (dotted_key, text) pairs depth-first in document order."""
    for key, value in tree.items():
        full_key = f"{prefix}.{key}" if prefix else key
        node = classify(value)
        if isinstance(node, Leaf):
            yield full_key, node.value
        elif isinstance(node, Branch):
            yield from iter_leaves(node.children, full_key)


# -----------------------------------------------------------------------------
# CONVERSION API
# -----------------------------------------------------------------------------

def to_nested(flat: FlatMap) -> NestedTree:
    """
    Build a nested document from a flat record.

    Keys are applied in the record's order, so `{"a": "x", "a.b": "y"}`
    produces `{"a": {"_value": "x", "b": "y"}}`.
    """
    nested: NestedTree = {}
    for dotted_key, value in flat.items():
        assign(nested, dotted_key, value)
    return nested


def to_flat(nested: NestedTree) -> FlatMap:
    """Flatten a nested document; only string leaves produce entries."""
    return dict(iter_leaves(nested))
