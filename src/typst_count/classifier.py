"""Decide how each content node takes part in counting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Union

from typst_count.schemas import ContentNode, NodeKind


class Action(str, Enum):
    """Traversal action attached to each node kind."""

    LEAF = "leaf"
    RECURSE = "recurse"
    SKIP = "skip"
    RESOLVE = "resolve"


@dataclass(frozen=True)
class Leaf:
    """The node contributes ``text`` verbatim and has nothing else to visit."""

    text: str


@dataclass(frozen=True)
class Recurse:
    """The node contributes nothing itself; visit its children in order."""


@dataclass(frozen=True)
class Skip:
    """The node and its whole subtree are excluded."""


@dataclass(frozen=True)
class Resolve:
    """The node references another file whose root replaces it."""

    target: str


Verdict = Union[Leaf, Recurse, Skip, Resolve]

RECURSE: Final = Recurse()
SKIP: Final = Skip()

POLICY: Final[dict[NodeKind, Action]] = {
    NodeKind.TEXT: Action.LEAF,
    NodeKind.HEADING: Action.RECURSE,
    NodeKind.PARAGRAPH: Action.RECURSE,
    NodeKind.LIST_ITEM: Action.RECURSE,
    NodeKind.EMPHASIS: Action.RECURSE,
    NodeKind.STRONG: Action.RECURSE,
    NodeKind.CONTAINER: Action.RECURSE,
    # A call node's children are its rendered output, never its definition.
    NodeKind.CALL: Action.RECURSE,
    NodeKind.CODE_BLOCK: Action.SKIP,
    NodeKind.INLINE_CODE: Action.SKIP,
    NodeKind.COMMENT: Action.SKIP,
    NodeKind.MATH_BLOCK: Action.SKIP,
    NodeKind.INLINE_MATH: Action.SKIP,
    NodeKind.DEFINITION: Action.SKIP,
    NodeKind.INCLUDE: Action.RESOLVE,
}

_missing = set(NodeKind) - set(POLICY)
if _missing:  # pragma: no cover - guards edits to NodeKind
    raise RuntimeError(f"No classification policy for: {sorted(k.value for k in _missing)}")


def classify(node: ContentNode) -> Verdict:
    """Classify ``node`` by its kind alone.

    Args:
        node: The node to classify. It is not modified.

    Returns:
        ``Leaf`` for text runs, ``Recurse`` for transparent containers,
        ``Skip`` for code, math, comments and definitions, and ``Resolve``
        for import/include references.
    """
    action = POLICY[node.kind]
    if action is Action.LEAF:
        return Leaf(node.text or "")
    if action is Action.RECURSE:
        return RECURSE
    if action is Action.SKIP:
        return SKIP
    return Resolve(node.target or "")
