"""Content tree models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NodeKind(str, Enum):
    """Closed set of content node kinds produced by a document compiler."""

    TEXT = "text"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list_item"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    CONTAINER = "container"
    CODE_BLOCK = "code_block"
    INLINE_CODE = "inline_code"
    COMMENT = "comment"
    MATH_BLOCK = "math_block"
    INLINE_MATH = "inline_math"
    DEFINITION = "definition"
    CALL = "call"
    INCLUDE = "include"


class ContentNode(BaseModel):
    """A node of a compiled document's content tree.

    Attributes:
        kind: The node kind.
        text: Literal rendered text, required for ``text`` nodes. Other kinds
            may carry source text (e.g. code) that is never counted.
        target: Reference to another file, required for ``include`` nodes.
        children: Child nodes in document order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: NodeKind
    text: str | None = None
    target: str | None = None
    children: tuple["ContentNode", ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "ContentNode":
        if self.kind is NodeKind.TEXT and self.text is None:
            raise ValueError("text nodes require a 'text' value")
        if self.kind is NodeKind.INCLUDE and not self.target:
            raise ValueError("include nodes require a 'target' reference")
        return self

    @classmethod
    def text_run(cls, text: str) -> "ContentNode":
        """Create a plain text run."""
        return cls(kind=NodeKind.TEXT, text=text)

    @classmethod
    def container(cls, kind: NodeKind, *children: "ContentNode") -> "ContentNode":
        """Create a node of ``kind`` wrapping ``children``."""
        return cls(kind=kind, children=children)

    @classmethod
    def include(cls, target: str) -> "ContentNode":
        """Create an import/include reference to ``target``."""
        return cls(kind=NodeKind.INCLUDE, target=target)
