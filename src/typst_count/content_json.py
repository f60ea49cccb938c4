"""Load content trees serialized as JSON.

Two shapes are accepted and may be mixed within one document:

* native nodes, objects with a ``kind`` key matching :class:`NodeKind`;
* Typst-style elements, objects with a ``func`` key as produced when Typst
  serializes content (``{"func": "text", "text": "Hi"}``,
  ``{"func": "sequence", "children": [...]}``, ...).

A bare list is read as a sequence of nodes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Final

from pydantic import ValidationError

from typst_count.exceptions import ContentFormatError
from typst_count.schemas import ContentNode, NodeKind

# Content-valued fields of Typst elements, in rendering order.
_CONTENT_FIELDS: Final = ("term", "description", "body", "child", "children", "caption")

_WRAPPERS: Final[dict[str, NodeKind]] = {
    "heading": NodeKind.HEADING,
    "par": NodeKind.PARAGRAPH,
    "list.item": NodeKind.LIST_ITEM,
    "enum.item": NodeKind.LIST_ITEM,
    "terms.item": NodeKind.LIST_ITEM,
    "emph": NodeKind.EMPHASIS,
    "strong": NodeKind.STRONG,
    "call": NodeKind.CALL,
}

_WHITESPACE: Final[dict[str, str]] = {
    "space": " ",
    "linebreak": "\n",
    "parbreak": "\n\n",
}

_Factory = Callable[[tuple[ContentNode, ...]], ContentNode]


def parse_content_json(source: str) -> ContentNode:
    """Parse a JSON document into a content tree.

    Raises:
        ContentFormatError: If the text is not JSON or does not describe
            a content tree.
    """
    try:
        data = json.loads(source)
    except json.JSONDecodeError as exc:
        raise ContentFormatError(f"Invalid JSON content: {exc}") from exc
    except RecursionError as exc:
        raise ContentFormatError("JSON content is nested too deeply to decode") from exc
    return content_from_data(data)


@dataclass(frozen=True)
class _Build:
    """Build a node from the ``arity`` most recently converted children."""

    factory: _Factory
    arity: int


def content_from_data(data: Any) -> ContentNode:
    """Convert decoded JSON data into a content tree.

    Conversion uses an explicit stack, so nesting depth is not limited by
    the interpreter's recursion limit.
    """
    if isinstance(data, list):
        data = {"kind": NodeKind.CONTAINER.value, "children": data}

    built: list[ContentNode] = []
    stack: list[Any] = [data]
    while stack:
        item = stack.pop()
        if isinstance(item, _Build):
            start = len(built) - item.arity
            children = tuple(built[start:])
            del built[start:]
            built.append(item.factory(children))
            continue
        factory, children_data = _expand(item)
        stack.append(_Build(factory, len(children_data)))
        stack.extend(reversed(children_data))
    return built[0]


def _expand(data: Any) -> tuple[_Factory, list[Any]]:
    """Split one JSON value into a node factory and its child values."""
    if isinstance(data, str):
        return _constant(ContentNode.text_run(data)), []
    if not isinstance(data, dict):
        raise ContentFormatError(f"Expected a content object, got {type(data).__name__}")
    if "kind" in data:
        return _expand_native(data)
    if "func" in data:
        return _expand_element(data)
    raise ContentFormatError("Content object needs a 'kind' or 'func' key")


def _expand_native(data: dict[str, Any]) -> tuple[_Factory, list[Any]]:
    fields = dict(data)
    children = fields.pop("children", None) or []
    if not isinstance(children, list):
        raise ContentFormatError("'children' must be a list")
    return partial(_native_node, fields), children


def _native_node(fields: dict[str, Any], children: tuple[ContentNode, ...]) -> ContentNode:
    try:
        return ContentNode(**fields, children=children)
    except ValidationError as exc:
        raise ContentFormatError(f"Invalid content node: {exc}") from exc


def _expand_element(data: dict[str, Any]) -> tuple[_Factory, list[Any]]:
    func = data["func"]

    if func == "text":
        text = data.get("text")
        if not isinstance(text, str):
            raise ContentFormatError("text elements need a string 'text' field")
        return _constant(ContentNode.text_run(text)), []
    if func in _WHITESPACE:
        return _constant(ContentNode.text_run(_WHITESPACE[func])), []
    if func == "smartquote":
        return _constant(ContentNode.text_run('"' if data.get("double", True) else "'")), []
    if func == "raw":
        kind = NodeKind.CODE_BLOCK if data.get("block") else NodeKind.INLINE_CODE
        return _constant(ContentNode(kind=kind, text=_optional_str(data.get("text")))), []
    if func == "equation":
        kind = NodeKind.MATH_BLOCK if data.get("block") else NodeKind.INLINE_MATH
        return _constant(ContentNode(kind=kind)), []
    if func == "comment":
        return _constant(ContentNode(kind=NodeKind.COMMENT, text=_optional_str(data.get("text")))), []
    if func == "definition":
        return _constant(ContentNode(kind=NodeKind.DEFINITION)), []
    if func == "include":
        path = data.get("path")
        if not isinstance(path, str) or not path:
            raise ContentFormatError("include elements need a 'path' field")
        return _constant(ContentNode.include(path)), []

    kind = _WRAPPERS.get(func, NodeKind.CONTAINER)
    return partial(_element_node, kind), _content_fields(data)


def _element_node(kind: NodeKind, children: tuple[ContentNode, ...]) -> ContentNode:
    return ContentNode(kind=kind, children=children)


def _content_fields(data: dict[str, Any]) -> list[Any]:
    values: list[Any] = []
    for field in _CONTENT_FIELDS:
        value = data.get(field)
        if isinstance(value, list):
            values.extend(value)
        elif isinstance(value, (dict, str)):
            values.append(value)
    return values


def _constant(node: ContentNode) -> _Factory:
    def factory(children: tuple[ContentNode, ...]) -> ContentNode:
        return node

    return factory


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None
