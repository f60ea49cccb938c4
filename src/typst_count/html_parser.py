"""Build content trees from rendered HTML (for example Typst's HTML export)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from typst_count.exceptions import ContentFormatError
from typst_count.schemas import ContentNode, NodeKind

try:
    from bs4 import BeautifulSoup
    from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


INCLUDE_ATTRIBUTE: Final = "data-include"

_WHITESPACE_RE = re.compile(r"\s+")

_TAG_KINDS: Final[dict[str, NodeKind]] = {
    "h1": NodeKind.HEADING,
    "h2": NodeKind.HEADING,
    "h3": NodeKind.HEADING,
    "h4": NodeKind.HEADING,
    "h5": NodeKind.HEADING,
    "h6": NodeKind.HEADING,
    "p": NodeKind.PARAGRAPH,
    "li": NodeKind.LIST_ITEM,
    "dt": NodeKind.LIST_ITEM,
    "dd": NodeKind.LIST_ITEM,
    "em": NodeKind.EMPHASIS,
    "i": NodeKind.EMPHASIS,
    "strong": NodeKind.STRONG,
    "b": NodeKind.STRONG,
    "pre": NodeKind.CODE_BLOCK,
    "code": NodeKind.INLINE_CODE,
    "kbd": NodeKind.INLINE_CODE,
    "samp": NodeKind.INLINE_CODE,
    "script": NodeKind.COMMENT,
    "style": NodeKind.COMMENT,
    "noscript": NodeKind.COMMENT,
    "template": NodeKind.COMMENT,
}

_BLOCK_TAGS: Final = frozenset(
    {
        "address", "article", "aside", "blockquote", "dd", "details", "div", "dl",
        "dt", "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
        "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "summary",
        "table", "td", "th", "tr", "ul",
    }
)

_OPAQUE_KINDS: Final = frozenset(
    {NodeKind.CODE_BLOCK, NodeKind.INLINE_CODE, NodeKind.COMMENT, NodeKind.MATH_BLOCK, NodeKind.INLINE_MATH}
)

# Elements whose edges start or end a rendered line.
_LINE_CONTAINERS: Final = _BLOCK_TAGS | {"body", "html", "[document]"}

# Tags converted to a single node holding their raw text.
_TEXT_KINDS: Final = frozenset({NodeKind.CODE_BLOCK, NodeKind.INLINE_CODE, NodeKind.COMMENT})


@dataclass(frozen=True)
class _Assemble:
    """Build a ``kind`` node from the children converted just before it."""

    kind: NodeKind
    blocks: tuple[bool, ...]


def parse_html_document(html: str) -> ContentNode:
    """Convert an HTML document into a content tree.

    Only the document body is converted; ``<head>`` never renders text.

    Raises:
        ContentFormatError: If the document has no content at all.
    """
    soup = BeautifulSoup(html, "lxml")
    root = find_document_root(soup)
    if root is None:
        raise ContentFormatError("HTML document has no content")
    return content_from_element(root)


def find_document_root(soup: BeautifulSoup) -> Tag | None:
    """Find the element holding the rendered document.

    A single ``<main>`` (or, without one, a single ``<article>``) is the
    document. When there are several, the whole ``<body>`` is used so none
    of them is dropped. Falls back to the soup itself when it has any
    children.
    """
    for name in ("main", "article"):
        found = soup.find_all(name)
        if len(found) == 1:
            return found[0]
        if found:
            break
    if soup.body:
        return soup.body
    return soup if soup.contents else None


def content_from_element(root: Tag) -> ContentNode:
    """Convert the children of ``root`` into a container node.

    Conversion uses an explicit stack, so nesting depth is not limited by
    the interpreter's recursion limit.
    """
    built: list[ContentNode | None] = []
    stack: list[object] = []
    _push_children(stack, root, NodeKind.CONTAINER)

    while stack:
        item = stack.pop()
        if isinstance(item, _Assemble):
            start = len(built) - len(item.blocks)
            children = _join_children(built[start:], item.blocks)
            del built[start:]
            built.append(ContentNode(kind=item.kind, children=tuple(children)))
            continue
        kind = _container_kind(item) if isinstance(item, Tag) else None
        if kind is None:
            built.append(_convert_leaf(item))
        else:
            _push_children(stack, item, kind)

    document = built.pop()
    if document is None:
        raise ContentFormatError("HTML document has no content")
    return document


def _push_children(stack: list[object], tag: Tag, kind: NodeKind) -> None:
    siblings = list(tag.children)
    rendered = [child for index, child in enumerate(siblings) if not _is_layout_whitespace(siblings, index)]
    stack.append(_Assemble(kind, tuple(_is_block(child) for child in rendered)))
    stack.extend(reversed(rendered))


def _join_children(nodes: list[ContentNode | None], blocks: tuple[bool, ...]) -> list[ContentNode]:
    children: list[ContentNode] = []
    last_visible: ContentNode | None = None
    pending_break = False
    for node, is_block in zip(nodes, blocks):
        if node is None:
            continue
        if node.kind in _OPAQUE_KINDS:
            # Excluded content never renders a separator of its own.
            pending_break = pending_break or is_block
            children.append(node)
            continue
        if (is_block or pending_break) and _needs_break(last_visible, node):
            children.append(ContentNode.text_run("\n"))
        children.append(node)
        last_visible = node
        pending_break = is_block
    return children


def _is_block(element: object) -> bool:
    return isinstance(element, Tag) and element.name in _BLOCK_TAGS


def _is_layout_whitespace(siblings: list, index: int) -> bool:
    """Whitespace-only strings at block boundaries are not rendered."""
    child = siblings[index]
    if not isinstance(child, NavigableString) or isinstance(child, Comment):
        return False
    if str(child).strip():
        return False
    before = siblings[index - 1] if index > 0 else None
    after = siblings[index + 1] if index + 1 < len(siblings) else None
    return _is_block_boundary(before) or _is_block_boundary(after)


def _is_block_boundary(sibling: object) -> bool:
    return sibling is None or _is_block(sibling)


def _at_line_edge(element: NavigableString, step: str) -> bool:
    """Whether nothing rendered lies between ``element`` and a line edge.

    ``step`` is ``"previous_sibling"`` or ``"next_sibling"``. Inline parents
    are climbed until a sibling or a block container is found.
    """
    current: Tag | NavigableString = element
    while True:
        sibling = getattr(current, step)
        while sibling is not None and _is_invisible(sibling):
            sibling = getattr(sibling, step)
        if sibling is not None:
            return _is_block(sibling) or (isinstance(sibling, Tag) and sibling.name == "br")
        parent = current.parent
        if parent is None or parent.name in _LINE_CONTAINERS:
            return True
        current = parent


def _is_invisible(element: object) -> bool:
    if isinstance(element, (Comment, Declaration, Doctype, ProcessingInstruction)):
        return True
    return isinstance(element, NavigableString) and not str(element).strip()


def _container_kind(element: Tag) -> NodeKind | None:
    """Kind of a tag whose children are converted, or None for leaf tags."""
    if element.get(INCLUDE_ATTRIBUTE) or element.name in ("br", "math"):
        return None
    kind = _TAG_KINDS.get(element.name, NodeKind.CONTAINER)
    return None if kind in _TEXT_KINDS else kind


def _convert_leaf(element: object) -> ContentNode | None:
    if isinstance(element, Comment):
        return ContentNode(kind=NodeKind.COMMENT, text=str(element))
    if isinstance(element, (Declaration, Doctype, ProcessingInstruction)):
        return None
    if isinstance(element, NavigableString):
        text = _WHITESPACE_RE.sub(" ", str(element))
        if _at_line_edge(element, "previous_sibling"):
            text = text.lstrip()
        if _at_line_edge(element, "next_sibling"):
            text = text.rstrip()
        return ContentNode.text_run(text) if text else None
    if not isinstance(element, Tag):
        return None

    include = element.get(INCLUDE_ATTRIBUTE)
    if include:
        return ContentNode.include(str(include))

    if element.name == "br":
        return ContentNode.text_run("\n")

    if element.name == "math":
        display = element.get("display")
        kind = NodeKind.MATH_BLOCK if display == "block" else NodeKind.INLINE_MATH
        return ContentNode(kind=kind)

    kind = _TAG_KINDS.get(element.name, NodeKind.CONTAINER)
    return ContentNode(kind=kind, text=element.get_text())
