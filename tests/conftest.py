"""Test setup for typst-count."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from typst_count.schemas import ContentNode, NodeKind  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    The end-to-end CLI tests read fixture files from disk:
        pytest -m cli        # run only CLI tests
        pytest -m "not cli"  # skip them
    """
    config.addinivalue_line(
        "markers",
        "cli: marks tests that run the command-line entry point against fixture files",
    )


def text(value: str) -> ContentNode:
    return ContentNode.text_run(value)


def node(kind: NodeKind, *children: ContentNode) -> ContentNode:
    return ContentNode.container(kind, *children)


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding sample content files."""
    return FIXTURES


@pytest.fixture
def simple_document() -> ContentNode:
    """Content tree of the "Simple Example Document" sample."""
    return node(
        NodeKind.CONTAINER,
        node(NodeKind.HEADING, text("Simple Example Document")),
        text("\n\n"),
        node(
            NodeKind.PARAGRAPH,
            text("The quick brown fox jumps over the lazy dog. This has "),
            node(NodeKind.STRONG, text("bold")),
            text(" and "),
            node(NodeKind.EMPHASIS, text("italic")),
            text(" text."),
        ),
    )
