"""Tests for the HTML content loader."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from typst_count.aggregator import count_document
from typst_count.exceptions import ContentFormatError
from typst_count.html_parser import content_from_element, parse_html_document
from typst_count.schemas import ContentNode, CountResult, NodeKind
from typst_count.world import InMemoryWorld


def count_html(html: str) -> CountResult:
    world = InMemoryWorld({"doc.html": parse_html_document(html)})
    report = count_document("doc.html", world)
    assert report.count is not None
    return report.count


def kinds(root: ContentNode) -> list[NodeKind]:
    return [child.kind for child in root.children]


class TestParseHtmlDocument:
    """Tests for parse_html_document."""

    def test_maps_tags_to_kinds(self) -> None:
        root = parse_html_document(
            "<body><h1>T</h1><p>P</p><ul><li>I</li></ul><pre>code</pre></body>"
        )
        assert NodeKind.HEADING in kinds(root)
        assert NodeKind.PARAGRAPH in kinds(root)
        assert NodeKind.CODE_BLOCK in kinds(root)

    def test_head_is_ignored(self) -> None:
        html = "<html><head><title>Hidden title</title></head><body><p>Visible</p></body></html>"
        assert count_html(html) == CountResult(words=1, characters=7)

    def test_emphasis_adds_no_characters(self) -> None:
        html = "<p>This has <strong>bold</strong> and <em>italic</em> text.</p>"
        assert count_html(html) == CountResult(words=6, characters=30)

    def test_code_math_comments_and_scripts_are_skipped(self) -> None:
        html = (
            "<body><p>Keep <code>skip()</code>this</p>"
            "<pre>also skipped</pre>"
            "<!-- a comment -->"
            "<script>var hidden = 1;</script>"
            '<math display="block"><mi>x</mi></math>'
            "</body>"
        )
        assert count_html(html) == CountResult(words=2, characters=9)

    def test_adjacent_blocks_do_not_fuse_words(self) -> None:
        assert count_html("<body><p>one</p><p>two</p></body>").words == 2

    def test_layout_whitespace_is_not_counted(self) -> None:
        compact = "<body><h1>Title</h1><p>Some text.</p></body>"
        pretty = "<body>\n  <h1>Title</h1>\n  <p>Some text.</p>\n</body>"
        indented = "<body>\n  <h1>\n    Title\n  </h1>\n  <p>\n    Some text.\n  </p>\n</body>"
        assert count_html(compact) == count_html(pretty)
        assert count_html(compact) == count_html(indented)
        assert count_html(compact) == CountResult(words=3, characters=16)

    def test_inline_whitespace_is_collapsed(self) -> None:
        assert count_html("<p>a  \n   b</p>") == CountResult(words=2, characters=3)

    def test_line_break_separates_words(self) -> None:
        assert count_html("<p>one<br>two</p>").words == 2

    def test_data_include_becomes_include(self) -> None:
        root = parse_html_document('<body><p>x</p><div data-include="chapter.html"></div></body>')
        includes = [child for child in root.children if child.kind is NodeKind.INCLUDE]
        assert includes == [ContentNode.include("chapter.html")]

    def test_empty_document_is_format_error(self) -> None:
        with pytest.raises(ContentFormatError):
            parse_html_document("")

    def test_whitespace_at_line_edges_inside_inline_elements(self) -> None:
        assert count_html("<p> <em> Some</em> text. </p>") == CountResult(words=2, characters=10)

    def test_inline_spacing_is_kept(self) -> None:
        assert count_html("<p>Some <em>more</em> text</p>") == CountResult(words=3, characters=14)


class TestFindDocumentRoot:
    """Which part of the page is counted."""

    def test_single_main_is_the_document(self) -> None:
        html = "<body><nav>Menu</nav><main><p>Body</p></main></body>"
        assert count_html(html) == CountResult(words=1, characters=4)

    def test_several_articles_are_all_counted(self) -> None:
        html = (
            "<body><article><p>First part.</p></article>"
            "<article><p>Second part.</p></article></body>"
        )
        assert count_html(html) == CountResult(words=4, characters=24)


class TestContentFromElement:
    """Tests for content_from_element."""

    def test_deep_nesting(self) -> None:
        soup = BeautifulSoup("<body></body>", "lxml")
        current = soup.body
        for _ in range(3000):
            child = soup.new_tag("span")
            current.append(child)
            current = child
        current.append(" deep ")

        world = InMemoryWorld({"doc.html": content_from_element(soup.body)})
        assert count_document("doc.html", world).count == CountResult(words=1, characters=4)
