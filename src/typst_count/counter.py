"""Word and character counting rules.

Words are maximal runs of non-whitespace characters. Scripts that do not
separate words with spaces are not segmented: a run of CJK characters counts
as one word. Characters are Unicode scalar values, so combining marks and
each half of an emoji ZWJ sequence count separately.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from typst_count.schemas import CountResult


@dataclass(frozen=True)
class TextFragment:
    """Rendered text tagged with the file it originated from."""

    text: str
    source: str

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("text fragments must not be empty")


def count_words(text: str) -> int:
    """Count maximal whitespace-free runs in ``text``."""
    return len(text.split())


def count_characters(text: str) -> int:
    """Count Unicode scalar values in ``text``."""
    return len(text)


def count_text(text: str) -> CountResult:
    return CountResult(words=count_words(text), characters=count_characters(text))


def join_fragments(fragments: Iterable[TextFragment], *, source: str | None = None) -> str:
    """Concatenate fragment texts in order, optionally only those from ``source``."""
    return "".join(
        fragment.text
        for fragment in fragments
        if source is None or fragment.source == source
    )


def count_fragments(
    fragments: Iterable[TextFragment], *, source: str | None = None
) -> CountResult:
    """Count the concatenation of ``fragments``.

    Fragments are joined without a separator; each keeps its own whitespace.

    Args:
        fragments: Fragments in document order.
        source: If given, only fragments originating from this file count.
    """
    return count_text(join_fragments(fragments, source=source))


def count_by_source(fragments: Iterable[TextFragment]) -> dict[str, CountResult]:
    """Count the text contributed by each source file, in first-seen order."""
    grouped: dict[str, list[str]] = {}
    for fragment in fragments:
        grouped.setdefault(fragment.source, []).append(fragment.text)
    return {source: count_text("".join(texts)) for source, texts in grouped.items()}
