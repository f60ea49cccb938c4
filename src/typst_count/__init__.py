"""typst-count: count words and characters in the rendered text of documents."""

from typst_count.aggregator import (
    AggregationOptions,
    aggregate,
    aggregate_async,
    count_document,
    extract_fragments,
)
from typst_count.classifier import Leaf, Recurse, Resolve, Skip, classify
from typst_count.counter import TextFragment, count_characters, count_text, count_words
from typst_count.exceptions import (
    CompilationError,
    ContentFormatError,
    ImportCycleError,
    TypstCountError,
    UnresolvedImportError,
)
from typst_count.limits import CountLimits, check_limits
from typst_count.schemas import (
    ContentNode,
    CountReport,
    CountResult,
    FileFailure,
    FileReport,
    NodeKind,
)
from typst_count.world import DocumentWorld, FileSystemWorld, InMemoryWorld, SourceDocument

__all__ = [
    "AggregationOptions",
    "CompilationError",
    "ContentFormatError",
    "ContentNode",
    "CountLimits",
    "CountReport",
    "CountResult",
    "DocumentWorld",
    "FileFailure",
    "FileReport",
    "FileSystemWorld",
    "ImportCycleError",
    "InMemoryWorld",
    "Leaf",
    "NodeKind",
    "Recurse",
    "Resolve",
    "Skip",
    "SourceDocument",
    "TextFragment",
    "TypstCountError",
    "UnresolvedImportError",
    "aggregate",
    "aggregate_async",
    "check_limits",
    "classify",
    "count_characters",
    "count_document",
    "count_text",
    "count_words",
    "extract_fragments",
]
