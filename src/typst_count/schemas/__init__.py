"""Shared schemas for typst-count."""

from typst_count.schemas.content import ContentNode, NodeKind
from typst_count.schemas.counts import (
    CountReport,
    CountResult,
    FileFailure,
    FileReport,
    sum_counts,
)

__all__ = [
    "ContentNode",
    "CountReport",
    "CountResult",
    "FileFailure",
    "FileReport",
    "NodeKind",
    "sum_counts",
]
