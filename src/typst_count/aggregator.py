"""Walk content trees and aggregate word/character counts."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, Union

from typst_count.classifier import Leaf, Recurse, Resolve, Skip, classify
from typst_count.config import TYPST_COUNT_MAX_WORKERS
from typst_count.counter import TextFragment, count_by_source, count_fragments
from typst_count.exceptions import ImportCycleError, TypstCountError
from typst_count.schemas import ContentNode, CountReport, FileFailure, FileReport
from typst_count.world import DocumentWorld, SourceDocument

logger = logging.getLogger(__name__)


@dataclass
class AggregationOptions:
    """Options for counting.

    Attributes:
        exclude_imports: If True, only text originating from each root file
            counts towards that file's result.
        max_workers: Maximum number of root files counted concurrently by
            :func:`aggregate_async`.
    """

    exclude_imports: bool = False
    max_workers: int = field(default=TYPST_COUNT_MAX_WORKERS)


@dataclass(frozen=True)
class _Visit:
    node: ContentNode
    source: str


@dataclass(frozen=True)
class _Leave:
    source: str


_Frame = Union[_Visit, _Leave]


def extract_fragments(document: SourceDocument, world: DocumentWorld) -> list[TextFragment]:
    """Collect the rendered text fragments reachable from ``document``.

    The walk is depth-first and pre-order. Include references are replaced by
    the referenced file's root, walked with that file as provenance; a
    ``_Leave`` frame closes the file once its subtree is done, which restores
    the importer's provenance for the following siblings.

    Raises:
        UnresolvedImportError: If an include cannot be resolved.
        ImportCycleError: If an include reaches a file that is still open.
    """
    fragments: list[TextFragment] = []
    open_files: list[str] = [document.file_id]
    stack: list[_Frame] = [_Leave(document.file_id), _Visit(document.root, document.file_id)]

    while stack:
        frame = stack.pop()
        if isinstance(frame, _Leave):
            open_files.remove(frame.source)
            continue

        verdict = classify(frame.node)
        if isinstance(verdict, Leaf):
            if verdict.text:
                fragments.append(TextFragment(verdict.text, frame.source))
        elif isinstance(verdict, Recurse):
            stack.extend(_Visit(child, frame.source) for child in reversed(frame.node.children))
        elif isinstance(verdict, Resolve):
            included = world.resolve(verdict.target, importer=frame.source, origin=document.file_id)
            if included.file_id in open_files:
                start = open_files.index(included.file_id)
                raise ImportCycleError(open_files[start:] + [included.file_id])
            open_files.append(included.file_id)
            stack.append(_Leave(included.file_id))
            stack.append(_Visit(included.root, included.file_id))
        elif not isinstance(verdict, Skip):  # pragma: no cover - exhaustive
            raise TypeError(f"Unexpected verdict {verdict!r}")

    return fragments


def count_document(
    file_id: str, world: DocumentWorld, options: AggregationOptions | None = None
) -> FileReport:
    """Compile and count one root file.

    Failures are reported in the returned ``FileReport`` instead of raised,
    so one broken root never aborts its siblings. Reporting them is left to
    the caller.
    """
    opts = options or AggregationOptions()
    try:
        document = world.compile(file_id)
        fragments = extract_fragments(document, world)
    except TypstCountError as exc:
        return FileReport(
            file_id=file_id,
            error=FileFailure(kind=exc.kind, message=str(exc), file_id=exc.file_id or file_id),
        )

    scope = document.file_id if opts.exclude_imports else None
    count = count_fragments(fragments, source=scope)
    logger.debug("Counted %s: %d words, %d characters", file_id, count.words, count.characters)
    return FileReport(file_id=file_id, count=count, sources=count_by_source(fragments))


def aggregate(
    file_ids: Iterable[str], world: DocumentWorld, options: AggregationOptions | None = None
) -> CountReport:
    """Count every root file in order and total the successful ones.

    Files importing the same shared file each count it in full.
    """
    opts = options or AggregationOptions()
    return CountReport.from_files(count_document(file_id, world, opts) for file_id in file_ids)


async def aggregate_async(
    file_ids: Iterable[str], world: DocumentWorld, options: AggregationOptions | None = None
) -> CountReport:
    """Like :func:`aggregate`, counting root files concurrently in worker threads.

    Per-file results keep input order regardless of completion order.
    """
    opts = options or AggregationOptions()
    semaphore = asyncio.Semaphore(max(1, opts.max_workers))

    async def _count(file_id: str) -> FileReport:
        async with semaphore:
            return await asyncio.to_thread(count_document, file_id, world, opts)

    reports = await asyncio.gather(*(_count(file_id) for file_id in file_ids))
    return CountReport.from_files(reports)
