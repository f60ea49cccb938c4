"""Document worlds: where compiled content trees come from.

A world maps file identifiers to compiled content trees and resolves the
import/include references found inside them. The aggregator only talks to
the :class:`DocumentWorld` protocol; :class:`FileSystemWorld` reads content
files from disk and :class:`InMemoryWorld` serves trees built in code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Protocol

from typst_count.config import TYPST_COUNT_ENCODING
from typst_count.content_json import parse_content_json
from typst_count.exceptions import CompilationError, UnresolvedImportError
from typst_count.html_parser import parse_html_document
from typst_count.schemas import ContentNode

logger = logging.getLogger(__name__)

Loader = Callable[[str], ContentNode]

LOADERS: dict[str, Loader] = {
    ".json": parse_content_json,
    ".html": parse_html_document,
    ".htm": parse_html_document,
}


@dataclass(frozen=True)
class SourceDocument:
    """A compiled file: its canonical identifier and content tree root."""

    file_id: str
    root: ContentNode


class DocumentWorld(Protocol):
    """Compilation collaborator consumed by the aggregator."""

    def compile(self, file_id: str) -> SourceDocument:
        """Compile a root file.

        Raises:
            CompilationError: If no content tree can be produced.
        """
        ...

    def resolve(self, reference: str, *, importer: str, origin: str | None = None) -> SourceDocument:
        """Resolve an include reference found in ``importer``.

        ``origin`` is the root file whose traversal reached ``importer``;
        worlds with project-relative references resolve them against it.

        Raises:
            UnresolvedImportError: If the target cannot be located or compiled.
        """
        ...


class FileSystemWorld:
    """Load content trees from files on disk.

    Relative references resolve against the importing file's directory;
    references starting with ``/`` resolve against ``root``. When ``root`` is
    not given, they resolve against the directory of the root file the
    traversal started from, so a shared include may resolve differently for
    each root that reaches it. The world holds no per-traversal state.
    """

    def __init__(self, root: Path | None = None, *, encoding: str = TYPST_COUNT_ENCODING) -> None:
        self.root = root.resolve() if root is not None else None
        self.encoding = encoding

    def compile(self, file_id: str) -> SourceDocument:
        path = Path(file_id).expanduser()
        try:
            path = path.resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise CompilationError(f"Failed to find input file: {file_id}", file_id=file_id) from exc
        return self._load(path, file_id=file_id)

    def resolve(self, reference: str, *, importer: str, origin: str | None = None) -> SourceDocument:
        importer_path = Path(importer)
        if reference.startswith("/"):
            base = self.root or Path(origin or importer).parent
            candidate = base / reference.lstrip("/")
        else:
            candidate = importer_path.parent / reference

        try:
            path = candidate.resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise UnresolvedImportError(
                f"Cannot find '{reference}' included from {importer}",
                file_id=importer,
                reference=reference,
            ) from exc

        try:
            document = self._load(path, file_id=str(path))
        except CompilationError as exc:
            raise UnresolvedImportError(
                f"Cannot compile '{reference}' included from {importer}: {exc}",
                file_id=importer,
                reference=reference,
            ) from exc
        logger.debug("Resolved %s from %s to %s", reference, importer, document.file_id)
        return document

    def _load(self, path: Path, *, file_id: str) -> SourceDocument:
        loader = LOADERS.get(path.suffix.lower())
        if loader is None:
            raise CompilationError(
                f"Unsupported content file type '{path.suffix}' for {path}", file_id=file_id
            )
        try:
            source = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise CompilationError(f"Failed to read {path}: {exc}", file_id=file_id) from exc
        try:
            root = loader(source)
        except CompilationError as exc:
            exc.file_id = exc.file_id or str(path)
            raise
        return SourceDocument(file_id=str(path), root=root)


class InMemoryWorld:
    """Serve content trees held in a mapping.

    References are looked up verbatim as file identifiers.
    """

    def __init__(self, documents: Mapping[str, ContentNode]) -> None:
        self.documents = dict(documents)

    def compile(self, file_id: str) -> SourceDocument:
        try:
            return SourceDocument(file_id=file_id, root=self.documents[file_id])
        except KeyError:
            raise CompilationError(f"No document named {file_id}", file_id=file_id) from None

    def resolve(self, reference: str, *, importer: str, origin: str | None = None) -> SourceDocument:
        if reference not in self.documents:
            raise UnresolvedImportError(
                f"Cannot find '{reference}' included from {importer}",
                file_id=importer,
                reference=reference,
            )
        return SourceDocument(file_id=reference, root=self.documents[reference])
