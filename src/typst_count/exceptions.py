"""Custom exceptions for typst-count."""

from __future__ import annotations


class TypstCountError(Exception):
    """Base exception for typst-count operations.

    Attributes:
        file_id: Identifier of the file the error was raised for, if known.
    """

    def __init__(self, message: str, *, file_id: str | None = None) -> None:
        super().__init__(message)
        self.file_id = file_id

    @property
    def kind(self) -> str:
        """Name of the error kind reported to callers."""
        return type(self).__name__


class CompilationError(TypstCountError):
    """A content tree could not be produced for a file."""


class ContentFormatError(CompilationError):
    """A content file was readable but its content tree is malformed."""

    @property
    def kind(self) -> str:
        return "CompilationError"


class UnresolvedImportError(TypstCountError):
    """An import/include target could not be located or compiled."""

    def __init__(
        self, message: str, *, file_id: str | None = None, reference: str | None = None
    ) -> None:
        super().__init__(message, file_id=file_id)
        self.reference = reference


class ImportCycleError(TypstCountError):
    """A file imports itself, directly or transitively."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        super().__init__(
            "Import cycle detected: " + " -> ".join(self.chain),
            file_id=self.chain[0] if self.chain else None,
        )
