"""Count result models."""

from __future__ import annotations

from typing import Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field

ErrorKind = Literal["CompilationError", "UnresolvedImportError", "ImportCycleError"]


class CountResult(BaseModel):
    """Word and character counts for a file or a set of files."""

    model_config = ConfigDict(frozen=True)

    words: int = Field(default=0, ge=0)
    characters: int = Field(default=0, ge=0)

    def __add__(self, other: "CountResult") -> "CountResult":
        if not isinstance(other, CountResult):
            return NotImplemented
        return CountResult(
            words=self.words + other.words,
            characters=self.characters + other.characters,
        )

    @classmethod
    def zero(cls) -> "CountResult":
        return cls(words=0, characters=0)


def sum_counts(counts: Iterable[CountResult]) -> CountResult:
    """Pointwise sum of ``counts``; zero for an empty iterable."""
    total = CountResult.zero()
    for count in counts:
        total = total + count
    return total


class FileFailure(BaseModel):
    """Why a root file could not be counted.

    Attributes:
        kind: Error kind name.
        message: Human readable description.
        file_id: File where the failure happened. For import errors this can
            be an imported file rather than the root.
    """

    kind: ErrorKind
    message: str
    file_id: str | None = None


class FileReport(BaseModel):
    """Outcome of counting one root file.

    Attributes:
        file_id: Root file identifier as supplied by the caller.
        count: Counts after import scoping, or None when the file failed.
        sources: Counts of the text contributed by each source file reached
            from this root (root included), keyed by canonical file id.
        error: Failure details, or None on success.
    """

    file_id: str
    count: CountResult | None = None
    sources: dict[str, CountResult] = Field(default_factory=dict)
    error: FileFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.count is not None


class CountReport(BaseModel):
    """Counts for every root file of an invocation plus their total."""

    files: list[FileReport] = Field(default_factory=list)
    total: CountResult = Field(default_factory=CountResult.zero)

    @classmethod
    def from_files(cls, files: Iterable[FileReport]) -> "CountReport":
        """Build a report whose total sums the successful files."""
        files = list(files)
        total = sum_counts(report.count for report in files if report.ok)
        return cls(files=files, total=total)

    @property
    def counts(self) -> dict[str, CountResult]:
        """Mapping from file id to count for the successful files."""
        return {report.file_id: report.count for report in self.files if report.ok}

    @property
    def failures(self) -> list[FileReport]:
        return [report for report in self.files if not report.ok]

    @property
    def has_failures(self) -> bool:
        return any(not report.ok for report in self.files)
