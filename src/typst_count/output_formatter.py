"""Render a CountReport as human-readable text, JSON, or CSV."""

from __future__ import annotations

import csv
import io
import json
from enum import Enum
from typing import Any

from typst_count.schemas import CountReport, CountResult, FileReport

_COLUMN_WIDTH = 12


class OutputFormat(str, Enum):
    HUMAN = "human"
    JSON = "json"
    CSV = "csv"


class CountMode(str, Enum):
    BOTH = "both"
    WORDS = "words"
    CHARACTERS = "characters"


class DisplayMode(str, Enum):
    """How much of the report to show.

    ``auto`` shows a per-file table when there is more than one file and the
    total otherwise; ``total`` shows only the total; ``detailed`` always shows
    the table plus each file's per-source breakdown; ``quiet`` prints bare
    numbers and nothing at all for files that failed.
    """

    AUTO = "auto"
    TOTAL = "total"
    QUIET = "quiet"
    DETAILED = "detailed"


def format_report(
    report: CountReport,
    *,
    fmt: OutputFormat = OutputFormat.HUMAN,
    mode: CountMode = CountMode.BOTH,
    display: DisplayMode = DisplayMode.AUTO,
) -> str:
    """Format ``report`` for output."""
    if fmt is OutputFormat.JSON:
        return _format_json(report, mode, display)
    if fmt is OutputFormat.CSV:
        return _format_csv(report, mode, display)
    return _format_human(report, mode, display)


def _fields(mode: CountMode) -> list[str]:
    if mode is CountMode.WORDS:
        return ["words"]
    if mode is CountMode.CHARACTERS:
        return ["characters"]
    return ["words", "characters"]


def _values(count: CountResult, mode: CountMode) -> list[int]:
    return [getattr(count, name) for name in _fields(mode)]


# ---------------------------------------------------------------------------
# Human
# ---------------------------------------------------------------------------


def _format_human(report: CountReport, mode: CountMode, display: DisplayMode) -> str:
    if display is DisplayMode.QUIET:
        return _format_quiet(report, mode)

    show_table = display is DisplayMode.DETAILED or (
        display is DisplayMode.AUTO and len(report.files) > 1
    )
    if show_table:
        return _format_table(report, mode, detailed=display is DisplayMode.DETAILED)

    lines = [
        f" {name.capitalize() + ':':<11} {value}"
        for name, value in zip(_fields(mode), _values(report.total, mode))
    ]
    lines.extend(_failure_line(file) for file in report.failures)
    return "\n".join(lines) + "\n"


def _format_quiet(report: CountReport, mode: CountMode) -> str:
    if len(report.files) > 1:
        counts = [file.count for file in report.files if file.count is not None]
    elif report.has_failures:
        counts = []
    else:
        counts = [report.total]
    return "".join(" ".join(str(value) for value in _values(count, mode)) + "\n" for count in counts)


def _format_table(report: CountReport, mode: CountMode, *, detailed: bool) -> str:
    names = [file.file_id for file in report.files]
    if detailed:
        names.extend("  " + source for file in report.files for source in file.sources)
    name_width = max([4, *(len(name) for name in names)])
    headers = [name.capitalize() for name in _fields(mode)]
    separator = "─" * (name_width + (_COLUMN_WIDTH + 1) * len(headers))

    def row(name: str, cells: list[Any]) -> str:
        return f"{name:<{name_width}}" + "".join(f" {cell:>{_COLUMN_WIDTH}}" for cell in cells)

    lines = [row("File", headers), separator]
    for file in report.files:
        if not file.ok:
            lines.append(row(file.file_id, [file.error.kind if file.error else "error"]))
            continue
        lines.append(row(file.file_id, _values(file.count, mode)))
        if detailed:
            for source, count in file.sources.items():
                lines.append(row("  " + source, _values(count, mode)))
    lines.append(separator)
    lines.append(row("Total", _values(report.total, mode)))
    lines.extend(_failure_line(file) for file in report.failures)
    return "\n".join(lines) + "\n"


def _failure_line(file: FileReport) -> str:
    error = file.error
    if error is None:
        return f"Error: {file.file_id}: not counted"
    return f"Error: {file.file_id}: {error.kind}: {error.message}"


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _format_json(report: CountReport, mode: CountMode, display: DisplayMode) -> str:
    total = dict(zip(_fields(mode), _values(report.total, mode)))
    if display is DisplayMode.TOTAL or (len(report.files) == 1 and not report.has_failures):
        return json.dumps(total) + "\n"

    entries: list[dict[str, Any]] = []
    for file in report.files:
        entry: dict[str, Any] = {"file": file.file_id}
        if file.ok:
            entry.update(zip(_fields(mode), _values(file.count, mode)))
            if display is DisplayMode.DETAILED:
                entry["sources"] = {
                    source: dict(zip(_fields(mode), _values(count, mode)))
                    for source, count in file.sources.items()
                }
        else:
            entry["error"] = file.error.model_dump() if file.error else None
        entries.append(entry)
    return json.dumps({"files": entries, "total": total}, indent=2) + "\n"


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def _format_csv(report: CountReport, mode: CountMode, display: DisplayMode) -> str:
    """One row per file, or a single total row.

    When any file failed, an ``error`` column is added; failed files get
    empty count cells and their error in that column.
    """
    fields = _fields(mode)
    with_errors = report.has_failures
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["file", *fields, *(["error"] if with_errors else [])])
    if display is DisplayMode.TOTAL and len(report.files) > 1:
        writer.writerow(["total", *_values(report.total, mode), *([""] if with_errors else [])])
        files = report.failures
    else:
        files = report.files
    for file in files:
        if file.count is not None:
            writer.writerow([file.file_id, *_values(file.count, mode), *([""] if with_errors else [])])
        else:
            error = f"{file.error.kind}: {file.error.message}" if file.error else "not counted"
            writer.writerow([file.file_id, *([""] * len(fields)), error])
    return buffer.getvalue()
