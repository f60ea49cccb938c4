"""Command-line interface for typst-count."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Sequence

from typst_count.aggregator import AggregationOptions, aggregate, aggregate_async
from typst_count.limits import CountLimits, check_limits
from typst_count.output_formatter import CountMode, DisplayMode, OutputFormat, format_report
from typst_count.utils.logging_config import get_logger
from typst_count.world import FileSystemWorld

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_LIMIT_VIOLATION = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typst-count",
        description=(
            "Count words and characters in compiled documents. Only rendered text "
            "is counted; code, math, comments and markup are excluded."
        ),
    )
    parser.add_argument("input", nargs="+", metavar="FILE", help="Content files to count (.json, .html)")
    parser.add_argument(
        "-f", "--format", type=OutputFormat, choices=list(OutputFormat), default=OutputFormat.HUMAN,
        help="Output format",
    )
    parser.add_argument(
        "-m", "--mode", type=CountMode, choices=list(CountMode), default=CountMode.BOTH,
        help="What to count",
    )
    parser.add_argument(
        "-d", "--display", type=DisplayMode, choices=list(DisplayMode), default=DisplayMode.AUTO,
        help="How much detail to show",
    )
    parser.add_argument("-o", "--output", type=Path, metavar="FILE", help="Write output to FILE instead of stdout")
    parser.add_argument(
        "-e", "--exclude-imports", action="store_true",
        help="Only count text from each input file, not from files it includes",
    )
    parser.add_argument("--root", type=Path, help="Project root for absolute include paths")
    parser.add_argument(
        "-j", "--jobs", type=int, default=1, metavar="N",
        help="Count up to N files concurrently",
    )
    parser.add_argument("--max-words", type=int, metavar="N")
    parser.add_argument("--min-words", type=int, metavar="N")
    parser.add_argument("--max-characters", type=int, metavar="N")
    parser.add_argument("--min-characters", type=int, metavar="N")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code.

    Exit codes: 0 on success, 1 when a count limit is violated, 2 when any
    input file could not be counted.
    """
    args = build_parser().parse_args(argv)

    world = FileSystemWorld(args.root)
    options = AggregationOptions(exclude_imports=args.exclude_imports, max_workers=max(1, args.jobs))
    if options.max_workers > 1:
        report = asyncio.run(aggregate_async(args.input, world, options))
    else:
        report = aggregate(args.input, world, options)

    output = format_report(report, fmt=args.format, mode=args.mode, display=args.display)
    if args.output:
        try:
            args.output.write_text(output, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write output file %s: %s", args.output, exc)
            return EXIT_ERROR
    else:
        sys.stdout.write(output)
        sys.stdout.flush()

    if report.has_failures:
        for failed in report.failures:
            if failed.error is not None:
                logger.error("%s: %s: %s", failed.file_id, failed.error.kind, failed.error.message)
        return EXIT_ERROR

    limits = CountLimits(
        max_words=args.max_words,
        min_words=args.min_words,
        max_characters=args.max_characters,
        min_characters=args.min_characters,
    )
    violations = check_limits(report.total, limits)
    for violation in violations:
        logger.error("%s", violation)
    return EXIT_LIMIT_VIOLATION if violations else EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
