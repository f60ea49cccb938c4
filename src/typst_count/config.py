"""Local configuration for typst-count."""

from __future__ import annotations

import os


DEFAULT_MAX_WORKERS = 4
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_ENCODING = "utf-8"

# Upper bound on root files counted concurrently by aggregate_async / --jobs.
TYPST_COUNT_MAX_WORKERS = max(1, int(os.getenv("TYPST_COUNT_MAX_WORKERS", str(DEFAULT_MAX_WORKERS))))
TYPST_COUNT_LOG_LEVEL = os.getenv("TYPST_COUNT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
TYPST_COUNT_ENCODING = os.getenv("TYPST_COUNT_ENCODING", DEFAULT_ENCODING)
