"""Entry point for ``python -m typst_count``."""

from typst_count.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
