"""Word and character limit checks."""

from __future__ import annotations

from dataclasses import dataclass

from typst_count.schemas import CountResult


@dataclass
class CountLimits:
    """Inclusive bounds on the total count. ``None`` disables a bound."""

    max_words: int | None = None
    min_words: int | None = None
    max_characters: int | None = None
    min_characters: int | None = None


def check_limits(total: CountResult, limits: CountLimits) -> list[str]:
    """Return one message per violated limit; empty when all limits hold."""
    errors: list[str] = []

    if limits.max_words is not None and total.words > limits.max_words:
        errors.append(f"Word count exceeds maximum ({total.words} > {limits.max_words})")
    if limits.min_words is not None and total.words < limits.min_words:
        errors.append(f"Word count below minimum ({total.words} < {limits.min_words})")
    if limits.max_characters is not None and total.characters > limits.max_characters:
        errors.append(
            f"Character count exceeds maximum ({total.characters} > {limits.max_characters})"
        )
    if limits.min_characters is not None and total.characters < limits.min_characters:
        errors.append(
            f"Character count below minimum ({total.characters} < {limits.min_characters})"
        )

    return errors
