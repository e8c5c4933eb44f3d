"""Change detection between processed results."""

from __future__ import annotations

from .types import NumberResult


def compare_results(a: NumberResult | None, b: NumberResult | None) -> bool:
    """Return True when two results represent the same value.

    Two missing results are equal and a missing result never equals a
    present one. Otherwise either representation confirming sameness is
    enough: equal ``array`` sequences, or equal ``object`` mappings.
    """
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return list(a.array) == list(b.array) or dict(a.object) == dict(b.object)


def is_expression_input(raw: str, processed: NumberResult) -> bool:
    """True when the typed text is not already the canonical display string."""
    return raw != processed.string
