"""Rounding and clamping of resolved values."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Mapping

from .types import ConstraintError, Constraints

# floats at or beyond 2**53 have no fractional part left to round
FLOAT_INTEGER_LIMIT = 2.0**53


def round_to(value: float, decimals: int) -> float:
    """Round to ``decimals`` fractional digits, halves away from zero.

    Rounding works on the shortest decimal representation of the float, so
    ``round_to(1.005, 2) == 1.01``. Non-finite values are returned unchanged.
    """
    if decimals < 0:
        raise ConstraintError(f"decimal must be non-negative, got {decimals}")
    if not math.isfinite(value) or abs(value) >= FLOAT_INTEGER_LIMIT:
        return value
    quantum = Decimal(1).scaleb(-decimals)
    # enough digits for every integer digit a float below the limit can hold
    context = Context(prec=17 + decimals)
    return float(
        Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP, context=context)
    )


def apply_one(
    value: float,
    min_value: float = -math.inf,
    max_value: float = math.inf,
    decimals: int = 2,
) -> float:
    """Round first, then clamp into ``[min_value, max_value]``."""
    rounded = round_to(value, decimals)
    return min(max(rounded, min_value), max_value)


def apply_many(
    values: Mapping[str, float], constraints: Constraints
) -> dict[str, float]:
    """Apply the same constraints independently to every key."""
    return {
        key: apply_one(value, constraints.min, constraints.max, constraints.decimal)
        for key, value in values.items()
    }
