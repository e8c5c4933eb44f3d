"""Classification of raw input into candidate numeric values."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .evaluator import evaluate
from .logging_config import get_logger
from .pattern import format_number
from .types import Classification, ExpressionError

logger = get_logger("normalizer")


def is_number(value: Any) -> bool:
    """True for int and float values, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _evaluate_item(item: Any) -> float:
    if is_number(item):
        return float(item)
    return evaluate(str(item))


def classify(raw: Any) -> Classification:
    """Classify raw input and evaluate the scalar candidates it contains.

    - str: each comma-separated segment is evaluated as an expression
    - int/float: the number itself
    - list/tuple: each element is evaluated from its string form
    - Mapping: marked record-like; values are looked up later, not evaluated

    A failing segment empties the whole batch instead of raising, so text
    like "10px" simply ends up neither scalar-like nor record-like.
    """
    if isinstance(raw, str):
        items: list[Any] = raw.split(",")
    elif is_number(raw):
        items = [raw]
    elif isinstance(raw, (list, tuple)):
        items = list(raw)
    elif isinstance(raw, Mapping):
        return Classification(is_record_like=True)
    else:
        return Classification()

    try:
        values = [_evaluate_item(item) for item in items]
    except ExpressionError as e:
        logger.debug(
            "Input %r is not a plain number list: %s",
            raw if not is_number(raw) else format_number(raw),
            e,
        )
        values = []

    return Classification(values=values, is_scalar_like=len(values) > 0)
