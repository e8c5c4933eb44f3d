"""Value processing: turn any supported input into a canonical NumberResult.

The processor ties the other components together:
- compile the template (pattern)
- classify the input (normalizer)
- resolve one value per placeholder key
- apply an optional transform, then rounding and clamping (constraints)
- render the template back into display text
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Callable

from .config import DEFAULT_PATTERN, ESCAPE_PATTERN_LITERALS
from .constraints import apply_many
from .evaluator import evaluate
from .logging_config import get_logger
from .normalizer import classify, is_number
from .pattern import CompiledPattern, compile_pattern, format_pattern, match_pattern
from .types import (
    Classification,
    Constraints,
    ExpressionError,
    InvalidInputTypeError,
    NumberResult,
    PatternMismatchError,
)

logger = get_logger("processor")

Transform = Callable[[float], float]


def _record_value(record: Mapping[str, Any], key: str) -> float:
    value = record.get(key)
    if value is None:
        return 0.0
    if not is_number(value):
        raise InvalidInputTypeError(
            f"Record value for '{key}' is not a number: {value!r}"
        )
    return float(value)


def _resolve(
    raw: Any, compiled: CompiledPattern, classification: Classification
) -> dict[str, float]:
    keys = compiled.keys

    # Text shaped like the template, e.g. "10px" for "{value}px"
    if (
        isinstance(raw, str)
        and not classification.is_scalar_like
        and not classification.is_record_like
    ):
        captured = match_pattern(compiled, raw)
        if captured is not None:
            return {key: evaluate(text) for key, text in captured.items()}

    if classification.is_scalar_like:
        values = classification.values
        # the last value fills every key beyond the evaluated count
        return {
            key: values[index] if index < len(values) else values[-1]
            for index, key in enumerate(keys)
        }

    if classification.is_record_like:
        return {key: _record_value(raw, key) for key in keys}

    if isinstance(raw, str):
        raise PatternMismatchError(
            f"Input {raw!r} does not match pattern {compiled.template!r}"
        )
    raise InvalidInputTypeError(
        f"Unsupported input of type {type(raw).__name__}: {raw!r}"
    )


def process(
    input_value: Any,
    pattern: str = DEFAULT_PATTERN,
    constraints: Constraints | None = None,
    transform: Transform | None = None,
    escape_literals: bool = ESCAPE_PATTERN_LITERALS,
) -> NumberResult:
    """Process a numeric value into its canonical tri-representation.

    Args:
        input_value: Number, text ("1+1", "10,20", "10px"), sequence or mapping
        pattern: Template with ``{key}`` placeholders (default: "{value}")
        constraints: Range and precision (default: unbounded, 2 decimals)
        transform: Optional function applied to every resolved value before
            constraints (used for stepping)
        escape_literals: Whether literal template text is regex-escaped

    Returns:
        NumberResult with array, string and object aligned to the pattern keys

    Raises:
        ExpressionError: If a captured substring does not evaluate, or a
            value is NaN
        PatternMismatchError: If text matches neither the pattern nor a
            plain comma-separated number list
        InvalidInputTypeError: If the input shape is unsupported

    Example:
        >>> process(10, "{value}px").string
        '10px'
        >>> process({"x": 10, "y": 20}, "{x},{y}").array
        [10.0, 20.0]
    """
    constraints = constraints or Constraints()
    compiled = compile_pattern(pattern, escape_literals)
    classification = classify(input_value)

    resolved = _resolve(input_value, compiled, classification)
    if transform is not None:
        resolved = {key: transform(value) for key, value in resolved.items()}

    for key, value in resolved.items():
        if math.isnan(value):
            raise ExpressionError(
                f"Value for '{key}' is not a number", "NOT_A_NUMBER"
            )

    constrained = apply_many(resolved, constraints)
    return NumberResult(
        array=[constrained[key] for key in compiled.keys],
        string=format_pattern(pattern, constrained),
        object=constrained,
    )


def process_catch(
    input_value: Any,
    pattern: str = DEFAULT_PATTERN,
    constraints: Constraints | None = None,
    transform: Transform | None = None,
    escape_literals: bool = ESCAPE_PATTERN_LITERALS,
) -> NumberResult | None:
    """Like process(), but returns None instead of raising."""
    if input_value is None:
        return None
    try:
        return process(input_value, pattern, constraints, transform, escape_literals)
    except Exception as e:
        logger.debug("Could not process %r with %r: %s", input_value, pattern, e)
        return None


def reshape_value(result: NumberResult, reference: Any) -> Any:
    """Convert a result back into the runtime shape of ``reference``.

    str -> display string, number -> first value, sequence -> list of values,
    anything else -> key/value mapping.
    """
    if isinstance(reference, str):
        return result.string
    if is_number(reference):
        return result.array[0] if result.array else None
    if isinstance(reference, (list, tuple)):
        return list(result.array)
    return dict(result.object)
