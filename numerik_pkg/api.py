"""Public API for Numerik - returns structured objects without side effects."""

from __future__ import annotations

import math
from typing import Any

from .config import DEFAULT_DECIMAL, DEFAULT_PATTERN
from .evaluator import evaluate as _evaluate
from .logging_config import get_logger
from .pattern import CompiledPattern, compile_pattern
from .processor import process
from .types import Constraints, EvalResult, NumerikError, ProcessResult

logger = get_logger("api")


def evaluate(expression: str) -> EvalResult:
    """Evaluate an arithmetic expression.

    Args:
        expression: Expression string (e.g., "2+3*4-5", "(100/4)*2")

    Returns:
        EvalResult with the value, or ok=False with value NaN

    Example:
        >>> from numerik_pkg.api import evaluate
        >>> evaluate("(100/4)*2").value
        50.0
        >>> evaluate("1 +").ok
        False
    """
    try:
        return EvalResult(ok=True, value=_evaluate(expression))
    except NumerikError as e:
        return EvalResult(ok=False, value=math.nan, error=str(e), error_code=e.code)


def validate_expression(expression: str) -> tuple[bool, str | None]:
    """Validate an expression without keeping its value.

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from numerik_pkg.api import validate_expression
        >>> validate_expression("2 + 2")
        (True, None)
        >>> validate_expression("2 ^ 2")[0]
        False
    """
    result = evaluate(expression)
    return result.ok, result.error


def process_value(
    input_value: Any,
    pattern: str = DEFAULT_PATTERN,
    min_value: float = -math.inf,
    max_value: float = math.inf,
    decimal: int = DEFAULT_DECIMAL,
) -> ProcessResult:
    """Process a numeric value against a template and constraints.

    Example:
        >>> from numerik_pkg.api import process_value
        >>> process_value(10, "{value}px").result.string
        '10px'
        >>> process_value("abc", "{value}px").error_code
        'PATTERN_MISMATCH'
    """
    try:
        constraints = Constraints(min_value, max_value, decimal)
        return ProcessResult(ok=True, result=process(input_value, pattern, constraints))
    except NumerikError as e:
        return ProcessResult(ok=False, error=str(e), error_code=e.code)
    except Exception as e:
        logger.warning(f"Unexpected processing error: {e}", exc_info=True)
        return ProcessResult(
            ok=False, error="Unexpected processing error", error_code="PROCESSING_ERROR"
        )


def compile_template(template: str) -> CompiledPattern:
    """Compile a template using the configured literal escaping."""
    return compile_pattern(template)


def clear_caches() -> None:
    """Drop all compiled patterns."""
    compile_pattern.cache_clear()
