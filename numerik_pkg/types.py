"""Type definitions, result dataclasses and errors shared across Numerik."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence, Union

from .config import DEFAULT_DECIMAL

Scalar = Union[str, int, float]
NumericValue = Union[Scalar, Sequence[Union[Scalar, None]], Mapping[str, float]]


@dataclass
class NumberResult:
    """Canonical tri-representation of a processed value.

    ``array`` is aligned to the compiled pattern keys, ``object`` maps each
    key to the same number and ``string`` is the rendered template.
    """

    array: list[float] = field(default_factory=list)
    string: str = ""
    object: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "array": list(self.array),
            "string": self.string,
            "object": dict(self.object),
        }


@dataclass(frozen=True)
class Constraints:
    """Range and precision applied to every resolved value."""

    min: float = -math.inf
    max: float = math.inf
    decimal: int = DEFAULT_DECIMAL

    def __post_init__(self) -> None:
        if self.decimal < 0:
            raise ConstraintError(
                f"decimal must be non-negative, got {self.decimal}"
            )
        if self.min > self.max:
            raise ConstraintError(
                f"min ({self.min}) must not exceed max ({self.max})"
            )


@dataclass
class Classification:
    """Outcome of normalizing raw input."""

    values: list[float] = field(default_factory=list)
    is_scalar_like: bool = False
    is_record_like: bool = False


class InteractionState(Enum):
    IDLE = "idle"
    EDITING = "editing"


@dataclass
class EvalResult:
    """Result of evaluating an arithmetic expression."""

    ok: bool
    value: float = math.nan
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.ok:
            result_dict["value"] = self.value
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r}, error_code={self.error_code!r})"
        return f"EvalResult(ok=True, value={self.value!r})"


@dataclass
class ProcessResult:
    """Result of running the value processor through the public API."""

    ok: bool
    result: NumberResult | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict.update(self.result.to_dict())
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"ProcessResult(ok=False, error={self.error!r}, error_code={self.error_code!r})"
        return f"ProcessResult(ok=True, result={self.result!r})"


class NumerikError(Exception):
    """Base class for every error raised while interpreting numeric input."""

    default_code = "NUMERIK_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ExpressionError(NumerikError):
    """Raised when an arithmetic expression cannot be evaluated."""

    default_code = "EXPRESSION_ERROR"


class PatternMismatchError(NumerikError):
    """Raised when text matches neither the pattern nor a plain number list."""

    default_code = "PATTERN_MISMATCH"


class InvalidInputTypeError(NumerikError):
    """Raised when the input shape fits none of the resolution branches."""

    default_code = "INVALID_INPUT_TYPE"


class ProcessingError(NumerikError):
    """Raised for any other failure while producing a NumberResult."""

    default_code = "PROCESSING_ERROR"


class ConstraintError(NumerikError, ValueError):
    """Raised when constraint parameters are inconsistent."""

    default_code = "INVALID_CONSTRAINTS"
