"""Arithmetic expression evaluation.

This module handles:
- Parenthesis balance checks
- Operator-precedence evaluation of decimal arithmetic (``+ - * /`` and parentheses)
- Signed-infinity semantics for division by zero (and reading ``Infinity`` back)

Anything beyond the four basic operators is rejected with ExpressionError.
"""

from __future__ import annotations

import math
import operator
from typing import Callable

from .config import MAX_INPUT_LENGTH, STRICT_PARENTHESES
from .types import ExpressionError

NUMBER_CHARS = frozenset("0123456789.")
INFINITY_WORD = "Infinity"


def _divide(a: float, b: float) -> float:
    """Divide like IEEE floats do: x/0 is a signed infinity, 0/0 is NaN."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


OPERATIONS: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _divide,
}

# "(" is a barrier: nothing with a lower precedence exists, so it is never popped by an operator
PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "(": 0}


def is_balanced(input_str: str) -> tuple[bool, int | None]:
    """Check if parentheses are balanced. Returns (is_balanced, error_position)."""
    stack: list[int] = []
    for i, char in enumerate(input_str):
        if char == "(":
            stack.append(i)
        elif char == ")":
            if not stack:
                return False, i
            stack.pop()
    if stack:
        return False, stack[0]  # Return position of first unmatched
    return True, None


def _to_number(token: str, expression: str) -> float:
    try:
        return float(token)
    except ValueError:
        raise ExpressionError(
            f"Invalid number '{token}' in expression: {expression}", "BAD_NUMBER"
        ) from None


def _apply_top(ops: list[str], nums: list[float], expression: str) -> None:
    op = ops.pop()
    if op == "(":
        raise ExpressionError(
            f"Unbalanced parentheses in expression: {expression}", "UNBALANCED"
        )
    if len(nums) < 2:
        raise ExpressionError(
            f"Operator '{op}' is missing an operand in expression: {expression}",
            "DANGLING_OPERATOR",
        )
    b = nums.pop()
    a = nums.pop()
    nums.append(OPERATIONS[op](a, b))


def evaluate(expression: str, strict_parentheses: bool = STRICT_PARENTHESES) -> float:
    """Evaluate an arithmetic expression to a float.

    Uses a single left-to-right scan with an operand stack and an operator
    stack. ``*`` and ``/`` bind tighter than ``+`` and ``-``; operators of
    equal precedence associate to the left. A ``-`` is part of the number
    only when it is the first non-whitespace character. ``Infinity`` reads
    back the display text of an unbounded value.

    Args:
        expression: Expression string (e.g., "(100/4)*2", "-3 + 4")
        strict_parentheses: If True, reject unbalanced parentheses up front.
            If False, a stray ")" is ignored.

    Returns:
        The numeric result. Division by zero gives a signed infinity.

    Raises:
        ExpressionError: If the input is empty, too long, contains an
            unsupported character, a malformed number, an operator without
            operands, or unbalanced parentheses.
    """
    if len(expression) > MAX_INPUT_LENGTH:
        raise ExpressionError(
            f"Input too long (max {MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )
    if strict_parentheses:
        balanced, position = is_balanced(expression)
        if not balanced:
            raise ExpressionError(
                f"Unbalanced parentheses at position {position}: {expression}",
                "UNBALANCED",
            )

    ops: list[str] = []
    nums: list[float] = []
    token = ""
    started = False
    index = 0

    while index < len(expression):
        char = expression[index]
        index += 1
        if char.isspace():
            continue
        if expression.startswith(INFINITY_WORD, index - 1):
            # display text of an unbounded value, optionally after the leading "-"
            if token not in ("", "-"):
                raise ExpressionError(
                    f"Invalid number '{token}{INFINITY_WORD}' in expression: "
                    f"{expression}",
                    "BAD_NUMBER",
                )
            nums.append(-math.inf if token == "-" else math.inf)
            token = ""
            started = True
            index += len(INFINITY_WORD) - 1
            continue
        if char in NUMBER_CHARS or (char == "-" and not started):
            token += char
            started = True
            continue
        started = True

        if token:
            nums.append(_to_number(token, expression))
            token = ""

        if char == "(":
            ops.append(char)
        elif char == ")":
            while ops and ops[-1] != "(":
                _apply_top(ops, nums, expression)
            if ops:
                ops.pop()
        elif char in OPERATIONS:
            while ops and PRECEDENCE[ops[-1]] >= PRECEDENCE[char]:
                _apply_top(ops, nums, expression)
            ops.append(char)
        else:
            raise ExpressionError(
                f"Unsupported character '{char}' in expression: {expression}",
                "BAD_CHARACTER",
            )

    if token:
        nums.append(_to_number(token, expression))

    while ops:
        _apply_top(ops, nums, expression)

    if not nums:
        raise ExpressionError(f"Invalid expression: {expression!r}", "EMPTY")
    return nums.pop()
