"""Template pattern compilation, matching and formatting.

A template such as ``"{x}px, {y}px"`` describes both how to read values out
of text (the matcher) and how to render values back into text. Placeholders
are ``{key}`` or ``{key,modifier}``; ``hidden`` is the only modifier and
suppresses the value when rendering.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from functools import lru_cache
from typing import Any, Mapping

from .config import (
    CACHE_SIZE_PATTERN,
    ESCAPE_PATTERN_LITERALS,
    HIDDEN_MODIFIER,
    PLACEHOLDER_REGEX,
    PLACEHOLDER_WITH_SPACE_REGEX,
)
from .types import PatternMismatchError, ProcessingError


@dataclass(frozen=True)
class CompiledPattern:
    """Keys and matcher derived from a template."""

    template: str
    keys: tuple[str, ...]
    matcher: re.Pattern
    # key -> name of the capture group of the key's last occurrence
    group_names: Mapping[str, str] = field(default_factory=dict)
    first_group: str | None = None


def split_placeholder(body: str) -> tuple[str, str]:
    """Split ``"key,modifier"`` into ``("key", "modifier")``."""
    parts = body.split(",")
    return parts[0], parts[1] if len(parts) > 1 else ""


def format_number(val: Any) -> str:
    """Stringify a number for display.

    Finite values are written in plain positional digits from their shortest
    repr, so the evaluator can read them back. Integral values drop the
    fractional part, ``-0`` renders as ``0`` and infinities render as
    ``Infinity``/``-Infinity``.

    Args:
        val: Numeric value to format

    Returns:
        Display string (e.g., "10", "12.35", "0.00000015", "-Infinity")
    """
    number = float(val)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "0"
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@lru_cache(maxsize=CACHE_SIZE_PATTERN)
def compile_pattern(
    template: str, escape_literals: bool = ESCAPE_PATTERN_LITERALS
) -> CompiledPattern:
    """Compile a template into its ordered keys and a matcher.

    Each placeholder, together with the whitespace around it, becomes a
    named capture group matching one or more characters. Keys are
    de-duplicated and keep first-seen order; a repeated key is read from
    its last occurrence.

    Args:
        template: Template string (e.g., "{value}px", "{x},{y}")
        escape_literals: If True, literal template text matches literally.
            If False, it is embedded into the regex unchanged.

    Returns:
        CompiledPattern for the template

    Raises:
        ProcessingError: If unescaped literal text is not a valid regex
    """
    keys: list[str] = []
    group_names: dict[str, str] = {}
    parts: list[str] = []
    position = 0

    for index, match in enumerate(PLACEHOLDER_WITH_SPACE_REGEX.finditer(template)):
        literal = template[position : match.start()]
        parts.append(re.escape(literal) if escape_literals else literal)
        key, _ = split_placeholder(match.group(1))
        group_name = f"_p{index}"
        if key not in group_names:
            keys.append(key)
        group_names[key] = group_name
        parts.append(f"(?P<{group_name}>.+)")
        position = match.end()

    tail = template[position:]
    parts.append(re.escape(tail) if escape_literals else tail)

    try:
        matcher = re.compile("(?:" + "".join(parts) + ")")
    except re.error as e:
        raise ProcessingError(
            f"Pattern {template!r} does not compile: {e}", "BAD_PATTERN"
        ) from e

    return CompiledPattern(
        template=template,
        keys=tuple(keys),
        matcher=matcher,
        group_names=group_names,
        first_group="_p0" if keys else None,
    )


def match_pattern(compiled: CompiledPattern, text: str) -> dict[str, str] | None:
    """Extract the raw captured text for every key.

    Returns None when ``text`` does not fully match. A key whose own group did
    not take part in the match falls back to the first placeholder group.
    """
    match = compiled.matcher.fullmatch(text)
    if match is None:
        return None

    first = match.group(compiled.first_group) if compiled.first_group else None
    captured: dict[str, str] = {}
    for key in compiled.keys:
        value = match.group(compiled.group_names[key])
        if value is None:
            value = first
        if value is None:
            raise PatternMismatchError(
                f"No capture for placeholder '{key}' in {text!r}"
            )
        captured[key] = value
    return captured


def format_pattern(template: str, values_by_key: Mapping[str, Any]) -> str:
    """Render values into a template.

    Args:
        template: Template string with placeholders
        values_by_key: Mapping of placeholder key to numeric value

    Returns:
        The rendered string; ``hidden`` placeholders render as ""

    Raises:
        ProcessingError: If a visible placeholder has no value
    """

    def substitute(match: re.Match) -> str:
        key, modifier = split_placeholder(match.group(1))
        if modifier == HIDDEN_MODIFIER:
            return ""
        if key not in values_by_key:
            raise ProcessingError(
                f"No value for placeholder '{key}' in {template!r}", "MISSING_KEY"
            )
        return format_number(values_by_key[key])

    return PLACEHOLDER_REGEX.sub(substitute, template)
