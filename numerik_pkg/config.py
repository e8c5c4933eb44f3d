"""Centralized configuration for Numerik.

This module defines:
- Input validation limits
- Default constraints and stepping amounts
- Pattern compilation options and cache sizes
- Regex patterns for placeholders

Configuration can be overridden via environment variables (prefixed with NUMERIK_).
"""

import os
import re

try:
    import importlib.metadata

    VERSION = importlib.metadata.version("numerik")
except Exception:
    # Fallback if package not installed
    VERSION = "1.0.0"

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("NUMERIK_MAX_INPUT_LENGTH", "10000"))  # characters

# Constraint defaults
DEFAULT_DECIMAL = int(os.getenv("NUMERIK_DEFAULT_DECIMAL", "2"))
DEFAULT_PATTERN = os.getenv("NUMERIK_DEFAULT_PATTERN", "{value}")

# Stepping (keyboard arrows and pointer drags)
DEFAULT_STEP = float(os.getenv("NUMERIK_DEFAULT_STEP", "1"))
DEFAULT_SHIFT_STEP = float(os.getenv("NUMERIK_DEFAULT_SHIFT_STEP", "10"))
DRAG_DISTANCE_THRESHOLD = float(
    os.getenv("NUMERIK_DRAG_DISTANCE_THRESHOLD", "1")
)  # pixels of pointer travel per step unit

# Parsing behavior
ESCAPE_PATTERN_LITERALS = (
    os.getenv("NUMERIK_ESCAPE_PATTERN_LITERALS", "true").lower() == "true"
)
STRICT_PARENTHESES = os.getenv("NUMERIK_STRICT_PARENTHESES", "true").lower() == "true"

# Cache configuration
CACHE_SIZE_PATTERN = int(os.getenv("NUMERIK_CACHE_SIZE_PATTERN", "256"))

HIDDEN_MODIFIER = "hidden"

# {key} or {key,modifier}; the whitespace variant is used when building matchers
PLACEHOLDER_REGEX = re.compile(r"\{([\w|,]+)\}")
PLACEHOLDER_WITH_SPACE_REGEX = re.compile(r"\s*\{([\w|,]+)\}\s*")

# Logging
LOG_LEVEL = os.getenv("NUMERIK_LOG_LEVEL", "WARNING")
