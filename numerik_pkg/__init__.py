"""Numerik package: numeric value interpretation for editable numeric inputs."""

__all__ = [
    "config",
    "types",
    "logging_config",
    "evaluator",
    "pattern",
    "normalizer",
    "constraints",
    "processor",
    "compare",
    "modifiers",
    "controller",
    "api",
]

# Public API exports

__api_exports__ = [
    "evaluate",
    "validate_expression",
    "process_value",
    "compile_template",
    "clear_caches",
]
