"""Normalize recipes into render-ready display records."""

from recipeshape.normalize.display import (
    DisplayIngredient,
    DisplayInstruction,
    DisplayRecipe,
    DisplayStats,
    DisplayStorage,
    normalize_to_display,
)
from recipeshape.normalize.timing import (
    format_minutes,
    format_storage_duration,
    format_timing,
    sum_instruction_minutes,
)

__all__ = [
    "DisplayIngredient",
    "DisplayInstruction",
    "DisplayRecipe",
    "DisplayStats",
    "DisplayStorage",
    "format_minutes",
    "format_storage_duration",
    "format_timing",
    "normalize_to_display",
    "sum_instruction_minutes",
]
