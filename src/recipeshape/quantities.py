"""Quantity parsing, formatting and unit-aware rounding."""

import math
import re
from typing import Any

# =============================================================================
# Rounding Tables
# =============================================================================

# Spoon and cup measures (rounded to the nearest quarter)
SPOON_CUP_UNITS: frozenset[str] = frozenset(
    {
        "tsp",
        "teaspoon",
        "teaspoons",
        "tbsp",
        "tbs",
        "tablespoon",
        "tablespoons",
        "cup",
        "cups",
        "c",
    }
)

# Ounces (rounded to the nearest half)
OUNCE_UNITS: frozenset[str] = frozenset({"oz", "ounce", "ounces"})

# Metric weight and volume (rounded to the nearest 5)
METRIC_UNITS: frozenset[str] = frozenset(
    {
        "g",
        "gram",
        "grams",
        "ml",
        "milliliter",
        "milliliters",
        "millilitre",
        "millilitres",
    }
)

# Count-based units (rounded to whole numbers)
COUNT_UNITS: frozenset[str] = frozenset(
    {
        "piece",
        "pieces",
        "clove",
        "cloves",
        "slice",
        "slices",
        "egg",
        "eggs",
    }
)

# Granularity per unit class
ROUNDING_STEPS: tuple[tuple[frozenset[str], float], ...] = (
    (SPOON_CUP_UNITS, 0.25),
    (OUNCE_UNITS, 0.5),
    (METRIC_UNITS, 5.0),
    (COUNT_UNITS, 1.0),
)

# Fallback precision for unknown units
DEFAULT_STEP = 0.01

# Standard cooking fractions, checked in order
FRACTION_GLYPHS: tuple[tuple[float, str], ...] = (
    (1 / 8, "⅛"),
    (1 / 4, "¼"),
    (1 / 3, "⅓"),
    (3 / 8, "⅜"),
    (1 / 2, "½"),
    (5 / 8, "⅝"),
    (2 / 3, "⅔"),
    (3 / 4, "¾"),
    (7 / 8, "⅞"),
)

FRACTION_TOLERANCE = 0.02

_SIMPLE_FRACTION = re.compile(r"^(\d+)/(\d+)$")
_MIXED_FRACTION = re.compile(r"^(\d+)\s+(\d+)/(\d+)$")
# Leading decimal prefix, the way a lenient float parser reads "2.5 cups"
_DECIMAL_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# =============================================================================
# Helpers
# =============================================================================


def round_half_up(value: float) -> int:
    """Round a finite value to the nearest integer, halves up."""
    return math.floor(value + 0.5)


def is_number(value: Any) -> bool:
    """Check for a finite int/float that is not a bool."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def number_text(value: float) -> str:
    """Render a number without a trailing '.0' for integral values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# =============================================================================
# Parsing
# =============================================================================


def parse_quantity(quantity: Any) -> float | None:
    """
    Parse a quantity into a number.

    Handles formats like:
    - 2, 2.5 (numbers pass through)
    - "2", "2.5"
    - "1/2" (None when the denominator is zero)
    - "1 1/2" (one and a half)

    Returns None for missing, empty or unparseable quantities.
    """
    if quantity is None or quantity == "":
        return None

    if isinstance(quantity, (bool, int, float)):
        return quantity if is_number(quantity) else None

    if not isinstance(quantity, str):
        return None

    text = quantity.strip()

    try:
        fraction_match = _SIMPLE_FRACTION.match(text)
        if fraction_match:
            num = int(fraction_match.group(1))
            denom = int(fraction_match.group(2))
            return num / denom if denom != 0 else None

        mixed_match = _MIXED_FRACTION.match(text)
        if mixed_match:
            whole = int(mixed_match.group(1))
            num = int(mixed_match.group(2))
            denom = int(mixed_match.group(3))
            return whole + num / denom if denom != 0 else None
    except (ValueError, OverflowError):
        # Digit runs too long to convert
        return None

    decimal_match = _DECIMAL_PREFIX.match(text)
    if not decimal_match:
        return None

    value = float(decimal_match.group(0))
    return value if math.isfinite(value) else None


# =============================================================================
# Formatting and Rounding
# =============================================================================


def format_quantity(value: float) -> str:
    """
    Format a number as a cooking-friendly string.

    Fractional parts close to a standard fraction use its glyph ("1½"),
    small values keep one decimal ("2.3") and everything else is rounded
    to a whole number.
    """
    whole = math.floor(value)
    frac = value - whole

    for frac_value, glyph in FRACTION_GLYPHS:
        if abs(frac - frac_value) < FRACTION_TOLERANCE:
            if whole == 0:
                return glyph
            return f"{whole}{glyph}"

    if value < 10 and frac != 0:
        text = f"{value:.1f}"
        return text[:-2] if text.endswith(".0") else text

    return str(round_half_up(value))


def rounding_step(unit: str | None) -> float:
    """Get the measuring granularity for a unit."""
    unit_lower = (unit or "").lower().strip()

    for units, step in ROUNDING_STEPS:
        if unit_lower in units:
            return step

    return DEFAULT_STEP


def round_to_sensible(value: float, unit: str | None) -> float:
    """
    Round a scaled quantity to what a cook would actually measure.

    Spoons and cups snap to quarters, ounces to halves, grams and
    milliliters to multiples of 5, count units to whole numbers. Unknown
    units keep two decimals. Values too large to count in steps are
    returned unchanged.
    """
    step = rounding_step(unit)
    steps = value * 100 if step == DEFAULT_STEP else value / step

    if not math.isfinite(steps):
        return value

    if step == DEFAULT_STEP:
        return round_half_up(steps) / 100

    return round_half_up(steps) * step
