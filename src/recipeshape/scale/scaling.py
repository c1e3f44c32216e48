"""Scale ingredient quantities to a different yield.

Handles quantity multiplication with unit-aware rounding and the
ingredients that must not scale ("to taste", fixed doses).
"""

import math
import re
from dataclasses import dataclass

from recipeshape.ingest.schemas import ScalingMode
from recipeshape.logging_config import get_logger
from recipeshape.quantities import format_quantity, parse_quantity, round_to_sensible

logger = get_logger(__name__)

DEFAULT_SERVINGS_UNIT = "servings"
TO_TASTE_MARKER = "(to taste)"

_FIRST_INTEGER = re.compile(r"(\d+)")


@dataclass(frozen=True)
class ScalableIngredient:
    """The minimal projection of an ingredient needed for scaling."""

    name: str
    quantity: float | str | None = None
    unit: str | None = None
    mode: ScalingMode | None = None

    @property
    def scaling_mode(self) -> ScalingMode:
        """Get the effective mode (proportional unless annotated)."""
        return self.mode or ScalingMode.PROPORTIONAL

    @property
    def is_eligible(self) -> bool:
        """Check if the ingredient scales with the yield."""
        return self.quantity is not None and self.scaling_mode is ScalingMode.PROPORTIONAL


@dataclass(frozen=True)
class ScaledDisplay:
    """Display text for an ingredient at some scale factor."""

    display: str
    scaled: bool


def format_ingredient_display(ingredient: ScalableIngredient) -> str:
    """Format an ingredient without scaling: "quantity unit name (to taste)"."""
    parts: list[str] = []

    if ingredient.quantity is not None and ingredient.quantity != "":
        qty = parse_quantity(ingredient.quantity)
        if qty is not None:
            parts.append(format_quantity(qty))
        else:
            parts.append(str(ingredient.quantity))

    if ingredient.unit:
        parts.append(ingredient.unit)

    parts.append(ingredient.name)

    if ingredient.mode is ScalingMode.TO_TASTE:
        parts.append(TO_TASTE_MARKER)

    return " ".join(parts)


def scale_ingredient(ingredient: ScalableIngredient, scale_factor: float) -> ScaledDisplay:
    """
    Scale one ingredient.

    To-taste and fixed ingredients, ingredients without a usable quantity
    and quantities that overflow when scaled keep their unscaled text and
    report ``scaled=False``.
    """
    if ingredient.scaling_mode in (ScalingMode.TO_TASTE, ScalingMode.FIXED):
        return ScaledDisplay(display=format_ingredient_display(ingredient), scaled=False)

    original_qty = parse_quantity(ingredient.quantity)
    if original_qty is None:
        return ScaledDisplay(display=format_ingredient_display(ingredient), scaled=False)

    raw_qty = original_qty * scale_factor
    if not math.isfinite(raw_qty):
        logger.debug(f"Scaled quantity for '{ingredient.name}' overflowed, keeping original")
        return ScaledDisplay(display=format_ingredient_display(ingredient), scaled=False)

    unit = ingredient.unit or ""
    scaled_qty = round_to_sensible(raw_qty, unit)

    parts = [format_quantity(scaled_qty)]
    if unit:
        parts.append(unit)
    parts.append(ingredient.name)

    return ScaledDisplay(display=" ".join(parts), scaled=scale_factor != 1)


# =============================================================================
# Servings
# =============================================================================


def calculate_scale_factor(original_servings: float, target_servings: float) -> float:
    """Get target / original; a non-positive original means no scaling."""
    if original_servings <= 0:
        return 1
    return target_servings / original_servings


def parse_servings(servings: str | None) -> int | None:
    """
    Extract the first whole number from a servings label.

    "4 servings" -> 4, "Makes 24" -> 24, "Serves 6-8" -> 6, "varies" -> None.
    """
    if not servings:
        return None

    match = _FIRST_INTEGER.search(str(servings).strip())
    if not match:
        return None

    try:
        return int(match.group(1))
    except ValueError:
        # Beyond the int conversion digit limit
        return None


def format_servings(count: int, unit: str | None = None) -> str:
    """Format a servings count, e.g. "6 servings"."""
    return f"{count} {unit or DEFAULT_SERVINGS_UNIT}"
