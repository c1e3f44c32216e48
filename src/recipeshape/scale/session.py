"""Scale a whole ingredient list for a chosen yield."""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from recipeshape.ingest.loader import flatten_sections, load_ingredient
from recipeshape.ingest.schemas import IngredientRecord, PlainText
from recipeshape.logging_config import get_logger
from recipeshape.quantities import round_half_up
from recipeshape.scale.scaling import (
    ScalableIngredient,
    calculate_scale_factor,
    format_ingredient_display,
    parse_servings,
    scale_ingredient,
)

logger = get_logger(__name__)

# "2 cups flour", "1 1/2 tsp salt", "3 eggs"
_INGREDIENT_LINE = re.compile(r"^([\d\s/]+)?\s*(\w+)?\s+(.+)$")

MIN_TARGET_SERVINGS = 1


@dataclass(frozen=True)
class ScaledIngredientItem:
    """One ingredient as shown before and after scaling."""

    id: str
    original: str
    scaled: str
    is_scaled: bool
    can_scale: bool


@dataclass(frozen=True)
class ScaledRecipe:
    """Scaled ingredient list for a target yield."""

    original_servings: int | None
    target_servings: int
    scale_factor: float
    can_scale: bool
    items: list[ScaledIngredientItem] = field(default_factory=list)

    @property
    def is_scaled(self) -> bool:
        """Check if quantities differ from the original."""
        return self.scale_factor != 1


def parse_ingredient_line(line: str) -> ScalableIngredient:
    """Split a plain ingredient line into quantity, unit and name."""
    match = _INGREDIENT_LINE.match(line)
    if not match:
        return ScalableIngredient(name=line)

    quantity = (match.group(1) or "").strip() or None
    return ScalableIngredient(name=match.group(3), quantity=quantity, unit=match.group(2))


def to_scalable(item: Any) -> ScalableIngredient | None:
    """
    Project a raw ingredient onto what the scaler needs.

    Plain strings are split with a "<qty> <unit> <name>" pattern; mappings
    may use either the legacy or the structured quantity shape.
    """
    if isinstance(item, str):
        return parse_ingredient_line(item.strip())

    if isinstance(item, Mapping):
        item = load_ingredient(item)

    if isinstance(item, PlainText):
        return parse_ingredient_line(item.text)

    if not isinstance(item, IngredientRecord):
        return None

    return ScalableIngredient(
        name=item.name,
        quantity=item.amount,
        unit=item.unit,
        mode=item.scaling_mode,
    )


def _scale_item(ingredient: ScalableIngredient, index: int, factor: float) -> ScaledIngredientItem:
    result = scale_ingredient(ingredient, factor)
    return ScaledIngredientItem(
        id=f"ing-{index}",
        original=format_ingredient_display(ingredient),
        scaled=result.display,
        is_scaled=result.scaled,
        can_scale=ingredient.is_eligible,
    )


def scale_ingredients(
    servings: str | None,
    ingredients: Sequence[Any],
    target_servings: int,
    scaling_enabled: bool = True,
) -> ScaledRecipe:
    """
    Scale an ingredient list from its original servings to a target.

    Args:
        servings: Original servings label (e.g. "4 servings").
        ingredients: Raw ingredients; sections are flattened.
        target_servings: Chosen yield, clamped to at least 1.
        scaling_enabled: When False every item keeps its original text.

    Returns:
        ScaledRecipe with per-ingredient original and scaled text.
    """
    original_servings = parse_servings(servings)
    target = max(MIN_TARGET_SERVINGS, round_half_up(target_servings))

    raw_items = flatten_sections(ingredients if isinstance(ingredients, (list, tuple)) else [])
    scalable: list[ScalableIngredient] = []
    for raw in raw_items:
        parsed = to_scalable(raw)
        if parsed is None:
            logger.debug(f"Skipping unscalable ingredient entry of type {type(raw).__name__}")
            continue
        scalable.append(parsed)

    can_scale = (
        scaling_enabled
        and original_servings is not None
        and any(ingredient.is_eligible for ingredient in scalable)
    )

    factor = 1.0
    if can_scale and original_servings is not None:
        factor = calculate_scale_factor(original_servings, target)

    return ScaledRecipe(
        original_servings=original_servings,
        target_servings=target,
        scale_factor=factor,
        can_scale=can_scale,
        items=[_scale_item(ingredient, index, factor) for index, ingredient in enumerate(scalable)],
    )


class ScalingSession:
    """
    Interactive scaling state for one recipe.

    Tracks the user's target yield and recomputes the scaled list on
    demand. Starts at the original servings, or ``default_target`` when the
    label has no number.
    """

    def __init__(
        self,
        servings: str | None,
        ingredients: Sequence[Any],
        scaling_enabled: bool = True,
        default_target: int = 4,
    ):
        self.servings = servings
        self.ingredients = list(ingredients)
        self.scaling_enabled = scaling_enabled
        self.original_servings = parse_servings(servings)
        self._target = max(MIN_TARGET_SERVINGS, self.original_servings or default_target)

    @property
    def target_servings(self) -> int:
        """Get the current target yield."""
        return self._target

    def set_target(self, value: float) -> None:
        """Set the target yield (rounded, at least 1)."""
        self._target = max(MIN_TARGET_SERVINGS, round_half_up(value))

    def increment(self) -> None:
        """Add one serving."""
        self._target += 1

    def decrement(self) -> None:
        """Remove one serving, never going below 1."""
        self._target = max(MIN_TARGET_SERVINGS, self._target - 1)

    def reset(self) -> None:
        """Return to the original servings (at least 1), if known."""
        if self.original_servings is not None:
            self._target = max(MIN_TARGET_SERVINGS, self.original_servings)

    def result(self) -> ScaledRecipe:
        """Scale the ingredients for the current target."""
        return scale_ingredients(
            self.servings,
            self.ingredients,
            self._target,
            scaling_enabled=self.scaling_enabled,
        )
