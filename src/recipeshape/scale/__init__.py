"""Ingredient scaling to a different yield."""

from recipeshape.scale.scaling import (
    ScalableIngredient,
    ScaledDisplay,
    calculate_scale_factor,
    format_ingredient_display,
    format_servings,
    parse_servings,
    scale_ingredient,
)
from recipeshape.scale.session import (
    ScaledIngredientItem,
    ScaledRecipe,
    ScalingSession,
    scale_ingredients,
    to_scalable,
)

__all__ = [
    "ScalableIngredient",
    "ScaledDisplay",
    "ScaledIngredientItem",
    "ScaledRecipe",
    "ScalingSession",
    "calculate_scale_factor",
    "format_ingredient_display",
    "format_servings",
    "parse_servings",
    "scale_ingredient",
    "scale_ingredients",
    "to_scalable",
]
