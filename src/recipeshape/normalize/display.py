"""Normalize recipes into a render-ready display record."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from recipeshape.ingest.loader import load_recipe
from recipeshape.ingest.schemas import (
    Ingredient,
    IngredientRecord,
    Instruction,
    InstructionRecord,
    MiseEntry,
    Recipe,
    Storage,
)
from recipeshape.normalize.timing import (
    format_minutes,
    format_storage_duration,
    format_timing,
    sum_instruction_minutes,
)
from recipeshape.quantities import number_text, round_half_up

DEFAULT_TITLE = "Untitled Recipe"
DEFAULT_YIELD_UNIT = "servings"
TO_TASTE_MARKER = "(to taste)"


class DisplayModel(BaseModel):
    """Base class for read-only display models (camelCase on the wire)."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DisplayIngredient(DisplayModel):
    """An ingredient line ready to render."""

    id: str
    text: str
    name: str
    quantity: str | None = None
    unit: str | None = None
    notes: str | None = None
    to_taste: bool | None = None
    is_structured: bool


class DisplayInstruction(DisplayModel):
    """An instruction step ready to render."""

    id: str
    text: str
    timing: str | None = None
    is_passive: bool | None = None
    has_timing: bool


class DisplayStorage(DisplayModel):
    """Storage guidance per location."""

    refrigerated: str | None = None
    frozen: str | None = None
    room_temp: str | None = None


class DisplayStats(DisplayModel):
    """How much structure was extracted from the source."""

    structured_ingredients: int
    total_ingredients: int
    timed_steps: int
    total_steps: int
    has_mise: bool
    has_storage: bool


class DisplayRecipe(DisplayModel):
    """Canonical display record for a recipe."""

    title: str
    description: str | None = None
    servings: str | None = None
    mise_en_place: list[str]
    ingredients: list[DisplayIngredient]
    instructions: list[DisplayInstruction]
    storage: DisplayStorage | None = None
    total_time: str | None = None
    stats: DisplayStats

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, leaving out absent fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Field normalizers
# =============================================================================


def normalize_servings(recipe: Recipe) -> str | None:
    """Prefer the structured yield over the legacy servings label."""
    if recipe.yield_ is not None:
        unit = recipe.yield_.unit or DEFAULT_YIELD_UNIT
        return f"{number_text(recipe.yield_.amount)} {unit}"
    return recipe.servings


def normalize_mise_en_place(items: list[MiseEntry]) -> list[str]:
    """Get the display text of each prep task."""
    return [item.text for item in items if item.text]


def _amount_text(amount: float | str) -> str:
    return amount if isinstance(amount, str) else number_text(amount)


def normalize_ingredient(item: Ingredient, index: int) -> DisplayIngredient:
    """Build the display line for one ingredient."""
    ingredient_id = f"ing-{index}"

    if not isinstance(item, IngredientRecord):
        return DisplayIngredient(
            id=ingredient_id,
            text=item.text,
            name=item.text,
            is_structured=False,
        )

    quantity = _amount_text(item.amount) if item.amount is not None else None

    parts: list[str] = []
    if quantity is not None:
        parts.append(quantity)
    if item.unit:
        parts.append(item.unit)
    parts.append(item.name)
    if item.to_taste:
        parts.append(TO_TASTE_MARKER)
    if item.preparation:
        parts.append(f"({item.preparation})")
    if item.notes:
        parts.append(f"— {item.notes}")

    is_structured = (
        item.amount is not None
        or item.unit is not None
        or item.to_taste
        or item.preparation is not None
    )

    return DisplayIngredient(
        id=ingredient_id,
        text=" ".join(parts),
        name=item.name,
        quantity=quantity,
        unit=item.unit,
        notes=item.notes,
        to_taste=item.to_taste or None,
        is_structured=is_structured,
    )


def normalize_ingredients(items: list[Ingredient]) -> list[DisplayIngredient]:
    """Build display lines with positional ids (ing-0, ing-1, ...)."""
    return [normalize_ingredient(item, index) for index, item in enumerate(items)]


def normalize_instruction(item: Instruction, index: int) -> DisplayInstruction:
    """Build the display step for one instruction."""
    step_id = f"step-{index}"

    if not isinstance(item, InstructionRecord):
        return DisplayInstruction(id=step_id, text=item.text, has_timing=False)

    timing = format_timing(item.timing)
    return DisplayInstruction(
        id=step_id,
        text=item.text,
        timing=timing,
        is_passive=item.timing is not None and item.timing.activity == "passive",
        has_timing=timing is not None,
    )


def normalize_instructions(items: list[Instruction]) -> list[DisplayInstruction]:
    """Build display steps with positional ids (step-0, step-1, ...)."""
    return [normalize_instruction(item, index) for index, item in enumerate(items)]


def normalize_storage(storage: Storage | None) -> DisplayStorage | None:
    """Format each storage location that has a duration; None if none do."""
    if storage is None:
        return None

    texts: dict[str, str] = {}
    for location, method in storage.locations():
        if method.iso8601:
            texts[location] = format_storage_duration(method)

    if not texts:
        return None
    return DisplayStorage(**texts)


def normalize_total_time(recipe: Recipe) -> str | None:
    """Prefer the explicit total time, else sum the step timings."""
    if recipe.total_minutes is not None:
        explicit = round_half_up(recipe.total_minutes)
        if explicit > 0:
            return format_minutes(explicit)

    derived = sum_instruction_minutes(recipe.instructions)
    if derived is None:
        return None
    return format_minutes(derived)


# =============================================================================
# Recipe
# =============================================================================


def normalize_to_display(recipe: Recipe | Any) -> DisplayRecipe:
    """
    Normalize a recipe into its display record.

    Args:
        recipe: A canonical Recipe or a raw record in any supported schema.

    Returns:
        DisplayRecipe with display lines and extraction stats.
    """
    recipe = load_recipe(recipe)

    ingredients = normalize_ingredients(recipe.ingredients)
    instructions = normalize_instructions(recipe.instructions)
    mise_en_place = normalize_mise_en_place(recipe.mise_en_place)
    storage = normalize_storage(recipe.storage)

    return DisplayRecipe(
        title=recipe.name or DEFAULT_TITLE,
        description=recipe.description,
        servings=normalize_servings(recipe),
        mise_en_place=mise_en_place,
        ingredients=ingredients,
        instructions=instructions,
        storage=storage,
        total_time=normalize_total_time(recipe),
        stats=DisplayStats(
            structured_ingredients=sum(1 for item in ingredients if item.is_structured),
            total_ingredients=len(ingredients),
            timed_steps=sum(1 for step in instructions if step.has_timing),
            total_steps=len(instructions),
            has_mise=len(mise_en_place) > 0,
            has_storage=storage is not None,
        ),
    )
