"""Load raw recipe records into the canonical model.

Every function here accepts ``Any`` and degrades instead of raising: bad
fields become ``None``, bad list entries are dropped, and a record that is
not a mapping at all loads as an empty recipe.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from recipeshape.ingest.schemas import (
    Duration,
    HoursMinutes,
    Ingredient,
    IngredientRecord,
    Instruction,
    InstructionRecord,
    MinutesDuration,
    MinutesRange,
    MiseEntry,
    MiseItem,
    PlainText,
    Recipe,
    ScalingMode,
    Storage,
    StorageMethod,
    Timing,
    Yield,
)
from recipeshape.logging_config import get_logger
from recipeshape.quantities import is_number, number_text

logger = get_logger(__name__)

SCALING_MODE_ALIASES: dict[str, ScalingMode] = {
    "proportional": ScalingMode.PROPORTIONAL,
    "linear": ScalingMode.PROPORTIONAL,
    "totaste": ScalingMode.TO_TASTE,
    "to_taste": ScalingMode.TO_TASTE,
    "fixed": ScalingMode.FIXED,
}

STORAGE_KEYS: dict[str, str] = {
    "refrigerated": "refrigerated",
    "frozen": "frozen",
    "roomTemp": "room_temp",
    "room_temp": "room_temp",
}


# =============================================================================
# Scalar helpers
# =============================================================================


def _text(value: Any) -> str | None:
    """Return a stripped non-empty string, or None."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _number(value: Any) -> float | None:
    """Return a finite number, or None."""
    return value if is_number(value) else None


def _items(value: Any) -> list[Any]:
    """Return list entries, or an empty list for non-list input."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def parse_scaling_mode(value: Any) -> ScalingMode | None:
    """Parse a scaling annotation (``{"mode": ...}`` or a bare mode string)."""
    if isinstance(value, Mapping):
        value = value.get("mode")
    mode = _text(value)
    if mode is None:
        return None
    return SCALING_MODE_ALIASES.get(mode.lower())


def flatten_sections(items: Iterable[Any]) -> list[Any]:
    """Inline the items of ``{"section": {"name", "items"}}`` groups."""
    flat: list[Any] = []
    for item in items:
        if isinstance(item, Mapping) and isinstance(item.get("section"), Mapping):
            flat.extend(_items(item["section"].get("items")))
        else:
            flat.append(item)
    return flat


# =============================================================================
# Ingredients
# =============================================================================


def load_ingredient(raw: Any) -> Ingredient | None:
    """
    Load one ingredient.

    Strings become PlainText, blank ones included so positions stay
    stable. Mappings need a name; the structured
    ``quantity: {amount, unit}`` shape is preferred over the legacy bare
    ``quantity`` plus standalone ``unit``.
    """
    if isinstance(raw, str):
        return PlainText(text=raw.strip())

    if not isinstance(raw, Mapping):
        return None

    name = _text(raw.get("name"))
    if name is None:
        text = _text(raw.get("text"))
        if text:
            return PlainText(text=text)
        logger.debug("Dropping ingredient without a name")
        return None

    quantity = raw.get("quantity")
    legacy_unit = _text(raw.get("unit"))
    amount: float | str | None = None
    unit = legacy_unit

    if isinstance(quantity, Mapping):
        structured_amount = quantity.get("amount")
        if is_number(structured_amount):
            amount = structured_amount
        else:
            amount = _text(structured_amount)
        unit = _text(quantity.get("unit")) or legacy_unit
    elif is_number(quantity):
        amount = quantity
    else:
        amount = _text(quantity)

    scaling_mode = parse_scaling_mode(raw.get("scaling"))
    to_taste = raw.get("toTaste") is True or scaling_mode is ScalingMode.TO_TASTE
    if to_taste and scaling_mode is None:
        scaling_mode = ScalingMode.TO_TASTE

    return IngredientRecord(
        name=name,
        amount=amount,
        unit=unit,
        preparation=_text(raw.get("preparation")) or _text(raw.get("prep")),
        notes=_text(raw.get("notes")),
        to_taste=to_taste,
        scaling_mode=scaling_mode,
    )


def load_ingredients(raw: Any) -> list[Ingredient]:
    """Load an ingredient list, flattening sections."""
    loaded = (load_ingredient(item) for item in flatten_sections(_items(raw)))
    return [item for item in loaded if item is not None]


# =============================================================================
# Instructions
# =============================================================================


def load_duration(raw: Any) -> Duration | None:
    """
    Load a duration.

    Accepted shapes:
    - 45 (minutes)
    - {"minutes": 45}
    - {"minMinutes": 5, "maxMinutes": 7}
    - {"hours": 1, "minutes": 30} (legacy)
    """
    if is_number(raw):
        return MinutesDuration(minutes=raw)

    if not isinstance(raw, Mapping):
        return None

    min_minutes = _number(raw.get("minMinutes"))
    max_minutes = _number(raw.get("maxMinutes"))
    if min_minutes is not None and max_minutes is not None:
        return MinutesRange(min_minutes=min_minutes, max_minutes=max_minutes)

    minutes = _number(raw.get("minutes"))
    if "hours" in raw:
        hours = _number(raw.get("hours"))
        if hours is None and minutes is None:
            return None
        return HoursMinutes(hours=hours or 0, minutes=minutes or 0)

    # A lone range bound counts as a single value
    for single in (minutes, min_minutes, max_minutes):
        if single is not None:
            return MinutesDuration(minutes=single)

    return None


def load_timing(raw: Any) -> Timing | None:
    """Load instruction timing, accepting the extractor's flat shape too."""
    if not isinstance(raw, Mapping):
        return None

    duration = load_duration(raw.get("duration"))
    if duration is None and "duration" not in raw:
        # Flat shape: {"minutes": 5} or {"minMinutes": 5, "maxMinutes": 7}
        flat = {key: raw[key] for key in ("minutes", "minMinutes", "maxMinutes") if key in raw}
        duration = load_duration(flat)

    activity = raw.get("activity")
    if activity not in ("active", "passive"):
        activity = None

    timing = Timing(
        duration=duration,
        activity=activity,
        completion_cue=_text(raw.get("completionCue")),
    )
    if timing == Timing():
        return None
    return timing


def load_instruction(raw: Any) -> Instruction | None:
    """Load one instruction step."""
    if isinstance(raw, str):
        return PlainText(text=raw.strip())

    if not isinstance(raw, Mapping):
        return None

    text = _text(raw.get("text"))
    if text is None:
        logger.debug("Dropping instruction without text")
        return None

    return InstructionRecord(text=text, timing=load_timing(raw.get("timing")))


def load_instructions(raw: Any) -> list[Instruction]:
    """Load an instruction list."""
    loaded = (load_instruction(item) for item in _items(raw))
    return [item for item in loaded if item is not None]


# =============================================================================
# Mise en place, storage, yield and time
# =============================================================================


def load_mise_en_place(raw: Any) -> list[MiseEntry]:
    """Load prep tasks; empty entries are dropped."""
    entries: list[MiseEntry] = []
    for item in _items(raw):
        if isinstance(item, str):
            text = _text(item)
            if text:
                entries.append(PlainText(text=text))
        elif isinstance(item, Mapping):
            text = _text(item.get("text"))
            if text:
                entries.append(MiseItem(text=text, ingredient=_text(item.get("ingredient"))))
    return entries


_HUMAN_DURATION_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(\d+)(?:-\d+)?\s*days?", re.IGNORECASE), "P{n}D"),
    (re.compile(r"(\d+)(?:-\d+)?\s*months?", re.IGNORECASE), "P{n}M"),
    (re.compile(r"(\d+)(?:-\d+)?\s*weeks?", re.IGNORECASE), "P{weeks_as_days}D"),
    (re.compile(r"(\d+)(?:-\d+)?\s*hours?", re.IGNORECASE), "PT{n}H"),
)

DEFAULT_STORAGE_ISO = "P1D"


def parse_duration_to_iso(text: str) -> str:
    """
    Convert a human shelf-life phrase to an ISO-8601 duration.

    "3-4 days" -> "P3D", "up to 3 months" -> "P3M", "2 weeks" -> "P14D",
    "2 hours" -> "PT2H". Anything else defaults to one day.
    """
    for pattern, template in _HUMAN_DURATION_PATTERNS:
        match = pattern.search(text)
        if match:
            n = int(match.group(1))
            return template.format(n=n, weeks_as_days=n * 7)
    return DEFAULT_STORAGE_ISO


def load_storage_method(raw: Any) -> StorageMethod | None:
    """Load one storage location."""
    if isinstance(raw, str):
        notes = _text(raw)
        if notes is None:
            return None
        return StorageMethod(iso8601=parse_duration_to_iso(notes), notes=notes)

    if not isinstance(raw, Mapping):
        return None

    duration = raw.get("duration")
    if isinstance(duration, Mapping):
        iso = _text(duration.get("iso8601"))
    else:
        iso = _text(duration)

    return StorageMethod(iso8601=iso, notes=_text(raw.get("notes")))


def load_storage(raw: Any) -> Storage | None:
    """Load the storage map keyed by refrigerated/frozen/roomTemp."""
    if not isinstance(raw, Mapping):
        return None

    methods: dict[str, StorageMethod] = {}
    for key, field_name in STORAGE_KEYS.items():
        method = load_storage_method(raw.get(key))
        if method is not None and field_name not in methods:
            methods[field_name] = method

    if not methods:
        return None
    return Storage(**methods)


def load_yield(raw: Any) -> Yield | None:
    """Load a structured ``{amount, unit}`` yield."""
    if not isinstance(raw, Mapping):
        return None
    amount = _number(raw.get("amount"))
    if amount is None or amount <= 0:
        return None
    return Yield(amount=amount, unit=_text(raw.get("unit")))


def load_servings(raw: Any) -> str | None:
    """Load the legacy free-form servings label (a bare number is allowed)."""
    if is_number(raw):
        return number_text(raw)
    return _text(raw)


def load_total_minutes(raw: Any) -> float | None:
    """Load ``time.total.minutes`` (or ``time.total`` as a bare number)."""
    if not isinstance(raw, Mapping):
        return None
    total = raw.get("total")
    if isinstance(total, Mapping):
        total = total.get("minutes")
    return _number(total)


# =============================================================================
# Recipe
# =============================================================================


def load_recipe(raw: Any) -> Recipe:
    """
    Load a raw recipe record in any supported schema revision.

    Args:
        raw: Decoded JSON (normally a dict); anything else loads as empty.

    Returns:
        The canonical Recipe.
    """
    if isinstance(raw, Recipe):
        return raw

    if not isinstance(raw, Mapping):
        logger.debug(f"Recipe record is {type(raw).__name__}, not a mapping")
        return Recipe()

    return Recipe(
        name=_text(raw.get("name")),
        description=_text(raw.get("description")),
        yield_=load_yield(raw.get("yield")),
        servings=load_servings(raw.get("servings")),
        total_minutes=load_total_minutes(raw.get("time")),
        ingredients=load_ingredients(raw.get("ingredients")),
        instructions=load_instructions(raw.get("instructions")),
        mise_en_place=load_mise_en_place(raw.get("miseEnPlace")),
        storage=load_storage(raw.get("storage")),
    )
