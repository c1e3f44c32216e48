"""Post-process a text extractor's JSON answer into a recipe record.

The extractor (a generative model prompted with recipe text) answers with
loosely-structured JSON: a servings phrase, a total-time phrase, string or
object ingredients, and human shelf-life phrases. This module turns that
answer into a current-schema recipe record that ``load_recipe`` accepts.
"""

import json
import math
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from recipeshape.ingest.loader import parse_duration_to_iso
from recipeshape.logging_config import get_logger
from recipeshape.quantities import is_number, round_half_up

logger = get_logger(__name__)

SCHEMA_URL = "https://spec.soustack.org/soustack.schema.json"
DEFAULT_CONVERTER = "unknown"
DEFAULT_NAME = "Untitled Recipe"
SOURCE_TEXT_LIMIT = 500

_FENCE_START = re.compile(r"^```(?:json)?\n?", re.IGNORECASE)
_FENCE_END = re.compile(r"\n?```$")

_YIELD_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(?:makes\s+)?(\d+(?:-\d+)?)\s+(.+)$", re.IGNORECASE),
    re.compile(r"^serves?\s+(\d+(?:-\d+)?)$", re.IGNORECASE),
)
_HOURS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?|h)", re.IGNORECASE)
_MINUTES = re.compile(r"(\d+(?:\.\d+)?)\s*(?:minutes?|mins?|m)(?!\w)", re.IGNORECASE)
_TO_TASTE = re.compile(r"to\s*taste", re.IGNORECASE)
_TO_TASTE_PAIR = re.compile(r"^(.+?)\s+and\s+(.+?)\s+to\s*taste$", re.IGNORECASE)
_TO_TASTE_SINGLE = re.compile(r"^(.+?)\s+to\s*taste$", re.IGNORECASE)
_TO_TASTE_NOTE = re.compile(r"^to\s*taste$", re.IGNORECASE)

STORAGE_LOCATIONS = ("refrigerated", "frozen", "roomTemp")


class ExtractionError(Exception):
    """Raised when extractor output is not a JSON object."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


# =============================================================================
# Response parsing
# =============================================================================


def strip_markdown_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence."""
    text = text.strip()
    text = _FENCE_START.sub("", text)
    text = _FENCE_END.sub("", text)
    return text.strip()


def parse_extraction_response(text: str) -> dict[str, Any]:
    """
    Decode the extractor's answer.

    Raises:
        ExtractionError: If the answer is not a JSON object.
    """
    cleaned = strip_markdown_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionError("Extractor output is not valid JSON", raw=cleaned[:500]) from e

    if not isinstance(data, dict):
        raise ExtractionError(
            f"Extractor output is a {type(data).__name__}, expected an object",
            raw=cleaned[:500],
        )
    return data


# =============================================================================
# Field parsers
# =============================================================================


def parse_yield(servings: str | None) -> dict[str, Any] | None:
    """
    Parse a servings phrase into a structured yield.

    "Makes 24 cookies" -> {"amount": 24, "unit": "cookies"}
    "Serves 4" -> {"amount": 4, "unit": "servings"}
    "6-8 servings" -> {"amount": 7, "unit": "servings"}
    """
    if not servings or not isinstance(servings, str):
        return None

    for pattern in _YIELD_PATTERNS:
        match = pattern.match(servings.strip())
        if not match:
            continue

        amount_text = match.group(1)
        unit = match.group(2) if pattern.groups > 1 else "servings"

        try:
            if "-" in amount_text:
                low, high = (int(part) for part in amount_text.split("-"))
                amount: float = (low + high) / 2
            else:
                amount = int(amount_text)
        except (ValueError, OverflowError):
            logger.debug(f"Servings amount too large: {amount_text[:20]}...")
            return None

        if is_number(amount) and amount > 0:
            if isinstance(amount, float) and amount.is_integer():
                amount = int(amount)
            return {"amount": amount, "unit": unit.lower()}

    return None


def parse_time_text(time_text: str | None) -> int | None:
    """Parse "1 hour 30 minutes" style text into whole minutes."""
    if not time_text or not isinstance(time_text, str):
        return None

    total = 0.0
    hours = _HOURS.search(time_text)
    if hours:
        total += float(hours.group(1)) * 60
    minutes = _MINUTES.search(time_text)
    if minutes:
        total += float(minutes.group(1))

    if not math.isfinite(total) or total <= 0:
        return None
    return round_half_up(total)


def split_to_taste(line: str) -> list[Any]:
    """
    Split a "to taste" line into to-taste ingredients.

    "salt and pepper to taste" -> two ingredients; "salt to taste" -> one.
    Lines that do not end in "to taste" are returned unchanged.
    """
    pair = _TO_TASTE_PAIR.match(line)
    if pair:
        return [
            {"name": pair.group(1).strip(), "scaling": {"mode": "toTaste"}},
            {"name": pair.group(2).strip(), "scaling": {"mode": "toTaste"}},
        ]

    single = _TO_TASTE_SINGLE.match(line)
    if single:
        return [{"name": single.group(1).strip(), "scaling": {"mode": "toTaste"}}]

    return [line]


# =============================================================================
# Section transforms
# =============================================================================


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def transform_ingredient(raw: Any) -> list[Any]:
    """Convert one extracted ingredient into current-schema entries."""
    if isinstance(raw, str):
        if _TO_TASTE.search(raw):
            return split_to_taste(raw)
        return [raw]

    if not isinstance(raw, Mapping) or not isinstance(raw.get("name"), str):
        logger.debug("Dropping extracted ingredient without a name")
        return []

    result: dict[str, Any] = {"name": raw["name"]}

    quantity = raw.get("quantity")
    unit = raw.get("unit")
    if is_number(quantity) or (isinstance(quantity, str) and quantity.strip()):
        result["quantity"] = {"amount": quantity}
        if unit:
            result["quantity"]["unit"] = unit
    elif unit:
        result["unit"] = unit

    if raw.get("prep"):
        result["prep"] = raw["prep"]

    notes = raw.get("notes")
    notes_say_to_taste = isinstance(notes, str) and _TO_TASTE_NOTE.match(notes.strip()) is not None
    if isinstance(notes, str) and notes and not notes_say_to_taste:
        result["notes"] = notes

    if raw.get("toTaste") is True or notes_say_to_taste:
        result["scaling"] = {"mode": "toTaste"}

    return [result]


def transform_instruction(raw: Any) -> Any | None:
    """Convert one extracted instruction into the current schema."""
    if isinstance(raw, str):
        return raw

    if not isinstance(raw, Mapping) or not isinstance(raw.get("text"), str):
        return None

    result: dict[str, Any] = {"text": raw["text"]}

    timing = raw.get("timing")
    if isinstance(timing, Mapping):
        converted: dict[str, Any] = {}
        if timing.get("activity") in ("active", "passive"):
            converted["activity"] = timing["activity"]

        min_minutes = timing.get("minMinutes")
        max_minutes = timing.get("maxMinutes")
        if is_number(min_minutes) and is_number(max_minutes):
            converted["duration"] = {"minMinutes": min_minutes, "maxMinutes": max_minutes}
        elif is_number(timing.get("minutes")):
            converted["duration"] = {"minutes": timing["minutes"]}

        if timing.get("completionCue"):
            converted["completionCue"] = timing["completionCue"]

        if converted:
            result["timing"] = converted

    return result


def transform_storage(raw: Any) -> dict[str, Any] | None:
    """Convert human shelf-life phrases into ISO-8601 storage entries."""
    if not isinstance(raw, Mapping):
        return None

    result: dict[str, Any] = {}
    for location in STORAGE_LOCATIONS:
        phrase = raw.get(location)
        if isinstance(phrase, str) and phrase.strip():
            result[location] = {
                "duration": {"iso8601": parse_duration_to_iso(phrase)},
                "notes": phrase,
            }

    return result or None


def infer_stacks(
    ingredients: list[Any],
    instructions: list[Any],
    mise_en_place: list[Any] | None,
    storage: dict[str, Any] | None,
) -> dict[str, int]:
    """Flag which optional capabilities the recipe carries."""
    stacks: dict[str, int] = {}

    if any(isinstance(item, Mapping) and "quantity" in item for item in ingredients):
        stacks["quantified"] = 1

    if any(isinstance(step, Mapping) and "timing" in step for step in instructions):
        stacks["structured"] = 1
        stacks["timed"] = 1

    if mise_en_place:
        stacks["prep"] = 1
    if storage:
        stacks["storage"] = 1

    return stacks


# =============================================================================
# Recipe
# =============================================================================


def transform_extracted(
    parsed: Mapping[str, Any],
    source_text: str = "",
    converter: str = DEFAULT_CONVERTER,
) -> dict[str, Any]:
    """
    Build a current-schema recipe record from extractor output.

    Args:
        parsed: Decoded extractor answer.
        source_text: The text the extractor was given (kept as provenance).
        converter: Name of the extractor that produced the answer.

    Returns:
        Recipe record dict ready for ``load_recipe``.
    """
    servings = parsed.get("servings") if isinstance(parsed.get("servings"), str) else None
    recipe_yield = parse_yield(servings)
    total_minutes = parse_time_text(parsed.get("totalTime"))

    ingredients: list[Any] = []
    for item in _as_list(parsed.get("ingredients")):
        ingredients.extend(transform_ingredient(item))

    instructions = [
        step
        for step in (transform_instruction(item) for item in _as_list(parsed.get("instructions")))
        if step is not None
    ]

    raw_mise = parsed.get("miseEnPlace")
    mise_en_place = None
    if isinstance(raw_mise, list):
        mise_en_place = [{"text": text} for text in raw_mise if isinstance(text, str) and text]

    storage = transform_storage(parsed.get("storage"))

    name = parsed.get("name")
    recipe: dict[str, Any] = {
        "$schema": SCHEMA_URL,
        "profile": "base" if recipe_yield or total_minutes else "lite",
        "stacks": infer_stacks(ingredients, instructions, mise_en_place, storage),
        "name": name if isinstance(name, str) and name else DEFAULT_NAME,
        "ingredients": ingredients,
        "instructions": instructions,
        "x-soustack": {
            "source": {
                "text": source_text[:SOURCE_TEXT_LIMIT],
                "convertedAt": datetime.now(timezone.utc).isoformat(),
                "converter": converter,
            },
        },
    }

    if isinstance(parsed.get("description"), str) and parsed["description"]:
        recipe["description"] = parsed["description"]
    if servings:
        recipe["servings"] = servings
    if recipe_yield:
        recipe["yield"] = recipe_yield
    if total_minutes:
        recipe["time"] = {"total": {"minutes": total_minutes}}
    if mise_en_place:
        recipe["miseEnPlace"] = mise_en_place
    if storage:
        recipe["storage"] = storage

    logger.debug(
        f"Transformed extracted recipe: {len(ingredients)} ingredients, "
        f"{len(instructions)} steps, stacks={sorted(recipe['stacks'])}"
    )
    return recipe
