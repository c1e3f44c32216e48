"""Canonical recipe model produced at the ingestion boundary.

Raw recipe records arrive in several historical shapes. The loader sniffs
each field once and builds these typed models, so everything downstream
works against a single representation. String-or-object entries are
modelled as two-variant unions discriminated by ``kind``.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ScalingMode(str, Enum):
    """How an ingredient quantity reacts to a change in yield."""

    PROPORTIONAL = "proportional"
    TO_TASTE = "toTaste"
    FIXED = "fixed"


class CanonicalModel(BaseModel):
    """Base class for immutable canonical models."""

    model_config = ConfigDict(frozen=True)


class PlainText(CanonicalModel):
    """An opaque display line with no extracted structure."""

    kind: Literal["text"] = "text"
    text: str


# =============================================================================
# Ingredients
# =============================================================================


class IngredientRecord(CanonicalModel):
    """A structured ingredient.

    ``amount`` is the quantity as supplied (number or text such as "1/2").
    ``unit`` is already resolved: a structured quantity's unit wins over a
    standalone legacy unit.
    """

    kind: Literal["ingredient"] = "ingredient"
    name: str
    amount: float | str | None = None
    unit: str | None = None
    preparation: str | None = None
    notes: str | None = None
    to_taste: bool = False
    scaling_mode: ScalingMode | None = None


Ingredient = Annotated[Union[PlainText, IngredientRecord], Field(discriminator="kind")]


# =============================================================================
# Instructions
# =============================================================================


class MinutesDuration(CanonicalModel):
    """A single duration in minutes."""

    kind: Literal["minutes"] = "minutes"
    minutes: float


class MinutesRange(CanonicalModel):
    """A duration range, e.g. 5-7 minutes."""

    kind: Literal["range"] = "range"
    min_minutes: float
    max_minutes: float


class HoursMinutes(CanonicalModel):
    """Legacy duration split into hours and minutes."""

    kind: Literal["hours_minutes"] = "hours_minutes"
    hours: float = 0
    minutes: float = 0


Duration = Annotated[
    Union[MinutesDuration, MinutesRange, HoursMinutes], Field(discriminator="kind")
]


class Timing(CanonicalModel):
    """Timing attached to an instruction step."""

    duration: Duration | None = None
    activity: Literal["active", "passive"] | None = None
    completion_cue: str | None = None


class InstructionRecord(CanonicalModel):
    """A structured instruction step."""

    kind: Literal["instruction"] = "instruction"
    text: str
    timing: Timing | None = None


Instruction = Annotated[Union[PlainText, InstructionRecord], Field(discriminator="kind")]


# =============================================================================
# Mise en place, storage and yield
# =============================================================================


class MiseItem(CanonicalModel):
    """A prep task to finish before cooking starts."""

    kind: Literal["mise"] = "mise"
    text: str
    ingredient: str | None = None


MiseEntry = Annotated[Union[PlainText, MiseItem], Field(discriminator="kind")]


class StorageMethod(CanonicalModel):
    """How long a dish keeps in one storage location."""

    iso8601: str | None = None
    notes: str | None = None


class Storage(CanonicalModel):
    """Storage guidance keyed by location."""

    refrigerated: StorageMethod | None = None
    frozen: StorageMethod | None = None
    room_temp: StorageMethod | None = None

    def locations(self) -> list[tuple[str, StorageMethod]]:
        """Get present locations in display order."""
        pairs = [
            ("refrigerated", self.refrigerated),
            ("frozen", self.frozen),
            ("room_temp", self.room_temp),
        ]
        return [(name, method) for name, method in pairs if method is not None]


class Yield(CanonicalModel):
    """Structured recipe yield, e.g. 24 cookies."""

    amount: float
    unit: str | None = None


class Recipe(CanonicalModel):
    """A recipe in canonical form."""

    name: str | None = None
    description: str | None = None
    yield_: Yield | None = None
    servings: str | None = None
    total_minutes: float | None = None
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[Instruction] = Field(default_factory=list)
    mise_en_place: list[MiseEntry] = Field(default_factory=list)
    storage: Storage | None = None
