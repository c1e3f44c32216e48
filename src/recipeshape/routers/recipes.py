"""API routes for normalizing and scaling recipes."""

from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from recipeshape.config import get_settings
from recipeshape.ingest.extraction import (
    DEFAULT_CONVERTER,
    ExtractionError,
    parse_extraction_response,
    transform_extracted,
)
from recipeshape.logging_config import get_logger
from recipeshape.normalize.display import normalize_to_display
from recipeshape.scale.scaling import parse_servings
from recipeshape.scale.session import ScaledRecipe, scale_ingredients

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


class CamelModel(BaseModel):
    """Request/response model with camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request/Response schemas
class NormalizeRequest(CamelModel):
    """A recipe record in any supported schema revision."""

    recipe: Any = None


class ExtractedRequest(CamelModel):
    """Raw extractor output to post-process and normalize."""

    text: str
    source_text: str = ""
    converter: str = DEFAULT_CONVERTER


class ExtractedResponse(CamelModel):
    """Post-processed recipe record with its display form."""

    recipe: dict[str, Any]
    display: dict[str, Any]


class ScaleRequest(CamelModel):
    """Ingredients to scale to a target yield."""

    servings: str | None = None
    ingredients: list[Any] = Field(default_factory=list)
    target_servings: int | None = Field(default=None, ge=1)
    scaling_enabled: bool = True


class ScaledIngredientResponse(CamelModel):
    """One ingredient before and after scaling."""

    id: str
    original: str
    scaled: str
    is_scaled: bool
    can_scale: bool


class ScaleResponse(CamelModel):
    """Scaled ingredient list."""

    original_servings: int | None
    target_servings: int
    scale_factor: float
    can_scale: bool
    is_scaled: bool
    ingredients: list[ScaledIngredientResponse]

    @classmethod
    def from_result(cls, result: ScaledRecipe) -> "ScaleResponse":
        """Build the response from a scaling result."""
        return cls(
            original_servings=result.original_servings,
            target_servings=result.target_servings,
            scale_factor=result.scale_factor,
            can_scale=result.can_scale,
            is_scaled=result.is_scaled,
            ingredients=[
                ScaledIngredientResponse(
                    id=item.id,
                    original=item.original,
                    scaled=item.scaled,
                    is_scaled=item.is_scaled,
                    can_scale=item.can_scale,
                )
                for item in result.items
            ],
        )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/normalize")
async def normalize_recipe(request: NormalizeRequest) -> dict[str, Any]:
    """Normalize a recipe record into its display form."""
    display = normalize_to_display(request.recipe)
    logger.debug(
        f"Normalized '{display.title}': "
        f"{display.stats.structured_ingredients}/{display.stats.total_ingredients} "
        f"structured ingredients, {display.stats.timed_steps}/{display.stats.total_steps} timed steps"
    )
    return display.to_json_dict()


@router.post("/extracted", response_model=ExtractedResponse, response_model_by_alias=True)
async def normalize_extracted(request: ExtractedRequest) -> ExtractedResponse:
    """Post-process extractor output and normalize the resulting recipe."""
    try:
        parsed = parse_extraction_response(request.text)
    except ExtractionError as e:
        logger.warning(f"Rejected extractor output: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    recipe = transform_extracted(parsed, request.source_text, request.converter)
    return ExtractedResponse(
        recipe=recipe,
        display=normalize_to_display(recipe).to_json_dict(),
    )


@router.post("/scale", response_model=ScaleResponse, response_model_by_alias=True)
async def scale_recipe(request: ScaleRequest) -> ScaleResponse:
    """Scale ingredient quantities to a target yield."""
    target = request.target_servings
    if target is None:
        target = parse_servings(request.servings) or get_settings().default_target_servings

    result = scale_ingredients(
        request.servings,
        request.ingredients,
        target,
        scaling_enabled=request.scaling_enabled,
    )
    return ScaleResponse.from_result(result)
