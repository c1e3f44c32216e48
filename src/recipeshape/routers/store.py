"""API routes for handing recipes between requests via the short-lived store."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from recipeshape.logging_config import LoggingContext, get_logger
from recipeshape.store import RecipeStore, get_recipe_store

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/store", tags=["store"])


class StoreRequest(BaseModel):
    """Recipe record to hand off."""

    recipe: dict[str, Any] | None = None


class StoreResponse(BaseModel):
    """Where the stored recipe can be fetched and for how long."""

    id: str
    expires_in: float = Field(serialization_alias="expiresIn")


class StoredRecipeResponse(BaseModel):
    """A recipe fetched from the store."""

    recipe: dict[str, Any]


def _is_storable(recipe: dict[str, Any] | None) -> bool:
    """A storable record has a name and an ingredient list."""
    if not recipe:
        return False
    return bool(recipe.get("name")) and isinstance(recipe.get("ingredients"), list)


@router.post("", response_model=StoreResponse, response_model_by_alias=True)
async def store_recipe(
    request: StoreRequest,
    store: Annotated[RecipeStore, Depends(get_recipe_store)],
) -> StoreResponse:
    """Store a recipe for a short time and return its id."""
    if not _is_storable(request.recipe):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid recipe")

    recipe_id = store.put(request.recipe)
    with LoggingContext(recipe_id=recipe_id):
        logger.info(f"Stored recipe '{request.recipe['name']}'")

    return StoreResponse(id=recipe_id, expires_in=store.ttl_seconds)


@router.get("/{recipe_id}", response_model=StoredRecipeResponse)
async def get_stored_recipe(
    recipe_id: str,
    store: Annotated[RecipeStore, Depends(get_recipe_store)],
) -> StoredRecipeResponse:
    """Fetch a stored recipe by id."""
    recipe = store.get(recipe_id)
    if recipe is None:
        with LoggingContext(recipe_id=recipe_id):
            logger.info("Stored recipe not found or expired")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found or expired")

    return StoredRecipeResponse(recipe=recipe)
