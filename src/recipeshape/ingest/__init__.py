"""Load raw recipe records and extractor output into the canonical model."""

from recipeshape.ingest.extraction import (
    ExtractionError,
    parse_extraction_response,
    transform_extracted,
)
from recipeshape.ingest.loader import load_recipe
from recipeshape.ingest.schemas import (
    IngredientRecord,
    InstructionRecord,
    PlainText,
    Recipe,
    ScalingMode,
)

__all__ = [
    "ExtractionError",
    "IngredientRecord",
    "InstructionRecord",
    "PlainText",
    "Recipe",
    "ScalingMode",
    "load_recipe",
    "parse_extraction_response",
    "transform_extracted",
]
