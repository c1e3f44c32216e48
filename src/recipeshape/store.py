"""Short-lived in-memory recipe store.

Hands a recipe record from one request to another (e.g. a converter page
to a viewer page). Entries expire after a TTL and a background task sweeps
them periodically. The normalizer and scaler never touch this store.
"""

import asyncio
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from recipeshape.config import get_settings
from recipeshape.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class StoredRecipe:
    """A stored recipe record and its expiry time."""

    recipe: dict[str, Any]
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check if the entry has expired at the given time."""
        return self.expires_at < now


class RecipeStore:
    """Process-wide expiring map of recipe records."""

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, StoredRecipe] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _generate_id() -> str:
        return uuid.uuid4().hex[:8]

    def put(self, recipe: dict[str, Any]) -> str:
        """Store a recipe and return its id."""
        recipe_id = self._generate_id()
        while recipe_id in self._entries:
            recipe_id = self._generate_id()

        self._entries[recipe_id] = StoredRecipe(
            recipe=recipe,
            expires_at=self._clock() + self.ttl_seconds,
        )
        logger.debug(f"Stored recipe {recipe_id} for {self.ttl_seconds:.0f}s")
        return recipe_id

    def get(self, recipe_id: str) -> dict[str, Any] | None:
        """Get a stored recipe, or None if unknown or expired."""
        entry = self._entries.get(recipe_id)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._entries[recipe_id]
            return None

        return entry.recipe

    def sweep(self) -> int:
        """Remove expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(f"Swept {len(expired)} expired recipes, {len(self._entries)} remain")
        return len(expired)

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    async def run_sweeper(self, interval_seconds: float) -> None:
        """Sweep expired entries every interval until cancelled."""
        logger.info(f"Recipe store sweeper started (every {interval_seconds:.0f}s)")
        try:
            while True:
                await asyncio.sleep(interval_seconds)
                self.sweep()
        except asyncio.CancelledError:
            logger.info("Recipe store sweeper stopped")
            raise


@lru_cache
def get_recipe_store() -> RecipeStore:
    """Get the process-wide recipe store."""
    return RecipeStore(ttl_seconds=get_settings().store_ttl_seconds)
