"""Shared API dependencies."""

import logging
from functools import lru_cache

from app.config import settings
from app.services.gemini_service import GeminiService
from app.services.recipe_service import RecipeService
from app.services.recipe_store import InMemoryRecipeStore, RecipeStore

logger = logging.getLogger(__name__)


def build_recipe_store() -> RecipeStore:
    """Create the recipe store selected by RECIPE_STORE."""
    backend = settings.recipe_store.lower()
    if backend == "memory":
        logger.warning("Using in-memory recipe store; recipes are lost on restart")
        return InMemoryRecipeStore()
    if backend == "firestore":
        from app.services.firestore_store import FirestoreRecipeStore

        return FirestoreRecipeStore()
    raise ValueError(f"Unknown recipe store backend: {settings.recipe_store}")


@lru_cache(maxsize=1)
def get_recipe_service() -> RecipeService:
    """Get the process-wide recipe service (generator and store clients are reused)."""
    return RecipeService(generator=GeminiService(), store=build_recipe_store())
