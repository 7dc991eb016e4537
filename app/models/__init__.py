"""Pydantic models."""

from app.models.recipe import (
    DEFAULT_TITLE,
    RecipeDraft,
    RecipePage,
    RecipeRequest,
    StoredRecipe,
)

__all__ = [
    "DEFAULT_TITLE",
    "RecipeDraft",
    "RecipePage",
    "RecipeRequest",
    "StoredRecipe",
]
