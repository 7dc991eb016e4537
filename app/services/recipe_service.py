"""Recipe generation and listing service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol

from app.config import settings
from app.models.recipe import RecipePage, StoredRecipe
from app.services.prompt_service import build_recipe_prompt
from app.services.recipe_parser import parse_recipe_text
from app.services.recipe_store import RecipeStore, parse_recipe_id
from app.utils.exceptions import GenerationError, NotFoundError
from app.utils.validators import (
    validate_ingredients_list,
    validate_preferences,
    validate_restrictions,
)

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


def clamp_page_size(requested: Optional[int], default: int, maximum: int) -> int:
    """Clamp a requested page size into [1, maximum]; None means default."""
    if requested is None:
        requested = default
    return max(1, min(int(requested), maximum))


class RecipeService:
    """
    Orchestrates recipe creation: validate -> prompt -> generate -> parse -> store.

    Persistence only starts once generation has fully succeeded, so a failed
    or timed-out generation never leaves a partial record behind.
    """

    def __init__(
        self,
        generator: TextGenerator,
        store: RecipeStore,
        generation_timeout: Optional[float] = None,
        default_page_size: Optional[int] = None,
        max_page_size: Optional[int] = None,
    ) -> None:
        self.generator = generator
        self.store = store
        self.generation_timeout = generation_timeout or settings.generation_timeout_s
        self.default_page_size = default_page_size or settings.recipes_default_limit
        self.max_page_size = max_page_size or settings.recipes_max_limit

    async def create_recipe(
        self,
        raw_ingredients: Any,
        restrictions: Any = None,
        preferences: Any = None,
    ) -> StoredRecipe:
        """
        Generate, parse and persist a recipe.

        Raises:
            ValidationError: Ingredients normalize to an empty list (no external call is made)
            GenerationError: Generator failed, timed out or returned no text
            PersistenceError: The store write failed
        """
        ingredients = validate_ingredients_list(raw_ingredients)
        dietary_restrictions = validate_restrictions(restrictions)
        prefs = validate_preferences(preferences)

        prompt = build_recipe_prompt(ingredients, dietary_restrictions, prefs)

        logger.info(
            "Generating recipe",
            extra={
                "ingredients_count": len(ingredients),
                "restrictions_count": len(dietary_restrictions),
                "has_preferences": bool(prefs),
            },
        )

        try:
            text = await asyncio.wait_for(self.generator.generate(prompt), timeout=self.generation_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Recipe generation timed out after {self.generation_timeout}s")
            raise GenerationError(f"Generation timed out after {self.generation_timeout:.0f}s") from e
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error generating recipe: {str(e)}", exc_info=True)
            raise GenerationError(f"Failed to generate recipe: {str(e)}") from e

        if not text or not text.strip():
            raise GenerationError("Generator returned empty text")

        draft = parse_recipe_text(text)
        if not draft.instructions:
            logger.warning(
                "Generated recipe has no instructions",
                extra={"title": draft.title, "text_chars": len(text)},
            )

        recipe = await self.store.create(draft, ingredients, dietary_restrictions, prefs)
        logger.info(
            "Recipe created",
            extra={
                "recipe_id": recipe.id,
                "ingredients_count": len(recipe.ingredients),
                "instructions_count": len(recipe.instructions),
            },
        )
        return recipe

    async def list_recipes(self, page_size: Optional[int] = None, cursor: Optional[str] = None) -> RecipePage:
        """List recipes newest first; page size is clamped to the configured maximum."""
        size = clamp_page_size(page_size, self.default_page_size, self.max_page_size)
        return await self.store.list(size, cursor or None)

    async def get_recipe(self, recipe_id: Any) -> StoredRecipe:
        parsed = parse_recipe_id(recipe_id)
        if parsed is None:
            raise NotFoundError(str(recipe_id))
        return await self.store.get(parsed)

    async def like_recipe(self, recipe_id: Any) -> StoredRecipe:
        parsed = parse_recipe_id(recipe_id)
        if parsed is None:
            raise NotFoundError(str(recipe_id))
        recipe = await self.store.like(parsed)
        logger.info("Recipe liked", extra={"recipe_id": recipe.id, "likes": recipe.likes})
        return recipe
