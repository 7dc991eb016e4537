"""
Recipe persistence interface and a process-local implementation.

Identity strategy: sequential integer ids. Document keys are
``receta{id}``, and a page cursor is the key of the last record on the page.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.models.recipe import DEFAULT_TITLE, RecipeDraft, RecipePage, StoredRecipe
from app.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

DOC_ID_PREFIX = "receta"


def doc_id_for(recipe_id: int) -> str:
    """Document key for a recipe id."""
    return f"{DOC_ID_PREFIX}{recipe_id}"


def parse_recipe_id(value: Any) -> Optional[int]:
    """
    Accept either a document key ("receta12") or a bare id ("12", 12).

    Returns None for anything else.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    text = str(value).strip()
    if text.lower().startswith(DOC_ID_PREFIX):
        text = text[len(DOC_ID_PREFIX):]
    if not text.isdigit():
        return None
    recipe_id = int(text)
    return recipe_id if recipe_id > 0 else None


def build_page(records: List[StoredRecipe], page_size: int) -> RecipePage:
    """Build a page from up to ``page_size + 1`` ordered records."""
    items = records[:page_size]
    has_more = len(records) > page_size
    next_cursor = doc_id_for(items[-1].id) if has_more and items else None
    return RecipePage(data=items, hasMore=has_more, nextCursor=next_cursor)


def record_from_dict(data: Dict[str, Any], fallback_id: Optional[str] = None) -> StoredRecipe:
    """
    Convert a stored document to a StoredRecipe.

    Documents written by older revisions used Spanish field names and kept
    instructions as a single newline-separated string; both are accepted.
    """
    recipe_id = parse_recipe_id(data.get("id")) or parse_recipe_id(fallback_id) or 0

    instructions = data.get("instructions", data.get("Instrucciones")) or []
    if isinstance(instructions, str):
        instructions = [line.strip() for line in instructions.splitlines() if line.strip()]

    return StoredRecipe(
        id=recipe_id,
        title=data.get("title") or data.get("Nombre") or DEFAULT_TITLE,
        ingredients=list(data.get("ingredients", data.get("Ingredientes")) or []),
        instructions=list(instructions),
        originalIngredients=list(data.get("originalIngredients") or []),
        dietaryRestrictions=list(data.get("dietaryRestrictions") or []),
        preferences=data.get("preferences") or "",
        createdAt=data.get("createdAt"),
        likes=int(data.get("likes") or 0),
    )


class RecipeStore(ABC):
    """
    Abstract interface for recipe persistence.

    Implementations:
    - FirestoreRecipeStore: Firestore with a transactional counter document
    - InMemoryRecipeStore: process-local, for development and tests
    """

    @abstractmethod
    async def create(
        self,
        draft: RecipeDraft,
        original_ingredients: List[str],
        dietary_restrictions: Optional[List[str]] = None,
        preferences: str = "",
    ) -> StoredRecipe:
        """
        Allocate the next id and persist the recipe in one atomic unit.

        Raises:
            PersistenceError: If the write cannot be completed
        """

    @abstractmethod
    async def list(self, page_size: int, cursor: Optional[str] = None) -> RecipePage:
        """
        List recipes newest first (createdAt desc, id desc).

        An unknown cursor restarts from the first page.
        """

    @abstractmethod
    async def get(self, recipe_id: int) -> StoredRecipe:
        """Fetch one recipe. Raises NotFoundError if it does not exist."""

    @abstractmethod
    async def like(self, recipe_id: int) -> StoredRecipe:
        """Atomically add one like. Raises NotFoundError if it does not exist."""


class InMemoryRecipeStore(RecipeStore):
    """Process-local recipe store. Not shared between workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_id = 0
        self._last_created_at: Optional[datetime] = None
        self._records: Dict[int, StoredRecipe] = {}

    def _now(self) -> datetime:
        now = datetime.now(timezone.utc)
        # Keep createdAt non-decreasing even if the wall clock steps back
        if self._last_created_at is not None and now < self._last_created_at:
            now = self._last_created_at
        self._last_created_at = now
        return now

    async def create(
        self,
        draft: RecipeDraft,
        original_ingredients: List[str],
        dietary_restrictions: Optional[List[str]] = None,
        preferences: str = "",
    ) -> StoredRecipe:
        with self._lock:
            self._last_id += 1
            record = StoredRecipe(
                id=self._last_id,
                title=draft.title,
                ingredients=list(draft.ingredients),
                instructions=list(draft.instructions),
                originalIngredients=list(original_ingredients),
                dietaryRestrictions=list(dietary_restrictions or []),
                preferences=preferences,
                createdAt=self._now(),
                likes=0,
            )
            self._records[record.id] = record

        logger.info("Recipe stored in memory", extra={"recipe_id": record.id})
        return record.model_copy(deep=True)

    async def list(self, page_size: int, cursor: Optional[str] = None) -> RecipePage:
        with self._lock:
            ordered = sorted(
                self._records.values(),
                key=lambda r: (r.createdAt, r.id),
                reverse=True,
            )

        start = 0
        cursor_id = parse_recipe_id(cursor)
        if cursor_id is not None:
            for index, record in enumerate(ordered):
                if record.id == cursor_id:
                    start = index + 1
                    break

        window = [r.model_copy(deep=True) for r in ordered[start:start + page_size + 1]]
        return build_page(window, page_size)

    async def get(self, recipe_id: int) -> StoredRecipe:
        with self._lock:
            record = self._records.get(recipe_id)
        if record is None:
            raise NotFoundError(str(recipe_id))
        return record.model_copy(deep=True)

    async def like(self, recipe_id: int) -> StoredRecipe:
        with self._lock:
            record = self._records.get(recipe_id)
            if record is None:
                raise NotFoundError(str(recipe_id))
            record.likes += 1
            return record.model_copy(deep=True)
