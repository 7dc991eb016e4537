"""
Firestore-backed recipe store.

Layout:
    contadores/recetas        {"lastId": n}
    recetas/receta{n}         recipe document, "id": n

Ids are allocated inside a Firestore transaction that reads the counter,
creates the recipe document and bumps the counter as one unit of work.
Concurrent transactions on the counter are retried by the SDK, so no two
callers can commit the same id.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from google.api_core import exceptions as gcp_exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP, Increment, Query, transactional

from app.config import settings
from app.models.recipe import RecipeDraft, RecipePage, StoredRecipe
from app.services.firebase_admin_init import get_firestore_client
from app.services.recipe_store import (
    RecipeStore,
    build_page,
    doc_id_for,
    parse_recipe_id,
    record_from_dict,
)
from app.utils.exceptions import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


def write_new_recipe(transaction, counter_ref, recipes_ref, payload: Dict[str, Any]) -> Tuple[int, Any]:
    """
    Transaction body: read counter, create recipe document, update counter.

    Returns:
        (new id, document reference)
    """
    snapshot = counter_ref.get(transaction=transaction)
    last_id = 0
    if snapshot.exists:
        last_id = int((snapshot.to_dict() or {}).get("lastId") or 0)

    new_id = last_id + 1
    doc_ref = recipes_ref.document(doc_id_for(new_id))

    # create() fails the commit if the document already exists
    transaction.create(doc_ref, {
        **payload,
        "id": new_id,
        "createdAt": SERVER_TIMESTAMP,
        "likes": 0,
    })
    transaction.set(counter_ref, {"lastId": new_id}, merge=True)
    return new_id, doc_ref


allocate_and_write = transactional(write_new_recipe)


class FirestoreRecipeStore(RecipeStore):
    """Recipe store on a Firestore collection plus a counter document."""

    def __init__(
        self,
        db=None,
        recipes_collection: Optional[str] = None,
        counters_collection: Optional[str] = None,
        counter_document: Optional[str] = None,
    ) -> None:
        self._db = db
        self.recipes_collection = recipes_collection or settings.recipes_collection
        self.counters_collection = counters_collection or settings.counters_collection
        self.counter_document = counter_document or settings.counter_document

    @property
    def db(self):
        """Get Firestore client (lazy initialization)."""
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    @property
    def recipes_ref(self):
        return self.db.collection(self.recipes_collection)

    @property
    def counter_ref(self):
        return self.db.collection(self.counters_collection).document(self.counter_document)

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    async def create(
        self,
        draft: RecipeDraft,
        original_ingredients: List[str],
        dietary_restrictions: Optional[List[str]] = None,
        preferences: str = "",
    ) -> StoredRecipe:
        payload = {
            "title": draft.title,
            "ingredients": list(draft.ingredients),
            "instructions": list(draft.instructions),
            "originalIngredients": list(original_ingredients),
            "dietaryRestrictions": list(dietary_restrictions or []),
            "preferences": preferences,
        }
        try:
            return await asyncio.to_thread(self._create_sync, payload)
        except Exception as e:
            logger.error("Recipe write failed: %s", str(e), exc_info=True)
            raise PersistenceError(f"Failed to store recipe: {str(e)}") from e

    async def list(self, page_size: int, cursor: Optional[str] = None) -> RecipePage:
        try:
            return await asyncio.to_thread(self._list_sync, page_size, cursor)
        except Exception as e:
            logger.error("Recipe listing failed: %s", str(e), exc_info=True)
            raise PersistenceError(f"Failed to list recipes: {str(e)}") from e

    async def get(self, recipe_id: int) -> StoredRecipe:
        try:
            return await asyncio.to_thread(self._get_sync, recipe_id)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Recipe read failed: %s", str(e), exc_info=True)
            raise PersistenceError(f"Failed to read recipe {recipe_id}: {str(e)}") from e

    async def like(self, recipe_id: int) -> StoredRecipe:
        try:
            return await asyncio.to_thread(self._like_sync, recipe_id)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Recipe like failed: %s", str(e), exc_info=True)
            raise PersistenceError(f"Failed to like recipe {recipe_id}: {str(e)}") from e

    # ---------------------------------------------------------------------
    # Blocking SDK calls (run in worker threads)
    # ---------------------------------------------------------------------

    def _create_sync(self, payload: Dict[str, Any]) -> StoredRecipe:
        transaction = self.db.transaction()
        new_id, doc_ref = allocate_and_write(transaction, self.counter_ref, self.recipes_ref, payload)
        logger.info("Recipe stored", extra={"recipe_id": new_id, "doc_id": doc_ref.id})

        # Read back to return the server-resolved createdAt. The write is
        # already committed, so a failed read must not turn into an error.
        try:
            snapshot = doc_ref.get()
            if snapshot.exists:
                return record_from_dict(snapshot.to_dict() or {}, snapshot.id)
        except Exception as e:
            logger.warning(f"Read-back of recipe {new_id} failed: {e}")

        return StoredRecipe(
            id=new_id,
            **payload,
            createdAt=datetime.now(timezone.utc),
            likes=0,
        )

    def _list_sync(self, page_size: int, cursor: Optional[str]) -> RecipePage:
        query = (
            self.recipes_ref
            .order_by("createdAt", direction=Query.DESCENDING)
            .order_by("id", direction=Query.DESCENDING)
        )

        cursor_id = parse_recipe_id(cursor)
        if cursor_id is not None:
            cursor_snapshot = self.recipes_ref.document(doc_id_for(cursor_id)).get()
            cursor_data = cursor_snapshot.to_dict() if cursor_snapshot.exists else None
            if cursor_data and cursor_data.get("createdAt") is not None:
                query = query.start_after(cursor_snapshot)
            elif cursor_data is not None:
                # Legacy documents without createdAt are not part of the ordered listing
                logger.info("Cursor has no createdAt, listing from the start", extra={"cursor": cursor})
            else:
                logger.info("Unknown cursor, listing from the start", extra={"cursor": cursor})
        elif cursor:
            logger.info("Unparseable cursor, listing from the start", extra={"cursor": cursor})

        # One extra document tells us whether another page exists
        snapshots = query.limit(page_size + 1).stream()
        records = [record_from_dict(s.to_dict() or {}, s.id) for s in snapshots]
        return build_page(records, page_size)

    def _get_sync(self, recipe_id: int) -> StoredRecipe:
        snapshot = self.recipes_ref.document(doc_id_for(recipe_id)).get()
        if not snapshot.exists:
            raise NotFoundError(str(recipe_id))
        return record_from_dict(snapshot.to_dict() or {}, snapshot.id)

    def _like_sync(self, recipe_id: int) -> StoredRecipe:
        doc_ref = self.recipes_ref.document(doc_id_for(recipe_id))
        try:
            doc_ref.update({"likes": Increment(1)})
        except gcp_exceptions.NotFound as e:
            raise NotFoundError(str(recipe_id)) from e
        return record_from_dict(doc_ref.get().to_dict() or {}, doc_ref.id)
