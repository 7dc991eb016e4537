"""Recipe generation and listing endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.dependencies import get_recipe_service
from app.middleware.rate_limit import rate_limit_dependency
from app.models.recipe import RecipePage, RecipeRequest, StoredRecipe
from app.services.recipe_service import RecipeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["recipes"])


@router.post("/generate-recipe", response_model=StoredRecipe, status_code=status.HTTP_201_CREATED)
async def generate_recipe(
    request: Request,
    body: RecipeRequest,
    _: None = Depends(rate_limit_dependency),
    recipe_service: RecipeService = Depends(get_recipe_service),
) -> StoredRecipe:
    """
    Generate a recipe from ingredients and store it.

    - **ingredients**: list of strings or a comma-separated string (required)
    - **dietaryRestrictions**: list of strings or a comma-separated string
    - **preferences**: free text
    """
    logger.info(
        "Route /api/generate-recipe called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/api/generate-recipe",
            "params": {
                "ingredients": body.ingredients,
                "dietaryRestrictions": body.dietaryRestrictions,
            },
        },
    )

    # ValidationError / GenerationError / PersistenceError are translated by
    # the application exception handler.
    return await recipe_service.create_recipe(
        body.ingredients,
        body.dietaryRestrictions,
        body.preferences,
    )


@router.get("/recipes", response_model=RecipePage)
async def list_recipes(
    request: Request,
    limit: Optional[int] = Query(None, description="Page size, clamped to the configured maximum"),
    cursor: Optional[str] = Query(None, description="nextCursor from the previous page"),
    lastId: Optional[str] = Query(None, description="Deprecated alias of cursor"),
    _: None = Depends(rate_limit_dependency),
    recipe_service: RecipeService = Depends(get_recipe_service),
) -> RecipePage:
    """List stored recipes, most recent first."""
    logger.info(
        "Route /api/recipes called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/api/recipes",
            "params": {"limit": limit, "cursor": cursor or lastId},
        },
    )
    return await recipe_service.list_recipes(limit, cursor or lastId)


@router.get("/recipes/{recipe_id}", response_model=StoredRecipe)
async def get_recipe(
    recipe_id: str,
    recipe_service: RecipeService = Depends(get_recipe_service),
) -> StoredRecipe:
    """Get one recipe by id (`12` or `receta12`)."""
    return await recipe_service.get_recipe(recipe_id)


@router.post("/recipes/{recipe_id}/like", response_model=StoredRecipe)
async def like_recipe(
    recipe_id: str,
    _: None = Depends(rate_limit_dependency),
    recipe_service: RecipeService = Depends(get_recipe_service),
) -> StoredRecipe:
    """Add one like to a recipe."""
    return await recipe_service.like_recipe(recipe_id)
