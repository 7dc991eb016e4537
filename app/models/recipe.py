"""Recipe Pydantic models."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

DEFAULT_TITLE = "Receta Generada"


class RecipeDraft(BaseModel):
    """Recipe parsed from generated text, before it is persisted."""

    title: str = Field(DEFAULT_TITLE, description="Recipe title")
    ingredients: List[str] = Field(default_factory=list, description="Ingredient lines, bullet removed")
    instructions: List[str] = Field(default_factory=list, description="Instruction steps, numbering removed")


class StoredRecipe(BaseModel):
    """Persisted recipe returned by all recipe endpoints."""

    id: int = Field(..., description="Sequential recipe ID")
    title: str = Field(DEFAULT_TITLE, description="Recipe title")
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    originalIngredients: List[str] = Field(
        default_factory=list, description="Ingredients exactly as supplied by the user"
    )
    dietaryRestrictions: List[str] = Field(default_factory=list)
    preferences: str = ""
    createdAt: Optional[datetime] = Field(None, description="Server-assigned creation time")
    likes: int = 0

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "id": 12,
                "title": "Arroz con pollo",
                "ingredients": ["1 pechuga de pollo", "1 taza de arroz"],
                "instructions": ["Cocinar el arroz.", "Añadir el pollo."],
                "originalIngredients": ["pollo", "arroz"],
                "dietaryRestrictions": [],
                "preferences": "",
                "createdAt": "2025-03-01T12:00:00Z",
                "likes": 0,
            }
        }


class RecipePage(BaseModel):
    """One page of the recipe listing."""

    data: List[StoredRecipe] = Field(default_factory=list)
    hasMore: bool = False
    nextCursor: Optional[str] = Field(None, description="Pass as `cursor` to fetch the next page")


class RecipeRequest(BaseModel):
    """Request body for recipe generation."""

    # Loosely typed so that malformed items reach the validators and get a 400
    ingredients: Any = Field(None, description="List of ingredients or a comma-separated string")
    dietaryRestrictions: Any = Field(None, description="List of restrictions or a comma-separated string")
    preferences: Any = Field(None, description="Free-text preferences; non-strings are ignored")
