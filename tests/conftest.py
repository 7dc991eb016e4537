"""Pytest configuration and fixtures."""

import asyncio
import os
from typing import List, Optional

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ["RECIPE_STORE"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_recipe_service
from app.main import app
from app.services.recipe_service import RecipeService
from app.services.recipe_store import InMemoryRecipeStore

CHICKEN_RICE_TEXT = (
    "**Título:** Chicken Rice\n"
    "**Ingredientes:**\n"
    "- chicken\n"
    "- rice\n"
    "**Instrucciones:**\n"
    "1. Cook rice\n"
    "2. Add chicken"
)


class FakeGenerator:
    """Scripted stand-in for GeminiService."""

    def __init__(self, text: str = CHICKEN_RICE_TEXT, error: Optional[Exception] = None, delay: float = 0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def store():
    return InMemoryRecipeStore()


@pytest.fixture
def recipe_service(generator, store):
    return RecipeService(generator=generator, store=store, generation_timeout=5.0)


@pytest.fixture
def client(recipe_service):
    """Create test client wired to the fake generator and in-memory store."""
    app.dependency_overrides[get_recipe_service] = lambda: recipe_service
    yield TestClient(app)
    app.dependency_overrides.clear()
