"""Tests for validators and prompt construction."""

import pytest

from app.services.prompt_service import build_recipe_prompt
from app.utils.exceptions import ValidationError
from app.utils.validators import (
    split_items,
    validate_ingredients_list,
    validate_preferences,
    validate_restrictions,
)


def test_validate_ingredients_list_valid():
    """Test ingredients list validation with valid list."""
    ingredients = ["chicken", "rice", "vegetables"]
    assert validate_ingredients_list(ingredients) == ingredients


def test_validate_ingredients_list_trims_and_drops_empties():
    assert validate_ingredients_list(["  chicken ", "", "   ", "rice"]) == ["chicken", "rice"]


def test_validate_ingredients_comma_string():
    assert validate_ingredients_list("tomate,  cebolla , ,ajo") == ["tomate", "cebolla", "ajo"]


@pytest.mark.parametrize("value", ([], "", None, " , ", {"a": 1}, 7))
def test_validate_ingredients_list_empty(value):
    """Test ingredients list validation with inputs that normalize to nothing."""
    with pytest.raises(ValidationError):
        validate_ingredients_list(value)


def test_validate_ingredients_rejects_non_strings():
    with pytest.raises(ValidationError):
        validate_ingredients_list(["pan", 3])


def test_validate_ingredients_limits():
    with pytest.raises(ValidationError):
        validate_ingredients_list([f"item {n}" for n in range(51)])
    with pytest.raises(ValidationError):
        validate_ingredients_list(["x" * 501])


def test_validate_restrictions_allows_empty():
    assert validate_restrictions(None) == []
    assert validate_restrictions("") == []
    assert validate_restrictions("vegano, sin gluten") == ["vegano", "sin gluten"]


@pytest.mark.parametrize("value,expected", ((None, ""), (5, ""), (["a"], ""), ("  dulce ", "dulce")))
def test_validate_preferences(value, expected):
    assert validate_preferences(value) == expected


def test_split_items_preserves_order():
    assert split_items(["c", "a", "b"]) == ["c", "a", "b"]


def test_prompt_contains_ingredients_and_format():
    prompt = build_recipe_prompt(["pollo", "arroz"])

    assert "Genera una receta con: pollo, arroz." in prompt
    assert "**Título:**" in prompt
    assert "**Ingredientes:**" in prompt
    assert "**Instrucciones:**" in prompt
    assert "Restricciones" not in prompt
    assert "Preferencias" not in prompt


def test_prompt_includes_restrictions_and_preferences():
    prompt = build_recipe_prompt(["pollo"], ["sin gluten"], "picante")

    assert "Restricciones dietéticas: sin gluten." in prompt
    assert "Preferencias: picante." in prompt


def test_prompt_is_deterministic():
    assert build_recipe_prompt(["a", "b"], ["c"], "d") == build_recipe_prompt(["a", "b"], ["c"], "d")
