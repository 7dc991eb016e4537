"""Input validation and normalization utilities."""

from typing import Any, List

from app.utils.exceptions import ValidationError

MAX_ITEMS = 50
MAX_ITEM_LENGTH = 500


def split_items(value: Any) -> List[str]:
    """
    Normalize a list of strings or a comma-separated string into trimmed items.

    Empty items are dropped; anything other than a list or string yields [].

    Raises:
        ValidationError: If a list contains non-string items
    """
    if value is None:
        return []

    if isinstance(value, str):
        raw_items = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw_items = list(value)
    else:
        return []

    items = []
    for item in raw_items:
        if item is None:
            continue
        if not isinstance(item, str):
            raise ValidationError("All items must be strings")
        item = item.strip()
        if item:
            items.append(item)
    return items


def _check_limits(items: List[str], what: str) -> List[str]:
    if len(items) > MAX_ITEMS:
        raise ValidationError(f"{what} list cannot exceed {MAX_ITEMS} items")
    for item in items:
        if len(item) > MAX_ITEM_LENGTH:
            raise ValidationError(f"{what} text cannot exceed {MAX_ITEM_LENGTH} characters")
    return items


def validate_ingredients_list(ingredients: Any) -> List[str]:
    """
    Validate and normalize the ingredients input.

    Args:
        ingredients: List of ingredient strings or a comma-separated string

    Returns:
        Ordered list of non-empty, trimmed ingredients

    Raises:
        ValidationError: If no valid ingredient remains or limits are exceeded
    """
    validated = split_items(ingredients)
    if not validated:
        raise ValidationError("At least one valid ingredient is required")
    return _check_limits(validated, "Ingredients")


def validate_restrictions(restrictions: Any) -> List[str]:
    """Normalize dietary restrictions; an empty result is allowed."""
    return _check_limits(split_items(restrictions), "Dietary restrictions")


def validate_preferences(preferences: Any) -> str:
    """Normalize free-text preferences. Non-strings are treated as empty."""
    if not isinstance(preferences, str):
        return ""
    preferences = preferences.strip()
    if len(preferences) > MAX_ITEM_LENGTH:
        raise ValidationError(f"Preferences cannot exceed {MAX_ITEM_LENGTH} characters")
    return preferences
