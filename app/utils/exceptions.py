"""Custom exception classes."""


class RecetasException(Exception):
    """Base exception for the recipe service."""

    pass


class ValidationError(RecetasException):
    """Raised when caller input is invalid or empty after normalization."""

    pass


class GenerationError(RecetasException):
    """Raised when the text generator is unavailable or returns no usable text."""

    pass


class PersistenceError(RecetasException):
    """Raised when a read or write against the recipe store fails."""

    pass


class NotFoundError(RecetasException):
    """Raised when a recipe does not exist."""

    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id
