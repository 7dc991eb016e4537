"""
Parser for the free-text recipe layout produced by the generator.

Expected (but never guaranteed) layout:

    **Título:** Arroz con pollo
    **Ingredientes:**
    - 1 taza de arroz
    * 2 muslos de pollo
    **Instrucciones:**
    1. Cocinar el arroz.
    2. Añadir el pollo.

Parsing is best-effort: lines that match no rule are dropped, and missing
sections produce the placeholder title or empty lists. It never raises.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Pattern, Tuple

from app.models.recipe import DEFAULT_TITLE, RecipeDraft

logger = logging.getLogger(__name__)

SECTION_NONE = "none"
SECTION_INGREDIENTS = "ingredients"
SECTION_INSTRUCTIONS = "instructions"

_EMPHASIS = r"(?:\*{1,2}|_{1,2})?"


def _header_pattern(label: str) -> Pattern[str]:
    # "Título:", "**Título:**", "**Título**:", "__Título:__ rest"
    return re.compile(
        rf"^{_EMPHASIS}\s*{label}\s*{_EMPHASIS}\s*:\s*{_EMPHASIS}\s*(?P<rest>.*)$",
        re.IGNORECASE,
    )


TITLE_HEADER = _header_pattern(r"t[ií]tulo")
INGREDIENTS_HEADER = _header_pattern(r"ingredientes")
INSTRUCTIONS_HEADER = _header_pattern(r"instrucciones")

BULLET_ITEM = re.compile(r"^[-*]\s+(?P<item>.*)$")
NUMBERED_STEP = re.compile(r"^\d+\.\s*(?P<step>.*)$")

_WRAPPED = re.compile(r"^(\*{1,2}|_{1,2})(?P<inner>(?:(?!\1).)+)\1$")
_TRAILING_EMPHASIS = re.compile(r"\s*(?:\*{1,2}|_{1,2})\s*$")


def _unwrap(text: str) -> str:
    """Remove emphasis markers that wrap the whole text."""
    text = text.strip()
    match = _WRAPPED.match(text)
    if match:
        return match.group("inner").strip()
    return text


class _ParseState:
    def __init__(self) -> None:
        self.section = SECTION_NONE
        self.title: Optional[str] = None
        self.ingredients: List[str] = []
        self.instructions: List[str] = []


def _on_title(state: _ParseState, match: re.Match) -> None:
    rest = match.group("rest").strip()
    if _WRAPPED.match(rest):
        title = _unwrap(rest)
    else:
        # Closing marker left over from "**Título: X**"
        title = _TRAILING_EMPHASIS.sub("", rest).strip()
    if title:
        state.title = title
    state.section = SECTION_NONE


def _on_ingredients_header(state: _ParseState, match: re.Match) -> None:
    state.section = SECTION_INGREDIENTS


def _on_instructions_header(state: _ParseState, match: re.Match) -> None:
    state.section = SECTION_INSTRUCTIONS


def _on_bullet(state: _ParseState, match: re.Match) -> None:
    item = _unwrap(match.group("item"))
    if item:
        state.ingredients.append(item)


def _on_step(state: _ParseState, match: re.Match) -> None:
    step = _unwrap(match.group("step"))
    if step:
        state.instructions.append(step)


# (required section or None for "any", pattern, action). First match wins.
_Rule = Tuple[Optional[str], Pattern[str], Callable[[_ParseState, re.Match], None]]

RULES: List[_Rule] = [
    (None, TITLE_HEADER, _on_title),
    (None, INGREDIENTS_HEADER, _on_ingredients_header),
    (None, INSTRUCTIONS_HEADER, _on_instructions_header),
    (SECTION_INGREDIENTS, BULLET_ITEM, _on_bullet),
    (SECTION_INSTRUCTIONS, NUMBERED_STEP, _on_step),
]


def parse_recipe_text(text: Optional[str]) -> RecipeDraft:
    """
    Parse generated recipe text into a RecipeDraft.

    Args:
        text: Raw generator output

    Returns:
        RecipeDraft; title falls back to DEFAULT_TITLE and missing sections
        yield empty lists.
    """
    state = _ParseState()
    lines = [line.strip() for line in (text or "").splitlines()]

    for line in lines:
        if not line:
            continue
        for section, pattern, action in RULES:
            if section is not None and state.section != section:
                continue
            match = pattern.match(line)
            if match:
                action(state, match)
                break

    draft = RecipeDraft(
        title=state.title or DEFAULT_TITLE,
        ingredients=state.ingredients,
        instructions=state.instructions,
    )

    logger.debug(
        "Parsed recipe text",
        extra={
            "title_found": state.title is not None,
            "ingredients_count": len(draft.ingredients),
            "instructions_count": len(draft.instructions),
        },
    )
    return draft
