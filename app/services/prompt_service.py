"""Prompt construction for recipe generation."""

from typing import List, Optional

RECIPE_FORMAT = """Formato:
**Título:** [Nombre de la receta]
**Ingredientes:**
- [Ingrediente 1]
- [Ingrediente 2]
**Instrucciones:**
1. [Paso 1]
2. [Paso 2]"""


def build_recipe_prompt(
    ingredients: List[str],
    restrictions: Optional[List[str]] = None,
    preferences: str = "",
) -> str:
    """
    Build the generation prompt.

    The output is deterministic for a given input and always ends with the
    three-section layout that the recipe parser understands.
    """
    lines = [f"Genera una receta con: {', '.join(ingredients)}."]
    if restrictions:
        lines.append(f"Restricciones dietéticas: {', '.join(restrictions)}.")
    if preferences:
        lines.append(f"Preferencias: {preferences}.")
    lines.append(
        "Responde únicamente con la receta, sin texto adicional, "
        "usando exactamente las secciones del formato."
    )
    return "\n".join(lines) + "\n\n" + RECIPE_FORMAT
