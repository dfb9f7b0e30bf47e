# recipe_ai_core/prompts.py

"""
Prompts e instrucciones para la extracción de recetas y la estimación de nutrición.

Los prompts están en inglés: los campos de la receta (y el placeholder
"Untitled Recipe") se guardan en inglés.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .domain_models import NUTRITION_FIELDS, Ingredient

RECIPE_EXTRACTION_SYSTEM = (
    "You are a culinary extraction engine. You read recipe photos and PDFs "
    "and return valid JSON only."
)

RECIPE_SCHEMA = """{
  "recipe_name": "string",
  "author": "string" or null,
  "description": "string" or null,
  "link": "string" or null,
  "servings": integer or null,
  "prep_time_minutes": integer or null,
  "cook_time_minutes": integer or null,
  "ingredients": [
    {
      "quantity": "string",
      "unit": "string",
      "item": "string",
      "notes": "string"
    }
  ],
  "instructions": [
    {
      "step_number": integer,
      "text": "string"
    }
  ],
  "nutrition": {
    "calories": integer or null,
    "protein_g": integer or null,
    "fat_g": integer or null,
    "carbs_g": integer or null
  } or null
}"""

NUTRITION_SYSTEM = (
    "You are a registered dietitian. You estimate nutrition per serving from "
    "ingredient lists and return valid JSON only."
)

DEFAULT_ESTIMATION_SERVINGS = 4
"""Porciones asumidas cuando la receta no indica cuántas rinde."""

_FIELD_DESCRIPTIONS = {
    "calories": ("calories PER SERVING", "calories"),
    "protein_g": ("protein in grams PER SERVING", "protein"),
    "fat_g": ("fat in grams PER SERVING", "fat"),
    "carbs_g": ("carbohydrates in grams PER SERVING", "carbohydrates"),
}


def build_extraction_prompt(mime_type: str) -> str:
    """Prompt de extracción principal con el esquema JSON esperado."""
    source = "PDF document" if "pdf" in mime_type else "image"
    return f"""Extract the recipe details from this {source}. Follow this JSON schema exactly. If a field is missing or cannot be determined, return null for that field.

Required JSON Schema:
{RECIPE_SCHEMA}

CRITICAL INSTRUCTIONS:
- Extract ALL ingredients with their quantities, units, and items. Each ingredient must have at least the "item" field.
- Extract ALL instructions/directions/steps. Look for numbered steps, "Instructions:", "Directions:", "Method:", or any cooking steps.
- Each instruction must have a "step_number" (1, 2, 3, ...) and "text" (the actual instruction text).
- Extract the author name if present (e.g., "By John Smith", "Recipe by...", "Author:...").
- Extract the description if present (usually a brief introduction or summary).
- Extract the recipe link/URL if present (e.g., "Source: https://...", "From: www.example.com").
- Extract nutrition information ONLY if it is explicitly provided. If it is not visible, set nutrition to null (it will be estimated separately from the ingredients).
- Return ONLY valid JSON: no markdown, no code blocks, no explanations. Start with {{ and end with }}.
- If a field cannot be determined, use null (not an empty string or 0).
- The instructions array is REQUIRED; if no instructions are found, return an empty array []."""


def format_ingredient_list(ingredients: Iterable[Ingredient]) -> str:
    return "\n".join(line for line in (ing.display_line() for ing in ingredients) if line)


def build_servings_note(servings: Optional[int], servings_text: Optional[str] = None) -> str:
    """
    Indicación de porciones para el modelo.

    `servings_text` es el valor libre original ("4-6"); si es un rango se le
    informa el rango y el promedio que tiene que usar.
    """
    if servings is None:
        return (
            f"Assume this recipe serves {DEFAULT_ESTIMATION_SERVINGS} people "
            "for calculation purposes."
        )
    if servings_text and servings_text.strip() != str(servings):
        return (
            f"This recipe serves {servings_text.strip()} people. "
            f"Use {servings} servings for calculations."
        )
    return f"This recipe serves {servings} people."


def build_nutrition_prompt(
    ingredients: Iterable[Ingredient],
    servings: Optional[int],
    missing_fields: Iterable[str],
    servings_text: Optional[str] = None,
) -> str:
    """
    Prompt de estimación acotado a los campos faltantes.

    Los campos se listan en orden canónico para que el prompt sea determinista.
    """
    requested = [f for f in NUTRITION_FIELDS if f in set(missing_fields)]
    structure_lines: List[str] = [
        f'  "{f}": number ({_FIELD_DESCRIPTIONS[f][0]})' for f in requested
    ]
    structure = "{\n" + ",\n".join(structure_lines) + "\n}"
    names = ", ".join(requested)
    count = len(requested)

    return f"""Estimate the nutritional information PER SERVING for this recipe based on the ingredients list. Provide realistic estimates based on typical nutritional values for these ingredients.

Ingredients:
{format_ingredient_list(ingredients)}

{build_servings_note(servings, servings_text)}

Return ONLY a JSON object with this exact structure (include ALL fields listed):
{structure}

REQUIREMENTS:
1. Return ALL {count} field(s): {names}
2. Every field must have a numeric value
3. Estimates are PER SERVING (not for the entire recipe)
4. Round to whole numbers (integers only)
5. Return ONLY valid JSON: no markdown, no code blocks, no explanations"""
