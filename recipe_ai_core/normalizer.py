"""
Normalización del JSON (no confiable) del modelo a la `Recipe` canónica.

`normalize_recipe` nunca falla: cada campo tiene un default y cada valor se
chequea por tipo en runtime. No hay coerción string→número en esta etapa
(eso pasa después, solo para porciones, en `servings.resolve_servings`).
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, List, Optional

from .domain_models import (
    NUTRITION_FIELDS,
    UNTITLED_RECIPE,
    Ingredient,
    InstructionStep,
    Number,
    NutritionFacts,
    Recipe,
)

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\S+")


def _is_number(value: Any) -> bool:
    # bool es subclase de int y no cuenta como número; NaN/Infinity tampoco
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _number_or_none(value: Any) -> Optional[Number]:
    return value if _is_number(value) else None


def _lower_char(c: str) -> str:
    low = c.lower()
    return low if len(low) == 1 else c


def _upper_char(c: str) -> str:
    up = c.upper()
    return up if len(up) == 1 else c


def _capitalize_token(match: re.Match) -> str:
    token = match.group(0)
    return _upper_char(token[0]) + token[1:]


def to_title_case(text: str) -> str:
    """
    Pasa a Title Case solo si el texto está "gritado".

    Un texto está gritado si más de la mitad de sus letras son mayúsculas. En ese caso se pasa todo a minúsculas y se capitaliza la
    primera letra de cada token separado por espacios ("CHICKEN SOUP" →
    "Chicken Soup"). Si no, se devuelve intacto: se respeta el casing
    intencional ("iPhone Pancakes", "BBQ ribs").
    """
    if not text:
        return text

    letters = [c for c in text if c.isalpha()]
    if not letters:
        return text

    uppercase = sum(1 for c in letters if c.isupper())
    if uppercase / len(letters) <= 0.5:
        return text

    lowered = "".join(_lower_char(c) for c in text)
    return _TOKEN_RE.sub(_capitalize_token, lowered)


def _clean_optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    text = str(value).strip()
    return text or None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _normalize_ingredients(raw: Any) -> List[Ingredient]:
    if not isinstance(raw, list):
        return []

    ingredients: List[Ingredient] = []
    for ing in raw:
        if isinstance(ing, dict):
            ingredients.append(
                Ingredient(
                    quantity=_as_text(ing.get("quantity")),
                    unit=_as_text(ing.get("unit")),
                    item=_as_text(ing.get("item")),
                    notes=_as_text(ing.get("notes")),
                )
            )
        elif isinstance(ing, str):
            ingredients.append(Ingredient(item=ing.strip()))
        else:
            ingredients.append(Ingredient())
    return ingredients


def _normalize_instructions(raw: Any) -> List[InstructionStep]:
    """
    Acepta objetos `{"step_number", "text"}` o strings sueltos.

    Los pasos con texto vacío se descartan y los que quedan se numeran 1..n
    en el orden de la lista.
    """
    if not isinstance(raw, list):
        return []

    texts: List[str] = []
    for inst in raw:
        if isinstance(inst, dict):
            text = _as_text(inst.get("text"))
        elif isinstance(inst, str):
            text = inst.strip()
        else:
            text = ""
        if text:
            texts.append(text)

    return [InstructionStep(step_number=i, text=t) for i, t in enumerate(texts, start=1)]


def _normalize_nutrition(raw: Any) -> Optional[NutritionFacts]:
    if not isinstance(raw, dict):
        return None
    return NutritionFacts(**{f: _number_or_none(raw.get(f)) for f in NUTRITION_FIELDS})


def normalize_recipe(data: Any) -> Recipe:
    """
    Valida y coerciona un objeto parseado (no confiable) a `Recipe`.

    Los flags de nutrición (`nutrition_ai_estimated`, `nutrition_servings_used`)
    arrancan en False/None; los setea el merge posterior.
    """
    if not isinstance(data, dict):
        logger.warning("Se esperaba un objeto de receta y llegó %s", type(data).__name__)
        data = {}

    raw_name = data.get("recipe_name")
    name = raw_name.strip() if isinstance(raw_name, str) else ""

    author = _clean_optional_str(data.get("author"))

    recipe = Recipe(
        recipe_name=to_title_case(name) if name else UNTITLED_RECIPE,
        author=to_title_case(author) if author else None,
        description=_clean_optional_str(data.get("description")),
        link=_clean_optional_str(data.get("link")),
        servings=_number_or_none(data.get("servings")),
        prep_time_minutes=_number_or_none(data.get("prep_time_minutes")),
        cook_time_minutes=_number_or_none(data.get("cook_time_minutes")),
        ingredients=_normalize_ingredients(data.get("ingredients")),
        instructions=_normalize_instructions(data.get("instructions")),
        nutrition=_normalize_nutrition(data.get("nutrition")),
    )

    if not recipe.instructions:
        logger.warning("La receta '%s' no tiene instrucciones extraídas", recipe.recipe_name)

    return recipe
