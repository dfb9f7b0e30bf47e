"""
Análisis de huecos y merge de nutrición.

- `find_missing_fields`: qué campos de nutrición faltan tras la extracción.
- `merge_nutrition`: combina lo extraído con lo estimado, campo por campo,
  prefiriendo siempre el dato original, y calcula los flags de procedencia.
"""

from __future__ import annotations

from typing import FrozenSet, Optional

from .domain_models import (
    NUTRITION_FIELDS,
    EstimatedNutrition,
    MergeResult,
    NutritionFacts,
)


def find_missing_fields(nutrition: Optional[NutritionFacts]) -> FrozenSet[str]:
    """
    Devuelve los campos de nutrición faltantes.

    Si `nutrition` es None faltan los cuatro; si no, falta cada campo cuyo
    valor sea None. El set vacío significa "no estimar" (no hay llamada de red).
    """
    if nutrition is None:
        return frozenset(NUTRITION_FIELDS)
    return frozenset(f for f in NUTRITION_FIELDS if nutrition.get(f) is None)


def merge_nutrition(
    original: Optional[NutritionFacts],
    estimated: EstimatedNutrition,
) -> MergeResult:
    """
    Merge campo por campo: original si no es None, si no el estimado.

    `ai_estimated` es True sii algún valor final vino del lado estimado. Si la
    estimación devolvió todo None queda en False aunque se haya intentado.
    `servings_used` solo se informa cuando `ai_estimated` es True.
    """
    base = original or NutritionFacts()
    merged = NutritionFacts()
    ai_estimated = False

    for field_name in NUTRITION_FIELDS:
        original_value = base.get(field_name)
        if original_value is not None:
            setattr(merged, field_name, original_value)
            continue
        estimated_value = estimated.get(field_name)
        setattr(merged, field_name, estimated_value)
        if estimated_value is not None:
            ai_estimated = True

    return MergeResult(
        nutrition=merged,
        ai_estimated=ai_estimated,
        servings_used=estimated.servings_used if ai_estimated else None,
    )
