"""
Estimación secundaria de nutrición a partir de los ingredientes.

Se invoca SOLO cuando `find_missing_fields` devolvió algo. Pide al modelo
únicamente los campos faltantes, por porción y como enteros.

Política de fallas
------------------
Esta etapa nunca interrumpe una extracción que ya salió bien: 429, errores de
red/HTTP o una respuesta irrecuperable devuelven todo None (con
`servings_used` informado) en lugar de propagar.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, Optional, Sequence

from .core.abstractions import ExtractionService
from .domain_models import NUTRITION_FIELDS, EstimatedNutrition, Ingredient
from .errors import MalformedResponse, RateLimited, UpstreamUnavailable
from .json_repair import parse_extraction_response, scrape_numeric_fields
from .prompts import DEFAULT_ESTIMATION_SERVINGS, build_nutrition_prompt
from .servings import round_half_up

logger = logging.getLogger(__name__)


def _requested_fields(missing_fields: Iterable[str]) -> Sequence[str]:
    missing = set(missing_fields)
    unknown = missing - set(NUTRITION_FIELDS)
    if unknown:
        raise ValueError(f"Campos de nutrición desconocidos: {sorted(unknown)}")
    return [f for f in NUTRITION_FIELDS if f in missing]


def _values_from_object(data: Dict[str, Any], requested: Sequence[str]) -> Dict[str, int]:
    values: Dict[str, int] = {}
    for field_name in requested:
        value = data.get(field_name)
        if isinstance(value, int) and not isinstance(value, bool):
            values[field_name] = value
        elif isinstance(value, float) and math.isfinite(value):
            values[field_name] = round_half_up(value)
        else:
            logger.warning("El modelo no devolvió un valor numérico para %s: %r", field_name, value)
    return values


def estimate_nutrition(
    ingredients: Sequence[Ingredient],
    servings: Optional[int],
    missing_fields: Iterable[str],
    *,
    service: ExtractionService | None = None,
    servings_text: Optional[str] = None,
) -> EstimatedNutrition:
    """
    Estima los campos de nutrición faltantes.

    Args:
        ingredients: Ingredientes normalizados de la receta.
        servings: Porciones resueltas (`resolve_servings`), o None.
        missing_fields: Campos a estimar; no puede ser vacío.
        service: Servicio de completions (default: OpenAI).
        servings_text: Valor libre original de porciones, solo para el prompt.

    Returns:
        `EstimatedNutrition` con valores SOLO para los campos pedidos; el resto
        siempre None. `servings_used` es `servings` o el default (4).

    Raises:
        ValueError: si `missing_fields` es vacío o tiene campos desconocidos
            (error de programación: el pipeline nunca lo hace).
    """
    requested = _requested_fields(missing_fields)
    if not requested:
        raise ValueError("estimate_nutrition requiere al menos un campo faltante")

    servings_used = servings if servings is not None else DEFAULT_ESTIMATION_SERVINGS
    empty = EstimatedNutrition(servings_used=servings_used)

    if service is None:
        from .llm_client import OpenAIExtractionService

        service = OpenAIExtractionService()

    prompt = build_nutrition_prompt(ingredients, servings, requested, servings_text=servings_text)
    logger.info("Estimando nutrición para %s (%d porciones)", ", ".join(requested), servings_used)

    try:
        raw = service.complete_text(prompt)
    except RateLimited as e:
        logger.warning("Cuota excedida en la estimación de nutrición, se omite: %s", e.upstream_message)
        return empty
    except UpstreamUnavailable as e:
        logger.warning("Falló la estimación de nutrición, se omite: %s", e.upstream_message)
        return empty

    try:
        values = _values_from_object(parse_extraction_response(raw), requested)
    except MalformedResponse as e:
        values = scrape_numeric_fields(raw, requested)
        if values:
            logger.info("Nutrición parcial recuperada por regex: %s", sorted(values))
        else:
            logger.warning("Respuesta de nutrición irrecuperable (%s): %r", e, raw[:500])
            return empty

    not_returned = [f for f in requested if f not in values]
    if not_returned:
        logger.warning("El modelo no devolvió valores para: %s", ", ".join(not_returned))

    return EstimatedNutrition(servings_used=servings_used, **values)
