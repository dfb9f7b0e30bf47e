from __future__ import annotations

"""
recipe_ai_core.engine
=====================

Orquestador de alto nivel del pipeline de escaneo de recetas.

Este módulo expone una **API interna** y estable para correr el flujo completo
del core (hash → cache → extracción → parse → normalización → nutrición), sin
preocuparse por:

- HTTP
- frameworks web
- detalles de CLI

La idea es que:

- La CLI (`cli.py`) y la API (`api/routes/scan.py`) usen estas funciones.
- Nadie hable directo con `llm_client.py` salvo a través de este engine.
"""

import logging
from typing import Optional, TypedDict

from .cache import RecipeCache
from .core.abstractions import ExtractionService, RecipeStore
from .domain_models import Recipe
from .estimator import estimate_nutrition
from .fingerprint import hash_bytes
from .json_repair import parse_extraction_response
from .media import validate_document
from .normalizer import normalize_recipe
from .nutrition import find_missing_fields, merge_nutrition
from .prompts import build_extraction_prompt
from .servings import resolve_servings

logger = logging.getLogger(__name__)


class ScanRunResult(TypedDict):
    """
    Resultado de una corrida completa del pipeline de escaneo.

    Estructura simple, pensada para:
    - Devolver datos a la capa HTTP.
    - Realizar asserts en tests de integración.
    """

    recipe: Recipe
    """Receta final (normalizada y con nutrición completada si hizo falta)."""

    fingerprint: str
    """SHA-256 hex de los bytes del archivo."""

    cached: bool
    """True si la receta salió del cache y no se llamó al modelo."""


def _default_service() -> ExtractionService:
    from .llm_client import OpenAIExtractionService

    return OpenAIExtractionService()


def extract_recipe(
    file_bytes: bytes,
    mime_type: str,
    *,
    service: ExtractionService | None = None,
) -> Recipe:
    """
    Extrae una receta de un documento (sin cache).

    Flujo:
    ------
    1) Validación de input (`InvalidInput` antes de cualquier llamada).
    2) Extracción principal con el modelo de visión.
    3) Parse tolerante (`parse_extraction_response`).
    4) Normalización (`normalize_recipe`).
    5) Porciones (`resolve_servings`) sobre el valor tal como vino del modelo.
    6) Si faltan campos de nutrición: estimación secundaria + merge.

    Parameters
    ----------
    file_bytes:
        Contenido del archivo (imagen o PDF).
    mime_type:
        MIME del archivo; ver `media.SUPPORTED_MIME_TYPES`.
    service:
        Servicio de extracción. Por defecto, OpenAI.

    Returns
    -------
    Recipe

    Raises
    ------
    InvalidInput, RateLimited, UpstreamUnavailable, MalformedResponse
        Fallas de la extracción principal. Las fallas de la estimación
        secundaria NO se propagan.
    """
    mime = validate_document(file_bytes, mime_type)
    if service is None:
        service = _default_service()

    raw = service.extract_document(file_bytes, mime, build_extraction_prompt(mime))
    data = parse_extraction_response(raw)
    recipe = normalize_recipe(data)

    raw_servings = data.get("servings")
    servings = resolve_servings(raw_servings)
    servings_text = raw_servings if isinstance(raw_servings, str) else None

    missing = find_missing_fields(recipe.nutrition)
    if not missing:
        return recipe

    logger.info("Faltan campos de nutrición: %s", ", ".join(sorted(missing)))
    estimated = estimate_nutrition(
        recipe.ingredients,
        servings,
        missing,
        service=service,
        servings_text=servings_text,
    )
    merged = merge_nutrition(recipe.nutrition, estimated)
    recipe.nutrition = merged.nutrition
    recipe.nutrition_ai_estimated = merged.ai_estimated
    recipe.nutrition_servings_used = merged.servings_used
    return recipe


def run_scan_pipeline(
    file_bytes: bytes,
    mime_type: str,
    *,
    store: Optional[RecipeStore] = None,
    service: ExtractionService | None = None,
    use_cache: bool = True,
) -> ScanRunResult:
    """
    Ejecuta el pipeline completo de escaneo (con cache por huella).

    - Si hay `store` y `use_cache`, una huella conocida devuelve la receta
      guardada sin llamar al modelo.
    - En un miss se corre `extract_recipe`. La receta NO se persiste acá:
      guardar es una acción explícita del usuario (`POST /api/v1/recipes`).
    """
    validate_document(file_bytes, mime_type)
    fingerprint = hash_bytes(file_bytes)

    if store is not None and use_cache:
        cached = RecipeCache(store).lookup(fingerprint)
        if cached is not None:
            return {"recipe": cached, "fingerprint": fingerprint, "cached": True}

    recipe = extract_recipe(file_bytes, mime_type, service=service)
    return {"recipe": recipe, "fingerprint": fingerprint, "cached": False}
