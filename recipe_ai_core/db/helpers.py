"""
Funciones helper para trabajar con `RecipeRecord`.

Estas funciones facilitan:
- Convertir entre `RecipeRecord` (ORM) y `Recipe` (dominio).
- Serializar la nutrición con su procedencia (`_ai_estimated`, `_servings_used`).
- CRUD de recetas, siempre acotado al usuario dueño.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..domain_models import NUTRITION_FIELDS, Recipe
from .models import RecipeRecord

logger = logging.getLogger(__name__)


class DuplicateRecipeError(ValueError):
    """Ya existe una receta del usuario para la misma huella de archivo."""

    def __init__(self, file_hash: str, existing_id: str):
        super().__init__(f"Ya existe una receta para este archivo (id={existing_id})")
        self.file_hash = file_hash
        self.existing_id = existing_id


# ============================================================
# Serialización
# ============================================================

def serialize_nutrition(recipe: Recipe) -> Optional[str]:
    """
    Serializa la nutrición de la receta a JSON (o None si no tiene).

    La procedencia viaja dentro del mismo blob:
        {"calories": 450, ..., "_ai_estimated": true, "_servings_used": 4}
    """
    if recipe.nutrition is None:
        return None
    payload: Dict[str, Any] = recipe.nutrition.to_dict()
    payload["_ai_estimated"] = recipe.nutrition_ai_estimated
    payload["_servings_used"] = recipe.nutrition_servings_used
    return json.dumps(payload)


def _load_json(raw: Optional[str], default: Any) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("JSON inválido en la base de datos: %s", e)
        return default


def _number_from_db(value: Optional[float]):
    # Float en la columna; los enteros vuelven como int
    if value is not None and float(value).is_integer():
        return int(value)
    return value


def record_to_recipe(record: RecipeRecord) -> Recipe:
    """Reconstruye un `Recipe` de dominio desde un registro."""
    nutrition = _load_json(record.nutrition_json, None)
    ai_estimated = False
    servings_used = None
    if isinstance(nutrition, dict):
        ai_estimated = bool(nutrition.get("_ai_estimated", False))
        servings_used = nutrition.get("_servings_used")
        nutrition = {f: nutrition.get(f) for f in NUTRITION_FIELDS}
    else:
        nutrition = None

    return Recipe.from_dict(
        {
            "recipe_name": record.recipe_name,
            "author": record.author,
            "description": record.description,
            "link": record.link,
            "servings": _number_from_db(record.servings),
            "prep_time_minutes": _number_from_db(record.prep_time_minutes),
            "cook_time_minutes": _number_from_db(record.cook_time_minutes),
            "ingredients": _load_json(record.ingredients_json, []),
            "instructions": _load_json(record.instructions_json, []),
            "nutrition": nutrition,
            "nutrition_ai_estimated": ai_estimated,
            "nutrition_servings_used": servings_used,
        }
    )


def _apply_recipe(record: RecipeRecord, recipe: Recipe) -> None:
    record.recipe_name = recipe.recipe_name
    record.author = recipe.author
    record.description = recipe.description
    record.link = recipe.link
    record.servings = recipe.servings
    record.prep_time_minutes = recipe.prep_time_minutes
    record.cook_time_minutes = recipe.cook_time_minutes
    record.ingredients_json = json.dumps([i.to_dict() for i in recipe.ingredients])
    record.instructions_json = json.dumps([s.to_dict() for s in recipe.instructions])
    record.nutrition_json = serialize_nutrition(recipe)


# ============================================================
# CRUD
# ============================================================

def get_recipe_record(session: Session, user_id: str, recipe_id: str) -> RecipeRecord | None:
    """Obtiene una receta por ID, solo si pertenece al usuario."""
    return (
        session.query(RecipeRecord)
        .filter_by(id=recipe_id, user_id=user_id)
        .first()
    )


def get_recipe_record_by_hash(session: Session, user_id: str, file_hash: str) -> RecipeRecord | None:
    """Obtiene la receta del usuario asociada a una huella de archivo."""
    return (
        session.query(RecipeRecord)
        .filter_by(user_id=user_id, file_hash=file_hash)
        .first()
    )


def list_recipe_records(session: Session, user_id: str) -> list[RecipeRecord]:
    """Lista las recetas del usuario, las más nuevas primero."""
    return (
        session.query(RecipeRecord)
        .filter_by(user_id=user_id)
        .order_by(RecipeRecord.created_at.desc())
        .all()
    )


def create_recipe_record(
    session: Session,
    user_id: str,
    recipe: Recipe,
    file_hash: str | None = None,
) -> RecipeRecord:
    """
    Crea una receta guardada.

    Args:
        session: Sesión de base de datos
        user_id: Dueño de la receta
        recipe: Receta de dominio (ya normalizada / editada por el usuario)
        file_hash: Huella del archivo de origen, si la hay

    Returns:
        RecipeRecord creado (con flush, así ya tiene id)

    Raises:
        DuplicateRecipeError: Si el usuario ya tiene una receta con esa huella
    """
    if file_hash:
        existing = get_recipe_record_by_hash(session, user_id, file_hash)
        if existing is not None:
            raise DuplicateRecipeError(file_hash, existing.id)

    record = RecipeRecord(user_id=user_id, file_hash=file_hash or None)
    _apply_recipe(record, recipe)
    session.add(record)
    session.flush()
    logger.info("Receta guardada: %s (usuario %s)", record.id, user_id)
    return record


def update_recipe_record(session: Session, record: RecipeRecord, recipe: Recipe) -> RecipeRecord:
    """Reemplaza el contenido de la receta (la huella no cambia)."""
    _apply_recipe(record, recipe)
    session.flush()
    return record


def delete_recipe_record(session: Session, record: RecipeRecord) -> None:
    session.delete(record)
    session.flush()
    logger.info("Receta eliminada: %s", record.id)
