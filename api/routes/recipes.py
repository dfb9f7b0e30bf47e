"""
Endpoints de recetas guardadas.

Este endpoint maneja:
- POST /api/v1/recipes: Guardar una receta
- GET /api/v1/recipes: Listar recetas del usuario
- GET /api/v1/recipes/{recipe_id}: Obtener una receta
- PUT /api/v1/recipes/{recipe_id}: Reemplazar una receta
- DELETE /api/v1/recipes/{recipe_id}: Eliminar una receta
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from recipe_ai_core.db.helpers import (
    DuplicateRecipeError,
    create_recipe_record,
    delete_recipe_record,
    get_recipe_record,
    list_recipe_records,
    record_to_recipe,
    update_recipe_record,
)
from recipe_ai_core.db.models import RecipeRecord

from ..dependencies import get_current_user_id, get_db
from ..models.requests import RecipePayload, RecipeResponse, RecipeSaveRequest, RecipeUpdateRequest

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


def _to_response(record: RecipeRecord) -> RecipeResponse:
    return RecipeResponse(
        id=record.id,
        file_hash=record.file_hash,
        created_at=record.created_at,
        updated_at=record.updated_at,
        recipe=RecipePayload.from_recipe(record_to_recipe(record)),
    )


def _get_owned_or_404(session: Session, user_id: str, recipe_id: str) -> RecipeRecord:
    record = get_recipe_record(session, user_id, recipe_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Receta {recipe_id} no encontrada")
    return record


@router.post("", response_model=RecipeResponse, status_code=201)
def save_recipe(
    request: RecipeSaveRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    """Guarda una receta del usuario. 409 si ya existe una para el mismo archivo."""
    try:
        record = create_recipe_record(
            session,
            user_id,
            request.recipe.to_recipe(),
            file_hash=request.file_hash,
        )
    except DuplicateRecipeError as e:
        raise HTTPException(
            status_code=409,
            detail={"message": str(e), "recipe_id": e.existing_id},
        )
    return _to_response(record)


@router.get("", response_model=List[RecipeResponse])
def list_recipes(
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    """Lista las recetas del usuario, las más nuevas primero."""
    return [_to_response(r) for r in list_recipe_records(session, user_id)]


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    return _to_response(_get_owned_or_404(session, user_id, recipe_id))


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: str,
    request: RecipeUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    """Reemplaza el contenido de una receta (la huella de archivo se mantiene)."""
    record = _get_owned_or_404(session, user_id, recipe_id)
    update_recipe_record(session, record, request.recipe.to_recipe())
    return _to_response(record)


@router.delete("/{recipe_id}", status_code=204)
def delete_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    record = _get_owned_or_404(session, user_id, recipe_id)
    delete_recipe_record(session, record)
