"""
Endpoint de escaneo de recetas.

Este endpoint maneja:
- POST /api/v1/scan: Extraer una receta de una imagen o PDF
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from recipe_ai_core.config import get_settings
from recipe_ai_core.db.store import SqlRecipeStore
from recipe_ai_core.engine import run_scan_pipeline
from recipe_ai_core.errors import (
    InvalidInput,
    MalformedResponse,
    RateLimited,
    RecipeExtractionError,
    UpstreamUnavailable,
)
from recipe_ai_core.media import detect_mime_type

from ..dependencies import get_current_user_id, get_db
from ..models.requests import RecipePayload, ScanResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/scan", tags=["scan"])

STATUS_BY_ERROR = {
    InvalidInput: 400,
    RateLimited: 429,
    UpstreamUnavailable: 502,
    MalformedResponse: 502,
}


def extraction_error_to_http(error: RecipeExtractionError) -> HTTPException:
    """Traduce un error del pipeline a HTTPException (`{"error", "message"}`)."""
    status_code = STATUS_BY_ERROR.get(type(error), 500)
    headers = None
    if isinstance(error, RateLimited) and error.retry_after:
        headers = {"Retry-After": str(error.retry_after)}
    return HTTPException(
        status_code=status_code,
        detail={"error": error.kind, "message": error.upstream_message},
        headers=headers,
    )


@router.post("", response_model=ScanResponse)
def scan_recipe(
    file: UploadFile = File(...),
    debug: bool = Form(False),
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    """
    Extrae una receta de un archivo subido.

    Args:
        file: Imagen (.png, .jpg, .jpeg, .webp) o PDF
        debug: Si True, ignora el cache y fuerza una extracción nueva

    Returns:
        ScanResponse con la receta, la huella del archivo y si salió del cache
    """
    settings = get_settings()
    content = file.file.read()

    max_bytes = settings.max_upload_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"El archivo supera el máximo de {settings.max_upload_mb} MB",
        )

    mime_type = detect_mime_type(file.filename, file.content_type)
    if mime_type is None:
        raise HTTPException(
            status_code=400,
            detail={
                "error": InvalidInput.kind,
                "message": "Tipo de archivo no soportado. Usar PDF, JPG, PNG o WEBP.",
            },
        )

    if debug:
        logger.info("Escaneo en modo debug: se omite el cache")

    try:
        result = run_scan_pipeline(
            content,
            mime_type,
            store=SqlRecipeStore(session, user_id),
            use_cache=not debug,
        )
    except RecipeExtractionError as e:
        logger.warning(f"Falló la extracción de {file.filename}: {e.kind} ({e.upstream_message})")
        raise extraction_error_to_http(e) from e

    return ScanResponse(
        success=True,
        recipe_data=RecipePayload.from_recipe(result["recipe"]),
        filename=file.filename,
        processed_at=datetime.now(timezone.utc),
        cached=result["cached"],
        file_hash=result["fingerprint"],
    )
