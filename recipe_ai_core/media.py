from __future__ import annotations

"""
recipe_ai_core.media
====================

Tipos de archivo soportados y validación de los documentos subidos.

Responsabilidad
----------------
- Determinar el MIME de un upload (content-type declarado o extensión).
- Rechazar con `InvalidInput` lo que no se puede mandar al modelo
  (MIME no soportado o archivo vacío), ANTES de cualquier llamada de red.

NO hace:
---------
- Render de PDF ni OCR (el modelo lee el documento de forma nativa).
"""

from pathlib import Path
from typing import Dict, Optional

from .errors import InvalidInput

SUPPORTED_MIME_TYPES = frozenset(
    {"image/png", "image/jpeg", "image/webp", "application/pdf"}
)

EXTENSION_MIME: Dict[str, str] = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}


def detect_mime_type(filename: str | None, declared: str | None = None) -> Optional[str]:
    """
    Resuelve el MIME de un upload.

    Prioriza el content-type declarado si es uno soportado (los navegadores a
    veces mandan `application/octet-stream`); si no, infiere por extensión.
    Devuelve None si no se puede determinar.
    """
    if declared:
        declared = declared.split(";")[0].strip().lower()
        if declared == "image/jpg":
            declared = "image/jpeg"
        if declared in SUPPORTED_MIME_TYPES:
            return declared

    if filename:
        return EXTENSION_MIME.get(Path(filename).suffix.lower())
    return None


def validate_document(file_bytes: bytes, mime_type: str | None) -> str:
    """
    Valida un documento antes de enviarlo al modelo.

    Returns
    -------
    str
        El MIME normalizado.

    Raises
    ------
    InvalidInput
        Si el archivo está vacío o el MIME no está soportado.
    """
    if not file_bytes:
        raise InvalidInput("El archivo está vacío")

    mime = (mime_type or "").split(";")[0].strip().lower()
    if mime == "image/jpg":
        mime = "image/jpeg"
    if mime not in SUPPORTED_MIME_TYPES:
        raise InvalidInput(
            f"Tipo de archivo no soportado: {mime_type or 'desconocido'}. "
            f"Soportados: {', '.join(sorted(SUPPORTED_MIME_TYPES))}"
        )
    return mime
