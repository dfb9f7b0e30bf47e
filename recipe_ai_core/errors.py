"""
recipe_ai_core.errors
=====================

Taxonomía de errores del pipeline de extracción.

- `MalformedResponse`: el texto del modelo no se pudo parsear ni siquiera
  después de la reparación por truncamiento.
- `UpstreamUnavailable`: error de red/HTTP contra el servicio de extracción.
- `RateLimited`: el servicio respondió con límite de cuota (429).
- `InvalidInput`: MIME no soportado o bytes vacíos (se valida antes de
  cualquier llamada de red).

En la extracción principal todos son fatales y se propagan al llamador.
En la estimación de nutrición se absorben dentro del estimador.
"""

from __future__ import annotations


class RecipeExtractionError(Exception):
    """Error base del pipeline. `kind` es un código corto apto para la API."""

    kind = "extraction_error"

    def __init__(self, message: str, upstream_message: str | None = None):
        self.upstream_message = upstream_message or message
        super().__init__(message)


class MalformedResponse(RecipeExtractionError):
    """El texto devuelto por el modelo no contiene un objeto JSON recuperable."""

    kind = "malformed_response"


class UpstreamUnavailable(RecipeExtractionError):
    """Falla de red o HTTP contactando al servicio de extracción."""

    kind = "upstream_unavailable"

    def __init__(self, message: str, upstream_message: str | None = None, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message, upstream_message)


class RateLimited(RecipeExtractionError):
    """El servicio de extracción devolvió 429 (cuota excedida)."""

    kind = "rate_limited"

    def __init__(self, message: str, upstream_message: str | None = None, retry_after: str | None = None):
        self.retry_after = retry_after
        super().__init__(message, upstream_message)


class InvalidInput(RecipeExtractionError):
    """El llamador pasó un MIME no soportado o un archivo vacío."""

    kind = "invalid_input"
