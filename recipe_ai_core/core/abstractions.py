"""
Abstracciones (Protocols) de los colaboradores externos del pipeline.

El pipeline solo habla con estas interfaces. Las
implementaciones reales viven en `llm_client.OpenAIExtractionService` y
`db.store.SqlRecipeStore`; en tests se usan fakes.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ..domain_models import Recipe


class ExtractionService(Protocol):
    """
    Servicio de completions "caja negra" (puede ser lento, limitar cuota o
    devolver texto mal formado).

    Ambos métodos devuelven el texto crudo del modelo. Errores:
    - `RateLimited` si el servicio respondió 429.
    - `UpstreamUnavailable` ante cualquier otra falla de red/HTTP.
    """

    def extract_document(self, document: bytes, mime_type: str, prompt: str) -> str:
        """
        Envía un documento (imagen o PDF) junto con el prompt de esquema.

        Args:
            document: Bytes crudos del archivo subido.
            mime_type: MIME del archivo (image/png, application/pdf, ...).
            prompt: Instrucciones con el esquema JSON pedido.

        Returns:
            Texto crudo que dice ser JSON (sin garantía de buena forma).
        """
        ...

    def complete_text(self, prompt: str) -> str:
        """
        Completion de solo texto (se usa para la estimación de nutrición).
        """
        ...


class RecipeStore(Protocol):
    """
    Store persistente de recetas, ligado a un usuario.

    La unicidad es por `(user_id, fingerprint)`: el mismo archivo subido dos
    veces por el mismo usuario es una sola receta.
    """

    def find_by_fingerprint(self, fingerprint: str) -> Optional[Recipe]:
        """Devuelve la receta guardada con esa huella, o None."""
        ...

    def create(self, recipe: Recipe, fingerprint: Optional[str] = None) -> Recipe:
        """Persiste la receta y la devuelve tal como quedó guardada."""
        ...
