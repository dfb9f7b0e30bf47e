from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List

import openai
from openai import OpenAI

from .config import get_settings
from .errors import RateLimited, UpstreamUnavailable
from .prompts import NUTRITION_SYSTEM, RECIPE_EXTRACTION_SYSTEM

logger = logging.getLogger(__name__)


def get_client() -> OpenAI:
    settings = get_settings()
    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY no está configurada en el .env")
    # Sin reintentos: la política de retry es del llamador
    return OpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.openai_timeout_seconds,
        max_retries=0,
    )


def _to_data_url(document: bytes, mime_type: str) -> str:
    b64 = base64.b64encode(document).decode("ascii")
    return f"data:{mime_type};base64,{b64}"


def _document_part(document: bytes, mime_type: str) -> Dict[str, Any]:
    """
    Arma la parte de contenido para el documento.

    Imágenes van como `image_url` (data URL); los PDF como `file` con
    `file_data`, que el modelo lee de forma nativa.
    """
    data_url = _to_data_url(document, mime_type)
    if mime_type == "application/pdf":
        return {
            "type": "file",
            "file": {"filename": "recipe.pdf", "file_data": data_url},
        }
    return {"type": "image_url", "image_url": {"url": data_url}}


def _complete(
    messages: List[Dict[str, Any]],
    *,
    model: str,
    max_tokens: int,
    temperature: float,
) -> str:
    """
    Llama a chat.completions y traduce las excepciones de OpenAI a la taxonomía
    del pipeline (`RateLimited` / `UpstreamUnavailable`).
    """
    client = get_client()
    try:
        completion = client.chat.completions.create(
            model=model,
            messages=messages,
            response_format={"type": "json_object"},
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except openai.RateLimitError as e:
        retry_after = e.response.headers.get("retry-after") if e.response is not None else None
        message = "Cuota de la API excedida."
        if retry_after:
            message += f" Reintentar en {retry_after} segundos."
        raise RateLimited(message, upstream_message=e.message, retry_after=retry_after) from e
    except openai.APIStatusError as e:
        raise UpstreamUnavailable(
            f"Error de la API de OpenAI: {e.status_code}",
            upstream_message=e.message,
            status_code=e.status_code,
        ) from e
    except openai.APIConnectionError as e:
        raise UpstreamUnavailable(
            "No se pudo contactar a la API de OpenAI",
            upstream_message=str(e),
        ) from e

    choice = completion.choices[0]
    if choice.finish_reason == "length":
        logger.warning("La respuesta del modelo se cortó por límite de tokens (%d)", max_tokens)
    return choice.message.content or ""


class OpenAIExtractionService:
    """
    Implementación de `ExtractionService` sobre la API de OpenAI.

    - `extract_document`: modelo con visión, imagen o PDF + prompt de esquema.
    - `complete_text`: modelo de texto, para la estimación de nutrición.
    """

    def __init__(self, model_vision: str | None = None, model_text: str | None = None):
        settings = get_settings()
        self.model_vision = model_vision or settings.openai_model_vision
        self.model_text = model_text or settings.openai_model_text

    def extract_document(self, document: bytes, mime_type: str, prompt: str) -> str:
        settings = get_settings()
        logger.info(
            "Extrayendo receta (%s, %d bytes) con %s", mime_type, len(document), self.model_vision
        )
        return _complete(
            [
                {"role": "system", "content": RECIPE_EXTRACTION_SYSTEM},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        _document_part(document, mime_type),
                    ],
                },
            ],
            model=self.model_vision,
            max_tokens=settings.extraction_max_tokens,
            temperature=settings.extraction_temperature,
        )

    def complete_text(self, prompt: str) -> str:
        settings = get_settings()
        return _complete(
            [
                {"role": "system", "content": NUTRITION_SYSTEM},
                {"role": "user", "content": prompt},
            ],
            model=self.model_text,
            max_tokens=settings.nutrition_max_tokens,
            temperature=settings.nutrition_temperature,
        )
