"""
recipe_ai_core.json_repair
==========================

Recuperación "best-effort" de JSON devuelto por el modelo de extracción.

El modelo no garantiza un esquema y el límite de tokens puede cortar una receta
larga a mitad de un array. Un `json.loads` directo descartaría una extracción
que está completa en un 95%, así que acá se aplica una heurística acotada:

1) Sacar los fences de Markdown (```json ... ```) y el texto previo al primer `{`.
2) Si el texto no termina en `}`, cortarlo en el último `}` o `]` que aparezca.
3) Contar aperturas/cierres y agregar los `]` faltantes y después los `}`.
4) Parsear. Si falla, `MalformedResponse`.

Importante
----------
Esto NO es un reparador general de JSON. El conteo es ingenuo (no distingue
llaves dentro de strings) y los tests fijan ese comportamiento exacto.

`scrape_numeric_fields` es el camino degradado: busca campos numéricos por
nombre con regex y nunca lanza excepciones.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable

from .errors import MalformedResponse

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)


def clean_response_text(raw: str) -> str:
    """
    Quita fences de Markdown, espacios y cualquier prosa antes del primer `{`.

    Si no hay ningún `{` devuelve el texto limpio tal cual (el parse fallará).
    """
    text = _FENCE_RE.sub("", raw or "").strip()
    start = text.find("{")
    if start > 0:
        text = text[start:]
    return text


def repair_truncated_json(text: str) -> str:
    """
    Cierra estructuras abiertas de un JSON posiblemente truncado.

    - Si no termina en `}`: corta justo después del último `}` o `]`
      (el que esté más adelante). Si no hay ninguno, no hay punto de corte
      plausible y se lanza `MalformedResponse`.
    - Agrega los `]` faltantes y luego los `}` faltantes (en ese orden).
    """
    if not text.endswith("}"):
        last_complete = max(text.rfind("}"), text.rfind("]"))
        if last_complete < 0:
            raise MalformedResponse(
                "La respuesta está truncada y no tiene ningún cierre recuperable",
                upstream_message=text[:200],
            )
        logger.warning(
            "Respuesta aparentemente truncada (%d caracteres), se corta en la posición %d",
            len(text),
            last_complete,
        )
        text = text[: last_complete + 1]

    missing_brackets = text.count("[") - text.count("]")
    missing_braces = text.count("{") - text.count("}")
    if missing_brackets > 0:
        text += "]" * missing_brackets
    if missing_braces > 0:
        text += "}" * missing_braces
    return text


def parse_extraction_response(raw: str) -> Dict[str, Any]:
    """
    Recupera un objeto JSON desde el texto crudo del modelo.

    Raises
    ------
    MalformedResponse
        Si no hay objeto JSON recuperable (incluso tras la reparación), o si
        lo recuperado no es un objeto (ej: una lista o un número).
    """
    text = clean_response_text(raw)
    if not text.startswith("{"):
        raise MalformedResponse(
            "La respuesta del modelo no contiene un objeto JSON",
            upstream_message=text[:200],
        )

    repaired = repair_truncated_json(text)
    try:
        data = json.loads(repaired)
    except json.JSONDecodeError as e:
        logger.error(
            "No se pudo parsear la respuesta del modelo (largo=%d): %s | inicio=%r | final=%r",
            len(raw or ""),
            e,
            (raw or "")[:300],
            (raw or "")[-200:],
        )
        raise MalformedResponse(
            "No se pudo parsear la respuesta del modelo como JSON",
            upstream_message=str(e),
        ) from e

    if not isinstance(data, dict):
        raise MalformedResponse(
            f"Se esperaba un objeto JSON y llegó {type(data).__name__}",
        )
    return data


def scrape_numeric_fields(raw: str, fields: Iterable[str]) -> Dict[str, int]:
    """
    Extrae campos numéricos por nombre (`"calories": 450`) directamente del texto.

    Cada campo se recupera de forma independiente. El número tiene que estar
    seguido de un delimitador (`,`, `}`, `]`, `"` o salto de línea): un número
    cortado al final de un texto truncado no es confiable y se ignora.

    Devuelve solo los campos encontrados (posiblemente vacío). Nunca lanza.
    """
    found: Dict[str, int] = {}
    for field_name in fields:
        pattern = rf'"{re.escape(field_name)}"\s*:\s*(\d+(?:\.\d+)?)(?=\s*[,}}\]"\n])'
        match = re.search(pattern, raw or "")
        if match:
            found[field_name] = int(float(match.group(1)) + 0.5)
    return found
