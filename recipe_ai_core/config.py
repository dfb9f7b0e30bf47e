# recipe_ai_core/config.py
from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv

"""
recipe_ai_core.config
=====================

Gestión centralizada de configuración de la aplicación.

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)

Convenciones
------------
- Las variables de entorno se cargan desde un archivo `.env` si existe.
- Los defaults están pensados para desarrollo local.
- En producción, los valores deben venir del entorno real (Docker, CI, etc.).

Notas importantes
-----------------
- `load_dotenv()` se ejecuta al importar el módulo.
- Si una variable crítica (ej. API key) no está presente,
  el error se lanza en el lugar donde se usa, no acá.
- En tests, `get_settings.cache_clear()` fuerza a releer el entorno.
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()


@dataclass
class Settings:
    """
    Contenedor tipado de configuración global de la aplicación.

    Attributes
    ----------
    openai_api_key:
        API key de OpenAI. Debe estar presente para cualquier operación con LLM.
    openai_model_vision:
        Modelo con visión para la extracción principal (imagen o PDF).
    openai_model_text:
        Modelo de texto para la estimación de nutrición.
    openai_timeout_seconds:
        Timeout del cliente HTTP de OpenAI. El pipeline no implementa otro.
    extraction_max_tokens / nutrition_max_tokens:
        Límites de salida. Una receta larga puede truncarse igual; para eso
        existe `json_repair`.
    database_url:
        URL SQLAlchemy del store de recetas.
    jwt_secret / jwt_algorithm:
        Para verificar los bearer tokens (se emiten fuera de este servicio).
    max_upload_mb:
        Tamaño máximo aceptado en /api/v1/scan.
    """

    # OpenAI
    openai_api_key: str
    openai_model_vision: str
    openai_model_text: str
    openai_timeout_seconds: float = 60.0

    # Generación
    extraction_max_tokens: int = 8000
    extraction_temperature: float = 0.1
    nutrition_max_tokens: int = 2000
    nutrition_temperature: float = 0.3

    # Persistencia
    database_url: str = "sqlite:///data/recipe_ai_core.sqlite"

    # Auth (solo verificación)
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"

    # Uploads
    max_upload_mb: int = 20


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - OPENAI_API_KEY
    - OPENAI_MODEL_VISION (default: "gpt-4.1-mini")
    - OPENAI_MODEL_TEXT (default: "gpt-4.1-mini")
    - OPENAI_TIMEOUT_SECONDS (default: 60)
    - EXTRACTION_MAX_TOKENS (default: 8000)
    - NUTRITION_MAX_TOKENS (default: 2000)
    - DATABASE_URL (default: "sqlite:///data/recipe_ai_core.sqlite")
    - JWT_SECRET, JWT_ALGORITHM (default: "HS256")
    - MAX_UPLOAD_MB (default: 20)

    Notas
    -----
    - Si `OPENAI_API_KEY` no está definida, NO se falla acá.
      El error se lanza cuando alguien intenta usar OpenAI.
    """
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_model_vision=os.getenv("OPENAI_MODEL_VISION", "gpt-4.1-mini"),
        openai_model_text=os.getenv("OPENAI_MODEL_TEXT", "gpt-4.1-mini"),
        openai_timeout_seconds=float(os.getenv("OPENAI_TIMEOUT_SECONDS", "60")),

        extraction_max_tokens=int(os.getenv("EXTRACTION_MAX_TOKENS", "8000")),
        nutrition_max_tokens=int(os.getenv("NUTRITION_MAX_TOKENS", "2000")),

        database_url=os.getenv("DATABASE_URL", "sqlite:///data/recipe_ai_core.sqlite"),

        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),

        max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "20")),
    )
