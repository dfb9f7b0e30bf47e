"""
API HTTP principal para recipe-ai-core.

Esta aplicación FastAPI expone endpoints REST que usan el core interno
(recipe_ai_core.engine) para extraer recetas de imágenes y PDFs.

Uso:
    uvicorn api.main:app --reload --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from recipe_ai_core.db.database import init_db

from .routes import recipes, scan

# Cargar variables de entorno
load_dotenv()

# Determinar ambiente
ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configurar logging según ambiente
log_level = getattr(logging, LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)
logger.info(f"🚀 Iniciando API en ambiente: {ENVIRONMENT}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Crea las tablas que falten al arrancar."""
    init_db()
    yield


app = FastAPI(
    title="Recipe AI Core API",
    description="API para extraer recetas estructuradas de imágenes y PDFs con IA",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: configurar según ambiente
cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
cors_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

logger.info(f"🌐 CORS origins configurados: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Registrar rutas
app.include_router(scan.router)
app.include_router(recipes.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "recipe-ai-core-api"}


@app.get("/health")
async def health():
    """Health check detallado."""
    return {
        "status": "ok",
        "service": "recipe-ai-core-api",
        "version": "0.1.0",
    }
