"""
Fixtures compartidas.

- `FakeExtractionService`: reemplaza a OpenAI con respuestas fijas (o excepciones)
  y registra cada llamada.
- `db_session`: SQLite en memoria con el esquema creado.
"""

import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recipe_ai_core.db.database import Base
from recipe_ai_core.db import models  # noqa: F401  registra RecipeRecord


class FakeExtractionService:
    """
    Servicio de extracción falso.

    `extraction` / `nutrition` pueden ser un string (respuesta cruda), un dict
    (se serializa a JSON) o una excepción (se lanza).
    """

    def __init__(self, extraction=None, nutrition=None):
        self.extraction = extraction
        self.nutrition = nutrition
        self.extract_calls = []
        self.text_calls = []

    @staticmethod
    def _respond(value):
        if isinstance(value, Exception):
            raise value
        if isinstance(value, dict):
            return json.dumps(value)
        return value or ""

    def extract_document(self, document, mime_type, prompt):
        self.extract_calls.append({"document": document, "mime_type": mime_type, "prompt": prompt})
        return self._respond(self.extraction)

    def complete_text(self, prompt):
        self.text_calls.append(prompt)
        return self._respond(self.nutrition)


@pytest.fixture
def fake_service_factory():
    return FakeExtractionService


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Sesión sobre SQLite en memoria; rollback al final del test."""
    Session = sessionmaker(bind=db_engine, autoflush=False, future=True)
    session = Session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
