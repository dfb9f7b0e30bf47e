"""
Modelos ORM de recetas guardadas.

Una receta guardada pertenece a un usuario y, opcionalmente, a la huella
(SHA-256) del archivo del que se extrajo. La huella es única por usuario y
es lo que usa el cache del pipeline.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class RecipeRecord(Base):
    """
    Receta persistida.

    `ingredients_json`, `instructions_json` y `nutrition_json` son JSON en
    texto. `nutrition_json` lleva además `_ai_estimated` y `_servings_used`
    (procedencia de la nutrición), con guion bajo para no chocar con las
    cuatro claves públicas.
    """
    __tablename__ = "recipes"
    __table_args__ = (
        UniqueConstraint("user_id", "file_hash", name="uq_recipes_user_file_hash"),
    )

    # Identidad
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(64), index=True)

    # Campos de la receta
    recipe_name: Mapped[str] = mapped_column(String(300))
    author: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    link: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    servings: Mapped[float | None] = mapped_column(Float, nullable=True)
    prep_time_minutes: Mapped[float | None] = mapped_column(Float, nullable=True)
    cook_time_minutes: Mapped[float | None] = mapped_column(Float, nullable=True)

    ingredients_json: Mapped[str] = mapped_column(Text, default="[]")
    instructions_json: Mapped[str] = mapped_column(Text, default="[]")
    nutrition_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Huella del archivo de origen (None si la receta se cargó a mano)
    file_hash: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
