"""
Cache de recetas por huella de contenido.

Wrapper fino sobre el `RecipeStore`: si la huella ya existe para el usuario,
se devuelve la receta guardada y se evita todo el pipeline (y las llamadas
al modelo).
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from .core.abstractions import RecipeStore
from .domain_models import Recipe

logger = logging.getLogger(__name__)


class RecipeCache:
    def __init__(self, store: RecipeStore):
        self.store = store

    def lookup(self, fingerprint: str) -> Optional[Recipe]:
        """
        Busca una receta guardada por huella.

        Un error de base de datos se loguea y se trata como miss: el pipeline
        puede seguir extrayendo aunque el cache no responda.
        """
        try:
            recipe = self.store.find_by_fingerprint(fingerprint)
        except SQLAlchemyError as e:
            logger.error("Error consultando el cache de recetas (%s): %s", fingerprint, e)
            return None

        if recipe is not None:
            logger.info("Receta en cache para la huella %s", fingerprint)
        return recipe

    def remember(self, fingerprint: str, recipe: Recipe) -> Recipe:
        """Guarda la receta asociada a la huella (delegado a `store.create`)."""
        return self.store.create(recipe, fingerprint=fingerprint)
