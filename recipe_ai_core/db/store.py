from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from ..domain_models import Recipe
from .helpers import create_recipe_record, get_recipe_record_by_hash, record_to_recipe


class SqlRecipeStore:
    """
    `RecipeStore` sobre SQLAlchemy, acotado a un usuario.

    No hace commit: el dueño de la sesión (`get_db_session` / `get_db`) decide.
    """

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def find_by_fingerprint(self, fingerprint: str) -> Optional[Recipe]:
        record = get_recipe_record_by_hash(self.session, self.user_id, fingerprint)
        return record_to_recipe(record) if record is not None else None

    def create(self, recipe: Recipe, fingerprint: str | None = None) -> Recipe:
        record = create_recipe_record(self.session, self.user_id, recipe, file_hash=fingerprint)
        return record_to_recipe(record)
