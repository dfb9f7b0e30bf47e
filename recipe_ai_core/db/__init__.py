"""Persistencia de recetas (SQLAlchemy)."""
