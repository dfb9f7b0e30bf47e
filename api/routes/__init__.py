"""Rutas de la API."""

from . import recipes, scan

__all__ = ["recipes", "scan"]
