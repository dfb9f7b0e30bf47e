"""
recipe_ai_core
==============

Core de extracción de recetas: documento (imagen/PDF) → receta estructurada,
con nutrición por porción completada por estimación cuando falta.

Punto de entrada: `recipe_ai_core.engine` (`extract_recipe`, `run_scan_pipeline`).
"""
