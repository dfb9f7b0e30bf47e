"""
API HTTP para recipe-ai-core.

Esta capa expone endpoints REST que usan el core interno (recipe_ai_core.engine)
para escanear recetas y administrar las recetas guardadas de cada usuario.
"""
