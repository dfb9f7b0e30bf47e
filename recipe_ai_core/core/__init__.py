"""
Interfaces genéricas del core.

Este paquete define los contratos con los colaboradores externos
(servicio de extracción y store de recetas) para que el pipeline pueda
probarse y reutilizarse sin OpenAI ni base de datos.
"""
