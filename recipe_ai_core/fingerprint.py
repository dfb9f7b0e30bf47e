"""
Huella de contenido (SHA-256) de los archivos subidos.

Se usa como clave de cache/deduplicación: dos uploads con los mismos bytes
colapsan a la misma receta guardada. Solo importan los bytes; nombre de
archivo, MIME y metadata no afectan el resultado.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

_CHUNK_SIZE = 1024 * 1024


def hash_bytes(data: bytes) -> str:
    """Devuelve el digest SHA-256 (hex, 64 caracteres) de `data`."""
    return hashlib.sha256(data).hexdigest()


def hash_file(path: str | Path) -> str:
    """
    Calcula la huella de un archivo en disco leyendo por bloques.

    Produce exactamente el mismo valor que `hash_bytes(path.read_bytes())`.
    Los errores de I/O (`FileNotFoundError`, `PermissionError`, ...) se propagan.
    """
    digest = hashlib.sha256()
    with Path(path).open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
