"""
Resolución de porciones libres ("4", "4-6", "4 to 6", 6) a un entero.

El valor resuelto solo se usa para la estimación de nutrición por porción;
nunca se escribe de vuelta en `Recipe.servings`.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

# Dos enteros separados por guion, en-dash, em-dash o la palabra "to"
_RANGE_RE = re.compile(r"(\d+)\s*(?:-|–|—|to)\s*(\d+)", re.IGNORECASE)
_INT_RE = re.compile(r"\d+")


def round_half_up(value: float) -> int:
    """Redondeo al entero más cercano, .5 hacia arriba (no el 'banker's rounding' de `round`)."""
    return int(math.floor(value + 0.5))


def resolve_servings(value: Any) -> Optional[int]:
    """
    Convierte un valor de porciones a entero.

    - None                    → None
    - int                     → tal cual
    - float                   → redondeado (half-up)
    - "4-6" / "4 to 6"        → promedio redondeado half-up (5)
    - string con un solo entero ("Serves 8") → ese entero
    - cualquier otra cosa     → None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return round_half_up(value)
    if not isinstance(value, str):
        return None

    range_match = _RANGE_RE.search(value)
    if range_match:
        low, high = int(range_match.group(1)), int(range_match.group(2))
        return round_half_up((low + high) / 2)

    numbers = _INT_RE.findall(value)
    if len(numbers) == 1:
        return int(numbers[0])
    return None
