from __future__ import annotations

"""
recipe_ai_core.domain_models
============================

Modelos de dominio (dataclasses) usados a lo largo del pipeline de recetas.

Objetivo
--------
Este módulo define las estructuras "neutras" del sistema:

- Ingredientes (`Ingredient`) y pasos (`InstructionStep`)
- Información nutricional por porción (`NutritionFacts`)
- La receta canónica (`Recipe`), salida del pipeline
- Resultados intermedios de la estimación (`EstimatedNutrition`, `MergeResult`)

Principios de diseño
--------------------
- Dataclasses sin lógica pesada: este módulo NO habla con OpenAI, DB, ni IO.
- `Recipe` tiene forma fija: la normalización siempre produce todos los campos,
  sin importar la forma del JSON de entrada.
- `to_dict()` devuelve la forma JSON que consume la API y el store.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]

NUTRITION_FIELDS = ("calories", "protein_g", "fat_g", "carbs_g")
"""Campos de nutrición rastreados, en orden canónico."""

UNTITLED_RECIPE = "Untitled Recipe"


# ============================================================
# Ingredientes e instrucciones
# ============================================================

@dataclass
class Ingredient:
    """
    Ingrediente de la receta. Los cuatro campos siempre existen (default "").

    El orden dentro de `Recipe.ingredients` es significativo.
    """
    quantity: str = ""
    unit: str = ""
    item: str = ""
    notes: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    def display_line(self) -> str:
        """Línea legible, ej: '2 cups flour (sifted)'."""
        parts = [p for p in (self.quantity, self.unit, self.item) if p]
        if self.notes:
            parts.append(f"({self.notes})")
        return " ".join(parts)


@dataclass
class InstructionStep:
    """Paso de la receta. `step_number` es 1-based y contiguo; `text` nunca vacío."""
    step_number: int
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================
# Nutrición
# ============================================================

@dataclass
class NutritionFacts:
    """
    Información nutricional POR PORCIÓN.

    Cada campo es un número o None. El sistema no valida rangos: que los valores
    sean razonables es responsabilidad del modelo.
    """
    calories: Optional[Number] = None
    protein_g: Optional[Number] = None
    fat_g: Optional[Number] = None
    carbs_g: Optional[Number] = None

    def get(self, field_name: str) -> Optional[Number]:
        return getattr(self, field_name)

    def to_dict(self) -> Dict[str, Optional[Number]]:
        return asdict(self)


@dataclass
class EstimatedNutrition:
    """
    Resultado del estimador secundario.

    `servings_used` es la cantidad de porciones que se le indicó al modelo
    (la real o el default), aunque la estimación haya fallado.
    """
    servings_used: int
    calories: Optional[int] = None
    protein_g: Optional[int] = None
    fat_g: Optional[int] = None
    carbs_g: Optional[int] = None

    def get(self, field_name: str) -> Optional[int]:
        return getattr(self, field_name)

    def is_empty(self) -> bool:
        return all(self.get(f) is None for f in NUTRITION_FIELDS)


@dataclass
class MergeResult:
    """Nutrición final + flags de procedencia."""
    nutrition: NutritionFacts
    ai_estimated: bool = False
    servings_used: Optional[int] = None


# ============================================================
# Receta canónica
# ============================================================

@dataclass
class Recipe:
    """
    Receta canónica (salida del pipeline).

    Invariantes:
    - `recipe_name` nunca vacío (placeholder "Untitled Recipe").
    - `nutrition_ai_estimated` es True sii al menos un campo de `nutrition`
      vino del estimador y no de la extracción principal.
    - `nutrition_servings_used` solo se setea cuando hubo estimación efectiva.
    - `nutrition` puede ser None (no había bloque de nutrición) o un
      `NutritionFacts` con campos None; ambos son legales.
    """
    recipe_name: str = UNTITLED_RECIPE
    author: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    servings: Optional[Number] = None
    prep_time_minutes: Optional[Number] = None
    cook_time_minutes: Optional[Number] = None
    ingredients: List[Ingredient] = field(default_factory=list)
    instructions: List[InstructionStep] = field(default_factory=list)
    nutrition: Optional[NutritionFacts] = None
    nutrition_ai_estimated: bool = False
    nutrition_servings_used: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipe_name": self.recipe_name,
            "author": self.author,
            "description": self.description,
            "link": self.link,
            "servings": self.servings,
            "prep_time_minutes": self.prep_time_minutes,
            "cook_time_minutes": self.cook_time_minutes,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "instructions": [s.to_dict() for s in self.instructions],
            "nutrition": self.nutrition.to_dict() if self.nutrition is not None else None,
            "nutrition_ai_estimated": self.nutrition_ai_estimated,
            "nutrition_servings_used": self.nutrition_servings_used,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        """
        Reconstruye una receta desde un dict ya normalizado (store o API).

        No es un normalizador: asume la forma de `to_dict()`. Para JSON no
        confiable del modelo usar `normalizer.normalize_recipe`.
        """
        nutrition = data.get("nutrition")
        return cls(
            recipe_name=data.get("recipe_name") or UNTITLED_RECIPE,
            author=data.get("author"),
            description=data.get("description"),
            link=data.get("link"),
            servings=data.get("servings"),
            prep_time_minutes=data.get("prep_time_minutes"),
            cook_time_minutes=data.get("cook_time_minutes"),
            ingredients=[
                Ingredient(
                    quantity=ing.get("quantity", ""),
                    unit=ing.get("unit", ""),
                    item=ing.get("item", ""),
                    notes=ing.get("notes", ""),
                )
                for ing in data.get("ingredients") or []
            ],
            instructions=[
                InstructionStep(step_number=int(st["step_number"]), text=st["text"])
                for st in data.get("instructions") or []
            ],
            nutrition=(
                NutritionFacts(**{f: nutrition.get(f) for f in NUTRITION_FIELDS})
                if nutrition is not None
                else None
            ),
            nutrition_ai_estimated=bool(data.get("nutrition_ai_estimated", False)),
            nutrition_servings_used=data.get("nutrition_servings_used"),
        )
