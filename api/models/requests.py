"""
Modelos de request/response para la API.

Estos modelos definen la estructura de los requests HTTP y validan tipos
antes de pasarlos al core.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from recipe_ai_core.domain_models import (
    UNTITLED_RECIPE,
    Ingredient,
    InstructionStep,
    NutritionFacts,
    Recipe,
)

Number = Union[int, float]


class IngredientPayload(BaseModel):
    quantity: str = Field(default="", description="Cantidad (texto libre, ej: '1 1/2')")
    unit: str = Field(default="", description="Unidad (ej: 'cups')")
    item: str = Field(default="", description="Ingrediente")
    notes: str = Field(default="", description="Notas (ej: 'finely chopped')")


class InstructionPayload(BaseModel):
    step_number: int = Field(..., ge=1, description="Número de paso (1..n)")
    text: str = Field(..., description="Texto del paso")


class NutritionPayload(BaseModel):
    calories: Optional[Number] = Field(default=None, description="Calorías por porción")
    protein_g: Optional[Number] = Field(default=None, description="Proteína (g) por porción")
    fat_g: Optional[Number] = Field(default=None, description="Grasa (g) por porción")
    carbs_g: Optional[Number] = Field(default=None, description="Carbohidratos (g) por porción")


class RecipePayload(BaseModel):
    """Receta canónica tal como viaja por la API."""

    recipe_name: str = Field(default=UNTITLED_RECIPE, description="Nombre de la receta")
    author: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    servings: Optional[Number] = None
    prep_time_minutes: Optional[Number] = None
    cook_time_minutes: Optional[Number] = None
    ingredients: List[IngredientPayload] = Field(default_factory=list)
    instructions: List[InstructionPayload] = Field(default_factory=list)
    nutrition: Optional[NutritionPayload] = None
    nutrition_ai_estimated: bool = Field(
        default=False, description="True si algún valor de nutrición lo estimó la IA"
    )
    nutrition_servings_used: Optional[int] = Field(
        default=None, description="Porciones asumidas en la estimación de nutrición"
    )

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipePayload":
        return cls.model_validate(recipe.to_dict())

    def to_recipe(self) -> Recipe:
        return Recipe(
            recipe_name=self.recipe_name.strip() or UNTITLED_RECIPE,
            author=self.author,
            description=self.description,
            link=self.link,
            servings=self.servings,
            prep_time_minutes=self.prep_time_minutes,
            cook_time_minutes=self.cook_time_minutes,
            ingredients=[Ingredient(**i.model_dump()) for i in self.ingredients],
            instructions=[InstructionStep(**s.model_dump()) for s in self.instructions],
            nutrition=NutritionFacts(**self.nutrition.model_dump()) if self.nutrition else None,
            nutrition_ai_estimated=self.nutrition_ai_estimated,
            nutrition_servings_used=self.nutrition_servings_used,
        )


class RecipeSaveRequest(BaseModel):
    """
    Request para guardar una receta (posiblemente editada por el usuario).

    `file_hash` es la huella devuelta por `/api/v1/scan`; si viene, habilita el
    cache para futuros escaneos del mismo archivo.
    """

    recipe: RecipePayload = Field(..., description="Receta a guardar")
    file_hash: Optional[str] = Field(
        default=None,
        min_length=64,
        max_length=64,
        description="SHA-256 hex del archivo de origen",
    )


class RecipeUpdateRequest(BaseModel):
    recipe: RecipePayload = Field(..., description="Nuevo contenido de la receta")


class ScanResponse(BaseModel):
    """Response de `POST /api/v1/scan`."""

    success: bool = Field(..., description="Siempre True en respuestas 200")
    recipe_data: RecipePayload = Field(..., description="Receta extraída")
    filename: Optional[str] = Field(default=None, description="Nombre del archivo subido")
    processed_at: datetime = Field(..., description="Momento del procesamiento (UTC)")
    cached: bool = Field(..., description="True si la receta salió del cache")
    file_hash: str = Field(..., description="SHA-256 hex del archivo")


class RecipeResponse(BaseModel):
    """Receta guardada."""

    id: str = Field(..., description="ID de la receta")
    file_hash: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    recipe: RecipePayload
