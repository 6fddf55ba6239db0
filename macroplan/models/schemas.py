"""
Pydantic data models for MacroPlan requests and payloads.
"""
from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from macroplan.engine.models import SlotName
from macroplan.utils.sanitization import SanitizedStr, SanitizedStrList

MIN_MEALS_PER_DAY = 3
MAX_MEALS_PER_DAY = 6

# Largest value a Numeric(4, 1) servings column holds on the 0.5 grid
MAX_ENTRY_SERVINGS = 999.5


def _round_macro(v: Optional[float]) -> Optional[float]:
    return None if v is None else round(v, 2)


class IngredientLine(BaseModel):
    """Ingredient line of a recipe."""
    name: SanitizedStr = Field(..., min_length=1, description="Name of the ingredient")
    quantity: float = Field(..., gt=0, description="Amount in the given unit")
    unit: SanitizedStr = Field(..., min_length=1, description="Unit (g, ml, tbsp, pcs...)")
    note: Optional[SanitizedStr] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "chicken breast", "quantity": 300, "unit": "g"}
            ]
        }
    }

    @field_validator("quantity")
    @classmethod
    def round_quantity(cls, v: float) -> float:
        return round(v, 2)

    @field_validator("name", "unit")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class RecipeBase(BaseModel):
    """Fields shared by recipe create and update payloads."""
    image_url: Optional[str] = Field(None, max_length=500)


class RecipeCreate(RecipeBase):
    """Payload to add a recipe to the catalog."""
    title: SanitizedStr = Field(..., min_length=1, max_length=200)
    description: SanitizedStr = Field(..., min_length=1, max_length=1000)
    ingredients: List[IngredientLine] = Field(..., min_length=1)
    steps: SanitizedStrList = Field(..., min_length=1)
    tags: SanitizedStrList = Field(default_factory=list)
    category: SanitizedStr = Field(..., min_length=1, max_length=100)
    servings: int = Field(..., gt=0)
    cook_time_min: int = Field(..., gt=0)
    kcal_per_serving: int = Field(..., ge=0)
    protein_per_serving: float = Field(..., ge=0)
    fat_per_serving: float = Field(..., ge=0)
    carbs_per_serving: float = Field(..., ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Chicken Quinoa Bowl",
                    "description": "Grilled chicken over quinoa with roasted vegetables.",
                    "ingredients": [
                        {"name": "chicken breast", "quantity": 300, "unit": "g"},
                        {"name": "quinoa", "quantity": 150, "unit": "g"}
                    ],
                    "steps": ["Cook quinoa", "Grill chicken", "Assemble"],
                    "tags": ["high-protein"],
                    "category": "lunch",
                    "servings": 2,
                    "cook_time_min": 35,
                    "kcal_per_serving": 620,
                    "protein_per_serving": 48,
                    "fat_per_serving": 16,
                    "carbs_per_serving": 68
                }
            ]
        }
    }

    @field_validator("title", "description", "category")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("steps")
    @classmethod
    def steps_not_blank(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("at least one step is required")
        return v

    @field_validator("protein_per_serving", "fat_per_serving", "carbs_per_serving")
    @classmethod
    def round_macros(cls, v: float) -> float:
        return _round_macro(v)


class RecipeUpdate(RecipeBase):
    """Partial recipe update; omitted fields are left as they are."""
    title: Optional[SanitizedStr] = Field(None, min_length=1, max_length=200)
    description: Optional[SanitizedStr] = Field(None, min_length=1, max_length=1000)
    ingredients: Optional[List[IngredientLine]] = Field(None, min_length=1)
    steps: Optional[SanitizedStrList] = Field(None, min_length=1)
    tags: Optional[SanitizedStrList] = None
    category: Optional[SanitizedStr] = Field(None, min_length=1, max_length=100)
    servings: Optional[int] = Field(None, gt=0)
    cook_time_min: Optional[int] = Field(None, gt=0)
    kcal_per_serving: Optional[int] = Field(None, ge=0)
    protein_per_serving: Optional[float] = Field(None, ge=0)
    fat_per_serving: Optional[float] = Field(None, ge=0)
    carbs_per_serving: Optional[float] = Field(None, ge=0)

    @field_validator("title", "description", "category")
    @classmethod
    def text_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("steps")
    @classmethod
    def steps_not_blank(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None and not v:
            raise ValueError("at least one step is required")
        return v

    @field_validator("protein_per_serving", "fat_per_serving", "carbs_per_serving")
    @classmethod
    def round_macros(cls, v: Optional[float]) -> Optional[float]:
        return _round_macro(v)


class RecipeFilters(BaseModel):
    """Catalog listing filters."""
    query: Optional[str] = None
    tags: Optional[List[str]] = None
    categories: Optional[List[str]] = None
    min_kcal: Optional[float] = None
    max_kcal: Optional[float] = None
    min_protein: Optional[float] = None
    max_protein: Optional[float] = None
    min_fat: Optional[float] = None
    max_fat: Optional[float] = None
    min_carbs: Optional[float] = None
    max_carbs: Optional[float] = None


class MealPlanCreate(BaseModel):
    """Payload to create a weekly meal plan."""
    week_start: date
    goals_kcal: int = Field(..., gt=0, description="Weekly calories goal")
    goals_protein: float = Field(..., ge=0, description="Weekly protein goal (g)")
    goals_fat: float = Field(..., ge=0, description="Weekly fat goal (g)")
    goals_carbs: float = Field(..., ge=0, description="Weekly carbs goal (g)")
    meals_per_day: int = Field(
        default=MIN_MEALS_PER_DAY,
        ge=MIN_MEALS_PER_DAY,
        le=MAX_MEALS_PER_DAY,
        description=f"Meals per day ({MIN_MEALS_PER_DAY}-{MAX_MEALS_PER_DAY})",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "week_start": "2024-01-01",
                    "goals_kcal": 14000,
                    "goals_protein": 700,
                    "goals_fat": 350,
                    "goals_carbs": 1750,
                    "meals_per_day": 3
                }
            ]
        }
    }


class MealPlanUpdate(BaseModel):
    """Partial meal plan update."""
    week_start: Optional[date] = None
    goals_kcal: Optional[int] = Field(None, gt=0)
    goals_protein: Optional[float] = Field(None, ge=0)
    goals_fat: Optional[float] = Field(None, ge=0)
    goals_carbs: Optional[float] = Field(None, ge=0)
    meals_per_day: Optional[int] = Field(None, ge=MIN_MEALS_PER_DAY, le=MAX_MEALS_PER_DAY)


class MealEntryCreate(BaseModel):
    """Place a recipe in a slot manually (upsert on date + slot)."""
    date: date
    slot: SlotName
    recipe_id: UUID
    servings_count: float = Field(..., gt=0, le=MAX_ENTRY_SERVINGS, multiple_of=0.5)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "date": "2024-01-01",
                    "slot": "breakfast",
                    "recipe_id": "550e8400-e29b-41d4-a716-446655440000",
                    "servings_count": 1.5
                }
            ]
        }
    }
