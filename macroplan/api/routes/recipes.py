"""
Recipe catalog API routes.
"""
import logging
from datetime import datetime
from fastapi import APIRouter, Depends, Query, status, Response
from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID

from macroplan.api.dependencies import get_recipe_service, http_error
from macroplan.config import settings
from macroplan.db.models import Recipe as DBRecipe
from macroplan.errors import MacroPlanError
from macroplan.models.schemas import RecipeCreate, RecipeFilters, RecipeUpdate
from macroplan.services.recipe_service import RecipeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


# Response schemas
class RecipeResponse(BaseModel):
    """Recipe response."""
    id: UUID
    title: str
    description: str
    ingredients: List[dict]
    steps: List[str]
    image_url: Optional[str] = None
    tags: List[str]
    category: str
    servings: int
    cook_time_min: int
    kcal_per_serving: int
    protein_per_serving: float
    fat_per_serving: float
    carbs_per_serving: float
    created_at: datetime
    updated_at: datetime

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "550e8400-e29b-41d4-a716-446655440000",
                    "title": "Chicken Quinoa Bowl",
                    "description": "Grilled chicken over quinoa with roasted vegetables.",
                    "ingredients": [
                        {"name": "chicken breast", "quantity": 300, "unit": "g", "note": None}
                    ],
                    "steps": ["Cook quinoa", "Grill chicken", "Assemble"],
                    "image_url": None,
                    "tags": ["high-protein"],
                    "category": "lunch",
                    "servings": 2,
                    "cook_time_min": 35,
                    "kcal_per_serving": 620,
                    "protein_per_serving": 48.0,
                    "fat_per_serving": 16.0,
                    "carbs_per_serving": 68.0,
                    "created_at": "2024-01-01T10:00:00",
                    "updated_at": "2024-01-01T10:00:00"
                }
            ]
        }
    }

    @staticmethod
    def from_db(recipe: DBRecipe) -> "RecipeResponse":
        """Convert a database recipe, turning Numeric columns into floats."""
        return RecipeResponse(
            id=recipe.id,
            title=recipe.title,
            description=recipe.description,
            ingredients=recipe.ingredients,
            steps=recipe.steps,
            image_url=recipe.image_url,
            tags=recipe.tags or [],
            category=recipe.category,
            servings=recipe.servings,
            cook_time_min=recipe.cook_time_min,
            kcal_per_serving=recipe.kcal_per_serving,
            protein_per_serving=float(recipe.protein_per_serving),
            fat_per_serving=float(recipe.fat_per_serving),
            carbs_per_serving=float(recipe.carbs_per_serving),
            created_at=recipe.created_at,
            updated_at=recipe.updated_at,
        )


class PaginationResponse(BaseModel):
    """Pagination block of a list response."""
    page: int
    page_size: int
    total: int
    pages: int


class RecipeListResponse(BaseModel):
    """Paginated recipe list response."""
    recipes: List[RecipeResponse]
    pagination: PaginationResponse


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    query: Optional[str] = Query(None, description="Search title, description and category"),
    tags: Optional[str] = Query(None, description="Comma-separated tags; any match"),
    category: Optional[str] = Query(None, description="Single category"),
    categories: Optional[str] = Query(None, description="Comma-separated categories; overrides category"),
    min_kcal: Optional[float] = Query(None, ge=0),
    max_kcal: Optional[float] = Query(None, ge=0),
    min_protein: Optional[float] = Query(None, ge=0),
    max_protein: Optional[float] = Query(None, ge=0),
    min_fat: Optional[float] = Query(None, ge=0),
    max_fat: Optional[float] = Query(None, ge=0),
    min_carbs: Optional[float] = Query(None, ge=0),
    max_carbs: Optional[float] = Query(None, ge=0),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        default=settings.pagination_default_page_size,
        ge=1,
        le=settings.pagination_max_page_size,
        description="Items per page",
    ),
    service: RecipeService = Depends(get_recipe_service),
):
    """
    Get the recipe catalog.

    Supports text search, tag and category filters and per-serving
    calorie and macro ranges.
    """
    filters = RecipeFilters(
        query=query,
        tags=_split_csv(tags),
        categories=_split_csv(categories) or ([category] if category else None),
        min_kcal=min_kcal,
        max_kcal=max_kcal,
        min_protein=min_protein,
        max_protein=max_protein,
        min_fat=min_fat,
        max_fat=max_fat,
        min_carbs=min_carbs,
        max_carbs=max_carbs,
    )
    recipes, total = service.list_recipes(filters, page=page, page_size=page_size)

    return RecipeListResponse(
        recipes=[RecipeResponse.from_db(r) for r in recipes],
        pagination=PaginationResponse(
            page=page,
            page_size=page_size,
            total=total,
            pages=(total + page_size - 1) // page_size,
        ),
    )


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: UUID,
    service: RecipeService = Depends(get_recipe_service),
):
    """Get a single recipe by ID."""
    try:
        return RecipeResponse.from_db(service.require_recipe(recipe_id))
    except MacroPlanError as e:
        raise http_error(e)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    request: RecipeCreate,
    service: RecipeService = Depends(get_recipe_service),
):
    """Add a recipe to the catalog."""
    return RecipeResponse.from_db(service.create_recipe(request))


@router.put("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: UUID,
    request: RecipeUpdate,
    service: RecipeService = Depends(get_recipe_service),
):
    """Update a recipe. Only the provided fields change."""
    try:
        return RecipeResponse.from_db(service.update_recipe(recipe_id, request))
    except MacroPlanError as e:
        raise http_error(e)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: UUID,
    service: RecipeService = Depends(get_recipe_service),
):
    """
    Delete a recipe.

    Fails with 409 while meal entries still use it.
    """
    try:
        service.delete_recipe(recipe_id)
    except MacroPlanError as e:
        logger.warning(f"Refused to delete recipe {recipe_id}: {e.message}")
        raise http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
