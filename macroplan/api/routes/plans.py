"""
Meal planning API routes.
"""
import logging
from datetime import date, datetime
from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel
from typing import Dict, List, Optional
from uuid import UUID

from macroplan.api.dependencies import get_meal_service, http_error
from macroplan.api.routes.recipes import PaginationResponse, RecipeResponse
from macroplan.config import settings
from macroplan.db.models import MealEntry, MealPlan
from macroplan.engine.meal_generator import summarize_totals
from macroplan.errors import MacroPlanError, PlanGenerationError
from macroplan.models.schemas import MealEntryCreate, MealPlanCreate, MealPlanUpdate
from macroplan.services.meal_service import MealPlanningService, plan_totals, sorted_entries

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/meal-plans", tags=["meal-plans"])


# Response schemas
class MealEntryResponse(BaseModel):
    """A recipe placed in a slot, with the recipe joined in."""
    id: UUID
    meal_plan_id: UUID
    date: date
    slot: str
    recipe_id: UUID
    servings_count: float
    recipe: Optional[RecipeResponse] = None

    @staticmethod
    def from_db(entry: MealEntry) -> "MealEntryResponse":
        return MealEntryResponse(
            id=entry.id,
            meal_plan_id=entry.meal_plan_id,
            date=entry.date,
            slot=entry.slot,
            recipe_id=entry.recipe_id,
            servings_count=float(entry.servings_count),
            recipe=RecipeResponse.from_db(entry.recipe) if entry.recipe else None,
        )


class MacroProgress(BaseModel):
    """Weekly total vs goal on one axis."""
    total: float
    goal: float
    percent: float


class MealPlanResponse(BaseModel):
    """Meal plan response."""
    id: UUID
    week_start: date
    meals_per_day: int
    goals_kcal: int
    goals_protein: float
    goals_fat: float
    goals_carbs: float
    entries: List[MealEntryResponse]
    nutrition: Dict[str, MacroProgress]
    created_at: datetime
    updated_at: datetime

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "550e8400-e29b-41d4-a716-446655440000",
                    "week_start": "2024-01-01",
                    "meals_per_day": 3,
                    "goals_kcal": 14000,
                    "goals_protein": 700.0,
                    "goals_fat": 350.0,
                    "goals_carbs": 1750.0,
                    "entries": [],
                    "nutrition": {
                        "kcal": {"total": 0.0, "goal": 14000.0, "percent": 0.0},
                        "protein": {"total": 0.0, "goal": 700.0, "percent": 0.0},
                        "fat": {"total": 0.0, "goal": 350.0, "percent": 0.0},
                        "carbs": {"total": 0.0, "goal": 1750.0, "percent": 0.0}
                    },
                    "created_at": "2024-01-01T10:00:00",
                    "updated_at": "2024-01-01T10:00:00"
                }
            ]
        }
    }

    @staticmethod
    def from_db_plan(plan: MealPlan, include_entries: bool = True) -> "MealPlanResponse":
        """Convert database plan to response."""
        return MealPlanResponse(
            id=plan.id,
            week_start=plan.week_start,
            meals_per_day=plan.meals_per_day,
            goals_kcal=plan.goals_kcal,
            goals_protein=float(plan.goals_protein),
            goals_fat=float(plan.goals_fat),
            goals_carbs=float(plan.goals_carbs),
            entries=[MealEntryResponse.from_db(e) for e in sorted_entries(plan.entries)]
            if include_entries else [],
            nutrition=summarize_totals(plan_totals(plan), plan.goals),
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )


class MealPlanListResponse(BaseModel):
    meal_plans: List[MealPlanResponse]
    pagination: PaginationResponse


class ShoppingListItem(BaseModel):
    """One ingredient summed over every entry of a plan."""
    name: str
    unit: str
    total_quantity: float


class ShoppingListResponse(BaseModel):
    plan_id: UUID
    items: List[ShoppingListItem]


class GenerateResponse(BaseModel):
    """Entries created by a generation run."""
    entries: List[MealEntryResponse]
    locked_count: int
    warning: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "entries": [
                        {
                            "id": "770e8400-e29b-41d4-a716-446655440002",
                            "meal_plan_id": "550e8400-e29b-41d4-a716-446655440000",
                            "date": "2024-01-01",
                            "slot": "lunch",
                            "recipe_id": "880e8400-e29b-41d4-a716-446655440003",
                            "servings_count": 1.5,
                            "recipe": None
                        }
                    ],
                    "locked_count": 1,
                    "warning": None
                }
            ]
        }
    }


@router.get("", response_model=MealPlanListResponse)
async def list_meal_plans(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        default=settings.pagination_default_page_size,
        ge=1,
        le=settings.pagination_max_page_size,
        description="Items per page",
    ),
    service: MealPlanningService = Depends(get_meal_service),
):
    """
    Get all meal plans, newest week first.

    Entries are omitted from the listing; fetch a plan for its entries.
    """
    plans, total = service.list_plans(page=page, page_size=page_size)
    return MealPlanListResponse(
        meal_plans=[MealPlanResponse.from_db_plan(p, include_entries=False) for p in plans],
        pagination=PaginationResponse(
            page=page,
            page_size=page_size,
            total=total,
            pages=(total + page_size - 1) // page_size,
        ),
    )


@router.get("/{plan_id}", response_model=MealPlanResponse)
async def get_meal_plan(
    plan_id: UUID,
    service: MealPlanningService = Depends(get_meal_service),
):
    """
    Get a specific meal plan with its entries and weekly nutrition progress.
    """
    try:
        return MealPlanResponse.from_db_plan(service.require_plan(plan_id))
    except MacroPlanError as e:
        raise http_error(e)


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_meal_plan(
    request: MealPlanCreate,
    service: MealPlanningService = Depends(get_meal_service),
):
    """Create an empty weekly meal plan."""
    return MealPlanResponse.from_db_plan(service.create_plan(request))


@router.put("/{plan_id}", response_model=MealPlanResponse)
async def update_meal_plan(
    plan_id: UUID,
    request: MealPlanUpdate,
    service: MealPlanningService = Depends(get_meal_service),
):
    """Update goals, week start or meals per day."""
    try:
        return MealPlanResponse.from_db_plan(service.update_plan(plan_id, request))
    except MacroPlanError as e:
        raise http_error(e)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal_plan(
    plan_id: UUID,
    service: MealPlanningService = Depends(get_meal_service),
):
    """Delete a meal plan and all its entries."""
    try:
        service.delete_plan(plan_id)
    except MacroPlanError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{plan_id}/generate", response_model=GenerateResponse)
async def generate_meal_plan(
    plan_id: UUID,
    service: MealPlanningService = Depends(get_meal_service),
):
    """
    Fill the plan's empty slots.

    Existing entries are kept as they are and count toward the weekly
    goals. Only the newly created entries are returned.
    """
    try:
        created, result = service.generate(plan_id)
    except MacroPlanError as e:
        if e.status_code >= 500:
            logger.error(f"Meal plan generation failed for plan {plan_id}: {e.message}")
        raise http_error(e)
    except Exception as e:
        logger.exception(f"Failed to generate meal plan {plan_id}")
        raise http_error(PlanGenerationError(
            str(e),
            details={"plan_id": str(plan_id), "error_type": type(e).__name__},
        ))

    if result.warning:
        logger.warning(f"Plan {plan_id}: {result.warning}")

    return GenerateResponse(
        entries=[MealEntryResponse.from_db(e) for e in created],
        locked_count=len(result.locked_slots),
        warning=result.warning,
    )


@router.post("/{plan_id}/entries", response_model=MealEntryResponse)
async def upsert_meal_entry(
    plan_id: UUID,
    request: MealEntryCreate,
    service: MealPlanningService = Depends(get_meal_service),
):
    """
    Put a recipe in a slot.

    Replaces the recipe and servings if the slot is already filled.
    """
    try:
        return MealEntryResponse.from_db(service.upsert_entry(plan_id, request))
    except MacroPlanError as e:
        raise http_error(e)


@router.delete("/{plan_id}/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal_entry(
    plan_id: UUID,
    entry_id: UUID,
    service: MealPlanningService = Depends(get_meal_service),
):
    """Remove a single entry from a plan."""
    try:
        service.delete_entry(plan_id, entry_id)
    except MacroPlanError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{plan_id}/shopping-list", response_model=ShoppingListResponse)
async def get_shopping_list(
    plan_id: UUID,
    service: MealPlanningService = Depends(get_meal_service),
):
    """
    Ingredients to buy for the whole plan.

    Quantities are scaled by each entry's servings and merged by
    ingredient name and unit.
    """
    try:
        items = service.shopping_list(plan_id)
    except MacroPlanError as e:
        raise http_error(e)
    return ShoppingListResponse(plan_id=plan_id, items=[ShoppingListItem(**item) for item in items])
