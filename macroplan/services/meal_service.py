"""
Meal planning service that wraps the engine and provides database persistence.
"""
import logging
import uuid
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from macroplan.config import settings
from macroplan.db.models import MealEntry, MealPlan, Recipe
from macroplan.engine.meal_generator import MealPlanGenerator
from macroplan.engine.models import (
    SLOT_ORDER, ExistingEntry, GenerationRequest, GenerationResult, MacroTotals, SlotName
)
from macroplan.engine.slots import slot_names_for, week_dates
from macroplan.errors import (
    DatabaseError,
    MealEntryNotFoundError,
    PlanNotFoundError,
    RecipeNotFoundError,
    SlotOutOfRangeError,
)
from macroplan.models.schemas import MealEntryCreate, MealPlanCreate, MealPlanUpdate
from macroplan.services.recipe_service import RecipeService

logger = logging.getLogger(__name__)

_SLOT_RANK = {name.value: index for index, name in enumerate(SLOT_ORDER)}


def default_generator() -> MealPlanGenerator:
    """Generator configured from application settings."""
    return MealPlanGenerator(
        pool_size=settings.generator_candidate_pool_size,
        serving_options=settings.generator_serving_options,
        max_swaps_per_index=settings.generator_max_swaps_per_index,
    )


def sorted_entries(entries: List[MealEntry]) -> List[MealEntry]:
    """Entries by date, then by daily slot order."""
    return sorted(entries, key=lambda e: (e.date, _SLOT_RANK.get(e.slot, len(_SLOT_RANK))))


def entry_to_existing(entry: MealEntry) -> ExistingEntry:
    """Convert a persisted entry into the engine's locked-entry form."""
    return ExistingEntry(
        date=entry.date,
        slot=SlotName(entry.slot),
        recipe_id=str(entry.recipe_id),
        servings=float(entry.servings_count),
    )


def plan_totals(plan: MealPlan) -> MacroTotals:
    """Weekly macros of every entry currently in the plan."""
    total = MacroTotals()
    for entry in plan.entries:
        if entry.recipe is not None:
            total = total + entry.recipe.to_macros().for_servings(float(entry.servings_count))
    return total


class MealPlanningService:
    """
    Service for meal plan operations.

    Provides methods for creating, retrieving, updating and deleting meal
    plans and their entries, and for filling a plan with the generator.
    """

    def __init__(self, db: Session, generator: Optional[MealPlanGenerator] = None):
        """
        Initialize the meal planning service.

        Args:
            db: SQLAlchemy database session for persistence operations.
            generator: Engine used by generate(); defaults to one built from settings.
        """
        self.db = db
        self.generator = generator or default_generator()

    def get_plan(self, plan_id: UUID) -> Optional[MealPlan]:
        return self.db.query(MealPlan).filter(MealPlan.id == plan_id).first()

    def require_plan(self, plan_id: UUID) -> MealPlan:
        """
        Get a meal plan or fail before any further work.

        Raises:
            PlanNotFoundError: If no plan has this id
        """
        plan = self.get_plan(plan_id)
        if plan is None:
            raise PlanNotFoundError(str(plan_id))
        return plan

    def list_plans(
        self,
        page: int = 1,
        page_size: int = settings.pagination_default_page_size,
    ) -> Tuple[List[MealPlan], int]:
        """
        Plans newest week first.

        Returns:
            (plans on the requested page, total plan count)
        """
        query = self.db.query(MealPlan)
        total = query.count()
        plans = (
            query.order_by(MealPlan.week_start.desc(), MealPlan.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return plans, total

    def create_plan(self, data: MealPlanCreate) -> MealPlan:
        plan = MealPlan(owner_id=uuid.UUID(settings.default_owner_id), **data.model_dump())
        self.db.add(plan)
        self.db.commit()
        self.db.refresh(plan)
        logger.info(f"Created meal plan {plan.id} for week of {plan.week_start}")
        return plan

    def update_plan(self, plan_id: UUID, data: MealPlanUpdate) -> MealPlan:
        plan = self.require_plan(plan_id)

        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(plan, field, value)

        self.db.commit()
        self.db.refresh(plan)
        return plan

    def delete_plan(self, plan_id: UUID) -> None:
        plan = self.require_plan(plan_id)
        self.db.delete(plan)
        self.db.commit()
        logger.info(f"Deleted meal plan {plan_id}")

    def upsert_entry(self, plan_id: UUID, data: MealEntryCreate) -> MealEntry:
        """
        Place a recipe in a slot, replacing whatever occupied it.

        Raises:
            PlanNotFoundError: If the plan does not exist
            RecipeNotFoundError: If the recipe does not exist
            SlotOutOfRangeError: If the date or slot is outside the plan's grid
        """
        plan = self.require_plan(plan_id)

        if (
            data.date not in week_dates(plan.week_start)
            or data.slot not in slot_names_for(plan.meals_per_day)
        ):
            raise SlotOutOfRangeError(str(plan_id), data.date.isoformat(), data.slot.value)

        recipe = self.db.query(Recipe).filter(Recipe.id == data.recipe_id).first()
        if recipe is None:
            raise RecipeNotFoundError(str(data.recipe_id))

        entry = (
            self.db.query(MealEntry)
            .filter(
                MealEntry.meal_plan_id == plan.id,
                MealEntry.date == data.date,
                MealEntry.slot == data.slot.value,
            )
            .first()
        )

        if entry is None:
            entry = MealEntry(
                meal_plan_id=plan.id,
                date=data.date,
                slot=data.slot.value,
            )
            self.db.add(entry)

        entry.recipe_id = recipe.id
        entry.servings_count = Decimal(str(data.servings_count))

        self.db.commit()
        self.db.refresh(entry)
        return entry

    def delete_entry(self, plan_id: UUID, entry_id: UUID) -> None:
        """
        Remove one entry from a plan.

        Raises:
            MealEntryNotFoundError: If the entry is missing or belongs to another plan
        """
        entry = self.db.query(MealEntry).filter(MealEntry.id == entry_id).first()
        if entry is None or entry.meal_plan_id != plan_id:
            raise MealEntryNotFoundError(str(plan_id), str(entry_id))

        self.db.delete(entry)
        self.db.commit()

    def generate(self, plan_id: UUID) -> Tuple[List[MealEntry], GenerationResult]:
        """
        Fill every free slot of a plan and persist the new entries.

        Entries present when this runs are locked: never modified, and
        counted toward the running weekly totals.

        Args:
            plan_id: Plan to fill

        Returns:
            (newly created entries in slot order, engine result)

        Raises:
            PlanNotFoundError: If the plan does not exist
            DatabaseError: If persisting the entries fails
        """
        plan = self.require_plan(plan_id)
        recipes = RecipeService(self.db).all_recipes()
        recipes_by_id = {str(r.id): r for r in recipes}

        request = GenerationRequest(
            week_start=plan.week_start,
            meals_per_day=plan.meals_per_day,
            goals=plan.goals,
            existing_entries=[entry_to_existing(e) for e in plan.entries],
            recipes=[r.to_macros() for r in recipes],
        )
        result = self.generator.generate(request)

        created: List[MealEntry] = []
        try:
            for assignment in result.assignments:
                entry = MealEntry(
                    meal_plan_id=plan.id,
                    date=assignment.slot.date,
                    slot=assignment.slot.slot.value,
                    recipe_id=recipes_by_id[assignment.recipe.id].id,
                    servings_count=Decimal(str(assignment.servings)),
                )
                self.db.add(entry)
                self.db.flush()
                created.append(entry)

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to persist generated entries for plan {plan_id}")
            raise DatabaseError(
                message="Database error occurred while saving generated meals. Please try again.",
                details={"plan_id": str(plan_id), "error_type": type(e).__name__},
            )

        for entry in created:
            self.db.refresh(entry)

        logger.info(
            f"Plan {plan_id}: created {len(created)} entries, "
            f"{len(result.locked_slots)} slots were locked"
        )
        return created, result

    def shopping_list(self, plan_id: UUID) -> List[Dict]:
        """
        Ingredients needed for every entry of a plan.

        Each recipe's ingredient quantities are scaled by the entry's
        servings_count. Lines sharing a name and unit (case-insensitive,
        surrounding whitespace ignored) are merged; the first spelling seen
        is kept. Items come out in first-seen order, entries walked by day
        then slot.

        Raises:
            PlanNotFoundError: If the plan does not exist
        """
        plan = self.require_plan(plan_id)

        items: Dict[Tuple[str, str], Dict] = {}
        for entry in sorted_entries(plan.entries):
            if entry.recipe is None:
                continue
            servings = float(entry.servings_count)
            for ingredient in entry.recipe.ingredients or []:
                name = ingredient["name"]
                unit = ingredient["unit"]
                key = (name.strip().lower(), unit.strip().lower())
                quantity = float(ingredient.get("quantity") or 0) * servings
                if key in items:
                    items[key]["total_quantity"] += quantity
                else:
                    items[key] = {"name": name, "unit": unit, "total_quantity": quantity}

        for item in items.values():
            item["total_quantity"] = round(item["total_quantity"], 2)
        return list(items.values())
