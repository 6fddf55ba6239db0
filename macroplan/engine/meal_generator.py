"""
Meal plan generator for macro-targeted weekly plans.
Fills the free slots of a week so total nutrition approaches the weekly goals,
leaving existing (locked) entries untouched.
"""
import logging
from typing import Dict, Iterable, Sequence

from macroplan.engine.allocator import (
    DEFAULT_POOL_SIZE, DEFAULT_SERVING_OPTIONS, allocate
)
from macroplan.engine.models import (
    ExistingEntry, GenerationRequest, GenerationResult, MacroTotals, RecipeMacros
)
from macroplan.engine.refiner import DEFAULT_MAX_SWAPS_PER_INDEX, refine
from macroplan.engine.slots import enumerate_slots, partition_slots

logger = logging.getLogger(__name__)

EMPTY_CATALOG_WARNING = "Recipe catalog is empty; free slots were left unfilled"


def locked_totals(
    entries: Iterable[ExistingEntry],
    recipes: Sequence[RecipeMacros],
) -> MacroTotals:
    """
    Sum the macros contributed by existing entries.

    Entries whose recipe is not in the catalog contribute nothing.
    """
    by_id: Dict[str, RecipeMacros] = {r.id: r for r in recipes}
    total = MacroTotals()
    for entry in entries:
        recipe = by_id.get(entry.recipe_id)
        if recipe is not None:
            total = total + recipe.for_servings(entry.servings)
    return total


class MealPlanGenerator:
    """Generate macro-targeted assignments for a weekly meal plan."""

    def __init__(
        self,
        pool_size: int = DEFAULT_POOL_SIZE,
        serving_options: Sequence[float] = DEFAULT_SERVING_OPTIONS,
        max_swaps_per_index: int = DEFAULT_MAX_SWAPS_PER_INDEX,
    ):
        """
        Initialize the generator.

        Args:
            pool_size: Number of top-ranked recipes considered per slot
            serving_options: Allowed serving multipliers
            max_swaps_per_index: Kept swaps per outer index in the refine pass
        """
        self.pool_size = pool_size
        self.serving_options = tuple(sorted(serving_options))
        self.max_swaps_per_index = max_swaps_per_index

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Compute assignments for every free slot of the plan.

        Args:
            request: Plan configuration, existing entries and recipe catalog

        Returns:
            GenerationResult with assignments in slot-enumeration order
        """
        slots = enumerate_slots(request.week_start, request.meals_per_day)
        locked, free = partition_slots(slots, request.existing_entries)
        already = locked_totals(request.existing_entries, request.recipes)

        warning = None
        if free and not request.recipes:
            warning = EMPTY_CATALOG_WARNING
            logger.warning(
                f"{EMPTY_CATALOG_WARNING} ({len(free)} free slots, week of {request.week_start})"
            )

        greedy = allocate(
            free_slots=free,
            recipes=request.recipes,
            goals=request.goals,
            locked_totals=already,
            total_slots=len(slots),
            pool_size=self.pool_size,
            serving_options=self.serving_options,
        )
        assignments = refine(greedy, max_swaps_per_index=self.max_swaps_per_index)

        projected = already
        for assignment in assignments:
            projected = projected + assignment.totals

        logger.info(
            f"Generated {len(assignments)} assignments for week of {request.week_start} "
            f"({len(locked)} locked, {len(free)} free, {len(request.recipes)} recipes)"
        )

        return GenerationResult(
            assignments=assignments,
            locked_slots=locked,
            free_slots=free,
            locked_totals=already,
            projected_totals=projected,
            warning=warning,
        )


def summarize_totals(totals: MacroTotals, goals: MacroTotals) -> Dict[str, Dict[str, float]]:
    """
    Compare weekly totals to goals per axis.

    Returns:
        {axis: {"total", "goal", "percent"}}; percent is 0 when the goal is 0
    """
    summary = {}
    for axis, goal in goals.as_dict().items():
        total = getattr(totals, axis)
        summary[axis] = {
            "total": round(total, 2),
            "goal": round(goal, 2),
            "percent": round(total / goal * 100, 1) if goal > 0 else 0.0,
        }
    return summary
