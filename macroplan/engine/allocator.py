"""
Greedy slot allocation.

Walks the free slots in order and gives each one the recipe and serving
size that best matches what is left of the weekly budget, spread evenly
over the slots still to fill.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from macroplan.engine.models import Assignment, MacroTotals, RecipeMacros, SlotKey
from macroplan.engine.scoring import macro_distance

logger = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 20
DEFAULT_SERVING_OPTIONS: Tuple[float, ...] = (0.5, 1.0, 1.5, 2.0)


def rank_candidates(
    recipes: Sequence[RecipeMacros],
    average_target: MacroTotals,
    pool_size: int = DEFAULT_POOL_SIZE,
) -> List[RecipeMacros]:
    """
    Rank recipes by single-serving distance to the average slot target.

    The sort is stable, so recipes with equal distance keep catalog order.

    Returns:
        At most pool_size recipes, best first
    """
    ranked = sorted(recipes, key=lambda r: macro_distance(r.per_serving, average_target))
    return ranked[:pool_size]


def remaining_slot_target(
    goals: MacroTotals,
    running_totals: MacroTotals,
    slots_left: int,
) -> MacroTotals:
    """What each of the slots_left remaining slots should contribute."""
    return (goals - running_totals).divide(slots_left)


def best_fit(
    candidates: Sequence[RecipeMacros],
    target: MacroTotals,
    serving_options: Sequence[float] = DEFAULT_SERVING_OPTIONS,
) -> Optional[Tuple[RecipeMacros, float, float]]:
    """
    Pick the (recipe, servings) pair closest to target.

    Ties go to the first pair encountered: candidate order first, then
    ascending serving size.

    Returns:
        (recipe, servings, score) or None when there are no candidates
    """
    best = None
    best_score = float("inf")

    for candidate in candidates:
        for servings in serving_options:
            score = macro_distance(candidate.for_servings(servings), target)
            if score < best_score:
                best_score = score
                best = (candidate, servings, score)

    return best


def allocate(
    free_slots: Sequence[SlotKey],
    recipes: Sequence[RecipeMacros],
    goals: MacroTotals,
    locked_totals: MacroTotals,
    total_slots: int,
    pool_size: int = DEFAULT_POOL_SIZE,
    serving_options: Sequence[float] = DEFAULT_SERVING_OPTIONS,
) -> List[Assignment]:
    """
    Greedily assign a recipe and serving size to every free slot.

    Args:
        free_slots: Slots to fill, in enumeration order
        recipes: Full catalog
        goals: Weekly targets
        locked_totals: Macros already contributed by locked entries
        total_slots: Size of the whole weekly grid, used for the ranking target
        pool_size: Number of ranked recipes considered per slot
        serving_options: Allowed serving multipliers, ascending

    Returns:
        One assignment per filled slot, in slot order. Empty when the
        catalog is empty or there is nothing to fill.
    """
    if not free_slots or not recipes:
        return []

    serving_options = sorted(serving_options)
    pool = rank_candidates(recipes, goals.divide(max(1, total_slots)), pool_size)

    assignments: List[Assignment] = []
    running = locked_totals

    for slot in free_slots:
        slots_left = len(free_slots) - len(assignments)
        target = remaining_slot_target(goals, running, slots_left)

        choice = best_fit(pool, target, serving_options)
        if choice is None:
            continue

        recipe, servings, score = choice
        assignment = Assignment(slot=slot, recipe=recipe, servings=servings, target=target)
        assignments.append(assignment)
        running = running + assignment.totals

        logger.debug(
            f"Assigned {recipe.title!r} x{servings} to {slot} (score {score:.4f})"
        )

    return assignments
