"""
Local refinement of greedy assignments.

One bounded pass of pairwise swaps. Two slots exchange their recipe and
serving size when doing so brings both closer, in sum, to the targets
they were allocated against. Weekly totals are unchanged by a swap.
"""
import logging
from dataclasses import replace
from typing import List, Sequence

from macroplan.engine.models import Assignment
from macroplan.engine.scoring import macro_distance

logger = logging.getLogger(__name__)

DEFAULT_MAX_SWAPS_PER_INDEX = 1


def assignment_cost(assignment: Assignment) -> float:
    """Distance between what a slot received and its allocation target."""
    return macro_distance(assignment.totals, assignment.target)


def pair_cost(first: Assignment, second: Assignment) -> float:
    return assignment_cost(first) + assignment_cost(second)


def swapped(first: Assignment, second: Assignment) -> tuple:
    """Exchange food between two slots; slot identity and targets stay put."""
    return (
        replace(first, recipe=second.recipe, servings=second.servings),
        replace(second, recipe=first.recipe, servings=first.servings),
    )


def refine(
    assignments: Sequence[Assignment],
    max_swaps_per_index: int = DEFAULT_MAX_SWAPS_PER_INDEX,
) -> List[Assignment]:
    """
    Run a single pass of strictly improving pairwise swaps.

    Pairs (i, j) with i < j are visited in ascending order. A swap is kept
    only when the post-swap pair cost is strictly lower than before. Once
    max_swaps_per_index swaps have been kept for i, scanning moves on to
    i + 1.

    Args:
        assignments: Greedy output, in slot order
        max_swaps_per_index: Kept swaps credited per outer index

    Returns:
        A new list; the input is left untouched
    """
    refined = list(assignments)
    kept = 0

    for i in range(len(refined) - 1):
        swaps_for_i = 0
        for j in range(i + 1, len(refined)):
            before = pair_cost(refined[i], refined[j])
            candidate_i, candidate_j = swapped(refined[i], refined[j])
            after = pair_cost(candidate_i, candidate_j)

            if after < before:
                refined[i], refined[j] = candidate_i, candidate_j
                kept += 1
                swaps_for_i += 1
                if swaps_for_i >= max_swaps_per_index:
                    break

    if kept:
        logger.debug(f"Refinement kept {kept} swap(s) across {len(refined)} assignments")

    return refined
