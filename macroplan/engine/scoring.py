"""
Macro distance scoring.

A weighted relative L1 deviation: calories dominate, macros follow.
"""
from typing import Dict

from macroplan.engine.models import MacroTotals


MACRO_WEIGHTS: Dict[str, float] = {
    "kcal": 1.0,
    "protein": 0.8,
    "fat": 0.6,
    "carbs": 0.6,
}


def _relative_deviation(candidate: float, target: float) -> float:
    # Non-positive targets divide by 1
    denominator = target if target > 0 else 1.0
    return abs(candidate - target) / denominator


def macro_distance(candidate: MacroTotals, target: MacroTotals) -> float:
    """
    Distance between a candidate macro profile and a target profile.

    Each axis contributes |candidate - target| / target, weighted by
    MACRO_WEIGHTS. Lower is a better fit; the result is never negative.

    Args:
        candidate: Macros a recipe (at some serving size) would contribute
        target: Macros the slot should ideally receive

    Returns:
        Non-negative weighted distance
    """
    return (
        MACRO_WEIGHTS["kcal"] * _relative_deviation(candidate.kcal, target.kcal)
        + MACRO_WEIGHTS["protein"] * _relative_deviation(candidate.protein, target.protein)
        + MACRO_WEIGHTS["fat"] * _relative_deviation(candidate.fat, target.fat)
        + MACRO_WEIGHTS["carbs"] * _relative_deviation(candidate.carbs, target.carbs)
    )
