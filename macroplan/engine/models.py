"""
Plain data models for the meal plan generator.

The engine works on these immutable dataclasses only. Services convert
ORM rows into them before generation and convert assignments back into
meal entries afterwards.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple


class SlotName(str, Enum):
    """Meal slots in their fixed daily order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK1 = "snack1"
    SNACK2 = "snack2"
    SNACK3 = "snack3"


# Daily order of slots; a plan uses the first meals_per_day of these
SLOT_ORDER: Tuple[SlotName, ...] = tuple(SlotName)

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class MacroTotals:
    """Calories and macros on the four scored axes."""

    kcal: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0

    def __add__(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            kcal=self.kcal + other.kcal,
            protein=self.protein + other.protein,
            fat=self.fat + other.fat,
            carbs=self.carbs + other.carbs,
        )

    def __sub__(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            kcal=self.kcal - other.kcal,
            protein=self.protein - other.protein,
            fat=self.fat - other.fat,
            carbs=self.carbs - other.carbs,
        )

    def scale(self, factor: float) -> "MacroTotals":
        """Multiply every axis by factor."""
        return MacroTotals(
            kcal=self.kcal * factor,
            protein=self.protein * factor,
            fat=self.fat * factor,
            carbs=self.carbs * factor,
        )

    def divide(self, divisor: float) -> "MacroTotals":
        return MacroTotals(
            kcal=self.kcal / divisor,
            protein=self.protein / divisor,
            fat=self.fat / divisor,
            carbs=self.carbs / divisor,
        )

    def as_dict(self) -> dict:
        return {
            "kcal": self.kcal,
            "protein": self.protein,
            "fat": self.fat,
            "carbs": self.carbs,
        }


@dataclass(frozen=True)
class RecipeMacros:
    """Per-serving nutrition snapshot of a catalog recipe."""

    id: str
    title: str
    kcal: int
    protein: float
    fat: float
    carbs: float

    @property
    def per_serving(self) -> MacroTotals:
        return MacroTotals(
            kcal=float(self.kcal),
            protein=self.protein,
            fat=self.fat,
            carbs=self.carbs,
        )

    def for_servings(self, servings: float) -> MacroTotals:
        """Macro contribution of this recipe scaled linearly by servings."""
        return self.per_serving.scale(servings)


@dataclass(frozen=True, order=True)
class SlotKey:
    """
    Identity of a meal slot within a plan.

    Dates are plain calendar days so that locked-entry matching never
    depends on a timezone.
    """

    date: date
    slot: SlotName

    def __str__(self) -> str:
        return f"{self.date.isoformat()}/{self.slot.value}"


@dataclass(frozen=True)
class ExistingEntry:
    """A meal entry present in the plan before generation runs."""

    date: date
    slot: SlotName
    recipe_id: str
    servings: float

    @property
    def key(self) -> SlotKey:
        return SlotKey(date=self.date, slot=self.slot)


@dataclass(frozen=True)
class Assignment:
    """
    A recipe and serving multiplier chosen for one free slot.

    target is the remaining per-slot target the allocator scored against
    when it picked this recipe; the refiner scores swaps against it.
    """

    slot: SlotKey
    recipe: RecipeMacros
    servings: float
    target: MacroTotals

    @property
    def totals(self) -> MacroTotals:
        return self.recipe.for_servings(self.servings)


@dataclass(frozen=True)
class GenerationRequest:
    """Everything the generator reads: plan configuration, entries and catalog."""

    week_start: date
    meals_per_day: int
    goals: MacroTotals
    existing_entries: List[ExistingEntry] = field(default_factory=list)
    recipes: List[RecipeMacros] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Output of one generator run."""

    assignments: List[Assignment]
    locked_slots: List[SlotKey]
    free_slots: List[SlotKey]
    locked_totals: MacroTotals
    projected_totals: MacroTotals
    warning: Optional[str] = None

    @property
    def unfilled_slots(self) -> List[SlotKey]:
        """Free slots the allocator could not fill (empty catalog)."""
        assigned = {a.slot for a in self.assignments}
        return [s for s in self.free_slots if s not in assigned]
