"""
Slot enumeration for weekly meal plans.

Builds the (date, slot) grid of a plan's week and separates the slots
already occupied by existing entries from the ones left to fill.
"""
from datetime import date, datetime, timedelta
from typing import Iterable, List, Tuple, Union

from macroplan.engine.models import (
    DAYS_PER_WEEK, SLOT_ORDER, ExistingEntry, SlotKey, SlotName
)


def as_calendar_day(value: Union[date, datetime]) -> date:
    """Normalise a date or datetime to a naive calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def slot_names_for(meals_per_day: int) -> List[SlotName]:
    """
    Return the slot names used by a plan with the given meal count.

    Raises:
        ValueError: If meals_per_day is outside 1..6
    """
    if not 1 <= meals_per_day <= len(SLOT_ORDER):
        raise ValueError(
            f"meals_per_day must be between 1 and {len(SLOT_ORDER)} (got {meals_per_day})"
        )
    return list(SLOT_ORDER[:meals_per_day])


def week_dates(week_start: Union[date, datetime]) -> List[date]:
    """The seven calendar days starting at week_start."""
    start = as_calendar_day(week_start)
    return [start + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def enumerate_slots(week_start: Union[date, datetime], meals_per_day: int) -> List[SlotKey]:
    """
    Enumerate every slot of the week in day-major, slot-minor order.

    Args:
        week_start: First day of the plan
        meals_per_day: Number of slots per day

    Returns:
        7 * meals_per_day slot keys
    """
    names = slot_names_for(meals_per_day)
    return [
        SlotKey(date=day, slot=name)
        for day in week_dates(week_start)
        for name in names
    ]


def partition_slots(
    slots: List[SlotKey],
    existing_entries: Iterable[ExistingEntry],
) -> Tuple[List[SlotKey], List[SlotKey]]:
    """
    Split slots into locked (already occupied) and free, preserving order.

    Matching is exact on calendar date and slot name. Entries that fall
    outside the enumerated grid are ignored here.
    """
    occupied = {
        SlotKey(date=as_calendar_day(entry.date), slot=SlotName(entry.slot))
        for entry in existing_entries
    }

    locked = [s for s in slots if s in occupied]
    free = [s for s in slots if s not in occupied]
    return locked, free
