"""Domain models for the weekly meal plan grid."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from uuid import UUID


class MealSlot(str, Enum):
    """Meal slots available on each day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


DAYS_PER_WEEK = 7

# Day indices used by the grid, Sunday first.
DAY_NAMES: dict[str, int] = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}


@dataclass(frozen=True)
class Week:
    """A household's planning week."""

    id: UUID
    household_id: UUID
    start_date: date
    end_date: date


@dataclass(frozen=True)
class Meal:
    """A single cell of the grid."""

    id: UUID
    week_id: UUID
    day: int
    slot: MealSlot
    recipe_id: UUID
    recipe_title: str | None = None


@dataclass(frozen=True)
class WeeklyPlan:
    """A week with its planned meals."""

    week: Week
    meals: list[Meal]
