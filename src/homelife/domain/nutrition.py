"""Nutrition roll-ups for recipes and planned weeks."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class NutritionTotals:
    """Calories and macronutrients summed over some amount of food."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


@dataclass(frozen=True)
class RecipeNutrition:
    """Whole-recipe totals and, when servings are known, one serving."""

    recipe_id: UUID
    title: str
    servings: int | None
    total: NutritionTotals
    per_serving: NutritionTotals | None


@dataclass(frozen=True)
class DayNutrition:
    """Totals for one day of the grid."""

    day: int
    on_date: date
    meals_count: int
    total: NutritionTotals


@dataclass(frozen=True)
class WeeklyNutrition:
    """Totals for every planned meal of a week."""

    week_id: UUID
    start_date: date
    end_date: date
    meals_count: int
    total: NutritionTotals
    daily_average: NutritionTotals
    daily: list[DayNutrition] = field(default_factory=list)
