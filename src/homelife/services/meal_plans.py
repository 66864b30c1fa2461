"""Weekly meal plan grid."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from homelife.domain.errors import NotFoundError, ValidationError
from homelife.domain.meal_plans import (
    DAY_NAMES,
    DAYS_PER_WEEK,
    Meal,
    MealSlot,
    Week,
    WeeklyPlan,
)
from homelife.domain.notifications import MEAL_PLAN_UPDATED, NotificationEvent
from homelife.domain.ownership import assert_owned_by
from homelife.services.notifications import EventPublisher
from homelife.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)


class MealPlanRepository(Protocol):
    """Persistence interface for weeks and meals."""

    def get_week(self, week_id: UUID) -> Week | None:
        """Return a week by id."""

    def find_week(self, household_id: UUID, start_date: date) -> Week | None:
        """Return the household week starting on ``start_date``."""

    def upsert_week(self, household_id: UUID, start_date: date, end_date: date) -> Week:
        """Insert the week or return the existing one for the same start."""

    def list_meals(self, week_id: UUID) -> list[Meal]:
        """Return the meals of a week."""

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal by id."""

    def upsert_meal(
        self, week_id: UUID, day: int, slot: MealSlot, recipe_id: UUID
    ) -> Meal:
        """Insert the meal or overwrite the recipe of the occupied cell."""

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal, returning whether it existed."""


@dataclass
class MealPlanService:
    """Application service for the day x slot planning grid."""

    repository: MealPlanRepository
    recipes: RecipeRepository
    publisher: EventPublisher
    first_weekday: int = 0

    def week_bounds(self, value: date | None = None) -> tuple[date, date]:
        """Return the start and end of the calendar week containing ``value``."""
        try:
            start = week_start(value or date.today(), self.first_weekday)
            return start, start + timedelta(days=DAYS_PER_WEEK - 1)
        except OverflowError as exc:
            raise ValidationError(
                "Week is outside the supported date range", field="start_date"
            ) from exc

    def get_weekly_plan(
        self, household_id: UUID, week_start_date: date | None = None
    ) -> WeeklyPlan | None:
        """Return the week and its meals, or None if it was never created."""
        start, _ = self.week_bounds(week_start_date)
        week = self.repository.find_week(household_id, start)
        if week is None:
            return None
        return WeeklyPlan(week=week, meals=self.repository.list_meals(week.id))

    def get_or_create_week(self, household_id: UUID, start_date: date) -> WeeklyPlan:
        """Return the week containing ``start_date``, creating it if needed."""
        start, end = self.week_bounds(start_date)
        week = self.repository.find_week(household_id, start)
        if week is None:
            week = self.repository.upsert_week(household_id, start, end)
            _logger.info(
                "Created planning week %s",
                start.isoformat(),
                extra={"household_id": household_id, "week_id": week.id},
            )
        return WeeklyPlan(week=week, meals=self.repository.list_meals(week.id))

    def get_week(self, week_id: UUID, household_id: UUID) -> Week:
        """Return a household week or raise NotFound."""
        return assert_owned_by(self.repository.get_week(week_id), household_id, "Week")

    def list_meals(self, week_id: UUID, household_id: UUID) -> list[Meal]:
        """Return the meals of a household week."""
        week = self.get_week(week_id, household_id)
        return self.repository.list_meals(week.id)

    def set_meal(  # noqa: PLR0913
        self,
        week_id: UUID,
        household_id: UUID,
        day: int | str,
        slot: str | MealSlot,
        recipe_id: UUID,
    ) -> Meal:
        """Assign a recipe to a cell, replacing whatever was there."""
        week = self.get_week(week_id, household_id)
        day_index = parse_day(day)
        meal_slot = parse_slot(slot)
        recipe = self.recipes.get_recipe(recipe_id)
        if recipe is None or recipe.household_id != household_id:
            raise ValidationError("Recipe does not exist", field="recipe_id")

        meal = self.repository.upsert_meal(week.id, day_index, meal_slot, recipe.id)
        self._notify(week.id, household_id)
        return meal

    def remove_meal(self, week_id: UUID, household_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal that belongs to the household week."""
        week = self.get_week(week_id, household_id)
        meal = self.repository.get_meal(meal_id)
        if meal is None or meal.week_id != week.id:
            raise NotFoundError("Meal")
        deleted = self.repository.delete_meal(meal.id)
        if deleted:
            self._notify(week.id, household_id)
        return deleted

    def _notify(self, week_id: UUID, household_id: UUID) -> None:
        try:
            self.publisher.publish(
                NotificationEvent(
                    name=MEAL_PLAN_UPDATED,
                    payload={
                        "week_id": str(week_id),
                        "household_id": str(household_id),
                    },
                )
            )
        except Exception:
            _logger.exception(
                "Failed to publish meal plan update",
                extra={"household_id": household_id, "week_id": week_id},
            )


def week_start(value: date, first_weekday: int = 0) -> date:
    """Return the first day of the week containing ``value``.

    ``first_weekday`` follows ``date.weekday()``: 0 is Monday, 6 is Sunday.
    """
    offset = (value.weekday() - first_weekday) % DAYS_PER_WEEK
    return value - timedelta(days=offset)


def parse_day(value: int | str) -> int:
    """Normalize a day name or number to 0 (Sunday) .. 6 (Saturday)."""
    if isinstance(value, bool):
        raise ValidationError("Day must be 0-6 or a day name", field="day")
    if isinstance(value, int):
        day = value
    else:
        cleaned = value.strip().lower()
        if cleaned in DAY_NAMES:
            return DAY_NAMES[cleaned]
        try:
            day = int(cleaned)
        except ValueError:
            raise ValidationError(
                "Day must be 0-6 or a day name", field="day"
            ) from None
    if not 0 <= day < DAYS_PER_WEEK:
        raise ValidationError("Day must be between 0 and 6", field="day")
    return day


def parse_slot(value: str | MealSlot) -> MealSlot:
    """Return the slot for a case-insensitive name."""
    if isinstance(value, MealSlot):
        return value
    try:
        return MealSlot(value.strip().lower())
    except ValueError:
        allowed = ", ".join(slot.value for slot in MealSlot)
        raise ValidationError(f"Slot must be one of {allowed}", field="slot") from None
