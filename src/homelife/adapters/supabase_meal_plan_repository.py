"""Supabase repository for planning weeks and meals."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from homelife.adapters.supabase_rows import embedded_name, parse_date
from homelife.domain.meal_plans import Meal, MealSlot, Week
from homelife.services.meal_plans import MealPlanRepository

_SLOT_ORDER = {slot: index for index, slot in enumerate(MealSlot)}


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for the meal plan grid.

    Weeks are unique per (household_id, start_date) and meals per
    (week_id, day, slot); both writes are upserts on those constraints.
    """

    client: Client

    def get_week(self, week_id: UUID) -> Week | None:
        """Return a week by id."""
        response = (
            self.client.table("weeks")
            .select("*")
            .eq("id", str(week_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_week(response.data[0])

    def find_week(self, household_id: UUID, start_date: date) -> Week | None:
        """Return the household week starting on ``start_date``."""
        response = (
            self.client.table("weeks")
            .select("*")
            .eq("household_id", str(household_id))
            .eq("start_date", start_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_week(response.data[0])

    def upsert_week(self, household_id: UUID, start_date: date, end_date: date) -> Week:
        """Insert the week, or return the row already holding this start date."""
        response = (
            self.client.table("weeks")
            .upsert(
                {
                    "household_id": str(household_id),
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                },
                on_conflict="household_id,start_date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create week")
        return _parse_week(response.data[0])

    def list_meals(self, week_id: UUID) -> list[Meal]:
        """Return the meals of a week ordered by day and slot."""
        response = (
            self.client.table("meals")
            .select("*, recipes(title)")
            .eq("week_id", str(week_id))
            .order("day")
            .execute()
        )
        meals = [_parse_meal(row) for row in response.data or []]
        meals.sort(key=lambda meal: (meal.day, _SLOT_ORDER[meal.slot]))
        return meals

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal by id."""
        response = (
            self.client.table("meals")
            .select("*, recipes(title)")
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def upsert_meal(
        self, week_id: UUID, day: int, slot: MealSlot, recipe_id: UUID
    ) -> Meal:
        """Insert the meal or overwrite the recipe in the occupied cell."""
        response = (
            self.client.table("meals")
            .upsert(
                {
                    "week_id": str(week_id),
                    "day": day,
                    "slot": slot.value,
                    "recipe_id": str(recipe_id),
                },
                on_conflict="week_id,day,slot",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal")
        meal = _parse_meal(response.data[0])
        return self.get_meal(meal.id) or meal

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal."""
        response = self.client.table("meals").delete().eq("id", str(meal_id)).execute()
        return bool(response.data)


def _parse_week(row: dict[str, object]) -> Week:
    return Week(
        id=UUID(row["id"]),
        household_id=UUID(row["household_id"]),
        start_date=parse_date(row["start_date"]),
        end_date=parse_date(row["end_date"]),
    )


def _parse_meal(row: dict[str, object]) -> Meal:
    return Meal(
        id=UUID(row["id"]),
        week_id=UUID(row["week_id"]),
        day=int(row["day"]),
        slot=MealSlot(row["slot"]),
        recipe_id=UUID(row["recipe_id"]),
        recipe_title=embedded_name(row, "recipes", "title"),
    )
