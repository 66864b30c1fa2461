"""Weekly insights aggregated across pantry, plan and expenses."""

from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from homelife.domain.insights import (
    PlanningSummary,
    WasteEntry,
    WasteSummary,
    WeeklyInsights,
    WeekRange,
)
from homelife.domain.meal_plans import MealSlot
from homelife.services.assistant import AssistantService
from homelife.services.expenses import ExpenseService
from homelife.services.meal_plans import MealPlanService
from homelife.services.pantry import PantryService

# Seven days of breakfast, lunch and dinner; snacks count as extra meals.
PLANNED_MEALS_TARGET = 21
EXPIRING_SOON_DAYS = 7
WASTE_WINDOW_DAYS = 7


@dataclass
class InsightsService:
    """Builds read-only weekly snapshots."""

    pantry: PantryService
    meal_plans: MealPlanService
    expenses: ExpenseService
    assistant: AssistantService

    async def get_weekly_insights(
        self,
        household_id: UUID,
        week_start_date: date | None = None,
        today: date | None = None,
    ) -> WeeklyInsights:
        """Return spending, waste, planning and expiry figures for a week."""
        current = today or date.today()
        start, end = self.meal_plans.week_bounds(week_start_date or current)
        spending = self.expenses.spending_between(household_id, start, end)
        waste = self._waste(household_id, start)
        planning = self._planning(household_id, start)
        expiring = self.pantry.get_expiring_soon(
            household_id, EXPIRING_SOON_DAYS, today=current
        )
        summary = await self.assistant.summarize_week(
            total_spend=spending.total,
            waste_count=waste.count,
            meals_planned=planning.meals_planned,
            expiring_count=len(expiring),
            expiring_names=[item.ingredient_name or "" for item in expiring],
        )
        return WeeklyInsights(
            week=WeekRange(start_date=start, end_date=end),
            spending=spending,
            waste=waste,
            planning=planning,
            expiring_soon=expiring,
            ai_summary=summary,
        )

    def _waste(self, household_id: UUID, start: date) -> WasteSummary:
        try:
            window_start = start - timedelta(days=WASTE_WINDOW_DAYS)
        except OverflowError:
            window_start = date.min
        rows = self.pantry.list_expired_between(household_id, window_start, start)
        items = [
            WasteEntry(
                ingredient=row.ingredient_name,
                quantity=row.quantity,
                expiry_date=row.expiry_date,
            )
            for row in rows
            if row.expiry_date is not None
        ]
        return WasteSummary(count=len(items), items=items)

    def _planning(self, household_id: UUID, start: date) -> PlanningSummary:
        by_slot = {slot.value: 0 for slot in MealSlot}
        plan = self.meal_plans.get_weekly_plan(household_id, start)
        meals = plan.meals if plan else []
        for meal in meals:
            by_slot[meal.slot.value] += 1
        return PlanningSummary(
            meals_planned=len(meals),
            by_slot=by_slot,
            coverage=round(len(meals) / PLANNED_MEALS_TARGET * 100, 1),
        )
