"""Meal plan grid endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from homelife.api.dependencies import Member, get_container, require_member
from homelife.api.responses import success
from homelife.api.schemas import MealCreate, WeekCreate
from homelife.containers import AppContainer
from homelife.domain.errors import ValidationError
from homelife.domain.meal_plans import WeeklyPlan

router = APIRouter(prefix="/v0.1/meal-plans", tags=["meal-plans"])


@router.get("")
async def get_weekly_plan(
    week_start_date: date | None = Query(default=None, alias="weekStartDate"),
    start_date: date | None = None,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the week containing the given date with its meals."""
    requested = week_start_date or start_date
    service = container.meal_plan_service
    plan = service.get_weekly_plan(member.household_id, requested)
    if plan is None:
        start, end = service.week_bounds(requested)
        return success(
            {"id": None, "start_date": start, "end_date": end, "meals": []}
        )
    return success(_week_payload(plan))


@router.post("")
async def create_week(
    body: WeekCreate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create the week containing ``start_date`` or return the existing one."""
    plan = container.meal_plan_service.get_or_create_week(
        member.household_id, body.start_date
    )
    return success(_week_payload(plan))


@router.post("/{week_id}/meals")
async def set_meal(
    week_id: UUID,
    body: MealCreate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Assign a recipe to a day and slot, replacing the previous one."""
    slot = body.slot or body.meal_type
    if not slot:
        raise ValidationError("Slot is required", field="slot")
    meal = container.meal_plan_service.set_meal(
        week_id, member.household_id, body.day, slot, body.recipe_id
    )
    return success(meal)


@router.post("/{week_id}/meals/{meal_id}/delete")
async def remove_meal(
    week_id: UUID,
    meal_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Remove a meal from the week."""
    container.meal_plan_service.remove_meal(week_id, member.household_id, meal_id)
    return success()


def _week_payload(plan: WeeklyPlan) -> dict[str, object]:
    return {
        "id": plan.week.id,
        "start_date": plan.week.start_date,
        "end_date": plan.week.end_date,
        "meals": plan.meals,
    }
