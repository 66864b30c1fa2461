"""Nutrition endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from homelife.api.dependencies import Member, get_container, require_member
from homelife.api.responses import success
from homelife.containers import AppContainer

router = APIRouter(prefix="/v0.1/nutrition", tags=["nutrition"])


@router.get("/recipes/{recipe_id}")
async def recipe_nutrition(
    recipe_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return whole-recipe and per-serving nutrition."""
    return success(
        container.nutrition_service.get_recipe_nutrition(
            recipe_id, member.household_id
        )
    )


@router.get("/weeks/{week_id}")
async def weekly_nutrition(
    week_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return nutrition for every planned meal of a week."""
    return success(
        container.nutrition_service.get_weekly_nutrition(week_id, member.household_id)
    )
