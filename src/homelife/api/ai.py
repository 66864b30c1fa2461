"""Assistant endpoints with pantry-based fallbacks."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from homelife.api.dependencies import Member, get_container, require_member
from homelife.api.responses import success
from homelife.containers import AppContainer

router = APIRouter(prefix="/v0.1/ai", tags=["ai"])

_logger = logging.getLogger(__name__)


@router.get("/recipe-suggestions")
async def recipe_suggestions(
    limit: int = Query(default=5),
    use_ai: bool = Query(default=True),
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Suggest recipes from the assistant, falling back to saved recipes."""
    if use_ai and container.assistant_service.enabled:
        pantry_names = container.pantry_service.ingredient_names(member.household_id)
        ideas = await container.assistant_service.suggest_recipes(pantry_names, limit)
        if ideas:
            return success({"suggestions": ideas, "source": "ai"})
        _logger.info(
            "No assistant suggestions, using saved recipes",
            extra={"household_id": member.household_id},
        )
    suggestions = container.recipe_service.suggest_from_pantry(
        member.household_id, limit
    )
    return success({"suggestions": suggestions, "source": "pantry"})


@router.get("/substitutions/{ingredient_id}")
async def substitutions(
    ingredient_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Suggest replacements for an ingredient using pantry stock."""
    ingredient = container.catalog_service.get_ingredient(
        ingredient_id, member.household_id
    )
    pantry_names = [
        name
        for name in container.pantry_service.ingredient_names(member.household_id)
        if name != ingredient.name
    ]
    options = await container.assistant_service.suggest_substitutions(
        ingredient.name, pantry_names
    )
    return success({"ingredient": ingredient.name, "substitutions": options})
