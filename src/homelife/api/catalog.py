"""Unit and ingredient endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from homelife.api.dependencies import (
    Member,
    get_container,
    require_member,
    require_user,
)
from homelife.api.responses import success
from homelife.api.schemas import IngredientCreate, UnitCreate
from homelife.containers import AppContainer

units_router = APIRouter(
    prefix="/v0.1/units", tags=["units"], dependencies=[Depends(require_user)]
)
ingredients_router = APIRouter(prefix="/v0.1/ingredients", tags=["ingredients"])


@units_router.get("")
async def list_units(
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return all units."""
    return success(container.catalog_service.list_units())


@units_router.post("")
async def create_unit(
    body: UnitCreate, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Create a unit."""
    return success(container.catalog_service.create_unit(body.name, body.abbreviation))


@ingredients_router.get("")
async def list_ingredients(
    search: str | None = None,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return household ingredients, optionally filtered by name."""
    return success(
        container.catalog_service.list_ingredients(member.household_id, search)
    )


@ingredients_router.get("/{ingredient_id}")
async def get_ingredient(
    ingredient_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return a household ingredient."""
    return success(
        container.catalog_service.get_ingredient(ingredient_id, member.household_id)
    )


@ingredients_router.post("")
async def create_ingredient(
    body: IngredientCreate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create an ingredient or update the default unit of an existing one."""
    ingredient = container.catalog_service.create_ingredient(
        member.household_id, body.model_dump()
    )
    return success(ingredient)
