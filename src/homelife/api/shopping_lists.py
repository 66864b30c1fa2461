"""Shopping list endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from homelife.api.dependencies import Member, get_container, require_member
from homelife.api.responses import success
from homelife.api.schemas import (
    ShoppingItemCreate,
    ShoppingItemUpdate,
    ShoppingListCreate,
    ShoppingListGenerate,
    ShoppingListUpdate,
)
from homelife.containers import AppContainer

router = APIRouter(prefix="/v0.1/shopping-lists", tags=["shopping-lists"])


@router.get("")
async def list_lists(
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return household shopping lists."""
    return success(container.shopping_list_service.list_lists(member.household_id))


@router.post("")
async def create_list(
    body: ShoppingListCreate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create an empty shopping list."""
    shopping_list = container.shopping_list_service.create_list(
        member.household_id, body.title, body.week_id
    )
    return success(shopping_list)


@router.post("/generate")
async def generate(
    body: ShoppingListGenerate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create a list from a week's meals minus pantry stock."""
    shopping_list = container.shopping_list_service.generate_from_meal_plan(
        member.household_id, body.week_id, body.title
    )
    return success(shopping_list)


@router.get("/{list_id}")
async def get_list(
    list_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return a shopping list with its items."""
    return success(
        container.shopping_list_service.get_list(list_id, member.household_id)
    )


@router.post("/{list_id}/update")
async def update_list(
    list_id: UUID,
    body: ShoppingListUpdate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Rename or complete a shopping list."""
    shopping_list = container.shopping_list_service.update_list(
        list_id, member.household_id, body.model_dump(exclude_unset=True)
    )
    return success(shopping_list)


@router.post("/{list_id}/delete")
async def delete_list(
    list_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Delete a shopping list."""
    container.shopping_list_service.delete_list(list_id, member.household_id)
    return success()


@router.post("/{list_id}/items")
async def add_item(
    list_id: UUID,
    body: ShoppingItemCreate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Add a line to a shopping list."""
    item = container.shopping_list_service.add_item(
        list_id,
        member.household_id,
        ingredient_id=body.ingredient_id,
        quantity=body.quantity,
        unit_id=body.unit_id,
    )
    return success(item)


@router.post("/{list_id}/items/{item_id}/update")
async def update_item(
    list_id: UUID,
    item_id: UUID,
    body: ShoppingItemUpdate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Change a line's quantity or bought flag."""
    item = container.shopping_list_service.update_item(
        list_id, member.household_id, item_id, body.model_dump(exclude_unset=True)
    )
    return success(item)


@router.post("/{list_id}/items/{item_id}/delete")
async def delete_item(
    list_id: UUID,
    item_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Remove a line from a shopping list."""
    container.shopping_list_service.delete_item(list_id, member.household_id, item_id)
    return success()
