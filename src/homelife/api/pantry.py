"""Pantry ledger endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from homelife.api.dependencies import Member, get_container, require_member
from homelife.api.responses import failure, success
from homelife.api.schemas import (
    ConsumeRequest,
    ExpiryUpdate,
    PantryItemCreate,
    PantryItemUpdate,
)
from homelife.containers import AppContainer
from homelife.services.pantry import MAX_EXPIRY_DAYS

router = APIRouter(prefix="/v0.1/pantry", tags=["pantry"])


@router.get("")
async def list_items(
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return household stock."""
    return success(container.pantry_service.list_items(member.household_id))


@router.post("")
async def add_item(
    body: PantryItemCreate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Add stock for an ingredient."""
    item = container.pantry_service.add(
        member.household_id,
        ingredient_id=body.ingredient_id,
        quantity=body.quantity,
        unit_id=body.unit_id,
        expiry_date=body.expiry_date,
        location=body.location,
    )
    return success(item)


@router.get("/expiring")
async def expiring_soon(
    days: int = Query(default=7, ge=0, le=MAX_EXPIRY_DAYS),
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return stock expiring within ``days``, soonest first."""
    return success(
        container.pantry_service.get_expiring_soon(member.household_id, days)
    )


@router.post("/expiring/email", response_model=None)
async def email_expiring(
    days: int = Query(default=7, ge=0, le=MAX_EXPIRY_DAYS),
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object] | JSONResponse:
    """Email expiring stock to the user and configured recipients."""
    result = await container.alert_service.send_expiring_items_email(
        member.user, member.household_id, days
    )
    if not result.delivered:
        return JSONResponse(status_code=502, content=failure("Failed to send email"))
    return success(
        {"items_count": result.items_count, "recipients": result.recipients},
        message="Email sent successfully",
    )


@router.post("/merge-duplicates")
async def merge_duplicates(
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Collapse rows of the same ingredient and unit."""
    result = container.pantry_service.merge_duplicates(member.household_id)
    return success(result, message=f"Merged {result.merged_count} duplicate items")


@router.post("/{item_id}/update")
async def update_item(
    item_id: UUID,
    body: PantryItemUpdate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Update stock fields and the underlying ingredient."""
    item = container.pantry_service.update_item(
        item_id, member.household_id, body.model_dump(exclude_unset=True)
    )
    return success(item)


@router.post("/{item_id}/expiry")
async def update_expiry(
    item_id: UUID,
    body: ExpiryUpdate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Change only the expiry date."""
    item = container.pantry_service.update_expiry(
        item_id, member.household_id, body.expiry_date
    )
    return success(item)


@router.delete("/{item_id}")
@router.post("/{item_id}/delete")
async def delete_item(
    item_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Delete a stock row."""
    container.pantry_service.delete_item(item_id, member.household_id)
    return success()


@router.post("/{item_id}/consume")
async def consume(
    item_id: UUID,
    body: ConsumeRequest,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Use up part or all of a stock row."""
    result = container.pantry_service.consume(
        item_id, member.household_id, body.quantity
    )
    if result.deleted:
        return success({"deleted": True}, message="Item consumed and removed")
    return success({"deleted": False, "item": result.item})
