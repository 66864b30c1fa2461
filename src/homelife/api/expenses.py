"""Expense endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from homelife.api.dependencies import Member, get_container, require_member
from homelife.api.responses import success
from homelife.api.schemas import ExpenseCreate, ExpenseUpdate
from homelife.containers import AppContainer

router = APIRouter(prefix="/v0.1/expenses", tags=["expenses"])


@router.get("")
async def list_expenses(
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return household expenses."""
    return success(container.expense_service.list_expenses(member.household_id))


@router.post("")
async def create_expense(
    body: ExpenseCreate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Record an expense."""
    expense = container.expense_service.create_expense(
        member.household_id, body.model_dump(exclude_none=True)
    )
    return success(expense)


@router.get("/summary")
async def summary(
    period: str = Query(default="week"),
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Summarize spending for the current week or month."""
    return success(container.expense_service.summary(member.household_id, period))


@router.get("/{expense_id}")
async def get_expense(
    expense_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return an expense."""
    return success(
        container.expense_service.get_expense(expense_id, member.household_id)
    )


@router.post("/{expense_id}/update")
async def update_expense(
    expense_id: UUID,
    body: ExpenseUpdate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Update an expense."""
    expense = container.expense_service.update_expense(
        expense_id, member.household_id, body.model_dump(exclude_unset=True)
    )
    return success(expense)


@router.post("/{expense_id}/delete")
async def delete_expense(
    expense_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Delete an expense."""
    container.expense_service.delete_expense(expense_id, member.household_id)
    return success()
