"""Household expense tracking and spending summaries."""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from homelife.domain.errors import ValidationError
from homelife.domain.expenses import Expense, SpendingSummary
from homelife.domain.ownership import assert_owned_by
from homelife.services.meal_plans import week_start

UNCATEGORIZED = "uncategorized"
PERIODS = ("week", "month")
_EXPENSE_FIELDS = ("store", "amount", "date", "category", "note", "receipt_link")


class ExpenseRepository(Protocol):
    """Persistence interface for expenses."""

    def get_expense(self, expense_id: UUID) -> Expense | None:
        """Return an expense by id."""

    def list_expenses(
        self, household_id: UUID, start: date | None = None, end: date | None = None
    ) -> list[Expense]:
        """Return household expenses dated within ``[start, end]``, newest first."""

    def create_expense(self, household_id: UUID, payload: dict[str, object]) -> Expense:
        """Create and return an expense."""

    def update_expense(self, expense_id: UUID, payload: dict[str, object]) -> Expense:
        """Update and return an expense."""

    def delete_expense(self, expense_id: UUID) -> bool:
        """Delete an expense."""


@dataclass
class ExpenseService:
    """Application service for expenses."""

    repository: ExpenseRepository
    first_weekday: int = 0

    def list_expenses(self, household_id: UUID) -> list[Expense]:
        """Return all household expenses."""
        return self.repository.list_expenses(household_id)

    def get_expense(self, expense_id: UUID, household_id: UUID) -> Expense:
        """Return a household expense or raise NotFound."""
        return assert_owned_by(
            self.repository.get_expense(expense_id), household_id, "Expense"
        )

    def create_expense(
        self, household_id: UUID, payload: Mapping[str, object]
    ) -> Expense:
        """Record a purchase."""
        data = _expense_fields(payload)
        if "amount" not in data:
            raise ValidationError("amount is required", field="amount")
        data.setdefault("date", date.today())
        return self.repository.create_expense(household_id, data)

    def update_expense(
        self, expense_id: UUID, household_id: UUID, payload: Mapping[str, object]
    ) -> Expense:
        """Update fields of a household expense."""
        expense = self.get_expense(expense_id, household_id)
        data = _expense_fields(payload)
        if not data:
            return expense
        return self.repository.update_expense(expense.id, data)

    def delete_expense(self, expense_id: UUID, household_id: UUID) -> None:
        """Delete a household expense."""
        expense = self.get_expense(expense_id, household_id)
        self.repository.delete_expense(expense.id)

    def summary(
        self, household_id: UUID, period: str = "week", today: date | None = None
    ) -> SpendingSummary:
        """Summarize spending for the current week or month."""
        current = today or date.today()
        if period == "week":
            start = week_start(current, self.first_weekday)
            end = start + timedelta(days=6)
        elif period == "month":
            start = current.replace(day=1)
            end = (start + timedelta(days=32)).replace(day=1) - timedelta(days=1)
        else:
            raise ValidationError(
                f"period must be one of {', '.join(PERIODS)}", field="period"
            )
        return self.spending_between(household_id, start, end)

    def spending_between(
        self, household_id: UUID, start: date, end: date
    ) -> SpendingSummary:
        """Summarize expenses dated within ``[start, end]``."""
        expenses = self.repository.list_expenses(household_id, start, end)
        return summarize_expenses(expenses, start, end)


def summarize_expenses(
    expenses: Iterable[Expense], start: date, end: date
) -> SpendingSummary:
    """Aggregate expenses into totals rounded to cents."""
    total = 0.0
    count = 0
    by_category: dict[str, float] = {}
    for expense in expenses:
        total += expense.amount
        count += 1
        category = expense.category or UNCATEGORIZED
        by_category[category] = by_category.get(category, 0.0) + expense.amount
    return SpendingSummary(
        start_date=start,
        end_date=end,
        total=round(total, 2),
        count=count,
        average_per_transaction=round(total / count, 2) if count else 0.0,
        by_category={key: round(value, 2) for key, value in by_category.items()},
    )


def _expense_fields(payload: Mapping[str, object]) -> dict[str, object]:
    data = {
        key: payload[key]
        for key in _EXPENSE_FIELDS
        if key in payload and payload[key] is not None
    }
    if "amount" in data:
        amount = data["amount"]
        if isinstance(amount, bool) or not isinstance(amount, int | float):
            raise ValidationError("amount must be a number", field="amount")
        if not math.isfinite(amount) or amount < 0:
            raise ValidationError(
                "amount must be a finite number of at least 0", field="amount"
            )
        data["amount"] = float(amount)
    return data
