"""Supabase repository for expenses."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from homelife.adapters.supabase_rows import parse_date, to_row
from homelife.domain.expenses import Expense
from homelife.services.expenses import ExpenseRepository


@dataclass
class SupabaseExpenseRepository(ExpenseRepository):
    """Supabase implementation for expenses."""

    client: Client

    def get_expense(self, expense_id: UUID) -> Expense | None:
        """Return an expense by id."""
        response = (
            self.client.table("expenses")
            .select("*")
            .eq("id", str(expense_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_expense(response.data[0])

    def list_expenses(
        self, household_id: UUID, start: date | None = None, end: date | None = None
    ) -> list[Expense]:
        """Return household expenses within ``[start, end]``, newest first."""
        query = (
            self.client.table("expenses")
            .select("*")
            .eq("household_id", str(household_id))
        )
        if start is not None:
            query = query.gte("date", start.isoformat())
        if end is not None:
            query = query.lte("date", end.isoformat())
        response = query.order("date", desc=True).execute()
        return [_parse_expense(row) for row in response.data or []]

    def create_expense(self, household_id: UUID, payload: dict[str, object]) -> Expense:
        """Create an expense and return it."""
        response = (
            self.client.table("expenses")
            .insert({"household_id": str(household_id), **to_row(payload)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create expense")
        return _parse_expense(response.data[0])

    def update_expense(self, expense_id: UUID, payload: dict[str, object]) -> Expense:
        """Update an expense and return it."""
        response = (
            self.client.table("expenses")
            .update(to_row(payload))
            .eq("id", str(expense_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update expense")
        return _parse_expense(response.data[0])

    def delete_expense(self, expense_id: UUID) -> bool:
        """Delete an expense."""
        response = (
            self.client.table("expenses").delete().eq("id", str(expense_id)).execute()
        )
        return bool(response.data)


def _parse_expense(row: dict[str, object]) -> Expense:
    return Expense(
        id=UUID(row["id"]),
        household_id=UUID(row["household_id"]),
        store=row.get("store"),
        amount=float(row.get("amount") or 0.0),
        date=parse_date(row["date"]),
        category=row.get("category"),
        note=row.get("note"),
        receipt_link=row.get("receipt_link"),
    )
