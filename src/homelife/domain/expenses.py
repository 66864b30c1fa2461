"""Domain models for expenses."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class Expense:
    """A recorded household purchase."""

    id: UUID
    household_id: UUID
    store: str | None
    amount: float
    date: date
    category: str | None
    note: str | None
    receipt_link: str | None


@dataclass(frozen=True)
class SpendingSummary:
    """Aggregated spending over a period."""

    start_date: date
    end_date: date
    total: float
    count: int
    average_per_transaction: float
    by_category: dict[str, float]
