"""Domain models for the pantry ledger."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class InventoryItem:
    """A row of on-hand stock."""

    id: UUID
    household_id: UUID
    ingredient_id: UUID
    quantity: float
    unit_id: UUID
    expiry_date: date | None
    location: str | None
    ingredient_name: str | None = None
    unit_name: str | None = None


@dataclass(frozen=True)
class ExpiringItem:
    """Inventory row annotated with its distance to expiry."""

    id: UUID
    ingredient_id: UUID
    ingredient_name: str | None
    quantity: float
    unit_id: UUID
    unit_name: str | None
    expiry_date: date
    location: str | None
    days_until_expiry: int
    use_first: bool


@dataclass(frozen=True)
class ConsumeResult:
    """Outcome of consuming stock from a row."""

    item: InventoryItem | None
    deleted: bool


@dataclass(frozen=True)
class MergeResult:
    """Outcome of collapsing duplicate rows."""

    merged_count: int
    items: list[InventoryItem]
