"""Pantry ledger: stock rows, consumption, merging and expiry views."""

import logging
import math
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from homelife.domain.errors import ConflictError, ValidationError
from homelife.domain.ownership import assert_owned_by
from homelife.domain.pantry import (
    ConsumeResult,
    ExpiringItem,
    InventoryItem,
    MergeResult,
)
from homelife.services.catalog import NUTRITION_FIELDS, CatalogService

MAX_WRITE_ATTEMPTS = 3
USE_FIRST_DAYS = 2
MAX_EXPIRY_DAYS = 365
_ITEM_FIELDS = ("quantity", "unit_id", "expiry_date", "location")

_logger = logging.getLogger(__name__)


class PantryRepository(Protocol):
    """Persistence interface for inventory rows."""

    def get_item(self, item_id: UUID) -> InventoryItem | None:
        """Return an inventory row by id."""

    def list_items(self, household_id: UUID) -> list[InventoryItem]:
        """Return household rows in creation order."""

    def create_item(
        self, household_id: UUID, payload: dict[str, object]
    ) -> InventoryItem:
        """Create and return an inventory row."""

    def update_item(self, item_id: UUID, payload: dict[str, object]) -> InventoryItem:
        """Update and return an inventory row."""

    def delete_item(self, item_id: UUID) -> bool:
        """Delete a row, returning whether it existed."""

    def update_quantity_if(
        self, item_id: UUID, expected: float, quantity: float
    ) -> InventoryItem | None:
        """Set the quantity only if it still equals ``expected``."""

    def delete_item_if(self, item_id: UUID, expected: float) -> bool:
        """Delete the row only if its quantity still equals ``expected``."""

    def collapse_items(
        self, keep_id: UUID, remove_ids: list[UUID]
    ) -> InventoryItem | None:
        """Atomically fold rows into ``keep_id`` using their current values.

        Returns None when ``keep_id`` no longer exists.
        """

    def list_expiring_between(
        self, household_id: UUID, start: date, end: date
    ) -> list[InventoryItem]:
        """Return rows with ``start <= expiry_date < end``, soonest first."""


@dataclass
class PantryService:
    """Application service for the household pantry."""

    repository: PantryRepository
    catalog: CatalogService

    def list_items(self, household_id: UUID) -> list[InventoryItem]:
        """Return all household stock rows."""
        return self.repository.list_items(household_id)

    def get_item(self, item_id: UUID, household_id: UUID) -> InventoryItem:
        """Return a household row or raise NotFound."""
        return assert_owned_by(
            self.repository.get_item(item_id), household_id, "Inventory item"
        )

    def ingredient_names(self, household_id: UUID) -> list[str]:
        """Return the distinct names of ingredients currently in stock."""
        names: list[str] = []
        for item in self.repository.list_items(household_id):
            name = item.ingredient_name
            if item.quantity > 0 and name and name not in names:
                names.append(name)
        return names

    def add(  # noqa: PLR0913
        self,
        household_id: UUID,
        ingredient_id: UUID,
        quantity: float,
        unit_id: UUID,
        expiry_date: date | None = None,
        location: str | None = None,
    ) -> InventoryItem:
        """Add stock for an existing ingredient and unit."""
        _validate_quantity(quantity, "quantity")
        self.catalog.require_ingredient(ingredient_id, household_id)
        self.catalog.require_unit(unit_id)
        item = self.repository.create_item(
            household_id,
            {
                "ingredient_id": ingredient_id,
                "quantity": quantity,
                "unit_id": unit_id,
                "expiry_date": expiry_date,
                "location": location,
            },
        )
        _logger.info(
            "Pantry item added",
            extra={"household_id": household_id, "item_id": item.id},
        )
        return item

    def update_item(
        self, item_id: UUID, household_id: UUID, payload: Mapping[str, object]
    ) -> InventoryItem:
        """Update stock fields and, optionally, the underlying ingredient."""
        item = self.get_item(item_id, household_id)
        changes = {key: payload[key] for key in _ITEM_FIELDS if key in payload}
        if "quantity" in changes:
            if changes["quantity"] is None:
                changes.pop("quantity")
            else:
                _validate_quantity(changes["quantity"], "quantity")
        if changes.get("unit_id") is not None:
            self.catalog.require_unit(changes["unit_id"])
        elif "unit_id" in changes:
            changes.pop("unit_id")

        ingredient_changes: dict[str, object] = {
            key: payload[key] for key in NUTRITION_FIELDS if key in payload
        }
        new_name = payload.get("ingredient_name") or payload.get("name")
        if new_name:
            ingredient_changes["name"] = new_name
        if ingredient_changes:
            ingredient = self.catalog.get_ingredient(item.ingredient_id, household_id)
            self.catalog.update_ingredient(ingredient, ingredient_changes)

        if changes:
            return self.repository.update_item(item.id, changes)
        return self.get_item(item.id, household_id)

    def update_expiry(
        self, item_id: UUID, household_id: UUID, expiry_date: date
    ) -> InventoryItem:
        """Change only the expiry date of a row."""
        item = self.get_item(item_id, household_id)
        return self.repository.update_item(item.id, {"expiry_date": expiry_date})

    def delete_item(self, item_id: UUID, household_id: UUID) -> None:
        """Delete a household row."""
        item = self.get_item(item_id, household_id)
        self.repository.delete_item(item.id)

    def consume(
        self, item_id: UUID, household_id: UUID, amount: float
    ) -> ConsumeResult:
        """Take ``amount`` out of a row, deleting it once nothing is left."""
        _validate_quantity(amount, "quantity")
        for _attempt in range(MAX_WRITE_ATTEMPTS):
            item = self.get_item(item_id, household_id)
            remaining = item.quantity - amount
            if remaining <= 0:
                if self.repository.delete_item_if(item.id, item.quantity):
                    _logger.info(
                        "Pantry item used up",
                        extra={"household_id": household_id, "item_id": item.id},
                    )
                    return ConsumeResult(item=None, deleted=True)
            else:
                updated = self.repository.update_quantity_if(
                    item.id, item.quantity, remaining
                )
                if updated is not None:
                    return ConsumeResult(item=updated, deleted=False)
            _logger.info(
                "Pantry item changed concurrently, retrying",
                extra={"household_id": household_id, "item_id": item.id},
            )
        raise ConflictError("Inventory item is being updated, try again")

    def merge_duplicates(self, household_id: UUID) -> MergeResult:
        """Collapse rows sharing ingredient and unit into the oldest row.

        Quantities are summed and the earliest known expiry date is kept.
        Storage location is not part of the key.
        """
        groups: dict[tuple[UUID, UUID], list[InventoryItem]] = defaultdict(list)
        for item in self.repository.list_items(household_id):
            groups[(item.ingredient_id, item.unit_id)].append(item)

        merged_count = 0
        for rows in groups.values():
            if len(rows) < 2:  # noqa: PLR2004
                continue
            keep, *rest = rows
            kept = self.repository.collapse_items(keep.id, [row.id for row in rest])
            if kept is None:
                continue
            merged_count += len(rest)

        if merged_count:
            _logger.info(
                "Merged %s duplicate pantry rows",
                merged_count,
                extra={"household_id": household_id},
            )
        return MergeResult(
            merged_count=merged_count,
            items=self.repository.list_items(household_id),
        )

    def get_expiring_soon(
        self, household_id: UUID, days: int, today: date | None = None
    ) -> list[ExpiringItem]:
        """Return rows expiring between today and ``days`` from now, soonest first."""
        if not 0 <= days <= MAX_EXPIRY_DAYS:
            raise ValidationError(
                f"days must be between 0 and {MAX_EXPIRY_DAYS}", field="days"
            )
        current = today or date.today()
        rows = self.repository.list_expiring_between(
            household_id, current, current + timedelta(days=days + 1)
        )
        dated = [(row.expiry_date, row) for row in rows if row.expiry_date is not None]
        dated.sort(key=lambda pair: pair[0])
        return [_annotate(row, expiry, current) for expiry, row in dated]

    def list_expired_between(
        self, household_id: UUID, start: date, end: date
    ) -> list[InventoryItem]:
        """Return rows whose expiry date falls in ``[start, end)``."""
        return self.repository.list_expiring_between(household_id, start, end)


def _validate_quantity(value: object, field: str) -> None:
    if (
        not isinstance(value, int | float)
        or not math.isfinite(value)
        or value < 0
    ):
        raise ValidationError(
            f"{field} must be a finite number of at least 0", field=field
        )


def _annotate(item: InventoryItem, expiry: date, today: date) -> ExpiringItem:
    days_until = (expiry - today).days
    return ExpiringItem(
        id=item.id,
        ingredient_id=item.ingredient_id,
        ingredient_name=item.ingredient_name,
        quantity=item.quantity,
        unit_id=item.unit_id,
        unit_name=item.unit_name,
        expiry_date=expiry,
        location=item.location,
        days_until_expiry=days_until,
        use_first=0 <= days_until <= USE_FIRST_DAYS,
    )
