"""Supabase repository for the pantry ledger."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from homelife.adapters.supabase_rows import embedded_name, parse_date, to_row
from homelife.domain.pantry import InventoryItem
from homelife.services.pantry import PantryRepository

_COLUMNS = "*, ingredients(name), units(name)"


@dataclass
class SupabasePantryRepository(PantryRepository):
    """Supabase implementation for inventory rows.

    Conditional writes filter on the previously read quantity so a concurrent
    change makes them match no row instead of overwriting it.
    """

    client: Client

    def get_item(self, item_id: UUID) -> InventoryItem | None:
        """Return an inventory row by id."""
        response = (
            self.client.table("inventory_items")
            .select(_COLUMNS)
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def list_items(self, household_id: UUID) -> list[InventoryItem]:
        """Return household rows, oldest first."""
        response = (
            self.client.table("inventory_items")
            .select(_COLUMNS)
            .eq("household_id", str(household_id))
            .order("created_at")
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def create_item(
        self, household_id: UUID, payload: dict[str, object]
    ) -> InventoryItem:
        """Create an inventory row and return it."""
        response = (
            self.client.table("inventory_items")
            .insert({"household_id": str(household_id), **to_row(payload)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create inventory item")
        return self._reload(response.data[0])

    def update_item(self, item_id: UUID, payload: dict[str, object]) -> InventoryItem:
        """Update an inventory row and return it."""
        response = (
            self.client.table("inventory_items")
            .update(to_row(payload))
            .eq("id", str(item_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update inventory item")
        return self._reload(response.data[0])

    def delete_item(self, item_id: UUID) -> bool:
        """Delete an inventory row."""
        response = (
            self.client.table("inventory_items")
            .delete()
            .eq("id", str(item_id))
            .execute()
        )
        return bool(response.data)

    def update_quantity_if(
        self, item_id: UUID, expected: float, quantity: float
    ) -> InventoryItem | None:
        """Set the quantity only while it still equals ``expected``."""
        response = (
            self.client.table("inventory_items")
            .update({"quantity": quantity})
            .eq("id", str(item_id))
            .eq("quantity", expected)
            .execute()
        )
        if not response.data:
            return None
        return self._reload(response.data[0])

    def delete_item_if(self, item_id: UUID, expected: float) -> bool:
        """Delete the row only while its quantity still equals ``expected``."""
        response = (
            self.client.table("inventory_items")
            .delete()
            .eq("id", str(item_id))
            .eq("quantity", expected)
            .execute()
        )
        return bool(response.data)

    def collapse_items(
        self, keep_id: UUID, remove_ids: list[UUID]
    ) -> InventoryItem | None:
        """Fold ``remove_ids`` into ``keep_id`` in one database transaction.

        The ``collapse_inventory_items`` function locks the rows, sums their
        current quantities, keeps the earliest expiry date and deletes the
        folded rows, so a write landing between listing and merging is kept.
        """
        response = self.client.rpc(
            "collapse_inventory_items",
            {
                "p_keep_id": str(keep_id),
                "p_remove_ids": [str(item_id) for item_id in remove_ids],
            },
        ).execute()
        if not response.data:
            return None
        return self._reload(response.data[0])

    def list_expiring_between(
        self, household_id: UUID, start: date, end: date
    ) -> list[InventoryItem]:
        """Return rows with ``start <= expiry_date < end``, soonest first."""
        response = (
            self.client.table("inventory_items")
            .select(_COLUMNS)
            .eq("household_id", str(household_id))
            .gte("expiry_date", start.isoformat())
            .lt("expiry_date", end.isoformat())
            .order("expiry_date")
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def _reload(self, row: dict[str, object]) -> InventoryItem:
        # Write responses do not carry the embedded ingredient and unit names.
        return self.get_item(UUID(row["id"])) or _parse_item(row)


def _parse_item(row: dict[str, object]) -> InventoryItem:
    return InventoryItem(
        id=UUID(row["id"]),
        household_id=UUID(row["household_id"]),
        ingredient_id=UUID(row["ingredient_id"]),
        quantity=float(row.get("quantity") or 0.0),
        unit_id=UUID(row["unit_id"]),
        expiry_date=parse_date(row.get("expiry_date")),
        location=row.get("location"),
        ingredient_name=embedded_name(row, "ingredients"),
        unit_name=embedded_name(row, "units"),
    )
