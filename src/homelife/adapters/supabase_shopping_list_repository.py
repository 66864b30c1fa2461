"""Supabase repository for shopping lists."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from homelife.adapters.supabase_rows import embedded_name, parse_uuid, to_row
from homelife.domain.shopping import ShoppingList, ShoppingListItem
from homelife.services.shopping import ShoppingListRepository

_LIST_COLUMNS = "*, shopping_list_items(*, ingredients(name))"
_ITEM_COLUMNS = "*, ingredients(name)"


@dataclass
class SupabaseShoppingListRepository(ShoppingListRepository):
    """Supabase implementation for shopping lists and items."""

    client: Client

    def get_list(self, list_id: UUID) -> ShoppingList | None:
        """Return a list with its items."""
        response = (
            self.client.table("shopping_lists")
            .select(_LIST_COLUMNS)
            .eq("id", str(list_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_list(response.data[0])

    def list_lists(self, household_id: UUID) -> list[ShoppingList]:
        """Return household lists, newest first."""
        response = (
            self.client.table("shopping_lists")
            .select(_LIST_COLUMNS)
            .eq("household_id", str(household_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_list(row) for row in response.data or []]

    def create_list(
        self, household_id: UUID, title: str, week_id: UUID | None
    ) -> ShoppingList:
        """Create an empty list."""
        response = (
            self.client.table("shopping_lists")
            .insert(
                {
                    "household_id": str(household_id),
                    "title": title,
                    "week_id": str(week_id) if week_id else None,
                    "is_completed": False,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create shopping list")
        return _parse_list(response.data[0])

    def update_list(self, list_id: UUID, payload: dict[str, object]) -> ShoppingList:
        """Update list fields and return the list with its items."""
        response = (
            self.client.table("shopping_lists")
            .update(to_row(payload))
            .eq("id", str(list_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update shopping list")
        return self.get_list(list_id) or _parse_list(response.data[0])

    def delete_list(self, list_id: UUID) -> bool:
        """Delete a list and its items."""
        self.client.table("shopping_list_items").delete().eq(
            "shopping_list_id", str(list_id)
        ).execute()
        response = (
            self.client.table("shopping_lists")
            .delete()
            .eq("id", str(list_id))
            .execute()
        )
        return bool(response.data)

    def add_items(
        self, list_id: UUID, items: list[dict[str, object]]
    ) -> list[ShoppingListItem]:
        """Insert items into a list."""
        payload = [
            {"shopping_list_id": str(list_id), "bought": False, **to_row(item)}
            for item in items
        ]
        response = self.client.table("shopping_list_items").insert(payload).execute()
        return [_parse_item(row) for row in response.data or []]

    def get_item(self, item_id: UUID) -> ShoppingListItem | None:
        """Return a list item by id."""
        response = (
            self.client.table("shopping_list_items")
            .select(_ITEM_COLUMNS)
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def update_item(
        self, item_id: UUID, payload: dict[str, object]
    ) -> ShoppingListItem:
        """Update a list item and return it."""
        response = (
            self.client.table("shopping_list_items")
            .update(to_row(payload))
            .eq("id", str(item_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update shopping list item")
        return _parse_item(response.data[0])

    def delete_item(self, item_id: UUID) -> bool:
        """Delete a list item."""
        response = (
            self.client.table("shopping_list_items")
            .delete()
            .eq("id", str(item_id))
            .execute()
        )
        return bool(response.data)


def _parse_list(row: dict[str, object]) -> ShoppingList:
    return ShoppingList(
        id=UUID(row["id"]),
        household_id=UUID(row["household_id"]),
        title=str(row.get("title", "")),
        week_id=parse_uuid(row.get("week_id")),
        is_completed=bool(row.get("is_completed", False)),
        items=[_parse_item(item) for item in row.get("shopping_list_items") or []],
    )


def _parse_item(row: dict[str, object]) -> ShoppingListItem:
    return ShoppingListItem(
        id=UUID(row["id"]),
        shopping_list_id=UUID(row["shopping_list_id"]),
        ingredient_id=UUID(row["ingredient_id"]),
        quantity=float(row.get("quantity") or 0.0),
        unit_id=UUID(row["unit_id"]),
        bought=bool(row.get("bought", False)),
        ingredient_name=embedded_name(row, "ingredients"),
    )
