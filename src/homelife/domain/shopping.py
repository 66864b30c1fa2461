"""Domain models for shopping lists."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class ShoppingListItem:
    """A line on a shopping list."""

    id: UUID
    shopping_list_id: UUID
    ingredient_id: UUID
    quantity: float
    unit_id: UUID
    bought: bool = False
    ingredient_name: str | None = None


@dataclass(frozen=True)
class ShoppingList:
    """Household shopping list, optionally tied to a week."""

    id: UUID
    household_id: UUID
    title: str
    week_id: UUID | None
    is_completed: bool
    items: list[ShoppingListItem] = field(default_factory=list)
