"""Shopping lists and generation from the weekly meal plan."""

import logging
import math
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from homelife.domain.errors import NotFoundError, ValidationError
from homelife.domain.ownership import assert_owned_by
from homelife.domain.shopping import ShoppingList, ShoppingListItem
from homelife.services.catalog import CatalogService
from homelife.services.meal_plans import MealPlanService
from homelife.services.pantry import PantryRepository
from homelife.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)


class ShoppingListRepository(Protocol):
    """Persistence interface for shopping lists and their items."""

    def get_list(self, list_id: UUID) -> ShoppingList | None:
        """Return a list with its items."""

    def list_lists(self, household_id: UUID) -> list[ShoppingList]:
        """Return household lists with their items, newest first."""

    def create_list(
        self, household_id: UUID, title: str, week_id: UUID | None
    ) -> ShoppingList:
        """Create an empty list."""

    def update_list(self, list_id: UUID, payload: dict[str, object]) -> ShoppingList:
        """Update list fields and return the list with its items."""

    def delete_list(self, list_id: UUID) -> bool:
        """Delete a list and its items."""

    def add_items(
        self, list_id: UUID, items: list[dict[str, object]]
    ) -> list[ShoppingListItem]:
        """Insert items into a list."""

    def get_item(self, item_id: UUID) -> ShoppingListItem | None:
        """Return a list item by id."""

    def update_item(
        self, item_id: UUID, payload: dict[str, object]
    ) -> ShoppingListItem:
        """Update and return a list item."""

    def delete_item(self, item_id: UUID) -> bool:
        """Delete a list item."""


@dataclass
class ShoppingListService:
    """Application service for shopping lists."""

    repository: ShoppingListRepository
    catalog: CatalogService
    meal_plans: MealPlanService
    recipes: RecipeRepository
    pantry: PantryRepository

    def list_lists(self, household_id: UUID) -> list[ShoppingList]:
        """Return household lists."""
        return self.repository.list_lists(household_id)

    def get_list(self, list_id: UUID, household_id: UUID) -> ShoppingList:
        """Return a household list or raise NotFound."""
        return assert_owned_by(
            self.repository.get_list(list_id), household_id, "Shopping list"
        )

    def create_list(
        self, household_id: UUID, title: str, week_id: UUID | None = None
    ) -> ShoppingList:
        """Create an empty list, optionally tied to a household week."""
        cleaned = title.strip()
        if not cleaned:
            raise ValidationError("title is required", field="title")
        if week_id is not None:
            week = self.meal_plans.repository.get_week(week_id)
            if week is None or week.household_id != household_id:
                raise ValidationError("Week does not exist", field="week_id")
        return self.repository.create_list(household_id, cleaned, week_id)

    def update_list(
        self, list_id: UUID, household_id: UUID, payload: Mapping[str, object]
    ) -> ShoppingList:
        """Rename a list or mark it completed."""
        shopping_list = self.get_list(list_id, household_id)
        changes: dict[str, object] = {}
        if payload.get("title") is not None:
            title = str(payload["title"]).strip()
            if not title:
                raise ValidationError("title must not be empty", field="title")
            changes["title"] = title
        if payload.get("is_completed") is not None:
            changes["is_completed"] = bool(payload["is_completed"])
        if not changes:
            return shopping_list
        return self.repository.update_list(shopping_list.id, changes)

    def delete_list(self, list_id: UUID, household_id: UUID) -> None:
        """Delete a household list."""
        shopping_list = self.get_list(list_id, household_id)
        self.repository.delete_list(shopping_list.id)

    def add_item(
        self,
        list_id: UUID,
        household_id: UUID,
        ingredient_id: UUID,
        quantity: float,
        unit_id: UUID,
    ) -> ShoppingListItem:
        """Add a line to a household list."""
        shopping_list = self.get_list(list_id, household_id)
        if not math.isfinite(quantity) or quantity < 0:
            raise ValidationError(
                "quantity must be a finite number of at least 0", field="quantity"
            )
        self.catalog.require_ingredient(ingredient_id, household_id)
        self.catalog.require_unit(unit_id)
        [item] = self.repository.add_items(
            shopping_list.id,
            [
                {
                    "ingredient_id": ingredient_id,
                    "quantity": quantity,
                    "unit_id": unit_id,
                }
            ],
        )
        return item

    def update_item(
        self,
        list_id: UUID,
        household_id: UUID,
        item_id: UUID,
        payload: Mapping[str, object],
    ) -> ShoppingListItem:
        """Change the quantity of a line or tick it off."""
        item = self._get_item(list_id, household_id, item_id)
        changes: dict[str, object] = {}
        if payload.get("quantity") is not None:
            quantity = float(payload["quantity"])
            if not math.isfinite(quantity) or quantity < 0:
                raise ValidationError(
                    "quantity must be a finite number of at least 0", field="quantity"
                )
            changes["quantity"] = quantity
        if payload.get("bought") is not None:
            changes["bought"] = bool(payload["bought"])
        if not changes:
            return item
        return self.repository.update_item(item.id, changes)

    def delete_item(self, list_id: UUID, household_id: UUID, item_id: UUID) -> None:
        """Remove a line from a household list."""
        item = self._get_item(list_id, household_id, item_id)
        self.repository.delete_item(item.id)

    def generate_from_meal_plan(
        self, household_id: UUID, week_id: UUID, title: str | None = None
    ) -> ShoppingList:
        """Create a list with what the week's meals need beyond pantry stock.

        Requirements are summed per ingredient and unit. Pantry stock of an
        ingredient is counted regardless of its unit and is used up by that
        ingredient's lines in the order they were first seen.
        """
        week = self.meal_plans.get_week(week_id, household_id)
        required: dict[tuple[UUID, UUID], float] = {}
        for meal in self.meal_plans.repository.list_meals(week.id):
            recipe = self.recipes.get_recipe(meal.recipe_id)
            if recipe is None:
                continue
            for line in recipe.ingredients:
                key = (line.ingredient_id, line.unit_id)
                required[key] = required.get(key, 0.0) + line.quantity

        stock: dict[UUID, float] = defaultdict(float)
        for item in self.pantry.list_items(household_id):
            stock[item.ingredient_id] += item.quantity

        needed: list[dict[str, object]] = []
        for (ingredient_id, unit_id), quantity in required.items():
            on_hand = stock[ingredient_id]
            stock[ingredient_id] = max(on_hand - quantity, 0.0)
            net = quantity - on_hand
            if net > 0:
                needed.append(
                    {
                        "ingredient_id": ingredient_id,
                        "quantity": net,
                        "unit_id": unit_id,
                    }
                )

        list_title = (title or "").strip() or (
            f"Shopping list for week of {week.start_date.isoformat()}"
        )
        shopping_list = self.repository.create_list(household_id, list_title, week.id)
        if needed:
            self.repository.add_items(shopping_list.id, needed)
        _logger.info(
            "Generated shopping list with %s items",
            len(needed),
            extra={
                "household_id": household_id,
                "week_id": week.id,
                "shopping_list_id": shopping_list.id,
            },
        )
        return self.get_list(shopping_list.id, household_id)

    def _get_item(
        self, list_id: UUID, household_id: UUID, item_id: UUID
    ) -> ShoppingListItem:
        shopping_list = self.get_list(list_id, household_id)
        item = self.repository.get_item(item_id)
        if item is None or item.shopping_list_id != shopping_list.id:
            raise NotFoundError("Shopping list item")
        return item
