"""Services for household recipes and pantry-based suggestions."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from homelife.domain.catalog import Unit
from homelife.domain.errors import ValidationError
from homelife.domain.ownership import assert_owned_by
from homelife.domain.recipes import Recipe, RecipeIngredient, RecipeSuggestion
from homelife.services.catalog import DEFAULT_UNIT, CatalogService
from homelife.services.pantry import PantryRepository

_RECIPE_FIELDS = ("title", "instructions", "tags", "servings", "prep_time", "cook_time")


class RecipeRepository(Protocol):
    """Persistence interface for recipes and their ingredient lines."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe with its lines."""

    def list_recipes(self, household_id: UUID) -> list[Recipe]:
        """Return household recipes with their lines."""

    def create_recipe(
        self,
        household_id: UUID,
        payload: dict[str, object],
        lines: list[RecipeIngredient],
    ) -> Recipe:
        """Create a recipe and its lines."""

    def update_recipe(
        self,
        recipe_id: UUID,
        payload: dict[str, object],
        lines: list[RecipeIngredient] | None,
    ) -> Recipe:
        """Update a recipe, replacing its lines when ``lines`` is given."""

    def delete_recipe(self, recipe_id: UUID) -> bool:
        """Delete a recipe and its lines."""


@dataclass
class RecipeService:
    """Application service for recipes."""

    repository: RecipeRepository
    catalog: CatalogService
    pantry: PantryRepository

    def list_recipes(self, household_id: UUID) -> list[Recipe]:
        """Return household recipes."""
        return self.repository.list_recipes(household_id)

    def get_recipe(self, recipe_id: UUID, household_id: UUID) -> Recipe:
        """Return a household recipe or raise NotFound."""
        return assert_owned_by(
            self.repository.get_recipe(recipe_id), household_id, "Recipe"
        )

    def create_recipe(
        self, household_id: UUID, payload: Mapping[str, object]
    ) -> Recipe:
        """Create a recipe; lines may name ingredients and units instead of ids."""
        fields = _recipe_fields(payload, partial=False)
        lines = [
            self._resolve_line(household_id, line)
            for line in payload.get("ingredients") or []
        ]
        return self.repository.create_recipe(household_id, fields, lines)

    def update_recipe(
        self, recipe_id: UUID, household_id: UUID, payload: Mapping[str, object]
    ) -> Recipe:
        """Update recipe fields and, when supplied, replace its lines."""
        recipe = self.get_recipe(recipe_id, household_id)
        fields = _recipe_fields(payload, partial=True)
        lines = None
        if payload.get("ingredients") is not None:
            lines = [
                self._resolve_line(household_id, line)
                for line in payload["ingredients"]
            ]
        if not fields and lines is None:
            return recipe
        return self.repository.update_recipe(recipe.id, fields, lines)

    def delete_recipe(self, recipe_id: UUID, household_id: UUID) -> None:
        """Delete a household recipe."""
        recipe = self.get_recipe(recipe_id, household_id)
        self.repository.delete_recipe(recipe.id)

    def suggest_from_pantry(
        self, household_id: UUID, limit: int = 5
    ) -> list[RecipeSuggestion]:
        """Rank recipes by the share of their ingredients currently in stock."""
        if limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")
        in_stock = self._stocked_ingredient_ids(household_id)
        suggestions: list[RecipeSuggestion] = []
        for recipe in self.repository.list_recipes(household_id):
            if not recipe.ingredients:
                continue
            available = [
                line for line in recipe.ingredients if line.ingredient_id in in_stock
            ]
            if not available:
                continue
            missing = [
                line.ingredient_name or str(line.ingredient_id)
                for line in recipe.ingredients
                if line.ingredient_id not in in_stock
            ]
            total = len(recipe.ingredients)
            suggestions.append(
                RecipeSuggestion(
                    recipe=recipe,
                    available_count=len(available),
                    total_count=total,
                    missing=missing,
                    match_ratio=round(len(available) / total, 2),
                )
            )
        suggestions.sort(
            key=lambda item: (
                -item.match_ratio,
                -item.available_count,
                item.recipe.title,
            )
        )
        return suggestions[:limit]

    def missing_ingredients(
        self, recipe_id: UUID, household_id: UUID
    ) -> list[RecipeIngredient]:
        """Return recipe lines whose ingredient is not in the pantry."""
        recipe = self.get_recipe(recipe_id, household_id)
        in_stock = self._stocked_ingredient_ids(household_id)
        seen: set[UUID] = set()
        missing: list[RecipeIngredient] = []
        for line in recipe.ingredients:
            if line.ingredient_id in in_stock or line.ingredient_id in seen:
                continue
            seen.add(line.ingredient_id)
            missing.append(line)
        return missing

    def _stocked_ingredient_ids(self, household_id: UUID) -> set[UUID]:
        return {
            item.ingredient_id
            for item in self.pantry.list_items(household_id)
            if item.quantity > 0
        }

    def _resolve_line(
        self, household_id: UUID, line: Mapping[str, object]
    ) -> RecipeIngredient:
        quantity = line.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int | float):
            raise ValidationError("Ingredient quantity is required", field="quantity")
        if not math.isfinite(quantity) or quantity < 0:
            raise ValidationError(
                "quantity must be a finite number of at least 0", field="quantity"
            )

        unit = self._line_unit(line)
        ingredient_id = line.get("ingredient_id")
        name = line.get("ingredient") or line.get("name")
        if ingredient_id is not None:
            ingredient = self.catalog.require_ingredient(ingredient_id, household_id)
        elif name:
            fallback = (unit.abbreviation or unit.name) if unit else None
            ingredient = self.catalog.resolve_ingredient(
                household_id, str(name), fallback_unit=fallback
            )
        else:
            raise ValidationError(
                "Ingredient id or name is required", field="ingredient_id"
            )

        if unit is not None:
            unit_id = unit.id
        elif ingredient.unit_id is not None:
            unit_id = ingredient.unit_id
        else:
            unit_id = self.catalog.resolve_unit(DEFAULT_UNIT).id
        return RecipeIngredient(
            ingredient_id=ingredient.id,
            quantity=float(quantity),
            unit_id=unit_id,
            ingredient_name=ingredient.name,
        )

    def _line_unit(self, line: Mapping[str, object]) -> Unit | None:
        if line.get("unit_id") is not None:
            return self.catalog.require_unit(line["unit_id"])
        if line.get("unit"):
            return self.catalog.resolve_unit(str(line["unit"]))
        return None


def _recipe_fields(payload: Mapping[str, object], partial: bool) -> dict[str, object]:
    fields = {key: payload[key] for key in _RECIPE_FIELDS if key in payload}
    for key in ("title", "instructions"):
        if key in fields or not partial:
            value = str(fields.get(key) or "").strip()
            if not value:
                raise ValidationError(f"{key} is required", field=key)
            fields[key] = value
    if fields.get("servings") is not None and fields["servings"] < 1:
        raise ValidationError("servings must be at least 1", field="servings")
    for key in ("prep_time", "cook_time"):
        if fields.get(key) is not None and fields[key] < 0:
            raise ValidationError(f"{key} must be at least 0", field=key)
    if "tags" in fields:
        fields["tags"] = list(fields["tags"] or [])
    return fields
