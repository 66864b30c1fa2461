"""Supabase repository for recipes."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from homelife.adapters.supabase_rows import embedded_name, to_row
from homelife.domain.recipes import Recipe, RecipeIngredient
from homelife.services.recipes import RecipeRepository

_COLUMNS = (
    "*, recipe_ingredients(ingredient_id, quantity, unit_id, position, "
    "ingredients(name))"
)


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipes and their ingredient lines."""

    client: Client

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe with its lines."""
        response = (
            self.client.table("recipes")
            .select(_COLUMNS)
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def list_recipes(self, household_id: UUID) -> list[Recipe]:
        """Return household recipes ordered by title."""
        response = (
            self.client.table("recipes")
            .select(_COLUMNS)
            .eq("household_id", str(household_id))
            .order("title")
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def create_recipe(
        self,
        household_id: UUID,
        payload: dict[str, object],
        lines: list[RecipeIngredient],
    ) -> Recipe:
        """Create a recipe and its lines."""
        response = (
            self.client.table("recipes")
            .insert({"household_id": str(household_id), **to_row(payload)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        recipe_id = UUID(response.data[0]["id"])
        self._insert_lines(recipe_id, lines)
        return self._require(recipe_id)

    def update_recipe(
        self,
        recipe_id: UUID,
        payload: dict[str, object],
        lines: list[RecipeIngredient] | None,
    ) -> Recipe:
        """Update a recipe, replacing its lines when given."""
        if payload:
            self.client.table("recipes").update(to_row(payload)).eq(
                "id", str(recipe_id)
            ).execute()
        if lines is not None:
            self.client.table("recipe_ingredients").delete().eq(
                "recipe_id", str(recipe_id)
            ).execute()
            self._insert_lines(recipe_id, lines)
        return self._require(recipe_id)

    def delete_recipe(self, recipe_id: UUID) -> bool:
        """Delete a recipe and its lines."""
        self.client.table("recipe_ingredients").delete().eq(
            "recipe_id", str(recipe_id)
        ).execute()
        response = (
            self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()
        )
        return bool(response.data)

    def _insert_lines(self, recipe_id: UUID, lines: list[RecipeIngredient]) -> None:
        payload = [
            {
                "recipe_id": str(recipe_id),
                "ingredient_id": str(line.ingredient_id),
                "quantity": line.quantity,
                "unit_id": str(line.unit_id),
                "position": position,
            }
            for position, line in enumerate(lines)
        ]
        if payload:
            self.client.table("recipe_ingredients").insert(payload).execute()

    def _require(self, recipe_id: UUID) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        if recipe is None:
            raise RuntimeError("Recipe disappeared after write")
        return recipe


def _parse_recipe(row: dict[str, object]) -> Recipe:
    raw_lines = sorted(
        row.get("recipe_ingredients") or [],
        key=lambda line: line.get("position") or 0,
    )
    return Recipe(
        id=UUID(row["id"]),
        household_id=UUID(row["household_id"]),
        title=str(row.get("title", "")),
        instructions=str(row.get("instructions") or ""),
        tags=list(row.get("tags") or []),
        servings=row.get("servings"),
        prep_time=row.get("prep_time"),
        cook_time=row.get("cook_time"),
        ingredients=[
            RecipeIngredient(
                ingredient_id=UUID(line["ingredient_id"]),
                quantity=float(line.get("quantity") or 0.0),
                unit_id=UUID(line["unit_id"]),
                ingredient_name=embedded_name(line, "ingredients"),
            )
            for line in raw_lines
        ],
    )
