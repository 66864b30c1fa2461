"""Supabase repository for units and ingredients."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client, PostgrestAPIError

from homelife.adapters.supabase_rows import parse_uuid, to_row
from homelife.domain.catalog import Ingredient, Unit
from homelife.services.catalog import CatalogRepository

UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase implementation for the unit and ingredient catalog."""

    client: Client

    def get_unit(self, unit_id: UUID) -> Unit | None:
        """Return a unit by id."""
        return self._first_unit("id", str(unit_id))

    def find_unit_by_abbreviation(self, abbreviation: str) -> Unit | None:
        """Return the first unit with this exact abbreviation."""
        return self._first_unit("abbreviation", abbreviation)

    def find_unit_by_name(self, name: str) -> Unit | None:
        """Return the first unit whose name matches case-insensitively."""
        response = (
            self.client.table("units")
            .select("*")
            .ilike("name", name)
            .order("created_at")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_unit(response.data[0])

    def list_units(self) -> list[Unit]:
        """Return all units ordered by name."""
        response = self.client.table("units").select("*").order("name").execute()
        return [_parse_unit(row) for row in response.data or []]

    def create_unit(self, name: str, abbreviation: str | None) -> Unit:
        """Create a unit, or return the one a concurrent request just created."""
        try:
            response = (
                self.client.table("units")
                .insert({"name": name, "abbreviation": abbreviation})
                .execute()
            )
        except PostgrestAPIError as exc:
            existing = self.find_unit_by_name(name) if _is_duplicate(exc) else None
            if existing is None:
                raise
            return existing
        if not response.data:
            raise RuntimeError("Failed to create unit")
        return _parse_unit(response.data[0])

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient | None:
        """Return an ingredient by id."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("id", str(ingredient_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ingredient(response.data[0])

    def find_ingredient_by_name(
        self, household_id: UUID, name: str
    ) -> Ingredient | None:
        """Return the household ingredient with this exact name."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("household_id", str(household_id))
            .eq("name", name)
            .order("created_at")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ingredient(response.data[0])

    def list_ingredients(
        self, household_id: UUID, search: str | None
    ) -> list[Ingredient]:
        """Return household ingredients, optionally filtered by name."""
        query = (
            self.client.table("ingredients")
            .select("*")
            .eq("household_id", str(household_id))
        )
        if search:
            query = query.ilike("name", f"%{search}%")
        response = query.order("name").execute()
        return [_parse_ingredient(row) for row in response.data or []]

    def create_ingredient(
        self, household_id: UUID, payload: dict[str, object]
    ) -> Ingredient:
        """Create an ingredient, or return the row a concurrent request created.

        Names are unique per household, so a lost insert race surfaces as a
        unique violation and the winning row is read back instead.
        """
        try:
            response = (
                self.client.table("ingredients")
                .insert({"household_id": str(household_id), **to_row(payload)})
                .execute()
            )
        except PostgrestAPIError as exc:
            existing = None
            if _is_duplicate(exc):
                existing = self.find_ingredient_by_name(
                    household_id, str(payload["name"])
                )
            if existing is None:
                raise
            return existing
        if not response.data:
            raise RuntimeError("Failed to create ingredient")
        return _parse_ingredient(response.data[0])

    def update_ingredient(
        self, ingredient_id: UUID, payload: dict[str, object]
    ) -> Ingredient:
        """Update an ingredient and return it."""
        response = (
            self.client.table("ingredients")
            .update(to_row(payload))
            .eq("id", str(ingredient_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update ingredient")
        return _parse_ingredient(response.data[0])

    def _first_unit(self, column: str, value: str) -> Unit | None:
        response = (
            self.client.table("units")
            .select("*")
            .eq(column, value)
            .order("created_at")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_unit(response.data[0])


def _is_duplicate(exc: PostgrestAPIError) -> bool:
    return exc.code == UNIQUE_VIOLATION


def _parse_unit(row: dict[str, object]) -> Unit:
    return Unit(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        abbreviation=row.get("abbreviation"),
    )


def _parse_ingredient(row: dict[str, object]) -> Ingredient:
    return Ingredient(
        id=UUID(row["id"]),
        household_id=UUID(row["household_id"]),
        name=str(row.get("name", "")),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        unit_id=parse_uuid(row.get("unit_id")),
    )
