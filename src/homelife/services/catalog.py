"""Unit and ingredient catalog."""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol
from uuid import UUID

from homelife.domain.catalog import Ingredient, Unit
from homelife.domain.errors import ValidationError
from homelife.domain.ownership import assert_owned_by

DEFAULT_UNIT_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "g": "Gram",
        "kg": "Kilogram",
        "L": "Liter",
        "mL": "Milliliter",
        "ml": "Milliliter",
        "cup": "Cup",
        "piece": "Piece",
        "pieces": "Piece",
        "pc": "Piece",
        "pack": "Piece",
    }
)
DEFAULT_UNIT = "g"
NUTRITION_FIELDS = ("calories", "protein", "carbs", "fat")

_logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    """Persistence interface for units and ingredients."""

    def get_unit(self, unit_id: UUID) -> Unit | None:
        """Return a unit by id."""

    def find_unit_by_abbreviation(self, abbreviation: str) -> Unit | None:
        """Return the first unit with this exact abbreviation."""

    def find_unit_by_name(self, name: str) -> Unit | None:
        """Return the first unit whose name matches case-insensitively."""

    def list_units(self) -> list[Unit]:
        """Return all units."""

    def create_unit(self, name: str, abbreviation: str | None) -> Unit:
        """Create and return a unit."""

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient | None:
        """Return an ingredient by id."""

    def find_ingredient_by_name(
        self, household_id: UUID, name: str
    ) -> Ingredient | None:
        """Return the first ingredient with this exact name in the household."""

    def list_ingredients(
        self, household_id: UUID, search: str | None
    ) -> list[Ingredient]:
        """Return household ingredients, optionally filtered by name."""

    def create_ingredient(
        self, household_id: UUID, payload: dict[str, object]
    ) -> Ingredient:
        """Create and return an ingredient."""

    def update_ingredient(
        self, ingredient_id: UUID, payload: dict[str, object]
    ) -> Ingredient:
        """Update and return an ingredient."""


@dataclass
class CatalogService:
    """Lookup and lazy creation of units and ingredients."""

    repository: CatalogRepository
    unit_names: Mapping[str, str] = field(default_factory=lambda: DEFAULT_UNIT_NAMES)

    def list_units(self) -> list[Unit]:
        """Return all units."""
        return self.repository.list_units()

    def create_unit(self, name: str, abbreviation: str | None = None) -> Unit:
        """Create a unit with a unique name."""
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError("Unit name is required", field="name")
        if self.repository.find_unit_by_name(cleaned):
            raise ValidationError("Unit name already exists", field="name")
        return self.repository.create_unit(cleaned, abbreviation or None)

    def require_unit(self, unit_id: UUID) -> Unit:
        """Return a unit or raise a validation error naming the field."""
        unit = self.repository.get_unit(unit_id)
        if unit is None:
            raise ValidationError("Unit does not exist", field="unit_id")
        return unit

    def resolve_unit(self, name_or_abbreviation: str) -> Unit:
        """Find a unit by abbreviation, then by name, creating it if absent."""
        value = name_or_abbreviation.strip()
        if not value:
            raise ValidationError("Unit is required", field="unit")
        unit = self.repository.find_unit_by_abbreviation(
            value
        ) or self.repository.find_unit_by_name(value)
        if unit:
            return unit

        full_name = (
            self.unit_names.get(value)
            or self.unit_names.get(value.lower())
            or value.lower().capitalize()
        )
        existing = self.repository.find_unit_by_name(full_name)
        if existing:
            return existing
        _logger.info("Creating unit %s (%s)", full_name, value)
        return self.repository.create_unit(full_name, value)

    def list_ingredients(
        self, household_id: UUID, search: str | None = None
    ) -> list[Ingredient]:
        """Return household ingredients."""
        return self.repository.list_ingredients(household_id, search or None)

    def get_ingredient(self, ingredient_id: UUID, household_id: UUID) -> Ingredient:
        """Return a household ingredient or raise NotFound."""
        return assert_owned_by(
            self.repository.get_ingredient(ingredient_id), household_id, "Ingredient"
        )

    def require_ingredient(self, ingredient_id: UUID, household_id: UUID) -> Ingredient:
        """Return a household ingredient or raise a validation error."""
        ingredient = self.repository.get_ingredient(ingredient_id)
        if ingredient is None or ingredient.household_id != household_id:
            raise ValidationError("Ingredient does not exist", field="ingredient_id")
        return ingredient

    def resolve_ingredient(
        self,
        household_id: UUID,
        name: str,
        fallback_unit: str | None = None,
        nutrition: Mapping[str, float] | None = None,
    ) -> Ingredient:
        """Find an ingredient by exact name, creating it when missing."""
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError("Ingredient name is required", field="name")
        existing = self.repository.find_ingredient_by_name(household_id, cleaned)
        if existing:
            return existing
        unit = self.resolve_unit(fallback_unit or DEFAULT_UNIT)
        payload: dict[str, object] = {"name": cleaned, "unit_id": unit.id}
        payload.update(_nutrition_payload(nutrition or {}))
        return self.repository.create_ingredient(household_id, payload)

    def create_ingredient(
        self, household_id: UUID, payload: Mapping[str, object]
    ) -> Ingredient:
        """Create an ingredient, or update the default unit of an existing one."""
        name = str(payload.get("name") or "").strip()
        if not name:
            raise ValidationError("Ingredient name is required", field="name")
        unit_id = payload.get("unit_id")
        if unit_id is not None:
            self.require_unit(unit_id)

        existing = self.repository.find_ingredient_by_name(household_id, name)
        if existing:
            if unit_id is not None and unit_id != existing.unit_id:
                return self.repository.update_ingredient(
                    existing.id, {"unit_id": unit_id}
                )
            return existing

        data: dict[str, object] = {"name": name, "unit_id": unit_id}
        data.update(_nutrition_payload(payload))
        return self.repository.create_ingredient(household_id, data)

    def update_ingredient(
        self, ingredient: Ingredient, payload: Mapping[str, object]
    ) -> Ingredient:
        """Rename an ingredient or change its nutrition values."""
        changes: dict[str, object] = {}
        name = payload.get("name")
        if name is not None:
            cleaned = str(name).strip()
            if not cleaned:
                raise ValidationError("Ingredient name is required", field="name")
            clash = self.repository.find_ingredient_by_name(
                ingredient.household_id, cleaned
            )
            if clash and clash.id != ingredient.id:
                raise ValidationError("Ingredient name already exists", field="name")
            if cleaned != ingredient.name:
                changes["name"] = cleaned
        changes.update(
            _nutrition_payload(
                {k: v for k, v in payload.items() if v is not None},
                defaults=False,
            )
        )
        if not changes:
            return ingredient
        return self.repository.update_ingredient(ingredient.id, changes)


def _nutrition_payload(
    source: Mapping[str, object], defaults: bool = True
) -> dict[str, float]:
    values: dict[str, float] = {}
    for key in NUTRITION_FIELDS:
        raw = source.get(key)
        if raw is None:
            if defaults:
                values[key] = 0.0
            continue
        value = float(raw)
        if not math.isfinite(value) or value < 0:
            raise ValidationError(
                f"{key} must be a finite number of at least 0", field=key
            )
        values[key] = value
    return values
