"""Domain models for units and ingredients."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Unit:
    """Measurement unit shared by all households."""

    id: UUID
    name: str
    abbreviation: str | None


@dataclass(frozen=True)
class Ingredient:
    """Household-scoped ingredient with per-unit nutrition."""

    id: UUID
    household_id: UUID
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    unit_id: UUID | None
