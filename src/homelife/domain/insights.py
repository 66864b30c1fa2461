"""Domain models for weekly insights."""

from dataclasses import dataclass
from datetime import date

from homelife.domain.expenses import SpendingSummary
from homelife.domain.pantry import ExpiringItem


@dataclass(frozen=True)
class WasteEntry:
    """An item that expired before being used."""

    ingredient: str | None
    quantity: float
    expiry_date: date


@dataclass(frozen=True)
class WasteSummary:
    """Items that expired in the week before the reference week."""

    count: int
    items: list[WasteEntry]


@dataclass(frozen=True)
class PlanningSummary:
    """Meal plan coverage for the reference week."""

    meals_planned: int
    by_slot: dict[str, int]
    coverage: float


@dataclass(frozen=True)
class WeekRange:
    """Inclusive week boundaries."""

    start_date: date
    end_date: date


@dataclass(frozen=True)
class WeeklyInsights:
    """Read-only snapshot for a household week."""

    week: WeekRange
    spending: SpendingSummary
    waste: WasteSummary
    planning: PlanningSummary
    expiring_soon: list[ExpiringItem]
    ai_summary: str | None
