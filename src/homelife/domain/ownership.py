"""Household ownership checks shared by all services."""

from typing import Protocol, TypeVar
from uuid import UUID

from homelife.domain.errors import NotFoundError


class HouseholdScoped(Protocol):
    """Any entity that belongs to exactly one household."""

    household_id: UUID


OwnedT = TypeVar("OwnedT", bound=HouseholdScoped)


def assert_owned_by(
    entity: OwnedT | None, household_id: UUID, name: str = "Resource"
) -> OwnedT:
    """Return the entity when it belongs to the household, else raise NotFound.

    Absent and foreign entities raise the same error so callers cannot discover
    other households.
    """
    if entity is None or entity.household_id != household_id:
        raise NotFoundError(name)
    return entity
