"""Domain models for users and households."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents an authenticated user."""

    id: UUID
    email: str
    name: str
    household_id: UUID | None


@dataclass(frozen=True)
class HouseholdRecord:
    """Tenant boundary that owns every other entity."""

    id: UUID
    name: str
    member_emails: list[str]
