"""User lookup for token authentication."""

import hashlib
from dataclasses import dataclass
from typing import Protocol

from homelife.domain.models import HouseholdRecord, UserRecord


class UserRepository(Protocol):
    """Persistence interface for users and households."""

    def get_by_token_hash(self, token_hash: str) -> UserRecord | None:
        """Return the user owning an API token hash, if any."""

    def list_households(self) -> list[HouseholdRecord]:
        """Return all households with member emails."""


@dataclass
class UserService:
    """Application service resolving bearer tokens to users."""

    repository: UserRepository

    def authenticate(self, token: str | None) -> UserRecord | None:
        """Return the user for a bearer token, or None when it is unknown."""
        if not token:
            return None
        return self.repository.get_by_token_hash(hash_token(token))

    def list_households(self) -> list[HouseholdRecord]:
        """Return every household."""
        return self.repository.list_households()


def hash_token(token: str) -> str:
    """Return the stored representation of an API token."""
    return hashlib.sha256(token.strip().encode("utf-8")).hexdigest()
