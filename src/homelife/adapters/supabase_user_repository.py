"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from homelife.adapters.supabase_rows import parse_uuid
from homelife.domain.models import HouseholdRecord, UserRecord
from homelife.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user lookups."""

    client: Client

    def get_by_token_hash(self, token_hash: str) -> UserRecord | None:
        """Return the user owning an API token hash, if present."""
        response = (
            self.client.table("users")
            .select("id, email, name, household_id")
            .eq("api_token_hash", token_hash)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserRecord(
            id=UUID(row["id"]),
            email=str(row.get("email") or ""),
            name=str(row.get("name") or ""),
            household_id=parse_uuid(row.get("household_id")),
        )

    def list_households(self) -> list[HouseholdRecord]:
        """Return every household with its member emails."""
        response = (
            self.client.table("households").select("id, name, users(email)").execute()
        )
        households = []
        for row in response.data or []:
            members = row.get("users") or []
            households.append(
                HouseholdRecord(
                    id=UUID(row["id"]),
                    name=str(row.get("name") or ""),
                    member_emails=[m["email"] for m in members if m.get("email")],
                )
            )
        return households
