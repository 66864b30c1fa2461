"""Conversions between Supabase rows and Python values."""

from collections.abc import Mapping
from datetime import date
from enum import Enum
from uuid import UUID


def to_row(payload: Mapping[str, object]) -> dict[str, object]:
    """Return a JSON-ready copy of a payload."""
    row: dict[str, object] = {}
    for key, value in payload.items():
        if isinstance(value, UUID):
            row[key] = str(value)
        elif isinstance(value, date):
            row[key] = value.isoformat()
        elif isinstance(value, Enum):
            row[key] = value.value
        else:
            row[key] = value
    return row


def parse_uuid(value: object) -> UUID | None:
    """Parse an optional UUID column."""
    if value is None or value == "":
        return None
    return value if isinstance(value, UUID) else UUID(str(value))


def parse_date(value: object) -> date | None:
    """Parse an optional date column, ignoring any time part."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def embedded_name(
    row: Mapping[str, object], relation: str, column: str = "name"
) -> object:
    """Return a column of an embedded to-one relation, if present."""
    related = row.get(relation)
    if isinstance(related, list):
        related = related[0] if related else None
    if isinstance(related, Mapping):
        return related.get(column)
    return None
