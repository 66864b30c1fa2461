"""Notification events emitted by domain operations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

MEAL_PLAN_UPDATED = "meal_plan_updated"
NOTIFICATION = "notification"
EXPIRING_ITEMS_EMAIL = "expiring_items_email"
EXPIRY_ALERT = "expiry_alert"


@dataclass(frozen=True)
class NotificationEvent:
    """Event value handed to the dispatcher."""

    name: str
    payload: dict[str, object]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def body(self) -> dict[str, object]:
        """Return the JSON body posted to the webhook."""
        return {
            "event": self.name,
            "timestamp": self.occurred_at.isoformat(),
            **self.payload,
        }


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a synchronous notification send."""

    delivered: bool
    items_count: int
    recipients: list[str]


@dataclass(frozen=True)
class AlertRunSummary:
    """Outcome of an expiry alert sweep across households."""

    households_alerted: int
    items_count: int
    delivered: int
