"""Expiry emails, expiry alert sweeps and ad-hoc notifications."""

import logging
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from homelife.domain.errors import ValidationError
from homelife.domain.models import UserRecord
from homelife.domain.notifications import (
    EXPIRING_ITEMS_EMAIL,
    EXPIRY_ALERT,
    NOTIFICATION,
    AlertRunSummary,
    DeliveryResult,
    NotificationEvent,
)
from homelife.domain.pantry import ExpiringItem
from homelife.services.notifications import NotificationDispatcher
from homelife.services.pantry import PantryService
from homelife.services.users import UserService

NOTIFICATION_CHANNELS = ("email", "telegram", "slack")
DEFAULT_SUBJECT = "HomeLife Notification"
EXPIRING_SUBJECT = "Items Expiring Soon - HomeLife"
URGENT_DAYS = 3

_logger = logging.getLogger(__name__)


@dataclass
class AlertService:
    """Builds notification payloads and delivers them synchronously."""

    pantry: PantryService
    users: UserService
    dispatcher: NotificationDispatcher
    extra_recipients: list[str] = field(default_factory=list)

    async def send_expiring_items_email(
        self,
        user: UserRecord,
        household_id: UUID,
        days: int = 7,
        today: date | None = None,
    ) -> DeliveryResult:
        """Email the user and configured recipients about expiring stock."""
        current = today or date.today()
        items = self.pantry.get_expiring_soon(household_id, days, today=current)
        recipients = _unique([user.email, *self.extra_recipients])
        event = NotificationEvent(
            name=EXPIRING_ITEMS_EMAIL,
            payload={
                "user": {"id": str(user.id), "name": user.name, "email": user.email},
                "household_id": str(household_id),
                "recipient_emails": recipients,
                "expiring_items": [_item_payload(item) for item in items],
                "days": days,
                "subject": EXPIRING_SUBJECT,
                "message": format_expiring_items_message(items, user.name),
            },
        )
        delivered = await self.dispatcher.deliver(event)
        _logger.info(
            "Expiring items email %s",
            "sent" if delivered else "failed",
            extra={"household_id": household_id, "user_id": user.id},
        )
        return DeliveryResult(
            delivered=delivered, items_count=len(items), recipients=recipients
        )

    async def send_expiry_alerts(
        self, days: int = URGENT_DAYS, today: date | None = None
    ) -> AlertRunSummary:
        """Send one alert per household that has stock expiring soon."""
        current = today or date.today()
        households_alerted = 0
        items_count = 0
        delivered = 0
        for household in self.users.list_households():
            items = self.pantry.get_expiring_soon(household.id, days, today=current)
            if not items:
                continue
            households_alerted += 1
            items_count += len(items)
            event = NotificationEvent(
                name=EXPIRY_ALERT,
                payload={
                    "household_id": str(household.id),
                    "household_name": household.name,
                    "users": household.member_emails,
                    "expiring_items": [_item_payload(item) for item in items],
                    "count": len(items),
                    "alert_date": current.isoformat(),
                },
            )
            if await self.dispatcher.deliver(event):
                delivered += 1
        _logger.info(
            "Expiry alerts: %s households, %s items, %s delivered",
            households_alerted,
            items_count,
            delivered,
        )
        return AlertRunSummary(
            households_alerted=households_alerted,
            items_count=items_count,
            delivered=delivered,
        )

    async def send_notification(  # noqa: PLR0913
        self,
        household_id: UUID,
        channels: list[str],
        message: str,
        sender_email: str,
        subject: str | None = None,
    ) -> bool:
        """Forward a free-form notification to the automation webhook."""
        if not channels:
            raise ValidationError("At least one channel is required", field="channels")
        unknown = [name for name in channels if name not in NOTIFICATION_CHANNELS]
        if unknown:
            raise ValidationError(
                f"Unsupported channel: {', '.join(unknown)}", field="channels"
            )
        if not message.strip():
            raise ValidationError("message is required", field="message")
        if "@" not in sender_email:
            raise ValidationError(
                "sender_email must be an email address", field="sender_email"
            )
        event = NotificationEvent(
            name=NOTIFICATION,
            payload={
                "household_id": str(household_id),
                "channels": channels,
                "message": message,
                "subject": subject or DEFAULT_SUBJECT,
                "sender_email": sender_email,
            },
        )
        return await self.dispatcher.deliver(event)


def format_expiring_items_message(items: list[ExpiringItem], user_name: str) -> str:
    """Render a plain-text email body grouping items by urgency."""
    if not items:
        return f"Hello {user_name},\n\nYou have no items expiring soon.\n"

    groups: dict[str, list[str]] = {
        "Expires today": [],
        "Expiring within 3 days": [],
        "Later": [],
    }
    for item in items:
        line = (
            f"- {item.ingredient_name or 'Unknown'}: "
            f"{item.quantity:g} {item.unit_name or 'unit'}"
        )
        if item.days_until_expiry <= 0:
            groups["Expires today"].append(line)
        elif item.days_until_expiry <= URGENT_DAYS:
            groups["Expiring within 3 days"].append(
                f"{line} ({item.days_until_expiry} days left, "
                f"expires {item.expiry_date.isoformat()})"
            )
        else:
            groups["Later"].append(
                f"{line} (expires {item.expiry_date.isoformat()})"
            )

    lines = [
        f"Hello {user_name},",
        "",
        "Here are the items in your pantry that are expiring soon:",
    ]
    for heading, entries in groups.items():
        if entries:
            lines.extend(["", f"{heading} ({len(entries)})", *entries])
    lines.extend(["", "Use them first to avoid waste."])
    return "\n".join(lines) + "\n"


def _item_payload(item: ExpiringItem) -> dict[str, object]:
    return {
        "id": str(item.id),
        "ingredient_name": item.ingredient_name or "Unknown",
        "quantity": item.quantity,
        "unit": item.unit_name or "unit",
        "expiry_date": item.expiry_date.isoformat(),
        "days_until_expiry": item.days_until_expiry,
        "location": item.location,
    }


def _unique(values: list[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen
