"""Best-effort delivery of notification events to automation webhooks."""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from typing import Protocol

from homelife.domain.errors import ExternalDependencyError
from homelife.domain.notifications import (
    EXPIRING_ITEMS_EMAIL,
    EXPIRY_ALERT,
    MEAL_PLAN_UPDATED,
    NOTIFICATION,
    NotificationEvent,
)

MAX_PENDING_EVENTS = 1000

_logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    """Sink for events emitted by domain operations."""

    def publish(self, event: NotificationEvent) -> None:
        """Hand an event over for asynchronous delivery. Never raises."""


class WebhookClient(Protocol):
    """Interface for posting JSON to an outside webhook."""

    async def post_json(self, url: str, payload: dict[str, object]) -> None:
        """POST a JSON payload, raising on transport or HTTP errors."""


def build_routes(
    meal_plan_url: str | None, notification_url: str | None
) -> dict[str, str | None]:
    """Map event names to the webhook URL that receives them."""
    return {
        MEAL_PLAN_UPDATED: meal_plan_url,
        NOTIFICATION: notification_url,
        EXPIRING_ITEMS_EMAIL: notification_url,
        EXPIRY_ALERT: notification_url,
    }


@dataclass
class NotificationDispatcher(EventPublisher):
    """Queues events and delivers them one POST at a time."""

    client: WebhookClient
    routes: dict[str, str | None]
    queue: asyncio.Queue[NotificationEvent] = field(
        default_factory=lambda: asyncio.Queue(maxsize=MAX_PENDING_EVENTS)
    )
    _worker: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    def publish(self, event: NotificationEvent) -> None:
        """Enqueue an event without waiting for delivery.

        Events are dropped with a warning once the queue is full, so a stalled
        webhook cannot grow memory without bound.
        """
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            _logger.warning(
                "Notification queue full; dropping event",
                extra={"event": event.name, "pending": self.queue.qsize()},
            )
        except Exception:
            _logger.exception(
                "Failed to enqueue notification event", extra={"event": event.name}
            )

    async def deliver(self, event: NotificationEvent) -> bool:
        """Deliver one event now and report whether the webhook accepted it."""
        url = self.routes.get(event.name)
        if not url:
            _logger.warning(
                "Webhook URL not configured; skipping event",
                extra={"event": event.name},
            )
            return False
        try:
            await self.client.post_json(url, event.body())
        except ExternalDependencyError as exc:
            _logger.warning(
                "Webhook delivery failed: %s", exc, extra={"event": event.name}
            )
            return False
        except Exception:
            _logger.exception("Webhook delivery failed", extra={"event": event.name})
            return False
        _logger.info("Webhook delivered", extra={"event": event.name})
        return True

    async def run(self) -> None:
        """Consume queued events until cancelled."""
        while True:
            event = await self.queue.get()
            try:
                await self.deliver(event)
            finally:
                self.queue.task_done()

    async def drain(self) -> int:
        """Deliver everything currently queued and return how many were sent."""
        delivered = 0
        while not self.queue.empty():
            event = self.queue.get_nowait()
            try:
                if await self.deliver(event):
                    delivered += 1
            finally:
                self.queue.task_done()
        return delivered

    def start(self) -> None:
        """Start the background worker on the running event loop."""
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Stop the worker and flush pending events."""
        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None
        await self.drain()
