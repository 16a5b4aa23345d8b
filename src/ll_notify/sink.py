"""Outbound notification delivery.

Transport is owned by the caller: anything with an async
`send(user_id, title, body)` can be plugged in. Delivery is fire-and-forget:
failures are logged, never retried, and never reach the operation that
triggered the notice.
"""

import logging
from typing import Protocol

from src.ll_notify.messages import Notification

logger = logging.getLogger(__name__)


class NotificationSinkProtocol(Protocol):
    async def send(self, user_id: str, title: str, body: str) -> None: ...


class Notifier:
    def __init__(self, sink: NotificationSinkProtocol) -> None:
        self._sink = sink

    async def deliver(self, notification: Notification) -> bool:
        """Send one notification. Returns False (after logging) if the sink failed."""
        try:
            await self._sink.send(notification.user_id, notification.title, notification.body)
        except Exception:
            logger.exception(
                "Failed to deliver %s notification: user=%s listing=%s",
                notification.kind.value, notification.user_id, notification.listing_id,
            )
            return False
        logger.debug(
            "Delivered %s notification: user=%s listing=%s",
            notification.kind.value, notification.user_id, notification.listing_id,
        )
        return True

    async def deliver_all(self, notifications: list[Notification]) -> int:
        delivered = 0
        for notification in notifications:
            if await self.deliver(notification):
                delivered += 1
        return delivered


class InMemoryNotificationSink:
    """Collects (user_id, title, body) tuples; used by tests and local runs."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, user_id: str, title: str, body: str) -> None:
        self.sent.append((user_id, title, body))

    def titles_for(self, user_id: str) -> list[str]:
        return [title for uid, title, _ in self.sent if uid == user_id]


class LoggingNotificationSink:
    async def send(self, user_id: str, title: str, body: str) -> None:
        logger.info("Notification for %s: %s | %s", user_id, title, body)
