"""Notification message types and the sale notification sink protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collection_sale_tracker.models.sale_event import SyntheticSaleEvent


@dataclass(frozen=True)
class NotificationMessage:
    """Message to be sent via one or more notification channels."""

    event_type: str
    message: str
    title: str | None = None
    payload: dict[str, Any] | None = None
    recipient: str | None = None
    """Subscriber the message is addressed to; None means the default channel."""


class NotificationStyler(Protocol):
    """Render a message into a formatted string for delivery."""

    def render(self, message: NotificationMessage) -> str:
        """Return a formatted message (Telegram-compatible HTML) for the given message."""
        ...


class NotificationSink(Protocol):
    """Receives admitted sale events, once per subscriber tracking the collection."""

    async def deliver(self, event: SyntheticSaleEvent, subscriber_id: str) -> None:
        """Deliver one sale event.

        Raises:
            DeliverySinkError: If delivery failed. The event stays admitted.
        """
        ...
