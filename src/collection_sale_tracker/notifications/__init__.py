"""Notification subsystem."""

from collection_sale_tracker.notifications.notification_manager import (
    NotificationService,
    sale_message,
)
from collection_sale_tracker.notifications.strategies import (
    BaseNotificationStrategy,
    ConsoleNotifier,
    TelegramNotifier,
)
from collection_sale_tracker.notifications.stylers import SaleNotificationStyler
from collection_sale_tracker.notifications.types import (
    NotificationMessage,
    NotificationSink,
    NotificationStyler,
)

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "TelegramNotifier",
    "NotificationMessage",
    "NotificationService",
    "NotificationSink",
    "NotificationStyler",
    "SaleNotificationStyler",
    "sale_message",
]
