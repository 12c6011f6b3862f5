"""Notification strategies."""

from collection_sale_tracker.notifications.strategies.base import (
    BaseNotificationStrategy,
)
from collection_sale_tracker.notifications.strategies.console import ConsoleNotifier
from collection_sale_tracker.notifications.strategies.telegram import TelegramNotifier

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "TelegramNotifier",
]
