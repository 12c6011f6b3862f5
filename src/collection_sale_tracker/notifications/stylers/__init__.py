"""Notification stylers."""

from collection_sale_tracker.notifications.stylers.notification_styler import (
    SaleNotificationStyler,
)

__all__ = ["SaleNotificationStyler"]
