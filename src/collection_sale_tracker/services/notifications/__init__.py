"""Operator alert listeners (fetch failures)."""

from collection_sale_tracker.services.notifications.fetch_failed_notifier import (
    FetchFailedNotifier,
)

__all__ = ["FetchFailedNotifier"]
