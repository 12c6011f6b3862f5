# -*- coding: utf-8 -*-
"""FetchFailedNotifier: listens to CollectionFetchFailedEvent and alerts the operator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog

from collection_sale_tracker.events.sales import CollectionFetchFailedEvent
from collection_sale_tracker.notifications.types import NotificationMessage
from collection_sale_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from collection_sale_tracker.clients.collection_metadata_cache import CollectionMetadataCache
    from collection_sale_tracker.notifications.notification_manager import NotificationService


class FetchFailedNotifier:
    """Subscribes to CollectionFetchFailedEvent and sends alerts via NotificationService."""

    def __init__(
        self,
        notification_service: "NotificationService",
        event_bus: Any,
        metadata_cache: Optional["CollectionMetadataCache"] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._notification_service = notification_service
        self._event_bus: "EventBus" = event_bus
        self._metadata = metadata_cache
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def start(self) -> None:
        """Subscribe to CollectionFetchFailedEvent."""
        self._event_bus.on(CollectionFetchFailedEvent, self._on_failed)
        self._logger.debug("fetch_failed_notifier_started")

    def stop(self) -> None:
        """Unsubscribe from CollectionFetchFailedEvent."""
        key = CollectionFetchFailedEvent.__name__
        handlers = getattr(self._event_bus, "handlers", {})
        if key in handlers:
            handlers[key] = [h for h in handlers[key] if h != self._on_failed]
        self._logger.debug("fetch_failed_notifier_stopped")

    def _on_failed(self, event: CollectionFetchFailedEvent) -> None:
        """Handle CollectionFetchFailedEvent: build and enqueue the alert."""
        name = (
            self._metadata.display_name(event.collection_address)
            if self._metadata is not None
            else mask_address(event.collection_address)
        )
        message = f"Could not fetch stats for {name} after {event.attempts} attempt(s)"

        payload: dict[str, Any] = {
            "collection_address": event.collection_address,
            "collection_name": name,
            "attempts": event.attempts,
        }
        if event.error_type:
            payload["error_type"] = event.error_type
        if event.error_message:
            payload["error_message"] = event.error_message

        self._notification_service.notify(
            NotificationMessage(
                event_type="fetch_failed",
                message=message,
                payload=payload,
            )
        )
        self._logger.debug(
            "fetch_failed_notified",
            collection=mask_address(event.collection_address),
            attempts=event.attempts,
        )
