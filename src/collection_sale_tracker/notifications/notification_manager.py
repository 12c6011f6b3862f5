"""Notification service: sale delivery sink and queued operator notifications."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from collection_sale_tracker.exceptions import DeliverySinkError
from collection_sale_tracker.notifications.strategies import BaseNotificationStrategy
from collection_sale_tracker.notifications.types import NotificationMessage
from collection_sale_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from collection_sale_tracker.models.sale_event import SyntheticSaleEvent


def sale_message(event: SyntheticSaleEvent, subscriber_id: str) -> NotificationMessage:
    """Build the notification for one admitted sale addressed to one subscriber."""
    name = event.collection_name or event.collection_address
    return NotificationMessage(
        event_type="sale_detected",
        message=f"New sale detected for {name}",
        title=f"New Sale: {name}",
        payload=event.to_payload(),
        recipient=subscriber_id,
    )


@dataclass
class NotificationService:
    """Dispatch notifications to all configured channels.

    deliver() is awaited by the poll cycle and raises DeliverySinkError when a
    channel fails. notify() enqueues operator messages (start/stop/alerts) and
    never blocks the caller.
    """

    notifiers: list[BaseNotificationStrategy]
    queue_size: int = 1000
    get_logger: Callable[[str], Any] = field(default=structlog.get_logger)
    _queue: asyncio.Queue[NotificationMessage] | None = field(init=False, default=None)
    _worker_task: asyncio.Task[None] | None = field(init=False, default=None)
    _logger: Any = field(init=False)

    def __post_init__(self) -> None:
        self._logger = self.get_logger("NotificationService")

    async def initialize(self) -> None:
        """Initialize all notifiers and start the operator message worker."""
        notifiers_count = len(self.notifiers)
        self._logger.debug(
            "notification_init_started",
            notification_notifiers_count=notifiers_count,
        )
        for notifier in self.notifiers:
            await notifier.initialize()
        if not self.notifiers:
            self._queue = None
            self._worker_task = None
            self._logger.info("notification_init_no_notifiers")
            return
        self._queue = asyncio.Queue[NotificationMessage](maxsize=self.queue_size)
        self._worker_task = asyncio.create_task(self._worker_loop())
        self._logger.debug(
            "notification_init_complete",
            notification_queue_size=self.queue_size,
            notification_worker_started=True,
        )

    async def shutdown(self) -> None:
        """Drain queued messages, then shut down all notifiers."""
        self._logger.debug("notification_shutdown_started")
        if self._queue is not None:
            self._queue.shutdown()
            await self._queue.join()
            self._logger.debug("notification_shutdown_queue_drained")
        if self._worker_task is not None:
            await self._worker_task
            self._worker_task = None
        self._queue = None

        for notifier in self.notifiers:
            await notifier.shutdown()
        self._logger.debug("notification_shutdown_complete")

    async def deliver(self, event: SyntheticSaleEvent, subscriber_id: str) -> None:
        """Send one admitted sale to every channel for one subscriber.

        All channels are attempted even if one fails.

        Raises:
            DeliverySinkError: If at least one channel failed.
        """
        message = sale_message(event, subscriber_id)
        failures: list[tuple[str, Exception]] = []
        for notifier in self.notifiers:
            try:
                await notifier.send_notification(message)
            except Exception as e:
                failures.append((type(notifier).__name__, e))
                self._logger.warning(
                    "notification_delivery_failed",
                    notification_channel=type(notifier).__name__,
                    notification_subscriber_id=subscriber_id,
                    notification_collection=mask_address(event.collection_address),
                    notification_sale_id=event.inferred_id,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
        if failures:
            channel, cause = failures[0]
            raise DeliverySinkError(
                f"Delivery failed on {len(failures)} channel(s), first: {channel}: {cause}",
                subscriber_id=subscriber_id,
                event=event,
                cause=cause,
            )
        self._logger.debug(
            "notification_delivered",
            notification_subscriber_id=subscriber_id,
            notification_sale_id=event.inferred_id,
            notification_notifiers_count=len(self.notifiers),
        )

    def notify(self, message: NotificationMessage) -> None:
        """Enqueue an operator notification (non-blocking for callers)."""
        queue = self._queue
        if queue is None:
            if not self.notifiers:
                return
            raise RuntimeError("NotificationService not initialized")
        try:
            queue.put_nowait(message)
        except asyncio.QueueFull:
            self._logger.warning(
                "notification_queue_full_dropped",
                notification_event_type=message.event_type,
            )

    async def _worker_loop(self) -> None:
        queue = self._queue
        if queue is None:
            return
        while True:
            try:
                msg = await queue.get()
            except asyncio.QueueShutDown:
                self._logger.debug("notification_worker_shutting_down")
                break
            try:
                await self._dispatch(msg)
            finally:
                queue.task_done()

    async def _dispatch(self, message: NotificationMessage) -> None:
        self._logger.debug(
            "notification_dispatch",
            notification_event_type=message.event_type,
            notification_notifiers_count=len(self.notifiers),
        )
        for notifier in self.notifiers:
            try:
                await notifier.send_notification(message)
            except Exception as e:
                self._logger.warning(
                    "notification_dispatch_failed",
                    notification_channel=type(notifier).__name__,
                    notification_event_type=message.event_type,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
