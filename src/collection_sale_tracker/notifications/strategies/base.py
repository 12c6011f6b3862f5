# -*- coding: utf-8 -*-
"""Base notification strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from collection_sale_tracker.notifications.types import NotificationMessage

if TYPE_CHECKING:  # pragma: no cover
    from collection_sale_tracker.config.config import Settings


class BaseNotificationStrategy(ABC):
    """Abstract base class for notification channels."""

    def __init__(self, settings: "Settings"):
        """
        Initialize the base strategy.

        Args:
            settings: Global configuration (Settings).
        """
        self.settings = settings

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Whether the channel is ready to send."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Open the channel."""
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Close the channel."""
        pass

    @abstractmethod
    async def send_notification(
        self,
        message: NotificationMessage,
    ) -> None:
        """
        Send one notification.

        Args:
            message: Message to send; message.recipient selects the target when supported.

        Raises:
            DeliverySinkError: When the message could not be delivered.
        """
        pass
