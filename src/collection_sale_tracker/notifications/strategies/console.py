# -*- coding: utf-8 -*-
"""Console notifier (print-based)."""

from __future__ import annotations

import re
from html import unescape
from typing import TYPE_CHECKING

from collection_sale_tracker.notifications.types import NotificationMessage
from collection_sale_tracker.notifications.strategies.base import BaseNotificationStrategy
from collection_sale_tracker.config import Settings

if TYPE_CHECKING:  # pragma: no cover
    from collection_sale_tracker.notifications.types import NotificationStyler

_TAG_RE = re.compile(r"<[^>]+>")


class ConsoleNotifier(BaseNotificationStrategy):
    """Print notifications to stdout as plain text."""

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler"
    ) -> None:
        super().__init__(settings)
        self._running = False
        self._styler = styler

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        """Send a notification to the console."""
        if not self.is_running or not self.settings.console.enabled:
            return
        body = self._styler.render(message) if self._styler else message.message
        prefix = f"[{message.recipient}] " if message.recipient else ""
        print(prefix + unescape(_TAG_RE.sub("", body)))
