# -*- coding: utf-8 -*-
"""Telegram notification strategy (async)."""

from __future__ import annotations

import asyncio
import re
import time
import structlog
from collections.abc import Awaitable
from typing import Any, Callable, Optional, TYPE_CHECKING

from telegram import Bot
from telegram.error import (
    BadRequest,
    Forbidden,
    NetworkError,
    RetryAfter,
    TelegramError,
    TimedOut,
)
from telegram.request import HTTPXRequest

from collection_sale_tracker.exceptions import DeliverySinkError
from collection_sale_tracker.notifications.types import NotificationMessage
from collection_sale_tracker.notifications.strategies.base import BaseNotificationStrategy

if TYPE_CHECKING:
    from collection_sale_tracker.config.config import Settings
    from collection_sale_tracker.notifications.types import NotificationStyler

# Numeric chat ids (groups are negative) or @channel usernames
_CHAT_ID_RE = re.compile(r"^(-?\d+|@[A-Za-z0-9_]{5,})$")


class TelegramNotifier(BaseNotificationStrategy):
    """Send notifications to Telegram using python-telegram-bot.

    A message whose recipient looks like a Telegram chat id goes to that chat;
    everything else goes to the configured default chat.
    """

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler",
        *,
        bot: Optional[Bot] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._styler: "NotificationStyler" = styler
        self._sleep = sleep

        cfg = self.settings.telegram
        token = cfg.api_key
        chat_id = cfg.chat_id
        if not cfg.enabled or not token or not chat_id:
            raise ValueError("TelegramNotifier requires token and chat_id.")

        self.token: str = str(token)
        self.chat_id: str = str(chat_id)
        self.messages_per_minute = cfg.messages_per_minute
        self.max_retries = cfg.max_retries
        self.backoff_base_seconds = cfg.backoff_base_seconds

        self.connect_timeout = cfg.connect_timeout
        self.read_timeout = cfg.read_timeout
        self.write_timeout = cfg.write_timeout
        self.pool_timeout = cfg.pool_timeout

        self._bot: Optional[Bot] = bot
        self._owns_bot = bot is None
        self._running = False
        self._message_timestamps: list[float] = []

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        if self._running:
            self._logger.warning("telegram_already_running")
            return

        if self._bot is None:
            request = HTTPXRequest(
                connect_timeout=self.connect_timeout,
                read_timeout=self.read_timeout,
                write_timeout=self.write_timeout,
                pool_timeout=self.pool_timeout,
            )
            self._bot = Bot(token=self.token, request=request)

        self._running = True

    async def shutdown(self) -> None:
        if not self._running:
            return

        if self._owns_bot:
            self._bot = None
        self._running = False

    def resolve_chat_id(self, recipient: Optional[str]) -> str:
        """Chat for a recipient: the recipient itself if it is a chat id, else the default chat."""
        if recipient and _CHAT_ID_RE.match(recipient.strip()):
            return recipient.strip()
        return self.chat_id

    async def send_notification(self, message: NotificationMessage) -> None:
        if not self._running:
            raise DeliverySinkError("Telegram notifier is not running")

        formatted = self._styler.render(message)
        await self._send_message(formatted, self.resolve_chat_id(message.recipient))

    async def _send_message(self, text: str, chat_id: str) -> None:
        if self._bot is None:
            raise DeliverySinkError("Telegram bot not initialized")

        await self._apply_rate_limit()
        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            backoff = min(60.0, self.backoff_base_seconds * (2 ** (attempt - 1)))
            try:
                await self._bot.send_message(
                    chat_id=chat_id,
                    text=text,
                    parse_mode="HTML",
                )
                self._message_timestamps.append(time.time())
                return
            except RetryAfter as exc:
                last_error = exc
                retry_after = getattr(exc, "retry_after", 1.0)
                backoff = (
                    retry_after.total_seconds()
                    if hasattr(retry_after, "total_seconds")
                    else float(retry_after)
                )
                self._logger.warning(
                    "telegram_rate_limit_retry_after",
                    retry_seconds=backoff,
                )
            except (BadRequest, Forbidden) as exc:
                self._logger.error(
                    "telegram_fatal_error",
                    telegram_chat_id=chat_id,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                raise DeliverySinkError(
                    f"Telegram rejected the message: {exc}",
                    subscriber_id=chat_id,
                    cause=exc,
                ) from exc
            except (NetworkError, TimedOut, TelegramError) as exc:
                last_error = exc
                self._logger.warning(
                    "telegram_error_retry",
                    error_type=type(exc).__name__,
                    attempt=attempt,
                    max_retries=self.max_retries,
                    backoff_seconds=backoff,
                )
            if attempt < self.max_retries:
                await self._sleep(backoff)

        self._logger.error(
            "telegram_max_retries_exceeded_message_dropped",
            telegram_chat_id=chat_id,
        )
        raise DeliverySinkError(
            f"Telegram send failed after {self.max_retries} attempts: {last_error}",
            subscriber_id=chat_id,
            cause=last_error,
        )

    async def _apply_rate_limit(self) -> None:
        if self.messages_per_minute <= 0:
            return

        now = time.time()
        window_start = now - 60
        self._message_timestamps = [t for t in self._message_timestamps if t >= window_start]
        if len(self._message_timestamps) >= self.messages_per_minute:
            sleep_time = 60 - (now - self._message_timestamps[0])
            if sleep_time > 0:
                await self._sleep(sleep_time)
