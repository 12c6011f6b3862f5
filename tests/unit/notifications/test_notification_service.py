# -*- coding: utf-8 -*-
"""Unit tests for NotificationService and notification channels."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from collection_sale_tracker.exceptions import DeliverySinkError
from collection_sale_tracker.models.sale_event import SourceMetrics, SyntheticSaleEvent
from collection_sale_tracker.notifications import (
    ConsoleNotifier,
    NotificationMessage,
    NotificationService,
    SaleNotificationStyler,
)


class _RecordingNotifier:
    """Notification channel double recording every message."""

    def __init__(self, error: Exception | None = None) -> None:
        self.messages: list[NotificationMessage] = []
        self.error = error
        self.initialized = False
        self.closed = False

    @property
    def is_running(self) -> bool:
        return self.initialized and not self.closed

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.closed = True

    async def send_notification(self, message: NotificationMessage) -> None:
        if self.error is not None:
            raise self.error
        self.messages.append(message)


def _event(now_utc: datetime) -> SyntheticSaleEvent:
    return SyntheticSaleEvent(
        collection_address="0xabc",
        inferred_id="synthetic:0xabc:1",
        estimated_price=Decimal("1"),
        inferred_at=now_utc,
        source_metrics=SourceMetrics(volume_delta=Decimal("1"), sales_count_delta=1),
    )


async def test_deliver_sends_to_every_channel(now_utc: datetime) -> None:
    first, second = _RecordingNotifier(), _RecordingNotifier()
    service = NotificationService(notifiers=[first, second])  # type: ignore[list-item]

    await service.deliver(_event(now_utc), "alice")

    assert [m.recipient for m in first.messages] == ["alice"]
    assert [m.event_type for m in second.messages] == ["sale_detected"]


async def test_deliver_raises_after_trying_all_channels(now_utc: datetime) -> None:
    broken = _RecordingNotifier(error=RuntimeError("down"))
    healthy = _RecordingNotifier()
    service = NotificationService(notifiers=[broken, healthy])  # type: ignore[list-item]

    with pytest.raises(DeliverySinkError) as exc_info:
        await service.deliver(_event(now_utc), "alice")

    assert exc_info.value.subscriber_id == "alice"
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert len(healthy.messages) == 1


async def test_notify_is_drained_on_shutdown() -> None:
    notifier = _RecordingNotifier()
    service = NotificationService(notifiers=[notifier])  # type: ignore[list-item]
    await service.initialize()

    service.notify(NotificationMessage(event_type="system_started", message="up"))
    await service.shutdown()

    assert [m.event_type for m in notifier.messages] == ["system_started"]
    assert notifier.closed


async def test_notify_without_notifiers_is_noop() -> None:
    service = NotificationService(notifiers=[])
    await service.initialize()

    service.notify(NotificationMessage(event_type="system_started", message="up"))
    await service.shutdown()


async def test_notify_failure_is_logged_not_raised() -> None:
    notifier = _RecordingNotifier(error=RuntimeError("down"))
    service = NotificationService(notifiers=[notifier])  # type: ignore[list-item]
    await service.initialize()

    service.notify(NotificationMessage(event_type="system_stopped", message="bye"))
    await service.shutdown()


async def test_console_notifier_prints_plain_text(
    capsys: pytest.CaptureFixture[str],
) -> None:
    settings: Any = SimpleNamespace(console=SimpleNamespace(enabled=True))
    notifier = ConsoleNotifier(settings, SaleNotificationStyler())
    await notifier.initialize()

    await notifier.send_notification(
        NotificationMessage(event_type="system_stopped", message="Tracker & co stopped", recipient="alice")
    )

    out = capsys.readouterr().out
    assert out.startswith("[alice] ")
    assert "Tracker & co stopped" in out
    assert "<b>" not in out


def _telegram_settings(**overrides: Any) -> Any:
    telegram = {
        "enabled": True,
        "api_key": "token",
        "chat_id": "-100200",
        "messages_per_minute": 0,
        "max_retries": 2,
        "backoff_base_seconds": 1.0,
        "connect_timeout": 1.0,
        "read_timeout": 1.0,
        "write_timeout": 1.0,
        "pool_timeout": 1.0,
    }
    telegram.update(overrides)
    return SimpleNamespace(telegram=SimpleNamespace(**telegram))


async def test_telegram_routes_to_subscriber_chat_or_default() -> None:
    from collection_sale_tracker.notifications import TelegramNotifier

    bot = SimpleNamespace(send_message=AsyncMock())
    notifier = TelegramNotifier(_telegram_settings(), SaleNotificationStyler(), bot=bot)  # type: ignore[arg-type]
    await notifier.initialize()

    await notifier.send_notification(
        NotificationMessage(event_type="system_stopped", message="bye", recipient="987654")
    )
    await notifier.send_notification(
        NotificationMessage(event_type="system_stopped", message="bye", recipient="default")
    )

    chats = [call.kwargs["chat_id"] for call in bot.send_message.await_args_list]
    assert chats == ["987654", "-100200"]


async def test_telegram_raises_after_retries_exhausted() -> None:
    from telegram.error import NetworkError

    from collection_sale_tracker.notifications import TelegramNotifier

    sleeps: list[float] = []

    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    bot = SimpleNamespace(send_message=AsyncMock(side_effect=NetworkError("offline")))
    notifier = TelegramNotifier(
        _telegram_settings(), SaleNotificationStyler(), bot=bot, sleep=_sleep  # type: ignore[arg-type]
    )
    await notifier.initialize()

    with pytest.raises(DeliverySinkError):
        await notifier.send_notification(NotificationMessage(event_type="x", message="y"))

    assert bot.send_message.await_count == 2
    assert sleeps == [1.0]


def test_telegram_requires_token_and_chat() -> None:
    from collection_sale_tracker.notifications import TelegramNotifier

    with pytest.raises(ValueError):
        TelegramNotifier(_telegram_settings(api_key=None), SaleNotificationStyler())  # type: ignore[arg-type]
