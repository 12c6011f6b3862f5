# -*- coding: utf-8 -*-
"""
Entry point for the collection sale tracker.

Orchestrates: logging, settings, container, registry seeding, polling runner, shutdown (SIGINT or CancelledError).
Sales flow: runner -> PollCycleCoordinator -> StatsFetcher -> SaleInferenceEngine -> dedup -> NotificationService.

Run with: python -m collection_sale_tracker.main

Notebook usage:
    from collection_sale_tracker.main import run
    await run()  # Interrupt kernel to stop; system will shut down on CancelledError.
"""
from __future__ import annotations

import asyncio
import signal
import structlog
from typing import Any

from collection_sale_tracker.DI import Container
from collection_sale_tracker.config import Settings, get_settings
from collection_sale_tracker.exceptions import MissingRequiredConfigError
from collection_sale_tracker.logging.config import configure_logging
from collection_sale_tracker.models.collection import TrackedCollection
from collection_sale_tracker.notifications.types import NotificationMessage
from collection_sale_tracker.persistence.repositories.interfaces import (
    ITrackedCollectionRepository,
)
from collection_sale_tracker.utils import extract_collection_address, mask_address


def _setup_sigint(shutdown_event: asyncio.Event) -> None:
    try:
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(
            signal.SIGINT,
            lambda: shutdown_event.set(),
        )
    except NotImplementedError:
        pass  # Windows has no add_signal_handler


async def seed_tracked_collections(
    settings: Settings,
    registry: ITrackedCollectionRepository,
    logger: Any,
) -> list[str]:
    """Register every TRACKING__TARGET_COLLECTIONS entry for the configured subscriber.

    Entries may be addresses, quoted addresses or marketplace URLs; entries
    no address can be extracted from are logged and skipped.

    Returns:
        Addresses now tracked, in configuration order.
    """
    subscriber_id = settings.tracking.subscriber_id
    seeded: list[str] = []
    for raw in settings.tracking.target_collections:
        extracted = extract_collection_address(raw)
        if extracted is None:
            logger.warning("main_invalid_collection_skipped", raw_value=raw)
            continue
        await registry.track(
            TrackedCollection.create(
                extracted.address,
                subscriber_id,
                source=extracted.source,
                url=extracted.url,
            )
        )
        if extracted.address not in seeded:
            seeded.append(extracted.address)
    return seeded


async def run() -> None:
    configure_logging()
    logger = structlog.get_logger("main")
    settings = get_settings()
    if not settings.tracking.target_collections:
        logger.error(
            "main_missing_target_collections",
            message="TRACKING__TARGET_COLLECTIONS is not set",
        )
        raise MissingRequiredConfigError("TRACKING__TARGET_COLLECTIONS")

    container = Container()
    registry = container.tracked_collection_repository()
    collections = await seed_tracked_collections(settings, registry, logger)
    if not collections:
        raise MissingRequiredConfigError("TRACKING__TARGET_COLLECTIONS")

    http_client = container.http_client()
    runner = container.polling_runner()
    fetch_failed_notifier = container.fetch_failed_notifier()
    notification_service = container.notification_service()
    await notification_service.initialize()
    fetch_failed_notifier.start()
    shutdown_event = asyncio.Event()
    _setup_sigint(shutdown_event)

    tr = settings.tracking
    logger.info(
        "main_tracking_started",
        collections=[mask_address(c) for c in collections],
        poll_seconds=tr.poll_seconds,
        cold_start_mode=tr.cold_start_mode,
    )
    notification_service.notify(
        NotificationMessage(
            event_type="system_started",
            message=f"Tracking sales for {len(collections)} collection(s)",
            payload={"collections": [mask_address(c) for c in collections]},
        )
    )

    try:
        await runner.run(shutdown_event)
    finally:
        fetch_failed_notifier.stop()
        notification_service.notify(
            NotificationMessage(
                event_type="system_stopped",
                message="Collection sale tracker stopped",
                payload={},
            )
        )
        await notification_service.shutdown()
        await http_client.aclose()
        logger.info("main_shutdown_complete")


def main() -> None:
    asyncio.run(run())


__all__ = ["run", "main", "seed_tracked_collections"]

if __name__ == "__main__":
    main()
