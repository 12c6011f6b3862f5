# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from datetime import timedelta

from dependency_injector import containers, providers

from collection_sale_tracker.config import Settings, get_settings
from collection_sale_tracker.events.bus import get_event_bus
from collection_sale_tracker.clients.collection_metadata_cache import CollectionMetadataCache
from collection_sale_tracker.clients.http import AsyncHttpClient
from collection_sale_tracker.clients.magic_eden import MagicEdenApiClient
from collection_sale_tracker.notifications.notification_manager import NotificationService
from collection_sale_tracker.notifications.strategies.base import BaseNotificationStrategy
from collection_sale_tracker.notifications.strategies.console import ConsoleNotifier
from collection_sale_tracker.notifications.strategies.telegram import TelegramNotifier
from collection_sale_tracker.notifications.stylers import SaleNotificationStyler
from collection_sale_tracker.persistence.repositories.in_memory import (
    InMemorySeenSaleRepository,
    InMemorySnapshotRepository,
    InMemoryTrackedCollectionRepository,
)
from collection_sale_tracker.services.inference import SaleInferenceEngine
from collection_sale_tracker.services.notifications import FetchFailedNotifier
from collection_sale_tracker.services.polling import PollCycleCoordinator, PollingRunner
from collection_sale_tracker.services.stats import StatsFetcher


def _build_metadata_cache(settings: Settings) -> CollectionMetadataCache:
    """Build the metadata cache with size from settings."""
    return CollectionMetadataCache(maxsize=settings.tracking.metadata_cache_size)


def _build_seen_sale_repository(settings: Settings) -> InMemorySeenSaleRepository:
    """Build the dedup cache with capacity and retention from settings."""
    tr = settings.tracking
    return InMemorySeenSaleRepository(
        capacity=tr.dedup_capacity,
        retention=timedelta(seconds=tr.dedup_retention_seconds),
    )


def _build_notification_styler(settings: Settings) -> SaleNotificationStyler:
    return SaleNotificationStyler(
        currency_symbol=settings.api.currency_symbol,
        marketplace_url=settings.api.marketplace_url,
    )


def _build_notification_notifiers(
    settings: Settings,
    styler: SaleNotificationStyler,
) -> list[BaseNotificationStrategy]:
    notifiers: list[BaseNotificationStrategy] = []
    if settings.console.enabled:
        notifiers.append(ConsoleNotifier(settings=settings, styler=styler))
    if settings.telegram.enabled:
        notifiers.append(TelegramNotifier(settings=settings, styler=styler))
    return notifiers


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, HTTP/API clients, caches, repositories, polling."""

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    magic_eden_client = providers.Singleton(
        MagicEdenApiClient,
        http_client=http_client,
        settings=config,
    )

    metadata_cache = providers.Singleton(_build_metadata_cache, config)

    event_bus = providers.Callable(get_event_bus)

    notification_styler = providers.Singleton(_build_notification_styler, config)

    notification_service = providers.Singleton(
        NotificationService,
        notifiers=providers.Callable(_build_notification_notifiers, config, notification_styler),
    )

    snapshot_repository = providers.Singleton(InMemorySnapshotRepository)

    seen_sale_repository = providers.Singleton(_build_seen_sale_repository, config)

    tracked_collection_repository = providers.Singleton(InMemoryTrackedCollectionRepository)

    stats_fetcher = providers.Singleton(
        StatsFetcher,
        api_client=magic_eden_client,
        metadata_cache=metadata_cache,
    )

    inference_engine = providers.Singleton(SaleInferenceEngine)

    poll_cycle_coordinator = providers.Singleton(
        PollCycleCoordinator,
        stats_fetcher=stats_fetcher,
        inference_engine=inference_engine,
        snapshot_repository=snapshot_repository,
        seen_sale_repository=seen_sale_repository,
        tracked_collection_repository=tracked_collection_repository,
        sink=notification_service,
        settings=config,
        event_bus=event_bus,
    )

    polling_runner = providers.Singleton(
        PollingRunner,
        coordinator=poll_cycle_coordinator,
        stats_fetcher=stats_fetcher,
        tracked_collection_repository=tracked_collection_repository,
        settings=config,
    )

    fetch_failed_notifier = providers.Singleton(
        FetchFailedNotifier,
        notification_service=notification_service,
        event_bus=event_bus,
        metadata_cache=metadata_cache,
    )
