# -*- coding: utf-8 -*-
"""PollCycleCoordinator: one fetch -> infer -> dedup -> deliver pass over all tracked collections."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.contextvars import bound_contextvars

from collection_sale_tracker.events.sales import (
    CollectionFetchFailedEvent,
    PollCycleCompletedEvent,
    SaleAdmittedEvent,
)
from collection_sale_tracker.exceptions import (
    CollectionNotFoundError,
    DeliverySinkError,
    FetchError,
)
from collection_sale_tracker.models.cycle_report import CycleReport, EntityState
from collection_sale_tracker.models.stats_snapshot import StatsSnapshot
from collection_sale_tracker.utils.validation import mask_address, normalize_collection_address

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from collection_sale_tracker.config import Settings
    from collection_sale_tracker.models.sale_event import SyntheticSaleEvent
    from collection_sale_tracker.notifications.types import NotificationSink
    from collection_sale_tracker.persistence.repositories.interfaces import (
        ISeenSaleRepository,
        ISnapshotRepository,
        ITrackedCollectionRepository,
    )
    from collection_sale_tracker.services.inference import SaleInferenceEngine
    from collection_sale_tracker.services.stats import StatsFetcher

_FetchOutcome = StatsSnapshot | FetchError | CollectionNotFoundError


def _utc_now() -> datetime:
    return datetime.now(UTC)


class PollCycleCoordinator:
    """Runs poll cycles. At most one cycle is active at a time.

    Fetches run concurrently (bounded by a semaphore); comparison, dedup and
    delivery then run serially per collection in input order, so events for a
    collection are always handled chronologically.
    """

    def __init__(
        self,
        stats_fetcher: StatsFetcher,
        inference_engine: SaleInferenceEngine,
        snapshot_repository: ISnapshotRepository,
        seen_sale_repository: ISeenSaleRepository,
        tracked_collection_repository: ITrackedCollectionRepository,
        sink: NotificationSink,
        settings: Settings,
        *,
        event_bus: Any = None,
        clock: Callable[[], datetime] = _utc_now,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            stats_fetcher: Fetches current stats (injected).
            inference_engine: Pure snapshot comparison (injected).
            snapshot_repository: Last snapshot per collection (injected).
            seen_sale_repository: Bounded dedup cache (injected).
            tracked_collection_repository: Subscriber registry, read only (injected).
            sink: Receives admitted events once per subscriber (injected).
            settings: Application settings (uses settings.tracking).
            event_bus: Optional bubus EventBus for sale and cycle events.
            clock: Returns cycle timestamps (injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._stats = stats_fetcher
        self._inference = inference_engine
        self._snapshots = snapshot_repository
        self._seen = seen_sale_repository
        self._registry = tracked_collection_repository
        self._sink = sink
        self._settings = settings
        self._event_bus: Optional["EventBus"] = event_bus
        self._clock = clock
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(settings.tracking.max_concurrent_fetches)
        # Collections whose first post-start poll was already handled. With an
        # unseeded snapshot store that poll is a baseline, which absorbs sales
        # made while the process was down, so suppress mode only withholds
        # events for collections whose snapshot was seeded before start.
        self._warmed: set[str] = set()
        self._cycles_run = 0

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    @property
    def cycles_run(self) -> int:
        return self._cycles_run

    async def run_cycle(self, collections: Optional[Iterable[str]] = None) -> CycleReport:
        """Run one poll cycle.

        Args:
            collections: Addresses to poll. None resolves the union of every
                subscriber's tracked set from the registry.

        Returns:
            CycleReport. If another cycle is running, the request is dropped
            and the report has skipped_overlap=True.
        """
        started_at = self._clock()
        if self._lock.locked():
            self._logger.warning("poll_cycle_skipped_overlap")
            return CycleReport(started_at=started_at, finished_at=started_at, skipped_overlap=True)

        async with self._lock:
            self._cycles_run += 1
            with bound_contextvars(poll_cycle=self._cycles_run):
                return await self._run_locked(collections, started_at)

    async def _run_locked(
        self, collections: Optional[Iterable[str]], started_at: datetime
    ) -> CycleReport:
        report = CycleReport(started_at=started_at)
        addresses = await self._resolve_collections(collections)
        if not addresses:
            report.finished_at = self._clock()
            self._logger.debug("poll_cycle_no_collections")
            return report

        report.purged = await self._seen.purge_expired()
        self._logger.debug(
            "poll_cycle_started",
            poll_collections_count=len(addresses),
            poll_purged=report.purged,
        )

        for address in addresses:
            report.outcomes[address] = EntityState.FETCHING
        fetched = await asyncio.gather(*(self._fetch(address) for address in addresses))

        for address, outcome in zip(addresses, fetched):
            with bound_contextvars(poll_collection=mask_address(address)):
                await self._process(report, address, outcome)

        report.finished_at = self._clock()
        self._logger.info(
            "poll_cycle_completed",
            poll_collections_count=report.collections_count,
            poll_emitted=len(report.emitted),
            poll_admitted=len(report.admitted),
            poll_suppressed=len(report.suppressed),
            poll_errors=len(report.errors),
            poll_not_found=len(report.not_found),
            poll_delivery_errors=len(report.delivery_errors),
            poll_deliveries=report.deliveries,
        )
        self._dispatch(
            PollCycleCompletedEvent(
                collections_count=report.collections_count,
                emitted_count=len(report.emitted),
                admitted_count=len(report.admitted),
                suppressed_count=len(report.suppressed),
                errors_count=len(report.errors),
                not_found_count=len(report.not_found),
                delivery_errors_count=len(report.delivery_errors),
                deliveries=report.deliveries,
                started_at=report.started_at,
                finished_at=report.finished_at,
            )
        )
        return report

    async def _resolve_collections(self, collections: Optional[Iterable[str]]) -> list[str]:
        if collections is None:
            raw: Iterable[str] = sorted(await self._registry.all_tracked())
        else:
            raw = collections
        addresses: list[str] = []
        for address in raw:
            address = normalize_collection_address(address)
            if address and address not in addresses:
                addresses.append(address)
        return addresses

    async def _fetch(self, address: str) -> _FetchOutcome:
        async with self._semaphore:
            try:
                return await self._stats.fetch(address)
            except (FetchError, CollectionNotFoundError) as e:
                return e
            except Exception as e:
                self._logger.exception(
                    "poll_fetch_unexpected_error",
                    poll_collection=mask_address(address),
                )
                return FetchError(address, cause=e, attempts=1)

    async def _process(self, report: CycleReport, address: str, outcome: _FetchOutcome) -> None:
        if isinstance(outcome, CollectionNotFoundError):
            report.outcomes[address] = EntityState.SKIPPED
            report.not_found.append(address)
            return
        if isinstance(outcome, FetchError):
            report.outcomes[address] = EntityState.FAILED
            report.errors.append((address, outcome))
            self._dispatch(
                CollectionFetchFailedEvent(
                    collection_address=address,
                    attempts=outcome.attempts,
                    error_type=type(outcome.cause).__name__ if outcome.cause else None,
                    error_message=str(outcome.cause) if outcome.cause else None,
                )
            )
            return

        report.outcomes[address] = EntityState.INFERRING
        previous = await self._snapshots.get(address)
        events = self._inference.infer(
            address,
            previous,
            outcome,
            metadata=self._stats.metadata_cache.get(address),
        )
        if outcome.is_newer_than(previous):
            await self._snapshots.put(address, outcome)

        if not events:
            report.outcomes[address] = (
                EntityState.BASELINE if previous is None else EntityState.UNCHANGED
            )
            self._warmed.add(address)
            return

        for event in events:
            report.outcomes[address] = await self._admit(report, event)

    async def _admit(self, report: CycleReport, event: SyntheticSaleEvent) -> EntityState:
        address = event.collection_address
        report.emitted.append(event)
        if await self._seen.has_seen(address, event.inferred_id):
            report.suppressed.append(event)
            self._logger.debug("sale_suppressed_duplicate", sale_id=event.inferred_id)
            return EntityState.SUPPRESSED

        # Admission is committed before delivery: a sink failure is reported
        # but the sale is never re-delivered (at-most-once per sale id).
        await self._seen.mark_seen(address, event.inferred_id)

        first_after_start = address not in self._warmed
        self._warmed.add(address)
        if first_after_start and self._settings.tracking.cold_start_mode == "suppress":
            report.suppressed.append(event)
            self._logger.info("sale_withheld_cold_start", sale_id=event.inferred_id)
            self._dispatch_admitted(event, delivered=False)
            return EntityState.SUPPRESSED

        report.admitted.append(event)
        self._logger.info(
            "sale_admitted",
            sale_id=event.inferred_id,
            sale_estimated_price=(
                str(event.estimated_price) if event.estimated_price is not None else None
            ),
            sale_sales_count_delta=event.source_metrics.sales_count_delta,
        )
        for subscriber_id in await self._registry.subscribers_for(address):
            try:
                await self._sink.deliver(event, subscriber_id)
                report.deliveries += 1
                continue
            except DeliverySinkError as e:
                error = e
            except Exception as e:
                error = DeliverySinkError(
                    str(e), subscriber_id=subscriber_id, event=event, cause=e
                )
            report.delivery_errors.append(error)
            self._logger.warning(
                "sale_delivery_failed",
                sale_id=event.inferred_id,
                subscriber_id=subscriber_id,
                error_type=type(error.cause or error).__name__,
                error_message=str(error),
            )
        self._dispatch_admitted(event, delivered=True)
        return EntityState.ADMITTED

    def _dispatch_admitted(self, event: SyntheticSaleEvent, *, delivered: bool) -> None:
        self._dispatch(
            SaleAdmittedEvent(
                collection_address=event.collection_address,
                inferred_id=event.inferred_id,
                estimated_price=(
                    str(event.estimated_price) if event.estimated_price is not None else None
                ),
                volume_delta=str(event.source_metrics.volume_delta),
                sales_count_delta=event.source_metrics.sales_count_delta,
                inferred_at=event.inferred_at,
                delivered=delivered,
            )
        )

    def _dispatch(self, event: Any) -> None:
        if self._event_bus is not None:
            self._event_bus.dispatch(event)
