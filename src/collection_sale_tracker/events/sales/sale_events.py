"""Sale-tracking events (emitted by PollCycleCoordinator)."""

from __future__ import annotations

from datetime import datetime

from bubus import BaseEvent  # type: ignore[import-untyped]


class SaleAdmittedEvent(BaseEvent[None]):
    """Emitted once per inferred sale that passed the dedup gate."""

    collection_address: str
    inferred_id: str
    estimated_price: str | None = None
    """Decimal rendered as string; None when the price is unknown."""
    volume_delta: str
    sales_count_delta: int
    inferred_at: datetime
    delivered: bool
    """False when the event was admitted but withheld (cold start)."""


class CollectionFetchFailedEvent(BaseEvent[None]):
    """Emitted when stats for a collection could not be fetched after all retries.

    Handled by FetchFailedNotifier to alert the operator.
    """

    collection_address: str
    attempts: int
    error_type: str | None = None
    error_message: str | None = None


class PollCycleCompletedEvent(BaseEvent[None]):
    """Emitted at the end of every cycle that actually ran."""

    collections_count: int
    emitted_count: int
    admitted_count: int
    suppressed_count: int
    errors_count: int
    not_found_count: int
    delivery_errors_count: int
    deliveries: int
    started_at: datetime
    finished_at: datetime
