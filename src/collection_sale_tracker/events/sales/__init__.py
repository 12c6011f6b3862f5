# -*- coding: utf-8 -*-
"""Sale-tracking events."""

from collection_sale_tracker.events.sales.sale_events import (
    CollectionFetchFailedEvent,
    PollCycleCompletedEvent,
    SaleAdmittedEvent,
)

__all__ = [
    "CollectionFetchFailedEvent",
    "PollCycleCompletedEvent",
    "SaleAdmittedEvent",
]
