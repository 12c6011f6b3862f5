# -*- coding: utf-8 -*-
"""Event bus and event types."""

from collection_sale_tracker.events.bus import get_event_bus, set_event_bus
from collection_sale_tracker.events.sales import (
    CollectionFetchFailedEvent,
    PollCycleCompletedEvent,
    SaleAdmittedEvent,
)

__all__ = [
    "CollectionFetchFailedEvent",
    "PollCycleCompletedEvent",
    "SaleAdmittedEvent",
    "get_event_bus",
    "set_event_bus",
]
