# -*- coding: utf-8 -*-
"""Domain models."""

from collection_sale_tracker.models.collection import (
    CollectionMetadata,
    TrackedCollection,
    placeholder_name,
)
from collection_sale_tracker.models.cycle_report import CycleReport, EntityState
from collection_sale_tracker.models.sale_event import SourceMetrics, SyntheticSaleEvent
from collection_sale_tracker.models.seen_sale import SeenSale
from collection_sale_tracker.models.stats_snapshot import StatsSnapshot

__all__ = [
    "CollectionMetadata",
    "CycleReport",
    "EntityState",
    "SeenSale",
    "SourceMetrics",
    "StatsSnapshot",
    "SyntheticSaleEvent",
    "TrackedCollection",
    "placeholder_name",
]
