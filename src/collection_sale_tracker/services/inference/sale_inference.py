# -*- coding: utf-8 -*-
"""SaleInferenceEngine: pure logic turning two stats snapshots into synthetic sale events.

No I/O and no store access. The marketplace exposes no per-sale feed, so any
increase of volume or sales count between two polls is read as at least one
sale. Several sales within one interval collapse into a single event.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from collection_sale_tracker.models.sale_event import SourceMetrics, SyntheticSaleEvent
from collection_sale_tracker.utils.dedupe import sale_key

if TYPE_CHECKING:
    from collection_sale_tracker.models.collection import CollectionMetadata
    from collection_sale_tracker.models.stats_snapshot import StatsSnapshot


def estimate_price(volume_delta: Decimal, floor_price: Optional[Decimal]) -> Optional[Decimal]:
    """Volume delta if positive, else a positive floor price, else None (unknown)."""
    if volume_delta > 0:
        return volume_delta
    if floor_price is not None and floor_price > 0:
        return floor_price
    return None


class SaleInferenceEngine:
    """Pure policy: compares snapshots and synthesizes at most one event per call."""

    def infer(
        self,
        collection_address: str,
        previous: Optional["StatsSnapshot"],
        current: "StatsSnapshot",
        *,
        metadata: Optional["CollectionMetadata"] = None,
    ) -> list[SyntheticSaleEvent]:
        """Return [] or [event] for the transition previous -> current.

        Checks (in order):
        1. No previous snapshot: baseline only, no event.
        2. volume_delta > 0 or sales_count_delta > 0: one event.
        3. Otherwise: no event (decreases are rolling-window decay, not sales).

        The event id depends only on (collection_address, current.observed_at),
        so replaying the same pair yields the same id.

        Args:
            collection_address: Collection the snapshots belong to.
            previous: Last stored snapshot, or None.
            current: Freshly fetched snapshot.
            metadata: Optional cached metadata for name/image on the event.

        Returns:
            List with zero or one SyntheticSaleEvent.
        """
        if previous is None:
            return []

        volume_delta = current.volume - previous.volume
        sales_count_delta = current.sales_count - previous.sales_count
        if volume_delta <= 0 and sales_count_delta <= 0:
            return []

        return [
            SyntheticSaleEvent(
                collection_address=collection_address.strip(),
                inferred_id=sale_key(collection_address, current.observed_at),
                estimated_price=estimate_price(volume_delta, current.floor_price),
                inferred_at=current.observed_at,
                source_metrics=SourceMetrics(
                    volume_delta=volume_delta,
                    sales_count_delta=sales_count_delta,
                ),
                collection_name=metadata.name if metadata is not None else None,
                collection_image=metadata.image if metadata is not None else None,
            )
        ]
