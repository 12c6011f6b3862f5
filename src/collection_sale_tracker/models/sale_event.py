# -*- coding: utf-8 -*-
"""Synthetic sale events inferred from stat deltas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True, slots=True)
class SourceMetrics:
    """Deltas between the previous and the current snapshot."""

    volume_delta: Decimal
    sales_count_delta: int


@dataclass(frozen=True, slots=True)
class SyntheticSaleEvent:
    """A sale that was inferred, not observed.

    One event may stand for several sales within the same poll interval.
    """

    collection_address: str
    inferred_id: str
    """Deterministic id from (collection_address, observed_at); see utils.dedupe.sale_key."""
    estimated_price: Decimal | None
    """Volume delta if positive, else floor price; None means unknown."""
    inferred_at: datetime
    source_metrics: SourceMetrics
    collection_name: str | None = None
    collection_image: str | None = None

    @property
    def price_known(self) -> bool:
        return self.estimated_price is not None

    def to_payload(self) -> dict[str, Any]:
        """Serialize for notification payloads and events (prices as strings)."""
        return {
            "collection_address": self.collection_address,
            "collection_name": self.collection_name,
            "collection_image": self.collection_image,
            "inferred_id": self.inferred_id,
            "estimated_price": (
                str(self.estimated_price) if self.estimated_price is not None else None
            ),
            "inferred_at": self.inferred_at.isoformat(),
            "volume_delta": str(self.source_metrics.volume_delta),
            "sales_count_delta": self.source_metrics.sales_count_delta,
        }
