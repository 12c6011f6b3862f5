# -*- coding: utf-8 -*-
"""Aggregate collection stats observed at one point in time."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    """Last-known aggregate stats for a collection.

    Replaced wholesale on every successful fetch; never by an older one.
    """

    volume: Decimal
    """Rolling 1-day traded volume."""
    floor_price: Decimal | None
    """Rolling 1-day floor sale price, None when the marketplace has none."""
    sales_count: int
    observed_at: datetime
    """Aware UTC timestamp of the fetch (microsecond resolution)."""

    def is_newer_than(self, other: StatsSnapshot | None) -> bool:
        """True when this snapshot may replace ``other``."""
        return other is None or self.observed_at > other.observed_at
