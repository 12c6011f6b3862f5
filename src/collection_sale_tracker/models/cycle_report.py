# -*- coding: utf-8 -*-
"""Outcome of one poll cycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from collection_sale_tracker.models.sale_event import SyntheticSaleEvent

if TYPE_CHECKING:
    from collection_sale_tracker.exceptions import DeliverySinkError, FetchError


class EntityState(str, Enum):
    """Per-collection state within one cycle. Only the terminal states are reported."""

    FETCHING = "FETCHING"
    INFERRING = "INFERRING"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"
    BASELINE = "BASELINE"
    UNCHANGED = "UNCHANGED"
    SUPPRESSED = "SUPPRESSED"
    ADMITTED = "ADMITTED"

    @property
    def is_terminal(self) -> bool:
        return self not in (EntityState.FETCHING, EntityState.INFERRING)


@dataclass
class CycleReport:
    """Aggregated result of PollCycleCoordinator.run_cycle()."""

    started_at: datetime
    finished_at: datetime | None = None
    emitted: list[SyntheticSaleEvent] = field(default_factory=list)
    """Every inferred event, duplicates included."""
    admitted: list[SyntheticSaleEvent] = field(default_factory=list)
    """Events that passed the dedup gate this cycle."""
    suppressed: list[SyntheticSaleEvent] = field(default_factory=list)
    """Events rejected as duplicates or withheld on cold start."""
    errors: list[tuple[str, FetchError]] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    delivery_errors: list[DeliverySinkError] = field(default_factory=list)
    outcomes: dict[str, EntityState] = field(default_factory=dict)
    deliveries: int = 0
    purged: int = 0
    skipped_overlap: bool = False
    """True when the cycle was dropped because another one was still running."""

    @property
    def collections_count(self) -> int:
        return len(self.outcomes)

    @property
    def ok(self) -> bool:
        return not self.errors and not self.delivery_errors and not self.skipped_overlap
