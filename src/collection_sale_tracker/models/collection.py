# -*- coding: utf-8 -*-
"""Tracked collections and their display metadata."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from decimal import Decimal

from collection_sale_tracker.utils.validation import mask_address, normalize_collection_address

PLACEHOLDER_NAME_PREFIX = "Collection "


def placeholder_name(address: str) -> str:
    """Name used until real metadata is available (e.g. 'Collection 0x5F8F...1FF0')."""
    return f"{PLACEHOLDER_NAME_PREFIX}{mask_address(address)}"


@dataclass(frozen=True, slots=True)
class CollectionMetadata:
    """Display metadata for a collection (cached across cycles)."""

    address: str
    name: str
    image: str | None = None
    description: str | None = None
    symbol: str | None = None
    floor_price: Decimal | None = None
    fetched_at: datetime | None = None

    @classmethod
    def placeholder(cls, address: str) -> CollectionMetadata:
        return cls(address=address, name=placeholder_name(address))

    @property
    def is_placeholder(self) -> bool:
        """True when the name is missing or still derived from the address."""
        return not self.name or self.name == placeholder_name(self.address)

    def merged_with(self, newer: CollectionMetadata) -> CollectionMetadata:
        """Fields from ``newer`` win when present; missing ones keep the old value."""
        return replace(
            self,
            name=newer.name if not newer.is_placeholder else self.name,
            image=newer.image or self.image,
            description=newer.description or self.description,
            symbol=newer.symbol or self.symbol,
            floor_price=newer.floor_price if newer.floor_price is not None else self.floor_price,
            fetched_at=newer.fetched_at or self.fetched_at,
        )


@dataclass(frozen=True, slots=True)
class TrackedCollection:
    """A collection a subscriber asked to be notified about."""

    address: str
    subscriber_id: str
    source: str = "Direct Collection ID"
    """How the address was given: Magic Eden, Contract Address, Direct Collection ID."""
    url: str | None = None
    added_at: datetime | None = None

    @classmethod
    def create(
        cls,
        address: str,
        subscriber_id: str,
        *,
        source: str = "Direct Collection ID",
        url: str | None = None,
        added_at: datetime | None = None,
    ) -> TrackedCollection:
        address = normalize_collection_address(address)
        subscriber_id = subscriber_id.strip()
        if not address or not subscriber_id:
            raise ValueError("address and subscriber_id must be non-empty")
        return cls(
            address=address,
            subscriber_id=subscriber_id,
            source=source,
            url=url,
            added_at=added_at or datetime.now(UTC),
        )
