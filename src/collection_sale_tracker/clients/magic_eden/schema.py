"""Magic Eden RTP API response types (collections/v7)."""

from __future__ import annotations

from typing import TypedDict


class CollectionSchema(TypedDict, total=False):
    """GET /v3/rtp/{chain}/collections/v7 item. Keys match API response (camelCase)."""

    id: str
    name: str
    symbol: str
    image: str
    description: str
    slug: str
    tokenCount: str
    ownerCount: int
    salesCount: int
    onSaleCount: str
    volume: dict[str, float]
    floorSale: dict[str, float]
    updatedAt: str
    createdAt: str


class CollectionsResponseSchema(TypedDict, total=False):
    """GET /v3/rtp/{chain}/collections/v7 response body."""

    collections: list[CollectionSchema]
    continuation: str | None
