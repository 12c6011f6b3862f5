# -*- coding: utf-8 -*-
"""Magic Eden RTP API client and response schema."""

from collection_sale_tracker.clients.magic_eden.magic_eden_api import MagicEdenApiClient
from collection_sale_tracker.clients.magic_eden.schema import (
    CollectionSchema,
    CollectionsResponseSchema,
)

__all__ = ["CollectionSchema", "CollectionsResponseSchema", "MagicEdenApiClient"]
