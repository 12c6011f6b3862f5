"""HTTP and API clients."""

from collection_sale_tracker.clients.collection_metadata_cache import CollectionMetadataCache
from collection_sale_tracker.clients.http import AsyncHttpClient
from collection_sale_tracker.clients.magic_eden import CollectionSchema, MagicEdenApiClient

__all__ = [
    "AsyncHttpClient",
    "CollectionMetadataCache",
    "CollectionSchema",
    "MagicEdenApiClient",
]
