"""Collection sale tracker: infers NFT collection sales from marketplace stat deltas."""

from collection_sale_tracker.clients import (
    AsyncHttpClient,
    CollectionMetadataCache,
    MagicEdenApiClient,
)
from collection_sale_tracker.config import get_settings
from collection_sale_tracker.DI import Container
from collection_sale_tracker.services import (
    PollCycleCoordinator,
    PollingRunner,
    SaleInferenceEngine,
    StatsFetcher,
)

__version__ = "0.1.0"
__all__ = [
    "AsyncHttpClient",
    "CollectionMetadataCache",
    "MagicEdenApiClient",
    "Container",
    "PollCycleCoordinator",
    "PollingRunner",
    "SaleInferenceEngine",
    "StatsFetcher",
    "get_settings",
]
