# -*- coding: utf-8 -*-
"""Application services."""

from collection_sale_tracker.services.inference import SaleInferenceEngine, estimate_price
from collection_sale_tracker.services.notifications import FetchFailedNotifier
from collection_sale_tracker.services.polling import PollCycleCoordinator, PollingRunner
from collection_sale_tracker.services.stats import StatsFetcher

__all__ = [
    "FetchFailedNotifier",
    "PollCycleCoordinator",
    "PollingRunner",
    "SaleInferenceEngine",
    "StatsFetcher",
    "estimate_price",
]
