"""Sale inference from stat deltas."""

from collection_sale_tracker.services.inference.sale_inference import (
    SaleInferenceEngine,
    estimate_price,
)

__all__ = ["SaleInferenceEngine", "estimate_price"]
