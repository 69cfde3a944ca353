from src.featuretree.client.http import FeatureTrackerClient, error_from_response
from src.featuretree.client.optimistic import FeatureTreeCache, OptimisticUpdate

__all__ = [
    "FeatureTrackerClient",
    "FeatureTreeCache",
    "OptimisticUpdate",
    "error_from_response",
]
