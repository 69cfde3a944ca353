"""Repository layer - data access abstraction."""

from src.featuretree.repositories.base import BaseRepository
from src.featuretree.repositories.feature import FeatureRepository
from src.featuretree.repositories.project import ProjectRepository

__all__ = [
    "BaseRepository",
    "FeatureRepository",
    "ProjectRepository",
]
