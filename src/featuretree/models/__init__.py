"""SQLModel tables."""

from src.featuretree.models.feature import Feature
from src.featuretree.models.project import Project

__all__ = ["Feature", "Project"]
