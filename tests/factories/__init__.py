"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import ProjectFactory, FeatureFactory
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.tracker import FeatureFactory, ProjectFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Tracker
    "FeatureFactory",
    "ProjectFactory",
]
