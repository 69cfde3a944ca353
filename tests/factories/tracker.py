"""Project and feature factories for test data generation."""

from polyfactory import Use

from src.featuretree.models import Feature, Project
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class ProjectFactory(BaseFactory):
    """Factory for generating Project test data."""

    __model__ = Project

    id = Use(generate_uuid)
    name = Use(lambda: f"Test Project {generate_uuid().hex[-8:]}")
    description = None
    created_at = Use(utc_now)
    updated_at = Use(utc_now)


class FeatureFactory(BaseFactory):
    """Factory for generating Feature test data.

    ``project_id`` must be passed explicitly; ``parent_id`` defaults to a root.
    """

    __model__ = Feature

    id = Use(generate_uuid)
    title = Use(lambda: f"Feature {generate_uuid().hex[-8:]}")
    description = None
    parent_id = None
    images = Use(list)
    order = 0
    has_accounting = False
    is_accounting_done = False
    is_completed = False
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def child_of(cls, parent: Feature, **kwargs):
        """Create a feature under ``parent`` in the same project."""
        return cls.build(project_id=parent.project_id, parent_id=parent.id, **kwargs)

    @classmethod
    def accounting_done(cls, **kwargs):
        """Create a feature whose accounting step is finished."""
        return cls.build(has_accounting=True, is_accounting_done=True, **kwargs)
