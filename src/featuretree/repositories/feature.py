"""Repository for Feature entity."""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import col, select

from src.featuretree.models import Feature
from src.featuretree.models.base import utc_now
from src.featuretree.repositories.base import BaseRepository


class FeatureRepository(BaseRepository[Feature]):
    """Repository for Feature entity.

    Features are stored flat; tree-shaped reads are assembled in memory
    by the caller.
    """

    model = Feature

    async def list_by_project(self, project_id: UUID) -> list[Feature]:
        """All features of a project ordered by (order, created_at)."""
        result = await self.session.execute(
            select(Feature)
            .where(Feature.project_id == project_id)
            .order_by(col(Feature.order).asc(), col(Feature.created_at).asc())
        )
        return list(result.scalars().all())

    async def list_child_ids(self, parent_id: UUID) -> list[UUID]:
        """Ids of the direct children of a feature."""
        result = await self.session.execute(
            select(Feature.id).where(Feature.parent_id == parent_id)
        )
        return list(result.scalars().all())

    async def get_parent_id(self, feature_id: UUID) -> UUID | None:
        """Parent id of a feature, or None for roots and unknown ids."""
        result = await self.session.execute(
            select(Feature.parent_id).where(Feature.id == feature_id)
        )
        return result.scalar_one_or_none()

    async def list_existing_ids(self, ids: Sequence[UUID]) -> set[UUID]:
        """Subset of ``ids`` that resolve to stored features."""
        if not ids:
            return set()
        result = await self.session.execute(select(Feature.id).where(col(Feature.id).in_(ids)))
        return set(result.scalars().all())

    async def set_order(self, feature_id: UUID, order: int) -> None:
        await self.session.execute(
            update(Feature)
            .where(col(Feature.id) == feature_id)
            .values(order=order, updated_at=utc_now())
        )

    async def delete_by_id(self, feature_id: UUID) -> int:
        """Delete a single feature row. Returns number of rows removed."""
        result = await self.session.execute(delete(Feature).where(col(Feature.id) == feature_id))
        return result.rowcount or 0

    async def delete_by_project(self, project_id: UUID) -> int:
        """Bulk-delete every feature of a project. Returns number of rows removed."""
        result = await self.session.execute(
            delete(Feature).where(col(Feature.project_id) == project_id)
        )
        return result.rowcount or 0
