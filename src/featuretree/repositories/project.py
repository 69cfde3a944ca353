"""Repository for Project entity."""

from uuid import UUID

from sqlmodel import select

from src.featuretree.models import Project
from src.featuretree.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity."""

    model = Project

    async def list_all(self) -> list[Project]:
        """List all projects, newest first."""
        result = await self.session.execute(select(Project).order_by(Project.created_at.desc()))
        return list(result.scalars().all())

    async def get_by_name(self, name: str, exclude_id: UUID | None = None) -> Project | None:
        """Get project by exact name, optionally ignoring one project (for renames)."""
        query = select(Project).where(Project.name == name)
        if exclude_id is not None:
            query = query.where(Project.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
