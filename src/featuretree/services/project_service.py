"""Project service."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.featuretree.core.exceptions import DuplicateNameError, NotFoundError, StorageError
from src.featuretree.core.logging import get_logger
from src.featuretree.models import Project
from src.featuretree.models.base import utc_now
from src.featuretree.repositories import FeatureRepository, ProjectRepository
from src.featuretree.schemas.project import ProjectCreate, ProjectUpdate

logger = get_logger(__name__)


def _duplicate(name: str | None) -> DuplicateNameError:
    return DuplicateNameError(f"Project with name '{name}' already exists")


class ProjectService:
    """Project management - business logic only."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        feature_repo: FeatureRepository,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.feature_repo = feature_repo
        self.session = session

    async def _commit(self, action: str, name: str | None = None) -> None:
        """Commit, mapping failures to domain errors.

        ``name`` is passed only when the commit writes a project name; an
        ``IntegrityError`` is then the unique-name race between the pre-check
        and the write. Any other integrity failure is a storage error.
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            if isinstance(e, IntegrityError) and name is not None:
                raise _duplicate(name) from e
            logger.exception("Project storage failure", action=action)
            raise StorageError(f"Failed to {action}: {e}") from e

    async def list_projects(self) -> list[Project]:
        return await self.project_repo.list_all()

    async def get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        return project

    async def create_project(self, data: ProjectCreate) -> Project:
        """Create a project.

        Raises:
            DuplicateNameError: If a project with the same name already exists
        """
        if await self.project_repo.get_by_name(data.name) is not None:
            raise _duplicate(data.name)

        project = Project(name=data.name, description=data.description)
        self.project_repo.add(project)
        await self._commit("create project", data.name)
        await self.session.refresh(project)

        logger.info("Project created", project_id=str(project.id))
        return project

    async def update_project(self, project_id: UUID, data: ProjectUpdate) -> Project:
        """Update name and/or description.

        Raises:
            NotFoundError: If the project does not exist
            DuplicateNameError: If another project already uses the new name
        """
        project = await self.get_project(project_id)
        changes = data.model_dump(exclude_unset=True)

        name = changes.get("name")
        renamed_to = None
        if name is not None and name != project.name:
            if await self.project_repo.get_by_name(name, exclude_id=project.id) is not None:
                raise _duplicate(name)
            project.name = renamed_to = name
        if "description" in changes:
            project.description = changes["description"]

        project.updated_at = utc_now()
        await self._commit("update project", renamed_to)
        await self.session.refresh(project)

        logger.info("Project updated", project_id=str(project.id), fields=sorted(changes))
        return project

    async def delete_project(self, project_id: UUID) -> int:
        """Delete a project and, in one bulk step, every feature it owns.

        Returns:
            Number of features deleted with the project.
        """
        project = await self.get_project(project_id)

        try:
            deleted_features = await self.feature_repo.delete_by_project(project.id)
            await self.project_repo.delete(project)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Project storage failure", action="delete project")
            raise StorageError(f"Failed to delete project: {e}") from e
        await self._commit("delete project")

        logger.info(
            "Project deleted",
            project_id=str(project_id),
            deleted_features=deleted_features,
        )
        return deleted_features
