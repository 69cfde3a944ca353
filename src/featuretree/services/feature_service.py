"""Feature tree service - create, update, cascade delete, reorder, tree queries."""

from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.featuretree.core.accounting import AccountingState, resolve_accounting
from src.featuretree.core.exceptions import (
    CycleError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.featuretree.core.logging import get_logger
from src.featuretree.core.tree import FeatureNode, assemble_tree, filter_by_status, search
from src.featuretree.models import Feature
from src.featuretree.models.base import utc_now
from src.featuretree.models.enums import StatusFilter, TreeMode
from src.featuretree.repositories import FeatureRepository, ProjectRepository
from src.featuretree.schemas.feature import FeatureCreate, FeatureUpdate
from src.featuretree.services.tree_integrity import TreeIntegrityChecker

logger = get_logger(__name__)


class FeatureService:
    """Feature management - business logic only.

    Transactions are committed here; repositories never commit.
    """

    def __init__(
        self,
        feature_repo: FeatureRepository,
        project_repo: ProjectRepository,
        session: AsyncSession,
    ):
        self.feature_repo = feature_repo
        self.project_repo = project_repo
        self.session = session
        self.integrity = TreeIntegrityChecker(feature_repo)

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Feature storage failure", action=action)
            raise StorageError(f"Failed to {action}: {e}") from e

    async def _require_project(self, project_id: UUID) -> None:
        if await self.project_repo.get_by_id(project_id) is None:
            raise NotFoundError(f"Project {project_id} not found")

    async def _require_parent(self, parent_id: UUID, project_id: UUID) -> Feature:
        parent = await self.feature_repo.get_by_id(parent_id)
        if parent is None:
            raise NotFoundError(f"Parent feature {parent_id} not found")
        if parent.project_id != project_id:
            raise ValidationError("Parent feature must belong to the same project")
        return parent

    async def get_feature(self, feature_id: UUID) -> Feature:
        feature = await self.feature_repo.get_by_id(feature_id)
        if feature is None:
            raise NotFoundError(f"Feature {feature_id} not found")
        return feature

    async def list_features(self, project_id: UUID) -> list[Feature]:
        """Flat feature list of a project, sorted by (order, created_at)."""
        return await self.feature_repo.list_by_project(project_id)

    async def get_feature_tree(
        self,
        project_id: UUID,
        status: StatusFilter = StatusFilter.ALL,
        query: str | None = None,
    ) -> tuple[TreeMode, list[FeatureNode[Feature]]]:
        """Assemble the project's forest, then apply status filter and search.

        Returns:
            Tuple of (mode, nodes). Mode is ``flat`` when a search was applied.
        """
        await self._require_project(project_id)
        forest = assemble_tree(await self.feature_repo.list_by_project(project_id))
        forest = filter_by_status(forest, status)
        if query:
            return TreeMode.FLAT, search(forest, query)
        return TreeMode.TREE, forest

    async def create_feature(self, data: FeatureCreate) -> Feature:
        """Create a feature under a project, optionally under a parent.

        Raises:
            NotFoundError: If the project or the parent does not exist
            ValidationError: If the parent is in another project
            AccountingStateError: If accounting is marked done without being required
        """
        await self._require_project(data.project_id)
        if data.parent_id is not None:
            await self._require_parent(data.parent_id, data.project_id)

        accounting = resolve_accounting(
            None,
            has_accounting=data.has_accounting,
            is_accounting_done=data.is_accounting_done,
        )

        feature = Feature(
            title=data.title,
            description=data.description,
            project_id=data.project_id,
            parent_id=data.parent_id,
            images=list(data.images),
            order=data.order,
            has_accounting=accounting.has_accounting,
            is_accounting_done=accounting.is_accounting_done,
            is_completed=data.is_completed,
        )
        self.feature_repo.add(feature)
        await self._commit("create feature")
        await self.session.refresh(feature)

        logger.info(
            "Feature created",
            feature_id=str(feature.id),
            project_id=str(feature.project_id),
            parent_id=str(feature.parent_id) if feature.parent_id else None,
        )
        return feature

    async def update_feature(self, feature_id: UUID, data: FeatureUpdate) -> Feature:
        """Apply a partial update.

        Re-parenting is validated against cycles before anything is written.

        Raises:
            NotFoundError: If the feature or the new parent does not exist
            CycleError: If the new parent is the feature itself or one of its descendants
            ValidationError: If the new parent is in another project
            AccountingStateError: If the resulting accounting flags are invalid
        """
        feature = await self.get_feature(feature_id)
        changes = data.model_dump(exclude_unset=True)

        if "parent_id" in changes and changes["parent_id"] is not None:
            parent_id = changes["parent_id"]
            if await self.integrity.would_create_cycle(feature.id, parent_id):
                raise CycleError(
                    "Cannot set a parent that would create a circular reference"
                )
            await self._require_parent(parent_id, feature.project_id)

        accounting = resolve_accounting(
            AccountingState(feature.has_accounting, feature.is_accounting_done),
            has_accounting=changes.get("has_accounting"),
            is_accounting_done=changes.get("is_accounting_done"),
        )

        if changes.get("title") is not None:
            feature.title = changes["title"]
        if "description" in changes:
            feature.description = changes["description"]
        if "parent_id" in changes:
            feature.parent_id = changes["parent_id"]
        if changes.get("images") is not None:
            feature.images = list(changes["images"])
        if changes.get("order") is not None:
            feature.order = changes["order"]
        if changes.get("is_completed") is not None:
            feature.is_completed = changes["is_completed"]
        feature.has_accounting = accounting.has_accounting
        feature.is_accounting_done = accounting.is_accounting_done

        # SQLModel has no onupdate hook
        feature.updated_at = utc_now()

        await self._commit("update feature")
        await self.session.refresh(feature)

        logger.info("Feature updated", feature_id=str(feature.id), fields=sorted(changes))
        return feature

    async def _collect_subtree(self, root_id: UUID) -> list[UUID]:
        """Ids of ``root_id`` and all descendants, each parent before its children."""
        collected: list[UUID] = []
        seen = {root_id}
        stack = [root_id]
        while stack:
            current = stack.pop()
            collected.append(current)
            for child_id in await self.feature_repo.list_child_ids(current):
                if child_id not in seen:
                    seen.add(child_id)
                    stack.append(child_id)
        return collected

    async def delete_feature(self, feature_id: UUID) -> int:
        """Delete a feature and its entire subtree, children before parents.

        Uses an explicit worklist, so depth is bounded by memory rather than
        the call stack. Each row is removed by its own statement.

        Returns:
            Number of features deleted (the feature plus its descendants).
        """
        await self.get_feature(feature_id)

        subtree = await self._collect_subtree(feature_id)
        deleted = 0
        try:
            for node_id in reversed(subtree):
                deleted += await self.feature_repo.delete_by_id(node_id)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Feature storage failure", action="delete feature subtree")
            raise StorageError(f"Failed to delete feature subtree: {e}") from e
        await self._commit("delete feature subtree")

        logger.info(
            "Feature subtree deleted",
            feature_id=str(feature_id),
            deleted_count=deleted,
        )
        return deleted

    async def reorder_features(self, feature_ids: list[UUID]) -> int:
        """Set ``order = index`` for each id. Ids not listed are untouched.

        Every id is validated before any write; one unknown id rejects the
        whole batch.

        Returns:
            Number of features reordered.
        """
        if not feature_ids:
            raise ValidationError("Feature id list is required")
        if len(set(feature_ids)) != len(feature_ids):
            raise ValidationError("Feature ids must not repeat")

        existing = await self.feature_repo.list_existing_ids(feature_ids)
        unknown = [str(fid) for fid in feature_ids if fid not in existing]
        if unknown:
            raise ValidationError(f"Unknown feature ids: {', '.join(unknown)}")

        for index, fid in enumerate(feature_ids):
            await self.feature_repo.set_order(fid, index)
        await self._commit("reorder features")

        logger.info("Features reordered", count=len(feature_ids))
        return len(feature_ids)
