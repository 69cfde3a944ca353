"""Client-side feature cache with optimistic updates.

Local state changes immediately; the server call follows. If the call fails
the cached feature is restored to its exact pre-update value and the error
is re-raised to the caller.
"""

from dataclasses import dataclass, field
from typing import Any, Literal
from uuid import UUID

from src.featuretree.client.http import FeatureTrackerClient
from src.featuretree.core.exceptions import NotFoundError
from src.featuretree.core.logging import get_logger
from src.featuretree.core.tree import FeatureNode, assemble_tree, filter_by_status, search
from src.featuretree.models.enums import StatusFilter
from src.featuretree.schemas.feature import FeatureRead, FeatureUpdate

logger = get_logger(__name__)

StatusFlag = Literal["is_completed", "has_accounting", "is_accounting_done"]


@dataclass
class FeatureTreeCache:
    """Local copy of one project's features, kept in server order."""

    project_id: UUID
    features: dict[UUID, FeatureRead] = field(default_factory=dict)

    @classmethod
    async def load(cls, client: FeatureTrackerClient, project_id: UUID) -> "FeatureTreeCache":
        features = await client.list_features(project_id)
        return cls(project_id, {f.id: f for f in features})

    def get(self, feature_id: UUID) -> FeatureRead:
        try:
            return self.features[feature_id]
        except KeyError:
            raise NotFoundError(f"Feature {feature_id} not found") from None

    def replace(self, feature: FeatureRead) -> None:
        self.features[feature.id] = feature

    def tree(
        self,
        status: StatusFilter = StatusFilter.ALL,
        query: str | None = None,
    ) -> list[FeatureNode[FeatureRead]]:
        ordered = sorted(self.features.values(), key=lambda f: (f.order, f.created_at))
        return search(filter_by_status(assemble_tree(ordered), status), query)

    async def set_flag(
        self,
        client: FeatureTrackerClient,
        feature_id: UUID,
        flag: StatusFlag,
        value: bool,
    ) -> FeatureRead:
        """Toggle one status checkbox optimistically."""
        update = OptimisticUpdate(feature_id, FeatureUpdate.model_validate({flag: value}))
        return await update.execute(self, client)


@dataclass(frozen=True)
class OptimisticUpdate:
    """A single feature update applied locally before the server confirms it."""

    feature_id: UUID
    changes: FeatureUpdate

    def effective_changes(self) -> FeatureUpdate:
        """Changes as the server will apply them.

        Turning accounting off also clears accounting-done.
        """
        if self.changes.has_accounting is False:
            return self.changes.model_copy(update={"is_accounting_done": False})
        return self.changes

    def apply(self, feature: FeatureRead) -> FeatureRead:
        local: dict[str, Any] = self.effective_changes().model_dump(exclude_unset=True)
        return feature.model_copy(update=local)

    async def execute(self, cache: FeatureTreeCache, client: FeatureTrackerClient) -> FeatureRead:
        previous = cache.get(self.feature_id)
        cache.replace(self.apply(previous))
        try:
            updated = await client.update_feature(self.feature_id, self.effective_changes())
        except Exception:
            cache.replace(previous)
            logger.warning("Optimistic update rolled back", feature_id=str(self.feature_id))
            raise
        cache.replace(updated)
        return updated
