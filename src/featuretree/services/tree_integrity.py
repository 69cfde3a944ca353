"""Cycle detection for feature re-parenting."""

from uuid import UUID

from src.featuretree.repositories import FeatureRepository


class TreeIntegrityChecker:
    """Guards the parent chain against cycles. Read-only."""

    def __init__(self, feature_repo: FeatureRepository):
        self.feature_repo = feature_repo

    async def would_create_cycle(self, feature_id: UUID, proposed_parent_id: UUID | None) -> bool:
        """Check whether making ``proposed_parent_id`` the parent of ``feature_id`` loops.

        Walks the proposed parent's ancestor chain looking for ``feature_id``.
        A missing proposed parent is not a cycle (the caller reports it as not
        found). A pre-existing loop in the chain that does not involve
        ``feature_id`` stops the walk and is not reported as a cycle.

        Returns:
            True if the re-parenting must be rejected.
        """
        if proposed_parent_id is None:
            return False

        if proposed_parent_id == feature_id:
            return True

        proposed_parent = await self.feature_repo.get_by_id(proposed_parent_id)
        if proposed_parent is None:
            return False

        visited: set[UUID] = set()
        current = proposed_parent.parent_id
        while current is not None:
            if current == feature_id:
                return True
            if current in visited:
                break
            visited.add(current)
            current = await self.feature_repo.get_parent_id(current)

        return False
