"""Feature endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.featuretree.api.dependencies import FeatureServiceDep
from src.featuretree.core.logging import bind_project_context
from src.featuretree.core.tree import FeatureNode
from src.featuretree.models import Feature
from src.featuretree.schemas.feature import (
    FeatureCreate,
    FeatureDeleteResult,
    FeatureNodeRead,
    FeatureRead,
    FeatureReorder,
    FeatureUpdate,
    ReorderResult,
)

router = APIRouter(prefix="/features", tags=["features"])


def to_node_reads(forest: list[FeatureNode[Feature]]) -> list[FeatureNodeRead]:
    """Convert an assembled forest into response models, preserving order."""
    roots: list[FeatureNodeRead] = []
    stack = [(node, roots) for node in reversed(forest)]
    while stack:
        node, siblings = stack.pop()
        read = FeatureNodeRead.model_validate(node.feature)
        siblings.append(read)
        stack.extend((child, read.children) for child in reversed(node.children))
    return roots


@router.get(
    "",
    response_model=list[FeatureRead],
    summary="List features",
    description="Flat list of a project's features, sorted by order then creation time.",
)
async def list_features(
    project_id: Annotated[UUID, Query(description="Project to list")],
    service: FeatureServiceDep,
) -> list[FeatureRead]:
    bind_project_context(project_id)
    features = await service.list_features(project_id)
    return [FeatureRead.model_validate(f) for f in features]


@router.put(
    "/reorder",
    response_model=ReorderResult,
    summary="Reorder features",
    description="Set each listed feature's order to its position in the list.",
    responses={
        200: {"description": "Features reordered"},
        400: {"description": "Unknown feature ids; nothing was changed"},
    },
)
async def reorder_features(request: FeatureReorder, service: FeatureServiceDep) -> ReorderResult:
    updated = await service.reorder_features(request.feature_ids)
    return ReorderResult(updated_count=updated)


@router.post(
    "",
    response_model=FeatureRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create feature",
    responses={
        201: {"description": "Feature created"},
        400: {"description": "Invalid accounting flags or cross-project parent"},
        404: {"description": "Project or parent not found"},
    },
)
async def create_feature(request: FeatureCreate, service: FeatureServiceDep) -> FeatureRead:
    bind_project_context(request.project_id)
    feature = await service.create_feature(request)
    return FeatureRead.model_validate(feature)


@router.get(
    "/{feature_id}",
    response_model=FeatureRead,
    summary="Get feature",
    responses={
        200: {"description": "Feature details"},
        404: {"description": "Feature not found"},
    },
)
async def get_feature(feature_id: UUID, service: FeatureServiceDep) -> FeatureRead:
    feature = await service.get_feature(feature_id)
    return FeatureRead.model_validate(feature)


@router.patch(
    "/{feature_id}",
    response_model=FeatureRead,
    summary="Update feature",
    description="Partial update. `parent_id: null` moves the feature to the root level.",
    responses={
        200: {"description": "Feature updated"},
        400: {"description": "Circular parent or invalid accounting flags"},
        404: {"description": "Feature or parent not found"},
    },
)
async def update_feature(
    feature_id: UUID,
    request: FeatureUpdate,
    service: FeatureServiceDep,
) -> FeatureRead:
    feature = await service.update_feature(feature_id, request)
    return FeatureRead.model_validate(feature)


@router.delete(
    "/{feature_id}",
    response_model=FeatureDeleteResult,
    summary="Delete feature",
    description="Delete a feature together with its entire subtree.",
    responses={
        200: {"description": "Feature and descendants deleted"},
        404: {"description": "Feature not found"},
    },
)
async def delete_feature(feature_id: UUID, service: FeatureServiceDep) -> FeatureDeleteResult:
    deleted = await service.delete_feature(feature_id)
    return FeatureDeleteResult(id=feature_id, deleted_count=deleted)
