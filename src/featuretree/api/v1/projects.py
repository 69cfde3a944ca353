"""Project endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.featuretree.api.dependencies import FeatureServiceDep, ProjectServiceDep
from src.featuretree.api.v1.features import to_node_reads
from src.featuretree.core.logging import bind_project_context
from src.featuretree.models.enums import StatusFilter
from src.featuretree.schemas.feature import FeatureTreeRead
from src.featuretree.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=list[ProjectRead],
    summary="List projects",
    description="List all projects, newest first.",
)
async def list_projects(service: ProjectServiceDep) -> list[ProjectRead]:
    projects = await service.list_projects()
    return [ProjectRead.model_validate(p) for p in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={
        200: {"description": "Project details"},
        404: {"description": "Project not found"},
    },
)
async def get_project(project_id: UUID, service: ProjectServiceDep) -> ProjectRead:
    project = await service.get_project(project_id)
    return ProjectRead.model_validate(project)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        201: {"description": "Project created"},
        409: {"description": "Project with this name already exists"},
    },
)
async def create_project(request: ProjectCreate, service: ProjectServiceDep) -> ProjectRead:
    project = await service.create_project(request)
    return ProjectRead.model_validate(project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    responses={
        200: {"description": "Project updated"},
        404: {"description": "Project not found"},
        409: {"description": "Project with this name already exists"},
    },
)
async def update_project(
    project_id: UUID,
    request: ProjectUpdate,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.update_project(project_id, request)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    description="Delete a project together with all of its features.",
    responses={
        204: {"description": "Project deleted"},
        404: {"description": "Project not found"},
    },
)
async def delete_project(project_id: UUID, service: ProjectServiceDep) -> None:
    bind_project_context(project_id)
    await service.delete_project(project_id)


@router.get(
    "/{project_id}/features/tree",
    response_model=FeatureTreeRead,
    summary="Get feature tree",
    description=(
        "Assemble the project's feature forest, optionally pruned by status. "
        "A non-empty search switches the result to a flat list of matches."
    ),
    responses={
        200: {"description": "Feature forest or flat search results"},
        404: {"description": "Project not found"},
    },
)
async def get_feature_tree(
    project_id: UUID,
    service: FeatureServiceDep,
    status_filter: Annotated[
        StatusFilter, Query(alias="status", description="Status filter")
    ] = StatusFilter.ALL,
    search: Annotated[
        str | None, Query(max_length=200, description="Case-insensitive title/description match")
    ] = None,
) -> FeatureTreeRead:
    bind_project_context(project_id)
    mode, nodes = await service.get_feature_tree(project_id, status_filter, search)
    return FeatureTreeRead(project_id=project_id, mode=mode, items=to_node_reads(nodes))
