"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.featuretree.api.dependencies.db import DBSession
from src.featuretree.api.dependencies.repositories import FeatureRepo, ProjectRepo
from src.featuretree.core.config import get_settings
from src.featuretree.core.storage import BlobStorage, build_blob_storage
from src.featuretree.services import FeatureService, ProjectService, UploadService


def get_project_service(
    project_repo: ProjectRepo,
    feature_repo: FeatureRepo,
    session: DBSession,
) -> ProjectService:
    """Get project service."""
    return ProjectService(project_repo, feature_repo, session)


def get_feature_service(
    feature_repo: FeatureRepo,
    project_repo: ProjectRepo,
    session: DBSession,
) -> FeatureService:
    """Get feature service."""
    return FeatureService(feature_repo, project_repo, session)


def get_blob_storage() -> BlobStorage:
    """Get the configured blob storage backend. Overridden in tests."""
    return build_blob_storage(get_settings())


def get_upload_service(
    storage: Annotated[BlobStorage, Depends(get_blob_storage)],
) -> UploadService:
    """Get upload service bound to the configured backend and size limit."""
    return UploadService(storage, max_bytes=get_settings().upload_max_bytes)


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
FeatureServiceDep = Annotated[FeatureService, Depends(get_feature_service)]
UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
