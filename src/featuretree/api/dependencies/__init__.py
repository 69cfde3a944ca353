"""FastAPI dependency injection definitions.

Re-exports all dependencies.
"""

from src.featuretree.api.dependencies.db import DBSession, get_db_session
from src.featuretree.api.dependencies.repositories import (
    FeatureRepo,
    ProjectRepo,
    get_feature_repository,
    get_project_repository,
)
from src.featuretree.api.dependencies.services import (
    FeatureServiceDep,
    ProjectServiceDep,
    UploadServiceDep,
    get_blob_storage,
    get_feature_service,
    get_project_service,
    get_upload_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "FeatureRepo",
    "ProjectRepo",
    "get_feature_repository",
    "get_project_repository",
    # Services
    "FeatureServiceDep",
    "ProjectServiceDep",
    "UploadServiceDep",
    "get_blob_storage",
    "get_feature_service",
    "get_project_service",
    "get_upload_service",
]
