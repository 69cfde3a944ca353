"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.featuretree.api.dependencies.db import DBSession
from src.featuretree.repositories import FeatureRepository, ProjectRepository


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_feature_repository(session: DBSession) -> FeatureRepository:
    return FeatureRepository(session)


ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
FeatureRepo = Annotated[FeatureRepository, Depends(get_feature_repository)]
