from src.featuretree.schemas.feature import (
    FeatureCreate,
    FeatureDeleteResult,
    FeatureNodeRead,
    FeatureRead,
    FeatureReorder,
    FeatureTreeRead,
    FeatureUpdate,
    ReorderResult,
)
from src.featuretree.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from src.featuretree.schemas.upload import UploadRead

__all__ = [
    "FeatureCreate",
    "FeatureDeleteResult",
    "FeatureNodeRead",
    "FeatureRead",
    "FeatureReorder",
    "FeatureTreeRead",
    "FeatureUpdate",
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
    "ReorderResult",
    "UploadRead",
]
