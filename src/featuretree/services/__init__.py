from src.featuretree.services.feature_service import FeatureService
from src.featuretree.services.project_service import ProjectService
from src.featuretree.services.tree_integrity import TreeIntegrityChecker
from src.featuretree.services.upload_service import UploadService, sanitize_filename

__all__ = [
    "FeatureService",
    "ProjectService",
    "TreeIntegrityChecker",
    "UploadService",
    "sanitize_filename",
]
