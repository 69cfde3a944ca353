from fastapi import APIRouter

from src.featuretree.api.v1 import features, projects, uploads

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(projects.router)
api_router.include_router(features.router)
api_router.include_router(uploads.router)
