"""Async HTTP client for the feature tracker API."""

from typing import Any, Self
from uuid import UUID

import httpx

from src.featuretree.core.exceptions import (
    DuplicateNameError,
    FeatureTrackerError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.featuretree.core.logging import get_logger
from src.featuretree.models.enums import StatusFilter
from src.featuretree.schemas.feature import (
    FeatureCreate,
    FeatureDeleteResult,
    FeatureRead,
    FeatureTreeRead,
    FeatureUpdate,
    ReorderResult,
)
from src.featuretree.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from src.featuretree.schemas.upload import UploadRead

logger = get_logger(__name__)

_ERRORS_BY_STATUS: dict[int, type[FeatureTrackerError]] = {
    400: ValidationError,
    404: NotFoundError,
    409: DuplicateNameError,
    422: ValidationError,
}


def error_from_response(response: httpx.Response) -> FeatureTrackerError:
    """Rebuild the server-side error from a failed response."""
    try:
        detail = response.json().get("detail", response.text)
    except ValueError:
        detail = response.text
    if not isinstance(detail, str):
        # FastAPI request validation errors carry a list of problems
        detail = str(detail)
    error_cls = _ERRORS_BY_STATUS.get(response.status_code)
    if error_cls is None:
        error_cls = StorageError if response.status_code >= 500 else FeatureTrackerError
    return error_cls(detail)


class FeatureTrackerClient:
    """Thin typed wrapper over the ``/api/v1`` endpoints.

    Usage:
        async with FeatureTrackerClient("http://localhost:8000") as client:
            project = await client.create_project(ProjectCreate(name="Roadmap"))
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/api/v1",
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)
        if response.is_error:
            error = error_from_response(response)
            logger.warning(
                "API request failed",
                method=method,
                path=path,
                status_code=response.status_code,
                request_id=response.headers.get("X-Request-ID"),
            )
            raise error
        if response.status_code == httpx.codes.NO_CONTENT:
            return None
        return response.json()

    # Projects

    async def list_projects(self) -> list[ProjectRead]:
        data = await self._request("GET", "/projects")
        return [ProjectRead.model_validate(item) for item in data]

    async def get_project(self, project_id: UUID) -> ProjectRead:
        return ProjectRead.model_validate(await self._request("GET", f"/projects/{project_id}"))

    async def create_project(self, data: ProjectCreate) -> ProjectRead:
        body = data.model_dump(mode="json")
        return ProjectRead.model_validate(await self._request("POST", "/projects", json=body))

    async def update_project(self, project_id: UUID, data: ProjectUpdate) -> ProjectRead:
        body = data.model_dump(mode="json", exclude_unset=True)
        return ProjectRead.model_validate(
            await self._request("PATCH", f"/projects/{project_id}", json=body)
        )

    async def delete_project(self, project_id: UUID) -> None:
        await self._request("DELETE", f"/projects/{project_id}")

    # Features

    async def list_features(self, project_id: UUID) -> list[FeatureRead]:
        data = await self._request("GET", "/features", params={"project_id": str(project_id)})
        return [FeatureRead.model_validate(item) for item in data]

    async def get_feature_tree(
        self,
        project_id: UUID,
        status: StatusFilter = StatusFilter.ALL,
        search: str | None = None,
    ) -> FeatureTreeRead:
        params = {"status": status.value}
        if search:
            params["search"] = search
        data = await self._request("GET", f"/projects/{project_id}/features/tree", params=params)
        return FeatureTreeRead.model_validate(data)

    async def get_feature(self, feature_id: UUID) -> FeatureRead:
        return FeatureRead.model_validate(await self._request("GET", f"/features/{feature_id}"))

    async def create_feature(self, data: FeatureCreate) -> FeatureRead:
        body = data.model_dump(mode="json")
        return FeatureRead.model_validate(await self._request("POST", "/features", json=body))

    async def update_feature(self, feature_id: UUID, data: FeatureUpdate) -> FeatureRead:
        body = data.model_dump(mode="json", exclude_unset=True)
        return FeatureRead.model_validate(
            await self._request("PATCH", f"/features/{feature_id}", json=body)
        )

    async def delete_feature(self, feature_id: UUID) -> FeatureDeleteResult:
        return FeatureDeleteResult.model_validate(
            await self._request("DELETE", f"/features/{feature_id}")
        )

    async def reorder_features(self, feature_ids: list[UUID]) -> ReorderResult:
        body = {"feature_ids": [str(fid) for fid in feature_ids]}
        return ReorderResult.model_validate(
            await self._request("PUT", "/features/reorder", json=body)
        )

    # Uploads

    async def upload_image(self, filename: str, data: bytes, content_type: str) -> UploadRead:
        files = {"file": (filename, data, content_type)}
        return UploadRead.model_validate(await self._request("POST", "/uploads", files=files))
