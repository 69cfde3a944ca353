"""Image upload endpoint."""

from typing import Annotated

from fastapi import APIRouter, File, UploadFile, status

from src.featuretree.api.dependencies import UploadServiceDep
from src.featuretree.schemas.upload import UploadRead

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post(
    "",
    response_model=UploadRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload image",
    description="Store one image (JPG, PNG, GIF or WEBP) and return its public URL.",
    responses={
        201: {"description": "Image stored"},
        400: {"description": "Missing file, wrong type or too large"},
    },
)
async def upload_image(
    service: UploadServiceDep,
    file: Annotated[UploadFile | None, File(description="Image file")] = None,
) -> UploadRead:
    if file is None:
        return await service.store_image(None, None, b"")
    # Read one byte past the limit so oversize files are detected without buffering them whole
    data = await file.read(service.max_bytes + 1)
    return await service.store_image(file.filename, file.content_type, data)
