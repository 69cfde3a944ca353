"""Image upload validation and storage."""

import re
import time
from pathlib import PurePath

from src.featuretree.core.exceptions import ValidationError
from src.featuretree.core.logging import get_logger
from src.featuretree.core.storage import BlobStorage
from src.featuretree.schemas.upload import UploadRead

logger = get_logger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
)
ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_filename(filename: str) -> str:
    """Make a client-supplied file name safe to use as a storage key.

    Anything but ASCII letters, digits, dots and dashes becomes ``_`` (this
    removes path separators), ``..`` sequences are neutralised, and a leading
    dot is replaced so the result is never a hidden file.
    """
    safe = _UNSAFE_CHARS.sub("_", filename)
    safe = safe.replace("..", "_")
    if safe.startswith("."):
        safe = "_" + safe[1:]
    return safe


class UploadService:
    """Validates image uploads and hands them to a blob storage backend."""

    def __init__(self, storage: BlobStorage, max_bytes: int):
        self.storage = storage
        self.max_bytes = max_bytes

    def validate(
        self, filename: str | None, content_type: str | None, size: int
    ) -> tuple[str, str]:
        """Check MIME type, extension and size.

        Returns:
            The accepted file name and content type

        Raises:
            ValidationError: On the first rule the file breaks
        """
        if not filename:
            raise ValidationError("No file uploaded")
        if content_type is None or content_type not in ALLOWED_CONTENT_TYPES:
            raise ValidationError(
                "File type not allowed. Must be an image (JPG, PNG, GIF, WEBP)"
            )
        if PurePath(filename).suffix.lower() not in ALLOWED_EXTENSIONS:
            raise ValidationError("File extension not allowed")
        if size > self.max_bytes:
            raise ValidationError(
                f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB"
            )
        return filename, content_type

    async def store_image(
        self, filename: str | None, content_type: str | None, data: bytes
    ) -> UploadRead:
        """Validate and store one image, returning its public URL."""
        filename, content_type = self.validate(filename, content_type, len(data))

        stored_name = f"{int(time.time() * 1000)}-{sanitize_filename(filename)}"
        url = await self.storage.put(stored_name, data, content_type)

        logger.info("Image stored", filename=stored_name, size=len(data))
        return UploadRead(url=url, filename=stored_name)
