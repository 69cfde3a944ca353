"""Upload schemas."""

from pydantic import BaseModel


class UploadRead(BaseModel):
    """A stored image: its public URL and the stored file name."""

    url: str
    filename: str
