"""Feature schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.featuretree.models.enums import TreeMode

MAX_FEATURE_IMAGES = 10


def _strip_title(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            raise ValueError("Feature title cannot be empty or whitespace only")
    return v


def _strip_description(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


class FeatureCreate(BaseModel):
    """Schema for creating a feature."""

    project_id: UUID
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    parent_id: UUID | None = None
    images: list[str] = Field(default_factory=list, max_length=MAX_FEATURE_IMAGES)
    order: int = 0
    has_accounting: bool = False
    is_accounting_done: bool = False
    is_completed: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        return _strip_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _strip_description(v)


class FeatureUpdate(BaseModel):
    """Schema for updating a feature.

    Only fields present in the request are applied. ``parent_id: null`` makes
    the feature a root; ``null`` for any other field means "not provided".
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    parent_id: UUID | None = None
    images: list[str] | None = Field(default=None, max_length=MAX_FEATURE_IMAGES)
    order: int | None = None
    has_accounting: bool | None = None
    is_accounting_done: bool | None = None
    is_completed: bool | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        return _strip_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _strip_description(v)


class FeatureRead(BaseModel):
    """Schema for reading a feature."""

    id: UUID
    title: str
    description: str | None
    project_id: UUID
    parent_id: UUID | None
    images: list[str]
    order: int
    has_accounting: bool
    is_accounting_done: bool
    is_completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FeatureNodeRead(FeatureRead):
    """A feature with its assembled children."""

    children: list["FeatureNodeRead"] = Field(default_factory=list)


class FeatureTreeRead(BaseModel):
    """Result of a tree query.

    ``mode`` is ``flat`` when a search was applied: items are the matching
    features only, without children.
    """

    project_id: UUID
    mode: TreeMode
    items: list[FeatureNodeRead]


class FeatureReorder(BaseModel):
    """New sibling order: each id gets ``order`` equal to its index."""

    feature_ids: list[UUID] = Field(min_length=1)

    @field_validator("feature_ids")
    @classmethod
    def validate_unique(cls, v: list[UUID]) -> list[UUID]:
        if len(set(v)) != len(v):
            raise ValueError("Feature ids must not repeat")
        return v


class FeatureDeleteResult(BaseModel):
    id: UUID
    deleted_count: int = Field(description="The feature plus all of its descendants")


class ReorderResult(BaseModel):
    updated_count: int
