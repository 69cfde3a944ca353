"""Feature model - a node in a project's feature tree."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field, SQLModel

from src.featuretree.models.base import utc_now


class Feature(SQLModel, table=True):
    """Feature entity stored flat with an optional parent pointer.

    Note: parent_id is a navigational reference, not ownership. The tree is
    rebuilt in memory per query (see core.tree).
    """

    __tablename__ = "features"
    __table_args__ = (
        Index("ix_features_project_parent_order", "project_id", "parent_id", "order"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    parent_id: UUID | None = Field(default=None, foreign_key="features.id", index=True)
    images: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    order: int = Field(default=0)
    has_accounting: bool = Field(default=False)
    is_accounting_done: bool = Field(default=False)
    is_completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
