"""Initial migration - projects and features

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_name", "projects", ["name"], unique=True)

    op.create_table(
        "features",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=5000), nullable=True),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("parent_id", sa.Uuid(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("has_accounting", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_accounting_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.ForeignKeyConstraint(["parent_id"], ["features.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_features_project_id", "features", ["project_id"], unique=False)
    op.create_index("ix_features_parent_id", "features", ["parent_id"], unique=False)
    op.create_index(
        "ix_features_project_parent_order",
        "features",
        ["project_id", "parent_id", "order"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_features_project_parent_order", table_name="features")
    op.drop_index("ix_features_parent_id", table_name="features")
    op.drop_index("ix_features_project_id", table_name="features")
    op.drop_table("features")
    op.drop_index("ix_projects_name", table_name="projects")
    op.drop_table("projects")
