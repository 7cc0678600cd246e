"""Initial schema — issues table with soft-delete timestamp.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "issues",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("project", sa.String(256), nullable=False),
        sa.Column("title", sa.String(1024), nullable=True),
        sa.Column("text", sa.Text, nullable=True),
        sa.Column("creator", sa.String(64), nullable=True),
        sa.Column("assignee", sa.String(64), nullable=True),
        sa.Column("status_note", sa.String(1024), nullable=True),
        sa.Column("open", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_issues_project_deleted_at", "issues", ["project", "deleted_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_issues_project_deleted_at", table_name="issues")
    op.drop_table("issues")
