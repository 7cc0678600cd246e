"""Issue ORM — persists one project-scoped issue document.

Invariants:
    - id is a UUID primary key generated by InsertBuilder (client never supplies it)
    - project is non-nullable and never updated
    - created_at is written once; updated_at is refreshed by every update
    - deleted_at NULL means live; a timestamp means soft-deleted at that instant

Design Decisions:
    - Text fields nullable: documents omit optional fields rather than storing blanks
    - Explicit deleted_at column over a presence flag: "never deleted" and
      "deleted at T" are distinct states, no key-absence semantics
    - Composite index (project, deleted_at): every query filters on both
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from issue_tracker.db.base import Base


class Issue(Base):
    """One issue document, soft-deletable."""
    __tablename__ = "issues"
    __table_args__ = (
        Index("ix_issues_project_deleted_at", "project", "deleted_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project: Mapped[str] = mapped_column(String(256), nullable=False)
    title: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    creator: Mapped[str | None] = mapped_column(String(64), nullable=True)
    assignee: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status_note: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    @property
    def deleted(self) -> bool:
        return self.deleted_at is not None
