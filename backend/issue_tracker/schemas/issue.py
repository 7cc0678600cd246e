"""Issue Schemas — public representation of an issue document.

Invariants:
    - Unset optional fields are omitted from the JSON, never rendered as null
    - deleted_at never appears for a live issue
    - Timestamps always render with a UTC offset, whatever the driver returned
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class IssueOut(BaseModel):
    """Issue as returned by POST and GET."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project: str
    title: str | None = None
    text: str | None = None
    creator: str | None = None
    assignee: str | None = None
    status_note: str | None = None
    open: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @field_validator("created_at", "updated_at", "deleted_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """SQLite hands back naive datetimes; stored values are always UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


def render_issue(issue: Any) -> dict:
    """Serialize an ORM row or an insert document to JSON-ready data."""
    return IssueOut.model_validate(issue).model_dump(mode="json", exclude_none=True)
