"""Domain Types — identity types, field names and builder output shapes.

Invariants:
    - IssueId wraps UUID, ProjectName wraps str
    - IssueField values are the exact document keys used on the wire and in the store
    - UpdateOperation only ever sets fields (never replaces a whole document)
    - IssueFilter always carries the project scope

Design Decisions:
    - NewType over dataclass wrappers for identities: zero runtime cost
    - str Enum for field names: members compare equal to the raw dict keys
    - Frozen dataclasses for builder outputs: the repository consumes them read-only
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

IssueId = NewType("IssueId", UUID)
ProjectName = NewType("ProjectName", str)


# ─── Enums ───────────────────────────────────────────────────────

class IssueField(str, Enum):
    """Every key an issue document may carry."""
    ID = "id"
    PROJECT = "project"
    TITLE = "title"
    TEXT = "text"
    CREATOR = "creator"
    ASSIGNEE = "assignee"
    STATUS_NOTE = "status_note"
    OPEN = "open"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ─── Builder Outputs ─────────────────────────────────────────────

@dataclass(frozen=True)
class UpdateOperation:
    """A "set these fields" operation over one issue."""
    set_fields: dict[str, Any]

    @property
    def updated_at(self) -> datetime:
        return self.set_fields[IssueField.UPDATED_AT.value]


@dataclass(frozen=True)
class IssueFilter:
    """Equality conditions scoped to a project, excluding soft-deleted rows."""
    project: ProjectName
    conditions: dict[str, Any] = field(default_factory=dict)
    exclude_deleted: bool = True

    @property
    def issue_id(self) -> IssueId | None:
        return self.conditions.get(IssueField.ID.value)
