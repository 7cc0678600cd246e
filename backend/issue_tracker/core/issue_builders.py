"""Issue Builders — turn raw request fields into insert documents, update operations and filters.

Invariants:
    - All builders are PURE over their own working copy: no IO, no async, no DB
    - The project scope passed to the constructor always overwrites any payload value
    - Validation reports (is_invalid) and never raises; callers check it BEFORE sanitize
    - sanitize() output only contains whitelisted fields plus the defaults it injects
    - Every filter excludes soft-deleted issues
    - A field sent as null or "" is treated as not sent (never stored, never matched)

Design Decisions:
    - One DocumentBuilder base parameterized by whitelist and required set; each
      subclass only decides its sanitize pipeline and output shape
    - Builders copy the raw mapping: the caller's request data is never mutated
    - `now` injectable on sanitize() so tests can pin timestamps
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Mapping

from issue_tracker.core.domain_types import (
    IssueField, IssueFilter, ProjectName, UpdateOperation,
)
from issue_tracker.core.validation_rules import (
    FILTER_FIELDS, INSERT_FIELDS, REQUIRED_ON_INSERT, UPDATE_FIELDS,
    find_invalid_field, is_present, parse_issue_id, parse_open,
)

_ID = IssueField.ID.value
_PROJECT = IssueField.PROJECT.value
_OPEN = IssueField.OPEN.value
_CREATED_AT = IssueField.CREATED_AT.value
_UPDATED_AT = IssueField.UPDATED_AT.value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentBuilder(ABC):
    """Shared validate-then-sanitize pipeline over one request's fields."""

    allowed_fields: frozenset[str] = frozenset()
    required_fields: frozenset[str] = frozenset()

    def __init__(self, raw: Mapping[str, Any], project: str | None = None):
        self.doc: dict[str, Any] = dict(raw)
        self.project = ProjectName(project) if project is not None else None
        if self.project is not None:
            self.doc[_PROJECT] = self.project

    def is_empty(self) -> bool:
        return not self.doc

    def lacks_required(self) -> bool:
        return any(self.doc.get(f) is None for f in self.required_fields)

    def invalid_field(self) -> str | None:
        return find_invalid_field(self.doc)

    def is_invalid(self) -> bool:
        return self.invalid_field() is not None

    def drop_absent(self) -> "DocumentBuilder":
        """Drop fields sent blank or null."""
        self.doc = {k: v for k, v in self.doc.items() if is_present(self.doc, k)}
        return self

    def drop_unexpected(self) -> "DocumentBuilder":
        self.doc = {k: v for k, v in self.doc.items() if k in self.allowed_fields}
        return self

    @abstractmethod
    def sanitize(self, now: datetime | None = None) -> Any:
        """Trim to the whitelist and shape the output for the store."""


class InsertBuilder(DocumentBuilder):
    """New-issue payload → document ready for a single insert."""

    allowed_fields = INSERT_FIELDS
    required_fields = REQUIRED_ON_INSERT

    def __init__(self, raw: Mapping[str, Any], project: str):
        super().__init__(raw, project)

    def set_defaults(self, now: datetime | None = None) -> "InsertBuilder":
        now = now or utcnow()
        doc = self.doc
        if doc.get(_ID) is None:
            doc[_ID] = uuid.uuid4()
        doc.setdefault(_CREATED_AT, now)
        doc.setdefault(_UPDATED_AT, doc[_CREATED_AT])
        opened = parse_open(doc.get(_OPEN))
        doc[_OPEN] = True if opened is None else opened
        return self

    def sanitize(self, now: datetime | None = None) -> dict[str, Any]:
        self.drop_absent().drop_unexpected()
        self.set_defaults(now)
        return self.doc


class UpdateBuilder(DocumentBuilder):
    """Partial-update payload → set-only operation that always refreshes updated_at.

    The identifier and project are not part of this payload; the caller
    scopes the operation with a FilterBuilder.
    """

    allowed_fields = UPDATE_FIELDS

    def sanitize(self, now: datetime | None = None) -> UpdateOperation:
        self.drop_unexpected().drop_absent()
        doc = self.doc
        if _OPEN in doc:
            opened = parse_open(doc[_OPEN])
            if opened is not None:
                doc[_OPEN] = opened
        doc[_UPDATED_AT] = now or utcnow()
        return UpdateOperation(set_fields=dict(doc))


class FilterBuilder(DocumentBuilder):
    """Query fields → equality predicate scoped to the project, live issues only.

    Values are matched as given; only the identifier is converted.
    """

    allowed_fields = FILTER_FIELDS

    def __init__(self, raw: Mapping[str, Any], project: str):
        super().__init__(raw, project)

    def sanitize(self, now: datetime | None = None) -> IssueFilter:
        self.drop_absent().drop_unexpected()
        conditions = dict(self.doc)
        conditions.pop(_PROJECT, None)
        if conditions.get(_ID) is not None:
            conditions[_ID] = parse_issue_id(conditions[_ID])
        return IssueFilter(project=self.project, conditions=conditions)
