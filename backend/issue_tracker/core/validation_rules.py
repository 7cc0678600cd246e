"""Validation Rules — shared field rule table and whitelists for all issue builders.

Invariants:
    - A rule runs only when its field is present (key set, value not None and not "")
    - Absence is never invalid here; required-field presence is checked by the caller first
    - find_invalid_field is single-pass: first violated rule wins
    - Whitelists are immutable (frozenset); unknown fields are dropped, never rejected

Design Decisions:
    - Rules take the field value, not the document: each predicate is testable alone
    - Date parsing delegated to pydantic's datetime adapter (ISO-8601 strings,
      unix timestamps, datetime instances)
"""

from datetime import datetime
from typing import Any, Callable, Mapping
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from issue_tracker.core.domain_types import IssueField

_DATETIME = TypeAdapter(datetime)

OPEN_STRINGS = {"true": True, "false": False}


def is_present(doc: Mapping[str, Any], field: str) -> bool:
    """True when the field carries a value worth validating."""
    value = doc.get(field)
    return value is not None and value != ""


def parse_datetime(value: Any) -> datetime:
    """Parse a client-supplied timestamp. Raises ValueError when unparseable."""
    try:
        return _DATETIME.validate_python(value)
    except ValidationError as e:
        raise ValueError(f"not a date: {value!r}") from e


def parse_issue_id(value: Any) -> UUID:
    """Convert a client-supplied identifier to the store's native UUID."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise ValueError(f"not an issue id: {value!r}")
    return UUID(value)


def parse_open(value: Any) -> bool | None:
    """Map the wire representation of `open` to a bool, None when unrecognized."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return OPEN_STRINGS.get(value)
    return None


# ─── Rules ───────────────────────────────────────────────────────

def _max_length(limit: int) -> Callable[[Any], bool]:
    def invalid(value: Any) -> bool:
        return not isinstance(value, str) or len(value) > limit
    return invalid


def _invalid_open(value: Any) -> bool:
    return parse_open(value) is None


def _invalid_datetime(value: Any) -> bool:
    try:
        parse_datetime(value)
    except ValueError:
        return True
    return False


def _invalid_issue_id(value: Any) -> bool:
    try:
        parse_issue_id(value)
    except ValueError:
        return True
    return False


INVALID_RULES: dict[str, Callable[[Any], bool]] = {
    IssueField.TITLE.value: _max_length(1024),
    IssueField.TEXT.value: _max_length(2 ** 16),
    IssueField.CREATOR.value: _max_length(64),
    IssueField.ASSIGNEE.value: _max_length(64),
    IssueField.STATUS_NOTE.value: _max_length(1024),
    IssueField.OPEN.value: _invalid_open,
    IssueField.CREATED_AT.value: _invalid_datetime,
    IssueField.UPDATED_AT.value: _invalid_datetime,
    IssueField.ID.value: _invalid_issue_id,
}


def find_invalid_field(doc: Mapping[str, Any]) -> str | None:
    """Return the first present field that violates its rule, or None."""
    for field, invalid in INVALID_RULES.items():
        if is_present(doc, field) and invalid(doc[field]):
            return field
    return None


def is_invalid(doc: Mapping[str, Any]) -> bool:
    return find_invalid_field(doc) is not None


# ─── Whitelists ──────────────────────────────────────────────────

REQUIRED_ON_INSERT = frozenset({
    IssueField.TITLE.value,
    IssueField.TEXT.value,
    IssueField.CREATOR.value,
})

UPDATE_FIELDS = frozenset({
    IssueField.TITLE.value,
    IssueField.TEXT.value,
    IssueField.CREATOR.value,
    IssueField.ASSIGNEE.value,
    IssueField.STATUS_NOTE.value,
    IssueField.OPEN.value,
})

INSERT_FIELDS = UPDATE_FIELDS | {IssueField.PROJECT.value}

FILTER_FIELDS = INSERT_FIELDS | {
    IssueField.CREATED_AT.value,
    IssueField.UPDATED_AT.value,
    IssueField.ID.value,
}
