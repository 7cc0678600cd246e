"""Boundary Protocols — contract between the pure builders and the store.

Invariants:
    - Core NEVER imports from the shell — dependency arrows point inward only
    - Every write touches at most one issue; return values are affected-row counts
    - Implementations raise DatabaseError (core/errors.py) on store failure

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the builders that produce the
      arguments are never async themselves
"""

from datetime import datetime
from typing import Any, Protocol, Sequence

from issue_tracker.core.domain_types import IssueFilter, UpdateOperation


class IssueRecord(Protocol):
    """Structural contract for issue rows returned by the store."""
    id: Any
    project: str
    title: str | None
    open: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


class IssueRepository(Protocol):
    """Contract for issue persistence — implemented by infrastructure."""
    async def insert(self, document: dict[str, Any]) -> int: ...
    async def find(
        self, predicate: IssueFilter, limit: int | None = None,
    ) -> Sequence[IssueRecord]: ...
    async def update_one(
        self, predicate: IssueFilter, operation: UpdateOperation,
    ) -> int: ...
    async def soft_delete_one(
        self, predicate: IssueFilter, deleted_at: datetime,
    ) -> int: ...
