"""Issue Repository — compiles builder outputs into SQLAlchemy statements.

Invariants:
    - Every statement is scoped by project; filters with exclude_deleted add deleted_at IS NULL
    - Writes are single statements, committed immediately, and return affected-row counts
    - Any SQLAlchemyError is rolled back and re-raised as DatabaseError(operation)

Design Decisions:
    - Filter values are bound through the target column's representation:
      "true"/"false" onto the boolean column, timestamp strings onto datetime
      columns; the builders stay agnostic of column types
    - Core insert()/update() over ORM unit-of-work: the caller needs row counts,
      not identity-mapped objects
"""

import logging
from datetime import datetime
from typing import Any, NoReturn, Sequence

from sqlalchemy import ColumnElement, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.core.domain_types import IssueField, IssueFilter, UpdateOperation
from issue_tracker.core.errors import DatabaseError
from issue_tracker.core.validation_rules import parse_datetime, parse_open
from issue_tracker.models.issue import Issue

logger = logging.getLogger(__name__)

_DATETIME_FIELDS = {IssueField.CREATED_AT.value, IssueField.UPDATED_AT.value}


def _column_value(field: str, value: Any) -> Any:
    """Bind a filter value in the representation its column stores."""
    if field == IssueField.OPEN.value:
        opened = parse_open(value)
        return value if opened is None else opened
    if field in _DATETIME_FIELDS and not isinstance(value, datetime):
        return parse_datetime(value)
    return value


def where_clauses(predicate: IssueFilter) -> list[ColumnElement[bool]]:
    """Translate an IssueFilter into SQLAlchemy WHERE clauses."""
    clauses: list[ColumnElement[bool]] = [Issue.project == predicate.project]
    for field, value in predicate.conditions.items():
        column = getattr(Issue, field)
        clauses.append(column == _column_value(field, value))
    if predicate.exclude_deleted:
        clauses.append(Issue.deleted_at.is_(None))
    return clauses


class SqlIssueRepository:
    """IssueRepository over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def insert(self, document: dict[str, Any]) -> int:
        result = await self._run("insert", insert(Issue).values(**document))
        return result.rowcount

    async def find(
        self, predicate: IssueFilter, limit: int | None = None,
    ) -> Sequence[Issue]:
        query = (
            select(Issue)
            .where(*where_clauses(predicate))
            .order_by(Issue.created_at)
        )
        if limit is not None:
            query = query.limit(limit)
        try:
            result = await self._db.execute(query)
        except SQLAlchemyError as e:
            await self._fail("find", e)
        return result.scalars().all()

    async def update_one(
        self, predicate: IssueFilter, operation: UpdateOperation,
    ) -> int:
        statement = (
            update(Issue)
            .where(*where_clauses(predicate))
            .values(**operation.set_fields)
            .execution_options(synchronize_session=False)
        )
        result = await self._run("update", statement)
        return result.rowcount

    async def soft_delete_one(
        self, predicate: IssueFilter, deleted_at: datetime,
    ) -> int:
        statement = (
            update(Issue)
            .where(*where_clauses(predicate))
            .values(deleted_at=deleted_at)
            .execution_options(synchronize_session=False)
        )
        result = await self._run("delete", statement)
        return result.rowcount

    async def _run(self, operation: str, statement):
        """Execute and commit one write statement."""
        try:
            result = await self._db.execute(statement)
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._fail(operation, e)
        return result

    async def _fail(self, operation: str, error: SQLAlchemyError) -> NoReturn:
        await self._db.rollback()
        logger.error(
            f"Issue {operation} failed: {error}",
            extra={"operation": operation},
        )
        raise DatabaseError("Database operation failed", operation) from error
