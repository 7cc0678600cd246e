"""Issue Routes — create, update, list and soft-delete issues of one project.

Invariants:
    - The project always comes from the path, never from the payload
    - Every client error is detected before the store is touched
    - Writes must affect exactly one issue; anything else is a persistence failure
    - PUT checks run in order: empty payload, missing id, id validity, field validity

Design Decisions:
    - Raw request fields go straight to the builders (no Pydantic request models):
      unknown fields must be dropped silently, not rejected
    - DatabaseError is translated to PersistenceFailureError here because only the
      route knows which client-facing message belongs to the operation
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.api.request_fields import read_body_fields, read_query_fields
from issue_tracker.config import Settings, get_settings
from issue_tracker.core.domain_types import IssueField
from issue_tracker.core.errors import (
    DatabaseError, EmptyUpdateError, ErrorContext, InvalidInputError,
    InvalidQueryError, MissingIdentifierError, MissingRequiredInputError,
    PersistenceFailureError,
)
from issue_tracker.core.issue_builders import (
    FilterBuilder, InsertBuilder, UpdateBuilder, utcnow,
)
from issue_tracker.core.repository_protocols import IssueRepository
from issue_tracker.infrastructure.database import get_db
from issue_tracker.infrastructure.issue_repository import SqlIssueRepository
from issue_tracker.schemas.issue import render_issue

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/issues", tags=["issues"])

_ID = IssueField.ID.value


def get_issue_repository(db: AsyncSession = Depends(get_db)) -> IssueRepository:
    return SqlIssueRepository(db)


def _has_id(fields: dict[str, Any]) -> bool:
    return fields.get(_ID) not in (None, "")


@router.post("/{project}")
async def create_issue(
    project: str,
    request: Request,
    repo: IssueRepository = Depends(get_issue_repository),
):
    """Create an issue; responds with the stored document including its id."""
    ctx = ErrorContext(project=project)
    builder = InsertBuilder(await read_body_fields(request), project)
    if builder.lacks_required():
        raise MissingRequiredInputError(ctx)
    if builder.is_invalid():
        raise InvalidInputError(field=builder.invalid_field(), context=ctx)
    document = builder.sanitize()

    try:
        inserted = await repo.insert(document)
    except DatabaseError as e:
        raise PersistenceFailureError("error while saving issue", ctx) from e
    if inserted != 1:
        raise PersistenceFailureError("error while saving issue", ctx)

    logger.info(
        "Issue created",
        extra={"project": project, "issue_id": str(document[_ID])},
    )
    return render_issue(document)


@router.put("/{project}", response_class=PlainTextResponse)
async def update_issue(
    project: str,
    request: Request,
    repo: IssueRepository = Depends(get_issue_repository),
):
    """Set the sent fields on one live issue and refresh its updated_at."""
    fields = await read_body_fields(request)
    issue_id = fields.pop(_ID, None)
    ctx = ErrorContext(
        project=project, issue_id=None if issue_id is None else str(issue_id),
    )

    update = UpdateBuilder(fields)
    if update.is_empty():
        raise EmptyUpdateError(ctx)
    if issue_id in (None, ""):
        raise MissingIdentifierError("no id sent", ctx)

    target = FilterBuilder({_ID: issue_id}, project)
    if target.is_invalid():
        raise InvalidQueryError(field=_ID, context=ctx)
    predicate = target.sanitize()

    if update.is_invalid():
        raise InvalidInputError(field=update.invalid_field(), context=ctx)
    operation = update.sanitize()

    failure = f"could not update {issue_id}"
    try:
        modified = await repo.update_one(predicate, operation)
    except DatabaseError as e:
        raise PersistenceFailureError(failure, ctx) from e
    if modified != 1:
        raise PersistenceFailureError(failure, ctx)

    logger.info(
        "Issue updated",
        extra={"project": project, "issue_id": str(issue_id)},
    )
    return "successfully updated"


@router.get("/{project}")
async def list_issues(
    project: str,
    request: Request,
    repo: IssueRepository = Depends(get_issue_repository),
    settings: Settings = Depends(get_settings),
):
    """List live issues of the project matching every query field."""
    ctx = ErrorContext(project=project)
    builder = FilterBuilder(read_query_fields(request), project)
    if builder.is_invalid():
        raise InvalidQueryError(field=builder.invalid_field(), context=ctx)
    predicate = builder.sanitize()

    try:
        issues = await repo.find(predicate, limit=settings.issue_list_limit)
    except DatabaseError as e:
        raise PersistenceFailureError("error fetching data", ctx) from e
    return [render_issue(issue) for issue in issues]


@router.delete("/{project}", response_class=PlainTextResponse)
async def delete_issue(
    project: str,
    request: Request,
    repo: IssueRepository = Depends(get_issue_repository),
):
    """Soft-delete one live issue; the id comes from the query string or the body."""
    fields = read_query_fields(request)
    if not _has_id(fields):
        fields = await read_body_fields(request)
        if not _has_id(fields):
            raise MissingIdentifierError("id error", ErrorContext(project=project))
    issue_id = fields[_ID]
    ctx = ErrorContext(project=project, issue_id=str(issue_id))

    builder = FilterBuilder(fields, project)
    if builder.is_invalid():
        raise InvalidQueryError(field=builder.invalid_field(), context=ctx)
    predicate = builder.sanitize()

    failure = f"could not delete {issue_id}"
    try:
        deleted = await repo.soft_delete_one(predicate, utcnow())
    except DatabaseError as e:
        raise PersistenceFailureError(failure, ctx) from e
    if deleted != 1:
        raise PersistenceFailureError(failure, ctx)

    logger.info(
        "Issue deleted",
        extra={"project": project, "issue_id": str(issue_id)},
    )
    return f"deleted {issue_id}"
