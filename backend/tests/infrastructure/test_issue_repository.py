"""Issue Repository — builder outputs executed against a real (SQLite) store.

Tests cover:
    - insert persists the sanitized document and reports one row
    - find honours project scope, equality conditions and soft delete
    - update_one sets fields only on the matched live issue
    - soft_delete_one sets deleted_at and hides the issue
    - SQLAlchemy failures surface as DatabaseError with the operation name
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

from issue_tracker.core.errors import DatabaseError
from issue_tracker.core.issue_builders import (
    FilterBuilder, InsertBuilder, UpdateBuilder,
)
from issue_tracker.db.base import Base
from issue_tracker.infrastructure.issue_repository import (
    SqlIssueRepository, where_clauses,
)
import issue_tracker.models  # noqa: F401

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def db():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def repo(db):
    return SqlIssueRepository(db)


async def _insert(repo, project="p", **fields) -> dict:
    raw = {"title": "T", "text": "x", "creator": "c", **fields}
    doc = InsertBuilder(raw, project).sanitize(NOW)
    assert await repo.insert(doc) == 1
    return doc


async def test_insert_then_find(repo):
    doc = await _insert(repo, assignee="Joe")
    (issue,) = await repo.find(FilterBuilder({}, "p").sanitize())
    assert issue.id == doc["id"]
    assert issue.assignee == "Joe"
    assert issue.open is True
    assert not issue.deleted


async def test_find_is_scoped_by_project(repo):
    await _insert(repo, project="a")
    await _insert(repo, project="b")
    issues = await repo.find(FilterBuilder({}, "a").sanitize())
    assert [i.project for i in issues] == ["a"]


async def test_find_binds_open_strings_to_boolean_column(repo):
    await _insert(repo, open="true")
    closed = await _insert(repo, open="false")
    issues = await repo.find(FilterBuilder({"open": "false"}, "p").sanitize())
    assert [i.id for i in issues] == [closed["id"]]


async def test_find_binds_timestamp_strings(repo):
    doc = await _insert(repo)
    predicate = FilterBuilder({"created_at": NOW.isoformat()}, "p").sanitize()
    assert [i.id for i in await repo.find(predicate)] == [doc["id"]]


async def test_find_respects_limit(repo):
    for _ in range(3):
        await _insert(repo)
    assert len(await repo.find(FilterBuilder({}, "p").sanitize(), limit=2)) == 2


async def test_update_one_sets_only_given_fields(repo):
    doc = await _insert(repo, assignee="Before")
    predicate = FilterBuilder({"id": str(doc["id"])}, "p").sanitize()
    later = datetime(2026, 10, 20, tzinfo=timezone.utc)
    operation = UpdateBuilder({"assignee": "After"}).sanitize(later)

    assert await repo.update_one(predicate, operation) == 1
    (issue,) = await repo.find(predicate)
    assert issue.assignee == "After"
    assert issue.title == "T"
    assert issue.updated_at.replace(tzinfo=None) == later.replace(tzinfo=None)
    assert issue.created_at.replace(tzinfo=None) == NOW.replace(tzinfo=None)


async def test_soft_delete_hides_issue_from_find_and_update(repo):
    doc = await _insert(repo)
    predicate = FilterBuilder({"id": str(doc["id"])}, "p").sanitize()

    assert await repo.soft_delete_one(predicate, NOW) == 1
    assert await repo.find(predicate) == []
    operation = UpdateBuilder({"title": "x"}).sanitize(NOW)
    assert await repo.update_one(predicate, operation) == 0
    assert await repo.soft_delete_one(predicate, NOW) == 0


def test_where_clauses_always_include_project_and_live_check():
    clauses = where_clauses(FilterBuilder({}, "p").sanitize())
    rendered = [str(c) for c in clauses]
    assert rendered == ["issues.project = :project_1", "issues.deleted_at IS NULL"]


class _BrokenSession:
    async def execute(self, statement):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    async def commit(self):
        pass

    async def rollback(self):
        self.rolled_back = True


@pytest.mark.parametrize("operation", ["insert", "find", "update", "delete"])
async def test_sqlalchemy_errors_become_database_error(operation):
    session = _BrokenSession()
    repo = SqlIssueRepository(session)
    predicate = FilterBuilder({}, "p").sanitize()
    calls = {
        "insert": lambda: repo.insert(InsertBuilder({"title": "T"}, "p").sanitize(NOW)),
        "find": lambda: repo.find(predicate),
        "update": lambda: repo.update_one(predicate, UpdateBuilder({}).sanitize(NOW)),
        "delete": lambda: repo.soft_delete_one(predicate, NOW),
    }
    with pytest.raises(DatabaseError) as exc_info:
        await calls[operation]()
    assert exc_info.value.operation == operation
    assert session.rolled_back
