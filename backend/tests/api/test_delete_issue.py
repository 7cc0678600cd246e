"""DELETE /api/issues/{project} — soft delete of one live issue.

Invariants:
    - id taken from the query string first, then from the body
    - No id anywhere → 400 "id error"
    - Deleted issues stay in the table with deleted_at set, but vanish from every listing
    - Deleting twice, or an unknown id → 500 "could not delete <id>"
"""

from uuid import UUID, uuid4

import pytest
from sqlalchemy import select

from issue_tracker.api.routes.issues import get_issue_repository
from issue_tracker.core.errors import DatabaseError
from issue_tracker.main import app
from issue_tracker.models.issue import Issue

URL = "/api/issues/apitest"


async def test_delete_with_id_in_query(client, create_issue):
    created = await create_issue()
    res = await client.delete(URL, params={"id": created["id"]})
    assert res.status_code == 200
    assert res.text == f"deleted {created['id']}"
    assert (await client.get(URL)).json() == []


async def test_delete_with_id_in_body(client, create_issue):
    created = await create_issue()
    res = await client.request("DELETE", URL, json={"id": created["id"]})
    assert res.status_code == 200
    assert res.text == f"deleted {created['id']}"


async def test_delete_with_id_in_form_body(client, create_issue):
    created = await create_issue()
    res = await client.request(
        "DELETE", URL, data={"id": created["id"]},
    )
    assert res.text == f"deleted {created['id']}"


async def test_delete_keeps_row_with_deleted_at(client, create_issue, test_session_factory):
    created = await create_issue()
    await client.delete(URL, params={"id": created["id"]})

    async with test_session_factory() as db:
        result = await db.execute(
            select(Issue).where(Issue.id == UUID(created["id"])),
        )
        issue = result.scalar_one()
    assert issue.deleted
    assert issue.deleted_at is not None


@pytest.mark.parametrize("body", [None, {}, {"title": "x"}, {"id": ""}])
async def test_delete_without_id(client, body):
    if body is None:
        res = await client.delete(URL)
    else:
        res = await client.request("DELETE", URL, json=body)
    assert res.status_code == 400
    assert res.text == "id error"


async def test_delete_malformed_id(client):
    res = await client.delete(URL, params={"id": "12"})
    assert res.status_code == 400
    assert res.text == "invalid query"


async def test_delete_unknown_id(client):
    issue_id = str(uuid4())
    res = await client.delete(URL, params={"id": issue_id})
    assert res.status_code == 500
    assert res.text == f"could not delete {issue_id}"


async def test_delete_twice_fails_second_time(client, create_issue):
    created = await create_issue()
    await client.delete(URL, params={"id": created["id"]})
    res = await client.delete(URL, params={"id": created["id"]})
    assert res.status_code == 500
    assert res.text == f"could not delete {created['id']}"


async def test_delete_extra_fields_narrow_the_match(client, create_issue):
    created = await create_issue(assignee="Joe")
    res = await client.delete(URL, params={"id": created["id"], "assignee": "Ann"})
    assert res.status_code == 500
    assert len((await client.get(URL)).json()) == 1


async def test_delete_other_project_issue_fails(client, create_issue):
    created = await create_issue(project="elsewhere")
    res = await client.delete(URL, params={"id": created["id"]})
    assert res.status_code == 500
    assert len((await client.get("/api/issues/elsewhere")).json()) == 1


async def test_store_failure_could_not_delete(client):
    class _FailingRepository:
        async def soft_delete_one(self, predicate, deleted_at):
            raise DatabaseError("boom", "delete")

    app.dependency_overrides[get_issue_repository] = _FailingRepository
    issue_id = str(uuid4())
    res = await client.delete(URL, params={"id": issue_id})
    assert res.status_code == 500
    assert res.text == f"could not delete {issue_id}"
