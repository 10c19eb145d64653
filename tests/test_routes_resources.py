"""Tests for the resource endpoints."""

import pytest
from httpx import AsyncClient

from tests.factories import make_resource, reload


@pytest.mark.asyncio
async def test_list_resources_uses_camel_case(client: AsyncClient, db):
    r = await make_resource(title="Exam", upvotes_nr=2)

    response = await client.get("/api/resources")

    assert response.status_code == 200
    data = response.json()
    assert data["page"] == 0
    assert data["pageSize"] >= 1
    [item] = data["resources"]
    assert item["id"] == r.id
    assert item["upvotesNr"] == 2
    assert "createdAt" in item


@pytest.mark.asyncio
async def test_count_and_newest(client: AsyncClient, db):
    old = await make_resource(title="old", minutes=0)
    new = await make_resource(title="new", minutes=1)

    assert (await client.get("/api/resources/count")).json() == {"count": 2}
    newest = (await client.get("/api/resources/newest")).json()
    assert [r["id"] for r in newest["resources"]] == [new.id, old.id]


@pytest.mark.asyncio
async def test_popular_endpoint(client: AsyncClient, db):
    quiet = await make_resource(title="quiet", minutes=5)
    loved = await make_resource(title="loved", favorites_nr=3, minutes=0)

    response = await client.get("/api/resources/popular")

    assert response.status_code == 200
    ranked = response.json()["resources"]
    assert [r["id"] for r in ranked] == [loved.id, quiet.id]
    assert "popularity" in ranked[0]
    assert ranked[0]["commentCount"] == 0


@pytest.mark.asyncio
async def test_search_endpoints(client: AsyncClient, refs):
    r = await make_resource(refs, title="Deadlocks explained")
    await make_resource(title="Deadlocks without refs")

    response = await client.get("/api/resources/search", params={"q": "deadlock"})
    data = response.json()
    assert data["query"] == "deadlock"
    assert [item["id"] for item in data["resources"]] == [r.id]
    assert data["resources"][0]["course"]["name"] == "Computer Engineering"

    response = await client.get("/api/resources/search/count", params={"q": "deadlock"})
    assert response.json() == {"count": 1}


@pytest.mark.asyncio
async def test_resources_by_ids(client: AsyncClient, db):
    a = await make_resource(title="a")
    await make_resource(title="b")

    response = await client.post("/api/resources/ids", json={"ids": [a.id, "missing"]})
    assert [item["id"] for item in response.json()["resources"]] == [a.id]

    response = await client.post("/api/resources/ids/count", json={"ids": [a.id, "missing"]})
    assert response.json() == {"count": 1}


@pytest.mark.asyncio
async def test_create_requires_session(client: AsyncClient, db):
    response = await client.post("/api/resources", json={"title": "Notes"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_update_delete(client: AsyncClient, db, sign_in):
    sign_in("owner@example.com", name="Owner")

    response = await client.post(
        "/api/resources",
        json={"title": "Notes", "documentFormat": "pdf", "hashtags": "#os"},
    )
    assert response.status_code == 201
    created = response.json()
    assert created["userEmail"] == "owner@example.com"
    assert created["userName"] == "Owner"
    assert created["downloadsNr"] == 0

    response = await client.patch(f"/api/resources/{created['id']}", json={"title": "Better notes"})
    assert response.status_code == 200
    assert response.json()["title"] == "Better notes"
    assert response.json()["hashtags"] == "#os"

    response = await client.delete(f"/api/resources/{created['id']}")
    assert response.status_code == 204
    assert (await client.get(f"/api/resources/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_only_owner_can_update(client: AsyncClient, db, sign_in):
    r = await make_resource(user_email="owner@example.com")
    sign_in("intruder@example.com")

    response = await client.patch(f"/api/resources/{r.id}", json={"title": "Mine now"})

    assert response.status_code == 401
    assert (await reload(r.id)).title == "Untitled"


@pytest.mark.asyncio
async def test_download_counter(client: AsyncClient, db):
    r = await make_resource()

    response = await client.post(f"/api/resources/{r.id}/download")
    assert response.json() == {"downloadsNr": 1}
    assert (await client.post("/api/resources/missing/download")).status_code == 404


@pytest.mark.asyncio
async def test_comments(client: AsyncClient, db, sign_in):
    r = await make_resource()
    sign_in("commenter@example.com", name="Commenter")

    response = await client.post(f"/api/resources/{r.id}/comments", json={"body": "Great notes"})
    assert response.status_code == 201
    assert response.json()["userName"] == "Commenter"

    comments = (await client.get(f"/api/resources/{r.id}/comments")).json()
    assert [c["body"] for c in comments] == ["Great notes"]

    popular = (await client.get("/api/resources/popular")).json()["resources"]
    assert popular[0]["commentCount"] == 1


@pytest.mark.asyncio
async def test_reference_data(client: AsyncClient, refs):
    courses = (await client.get("/api/courses")).json()
    assert courses == [{"id": refs["course"].id, "name": "Computer Engineering"}]

    subjects = (await client.get("/api/subjects", params={"courseId": refs["course"].id})).json()
    assert subjects == [
        {"id": refs["subject"].id, "name": "Operating Systems", "courseId": refs["course"].id}
    ]
    assert (await client.get("/api/subjects", params={"courseId": 999})).json() == []

    document_types = (await client.get("/api/document-types")).json()
    assert [d["name"] for d in document_types] == ["Exam"]


@pytest.mark.asyncio
async def test_create_with_unknown_subject_is_validation_error(client: AsyncClient, foreign_keys, sign_in):
    sign_in("owner@example.com")

    response = await client.post("/api/resources", json={"title": "x", "subjectId": 9999})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "Unknown subject_id: 9999"
    assert (await client.get("/api/resources/count")).json() == {"count": 0}


@pytest.mark.asyncio
async def test_patch_with_unknown_course_is_validation_error(client: AsyncClient, foreign_keys, refs, sign_in):
    sign_in("owner@example.com")
    r = await make_resource(refs)

    response = await client.patch(f"/api/resources/{r.id}", json={"courseId": 9999})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert (await reload(r.id)).course_id == refs["course"].id
