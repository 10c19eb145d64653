"""Tests for the per-user vote and favorite endpoints."""

import pytest
from httpx import AsyncClient

from tests.factories import make_resource, reload

EMAIL = "alice@example.com"


@pytest.mark.asyncio
async def test_upvote_requires_session(client: AsyncClient, db):
    r = await make_resource()
    response = await client.post(f"/api/users/{EMAIL}/upvote", json={"resourceId": r.id})
    assert response.status_code == 401
    assert (await reload(r.id)).upvotes_nr == 0


@pytest.mark.asyncio
async def test_upvote_for_someone_else_is_rejected(client: AsyncClient, db, sign_in):
    r = await make_resource()
    sign_in("mallory@example.com")

    response = await client.post(f"/api/users/{EMAIL}/upvote", json={"resourceId": r.id})

    assert response.status_code == 401
    assert (await reload(r.id)).upvotes_nr == 0


@pytest.mark.asyncio
async def test_upvote_without_resource_id(client: AsyncClient, db, sign_in):
    sign_in(EMAIL)

    response = await client.post(f"/api/users/{EMAIL}/upvote", json={})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "No resource id provided"


@pytest.mark.asyncio
async def test_upvote_unknown_resource(client: AsyncClient, db, sign_in):
    sign_in(EMAIL)

    response = await client.post(f"/api/users/{EMAIL}/upvote", json={"resourceId": "missing"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Resource does not exist"


@pytest.mark.asyncio
async def test_upvote_add_and_remove(client: AsyncClient, db, sign_in):
    r = await make_resource()
    sign_in(EMAIL)

    response = await client.post(f"/api/users/{EMAIL}/upvote", json={"resourceId": r.id})
    assert response.status_code == 200
    assert response.json() == {"message": "Upvote added"}

    # Repeated request does not count twice.
    await client.post(f"/api/users/{EMAIL}/upvote", json={"resourceId": r.id})
    assert (await reload(r.id)).upvotes_nr == 1

    votes = (await client.get(f"/api/users/{EMAIL}/votes")).json()
    assert votes["upvotes"] == [r.id]

    response = await client.request("DELETE", f"/api/users/{EMAIL}/upvote", json={"resourceId": r.id})
    assert response.status_code == 200
    assert response.json() == {"message": "Upvote removed"}
    assert (await reload(r.id)).upvotes_nr == 0


@pytest.mark.asyncio
async def test_downvote_add_and_remove(client: AsyncClient, db, sign_in):
    r = await make_resource()
    sign_in(EMAIL)

    response = await client.post(f"/api/users/{EMAIL}/downvote", json={"resourceId": r.id})
    assert response.json() == {"message": "Downvote added"}
    assert (await reload(r.id)).downvotes_nr == 1

    response = await client.request("DELETE", f"/api/users/{EMAIL}/downvote", json={"resourceId": r.id})
    assert response.json() == {"message": "Downvote removed"}
    assert (await reload(r.id)).downvotes_nr == 0


@pytest.mark.asyncio
async def test_favorites_endpoints(client: AsyncClient, db, sign_in):
    r = await make_resource()
    sign_in(EMAIL)

    assert (await client.get(f"/api/users/{EMAIL}/favorites")).status_code == 404

    response = await client.post(f"/api/users/{EMAIL}/favorites", json={"resourceId": r.id})
    assert response.json() == {"message": "Favorite added"}

    response = await client.get(f"/api/users/{EMAIL}/favorites")
    assert response.json() == {"email": EMAIL, "favorites": [r.id]}
    assert (await reload(r.id)).favorites_nr == 1

    await client.request("DELETE", f"/api/users/{EMAIL}/favorites", json={"resourceId": r.id})
    assert (await reload(r.id)).favorites_nr == 0


@pytest.mark.asyncio
async def test_votes_of_another_user_are_private(client: AsyncClient, db, sign_in):
    sign_in("mallory@example.com")
    response = await client.get(f"/api/users/{EMAIL}/votes")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_user_resources_listing(client: AsyncClient, db):
    mine = await make_resource(title="mine", user_email=EMAIL)
    await make_resource(title="theirs", user_email="bob@example.com")

    response = await client.get(f"/api/users/{EMAIL}/resources")
    data = response.json()
    assert [r["id"] for r in data["resources"]] == [mine.id]
    assert data["resources"][0]["userEmail"] == EMAIL

    response = await client.get(f"/api/users/{EMAIL}/resources/count")
    assert response.json() == {"count": 1}
