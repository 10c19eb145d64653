"""Tests for health endpoint and error envelopes."""

import pytest
from httpx import AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from resourcehub.stores import redis as redis_store


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health endpoint returns ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_store_unavailable_is_generic_503(client: AsyncClient):
    """Without a database every store call fails as a whole with a generic message."""
    response = await client.get("/api/resources")
    assert response.status_code == 503
    error = response.json()["error"]
    assert error["code"] == "STORE_UNAVAILABLE"
    assert error["message"] == "Service temporarily unavailable"


@pytest.mark.asyncio
async def test_unknown_resource_is_structured_404(client: AsyncClient, db):
    response = await client.get("/api/resources/nope")
    assert response.status_code == 404
    assert response.json() == {
        "error": {"code": "NOT_FOUND", "message": "Resource does not exist", "detail": None}
    }


@pytest.mark.asyncio
async def test_invalid_page_is_validation_error(client: AsyncClient, db):
    response = await client.get("/api/resources", params={"page": -1})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_session_cookie_without_redis_is_503(client: AsyncClient):
    """A session can only be resolved through Redis; without it the request fails as a whole."""
    response = await client.get("/api/auth/session", headers={"Cookie": "resourcehub_session=token"})
    assert response.status_code == 503
    assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"


class _UnreachableRedis:
    async def get(self, key: str) -> str | None:
        raise RedisConnectionError("Connection refused")


@pytest.mark.asyncio
async def test_bearer_token_with_redis_down_is_503(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(redis_store, "_redis", _UnreachableRedis())

    response = await client.get("/api/auth/session", headers={"Authorization": "Bearer token"})

    assert response.status_code == 503
    assert response.json()["error"]["message"] == "Service temporarily unavailable"
