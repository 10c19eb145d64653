"""Tests for GitHub sign-in (no network calls, no Redis)."""

import httpx
import pytest
from httpx import AsyncClient

from resourcehub.services import auth as auth_service
from resourcehub.services.auth import (
    GitHubOAuthClient,
    GitHubProfile,
    OAuthError,
    Principal,
    _primary_verified_email,
    complete_sign_in,
    on_sign_in,
)
from resourcehub.services.votes import get_favorites, get_user_votes


def _github(handler) -> GitHubOAuthClient:
    return GitHubOAuthClient(
        client_id="cid",
        client_secret="secret",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def test_authorize_url_carries_client_and_state() -> None:
    client = GitHubOAuthClient(client_id="cid", client_secret="secret")
    url = client.authorize_url("http://api.test/api/auth/callback/github", "xyz")

    assert url.startswith(GitHubOAuthClient.AUTHORIZE_URL + "?")
    params = httpx.URL(url).params
    assert params["client_id"] == "cid"
    assert params["state"] == "xyz"
    assert params["redirect_uri"] == "http://api.test/api/auth/callback/github"


def test_primary_verified_email() -> None:
    emails = [
        {"email": "old@example.com", "verified": True, "primary": False},
        {"email": "main@example.com", "verified": True, "primary": True},
        {"email": "spam@example.com", "verified": False, "primary": False},
    ]
    assert _primary_verified_email(emails) == "main@example.com"
    assert _primary_verified_email(emails[:1]) == "old@example.com"
    assert _primary_verified_email(emails[2:]) is None


@pytest.mark.asyncio
async def test_exchange_code_returns_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == GitHubOAuthClient.TOKEN_URL
        assert b"code=abc" in request.content
        return httpx.Response(200, json={"access_token": "gho_token", "token_type": "bearer"})

    client = _github(handler)
    assert await client.exchange_code("abc", "http://api.test/cb") == "gho_token"
    await client.close()


@pytest.mark.asyncio
async def test_exchange_code_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "bad_verification_code"})

    client = _github(handler)
    with pytest.raises(OAuthError):
        await client.exchange_code("abc", "http://api.test/cb")
    await client.close()


@pytest.mark.asyncio
async def test_fetch_profile_falls_back_to_emails_endpoint() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer gho_token"
        if request.url.path == "/user":
            return httpx.Response(
                200,
                json={"id": 7, "login": "octo", "name": None, "email": None, "avatar_url": "https://a/7"},
            )
        if request.url.path == "/user/emails":
            return httpx.Response(200, json=[{"email": "octo@example.com", "verified": True, "primary": True}])
        return httpx.Response(404)

    client = _github(handler)
    profile = await client.fetch_profile("gho_token")
    await client.close()

    assert profile == GitHubProfile(github_id="7", email="octo@example.com", name="octo", image="https://a/7")


@pytest.mark.asyncio
async def test_fetch_profile_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Bad credentials"})

    client = _github(handler)
    with pytest.raises(OAuthError):
        await client.fetch_profile("expired")
    await client.close()


@pytest.mark.asyncio
async def test_sign_in_hook_creates_user_with_empty_favorites(db) -> None:
    profile = GitHubProfile(github_id="7", email="octo@example.com", name="Octo", image=None)

    principal = await on_sign_in(profile)

    assert principal == Principal(email="octo@example.com", name="Octo", image=None)
    assert await get_favorites("octo@example.com") == []

    # Signing in again keeps the existing ledger.
    await on_sign_in(profile)
    votes = await get_user_votes("octo@example.com")
    assert votes is not None and votes.favorites == []


@pytest.mark.asyncio
async def test_complete_sign_in_rejects_unknown_state(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_consume(state: str) -> bool:
        return False

    monkeypatch.setattr(auth_service, "consume_oauth_state", fake_consume)

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("GitHub must not be called for an unknown state")

    with pytest.raises(OAuthError):
        await complete_sign_in(_github(handler), "code", "forged")


@pytest.mark.asyncio
async def test_complete_sign_in_opens_session(db, monkeypatch: pytest.MonkeyPatch) -> None:
    saved: dict[str, dict] = {}

    async def fake_consume(state: str) -> bool:
        return state == "issued"

    async def fake_save_session(token: str, data: dict, ttl: int) -> None:
        saved[token] = data

    monkeypatch.setattr(auth_service, "consume_oauth_state", fake_consume)
    monkeypatch.setattr(auth_service, "save_session", fake_save_session)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "github.com":
            return httpx.Response(200, json={"access_token": "gho_token"})
        return httpx.Response(
            200,
            json={"id": 9, "login": "dev", "name": "Dev", "email": "dev@example.com", "avatar_url": None},
        )

    token, principal = await complete_sign_in(_github(handler), "code", "issued")

    assert principal.email == "dev@example.com"
    assert saved[token] == {"email": "dev@example.com", "name": "Dev", "image": None}
    assert await get_favorites("dev@example.com") == []


@pytest.mark.asyncio
async def test_session_endpoint_when_signed_out(client: AsyncClient) -> None:
    response = await client.get("/api/auth/session")
    assert response.status_code == 200
    assert response.json() == {"user": None}


@pytest.mark.asyncio
async def test_session_endpoint_when_signed_in(client: AsyncClient, sign_in) -> None:
    sign_in("octo@example.com", name="Octo")
    response = await client.get("/api/auth/session")
    assert response.json() == {"user": {"email": "octo@example.com", "name": "Octo", "image": None}}


@pytest.mark.asyncio
async def test_callback_without_code(client: AsyncClient) -> None:
    response = await client.get("/api/auth/callback/github")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_callback_denied_by_user(client: AsyncClient) -> None:
    response = await client.get("/api/auth/callback/github", params={"error": "access_denied"})
    assert response.status_code == 401
