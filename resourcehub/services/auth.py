"""GitHub sign-in and persisted sessions.

Flow:
1. /api/auth/signin issues a random state (kept in Redis) and redirects to GitHub
2. GitHub redirects back to /api/auth/callback/github with code + state
3. The state is consumed (single use), the code is exchanged for a token
4. The GitHub profile (and primary verified email) is fetched
5. Sign-in hook: the user row and an empty favorites ledger are created if absent
6. A session is persisted in Redis under an opaque token (the cookie value)

The rest of the API only ever sees the principal stored in the session.
"""

import logging
import secrets
from dataclasses import asdict, dataclass
from typing import Any
from urllib.parse import urlencode

import httpx

from resourcehub.settings import get_settings
from resourcehub.services.votes import get_favorites, post_favorites, upsert_user
from resourcehub.stores.redis import (
    consume_oauth_state,
    delete_session,
    load_session,
    save_oauth_state,
    save_session,
)

logger = logging.getLogger("uvicorn.error")

GITHUB_CALLBACK_PATH = "/api/auth/callback/github"


class OAuthError(Exception):
    """GitHub refused the code, or the profile could not be read."""


@dataclass
class GitHubProfile:
    """The parts of a GitHub account we keep."""

    github_id: str
    email: str
    name: str | None = None
    image: str | None = None


@dataclass
class Principal:
    """The signed-in user, as stored in a session."""

    email: str
    name: str | None = None
    image: str | None = None


class GitHubOAuthClient:
    """Client for GitHub's OAuth web flow and user API."""

    AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
    TOKEN_URL = "https://github.com/login/oauth/access_token"
    API_URL = "https://api.github.com"
    SCOPE = "read:user user:email"

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize client with OAuth app credentials."""
        settings = get_settings()
        self.client_id = client_id or settings.github_client_id
        self.client_secret = client_secret or settings.github_client_secret
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=15.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    def authorize_url(self, redirect_uri: str, state: str) -> str:
        """Build the GitHub authorize URL the browser is sent to."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "scope": self.SCOPE,
            "state": state,
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange an authorization code for an access token.

        Raises:
            OAuthError: If GitHub rejects the code.
        """
        client = await self._get_client()
        try:
            response = await client.post(
                self.TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "redirect_uri": redirect_uri,
                },
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise OAuthError(f"Token exchange failed: {e}") from e

        payload = response.json()
        token = payload.get("access_token")
        if not token:
            # GitHub answers 200 with {"error": "bad_verification_code", ...}
            raise OAuthError(f"Token exchange rejected: {payload.get('error', 'no access_token')}")
        return token

    async def fetch_profile(self, access_token: str) -> GitHubProfile:
        """Fetch the user's profile and primary verified email.

        Raises:
            OAuthError: If the API call fails or no usable email is found.
        """
        client = await self._get_client()
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github+json",
        }
        try:
            user_response = await client.get(f"{self.API_URL}/user", headers=headers)
            user_response.raise_for_status()
            user = user_response.json()

            email = user.get("email")
            if not email:
                emails_response = await client.get(f"{self.API_URL}/user/emails", headers=headers)
                emails_response.raise_for_status()
                email = _primary_verified_email(emails_response.json())
        except httpx.HTTPError as e:
            raise OAuthError(f"GitHub profile fetch failed: {e}") from e

        if not email:
            raise OAuthError("GitHub account has no verified email")

        return GitHubProfile(
            github_id=str(user["id"]),
            email=email,
            name=user.get("name") or user.get("login"),
            image=user.get("avatar_url"),
        )


def _primary_verified_email(emails: list[dict[str, Any]]) -> str | None:
    """Pick the primary verified address, else any verified one."""
    verified = [e for e in emails if e.get("verified")]
    for entry in verified:
        if entry.get("primary"):
            return entry.get("email")
    return verified[0].get("email") if verified else None


def callback_url() -> str:
    """Redirect URI registered with the GitHub OAuth app."""
    return f"{get_settings().auth_url.rstrip('/')}{GITHUB_CALLBACK_PATH}"


async def begin_sign_in(client: GitHubOAuthClient) -> str:
    """Issue a state value and return the authorize URL to redirect to."""
    state = secrets.token_urlsafe(24)
    await save_oauth_state(state)
    return client.authorize_url(callback_url(), state)


async def complete_sign_in(client: GitHubOAuthClient, code: str, state: str) -> tuple[str, Principal]:
    """Finish the OAuth round-trip and open a session.

    Returns:
        (session token, principal)

    Raises:
        OAuthError: On an unknown/reused state or any GitHub failure.
    """
    if not await consume_oauth_state(state):
        raise OAuthError("Unknown or expired OAuth state")

    access_token = await client.exchange_code(code, callback_url())
    profile = await client.fetch_profile(access_token)
    principal = await on_sign_in(profile)
    token = await start_session(principal)
    return token, principal


async def on_sign_in(profile: GitHubProfile) -> Principal:
    """Sign-in hook: make sure the user and their favorites ledger exist."""
    logger.info(f"Sign-in github_id={profile.github_id} email={profile.email}")
    if await get_favorites(profile.email) is None:
        await post_favorites(profile.email, [])
        logger.info(f"Initialised favorites for {profile.email}")
    await upsert_user(
        profile.email,
        name=profile.name,
        image=profile.image,
        github_id=profile.github_id,
    )
    return Principal(email=profile.email, name=profile.name, image=profile.image)


async def start_session(principal: Principal) -> str:
    """Persist a session for ``principal`` and return its token."""
    token = secrets.token_urlsafe(32)
    await save_session(token, asdict(principal), get_settings().session_max_age)
    return token


async def get_principal(token: str) -> Principal | None:
    """Resolve a session token, or None if it is unknown or expired."""
    data = await load_session(token)
    if not data or not data.get("email"):
        return None
    return Principal(email=data["email"], name=data.get("name"), image=data.get("image"))


async def end_session(token: str) -> None:
    """Sign out."""
    await delete_session(token)
