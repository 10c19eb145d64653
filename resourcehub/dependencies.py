"""FastAPI dependencies: the signed-in principal and the GitHub client."""

from fastapi import Depends, HTTPException, Request, status

from resourcehub.services.auth import GitHubOAuthClient, Principal, get_principal
from resourcehub.settings import get_settings


def session_token(request: Request) -> str | None:
    """Session token from a bearer header, else from the session cookie."""
    authorization = request.headers.get("Authorization")
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return request.cookies.get(get_settings().session_cookie_name)


async def get_optional_principal(request: Request) -> Principal | None:
    """The signed-in principal, or None for anonymous requests."""
    token = session_token(request)
    if not token:
        return None
    return await get_principal(token)


async def require_principal(
    principal: Principal | None = Depends(get_optional_principal),
) -> Principal:
    """The signed-in principal; 401 when nobody is signed in."""
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return principal


def ensure_same_user(principal: Principal, email: str) -> None:
    """Callers may only act on their own ledger."""
    if principal.email != email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Cannot act on behalf of another user",
        )


async def get_github_client():
    """GitHub OAuth client, closed after the request."""
    client = GitHubOAuthClient()
    try:
        yield client
    finally:
        await client.close()
