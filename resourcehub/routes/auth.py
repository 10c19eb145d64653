"""Sign-in endpoints (GitHub OAuth + persisted sessions).

GET  /api/auth/signin           - redirect to GitHub
GET  /api/auth/callback/github  - finish sign-in, set the session cookie
GET  /api/auth/session          - current session ({"user": null} when signed out)
POST /api/auth/signout          - drop the session
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse, Response

from resourcehub.dependencies import get_github_client, get_optional_principal, session_token
from resourcehub.schemas import MessageResponse, SessionResponse, SessionUser
from resourcehub.services.auth import (
    GitHubOAuthClient,
    OAuthError,
    Principal,
    begin_sign_in,
    complete_sign_in,
    end_session,
)
from resourcehub.settings import get_settings

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get("/signin")
async def sign_in(client: GitHubOAuthClient = Depends(get_github_client)) -> RedirectResponse:
    """Start the GitHub OAuth round-trip."""
    return RedirectResponse(await begin_sign_in(client), status_code=status.HTTP_302_FOUND)


@router.get("/callback/github")
async def github_callback(
    code: str | None = Query(default=None),
    state: str | None = Query(default=None),
    error: str | None = Query(default=None),
    client: GitHubOAuthClient = Depends(get_github_client),
) -> RedirectResponse:
    """Finish sign-in and set the session cookie."""
    if error:
        logger.warning(f"GitHub sign-in denied: {error}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign-in was cancelled")
    if not code or not state:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing code or state")

    try:
        token, principal = await complete_sign_in(client, code, state)
    except OAuthError as e:
        logger.warning(f"GitHub sign-in rejected: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign-in failed")

    settings = get_settings()
    response = RedirectResponse(settings.frontend_url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
        max_age=settings.session_max_age,
    )
    logger.info(f"Session opened for {principal.email}")
    return response


@router.get("/session", response_model=SessionResponse)
async def get_session_info(
    principal: Principal | None = Depends(get_optional_principal),
) -> SessionResponse:
    if principal is None:
        return SessionResponse()
    return SessionResponse(
        user=SessionUser(email=principal.email, name=principal.name, image=principal.image)
    )


@router.post("/signout", response_model=MessageResponse)
async def sign_out(request: Request, response: Response) -> MessageResponse:
    token = session_token(request)
    if token:
        await end_session(token)
    response.delete_cookie(get_settings().session_cookie_name)
    return MessageResponse(message="Signed out")
