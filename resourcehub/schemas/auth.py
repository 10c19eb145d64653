"""Schemas for the sign-in session endpoints (/api/auth)."""

from pydantic import BaseModel


class SessionUser(BaseModel):
    """The signed-in principal as exposed to the frontend."""

    email: str
    name: str | None = None
    image: str | None = None


class SessionResponse(BaseModel):
    """GET /api/auth/session. ``user`` is null when nobody is signed in."""

    user: SessionUser | None = None
