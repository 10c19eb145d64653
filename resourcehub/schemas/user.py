"""Schemas for the per-user endpoints (/api/users/{email}/...)."""

from pydantic import BaseModel, Field


class ResourceIdRequest(BaseModel):
    """Body of every vote/favorite mutation.

    ``resourceId`` is optional at the schema level so that a missing id gets
    the same 400 answer as the other request checks.
    """

    resource_id: str | None = Field(alias="resourceId", default=None)

    model_config = {"populate_by_name": True}


class MessageResponse(BaseModel):
    message: str


class UserVotes(BaseModel):
    """Resource ids a user has favorited, upvoted and downvoted."""

    email: str
    favorites: list[str] = Field(default_factory=list)
    upvotes: list[str] = Field(default_factory=list)
    downvotes: list[str] = Field(default_factory=list)


class FavoritesResponse(BaseModel):
    email: str
    favorites: list[str]
