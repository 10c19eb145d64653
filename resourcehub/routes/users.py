"""Per-user endpoints: owned resources, votes and favorites.

POST/DELETE /api/users/{email}/upvote    - add/remove an upvote
POST/DELETE /api/users/{email}/downvote  - add/remove a downvote
GET/POST/DELETE /api/users/{email}/favorites

Every mutation requires a session whose email equals the path email.
Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from resourcehub.dependencies import ensure_same_user, require_principal
from resourcehub.schemas import (
    CountResponse,
    FavoritesResponse,
    MessageResponse,
    ResourceIdRequest,
    ResourceOut,
    ResourcePage,
    UserVotes,
)
from resourcehub.services.auth import Principal
from resourcehub.services.pagination import resolve_page_size
from resourcehub.services.resources import (
    count_resources_by_owner,
    get_resource,
    list_resources_by_owner,
)
from resourcehub.services.votes import (
    add_downvote,
    add_favorite,
    add_upvote,
    get_favorites,
    get_user_votes,
    remove_downvote,
    remove_favorite,
    remove_upvote,
)

router = APIRouter()


async def _checked_resource_id(
    uemail: str,
    principal: Principal,
    body: ResourceIdRequest | None,
) -> str:
    """Run the shared request checks of every ledger mutation."""
    ensure_same_user(principal, uemail)

    if body is None or not body.resource_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No resource id provided")

    if await get_resource(body.resource_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resource does not exist")

    return body.resource_id


@router.get("/{uemail}/resources", response_model=ResourcePage)
async def get_user_resources(
    uemail: str,
    page: int = Query(default=0, ge=0, description="Zero-indexed page"),
) -> ResourcePage:
    """List the resources a user uploaded, newest first."""
    resources = await list_resources_by_owner(uemail, page)
    return ResourcePage(
        resources=[ResourceOut.model_validate(r) for r in resources],
        page=page,
        page_size=resolve_page_size(),
    )


@router.get("/{uemail}/resources/count", response_model=CountResponse)
async def get_user_resources_count(uemail: str) -> CountResponse:
    return CountResponse(count=await count_resources_by_owner(uemail))


@router.get("/{uemail}/votes", response_model=UserVotes)
async def get_votes(
    uemail: str,
    principal: Principal = Depends(require_principal),
) -> UserVotes:
    """Favorites, upvotes and downvotes of the signed-in user."""
    ensure_same_user(principal, uemail)
    votes = await get_user_votes(uemail)
    return votes or UserVotes(email=uemail)


@router.post("/{uemail}/upvote", response_model=MessageResponse)
async def post_upvote(
    uemail: str,
    body: ResourceIdRequest | None = Body(default=None),
    principal: Principal = Depends(require_principal),
) -> MessageResponse:
    resource_id = await _checked_resource_id(uemail, principal, body)
    await add_upvote(uemail, resource_id)
    return MessageResponse(message="Upvote added")


@router.delete("/{uemail}/upvote", response_model=MessageResponse)
async def delete_upvote(
    uemail: str,
    body: ResourceIdRequest | None = Body(default=None),
    principal: Principal = Depends(require_principal),
) -> MessageResponse:
    resource_id = await _checked_resource_id(uemail, principal, body)
    await remove_upvote(uemail, resource_id)
    return MessageResponse(message="Upvote removed")


@router.post("/{uemail}/downvote", response_model=MessageResponse)
async def post_downvote(
    uemail: str,
    body: ResourceIdRequest | None = Body(default=None),
    principal: Principal = Depends(require_principal),
) -> MessageResponse:
    resource_id = await _checked_resource_id(uemail, principal, body)
    await add_downvote(uemail, resource_id)
    return MessageResponse(message="Downvote added")


@router.delete("/{uemail}/downvote", response_model=MessageResponse)
async def delete_downvote(
    uemail: str,
    body: ResourceIdRequest | None = Body(default=None),
    principal: Principal = Depends(require_principal),
) -> MessageResponse:
    resource_id = await _checked_resource_id(uemail, principal, body)
    await remove_downvote(uemail, resource_id)
    return MessageResponse(message="Downvote removed")


@router.get("/{uemail}/favorites", response_model=FavoritesResponse)
async def get_user_favorites(
    uemail: str,
    principal: Principal = Depends(require_principal),
) -> FavoritesResponse:
    ensure_same_user(principal, uemail)
    favorites = await get_favorites(uemail)
    if favorites is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No favorites for this user")
    return FavoritesResponse(email=uemail, favorites=favorites)


@router.post("/{uemail}/favorites", response_model=MessageResponse)
async def post_favorite(
    uemail: str,
    body: ResourceIdRequest | None = Body(default=None),
    principal: Principal = Depends(require_principal),
) -> MessageResponse:
    resource_id = await _checked_resource_id(uemail, principal, body)
    await add_favorite(uemail, resource_id)
    return MessageResponse(message="Favorite added")


@router.delete("/{uemail}/favorites", response_model=MessageResponse)
async def delete_favorite(
    uemail: str,
    body: ResourceIdRequest | None = Body(default=None),
    principal: Principal = Depends(require_principal),
) -> MessageResponse:
    resource_id = await _checked_resource_id(uemail, principal, body)
    await remove_favorite(uemail, resource_id)
    return MessageResponse(message="Favorite removed")
