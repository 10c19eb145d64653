"""Resource endpoints.

GET    /api/resources                  - every resource, newest first
GET    /api/resources/count            - number of resources
GET    /api/resources/newest           - newest first
GET    /api/resources/popular          - ranked by popularity
GET    /api/resources/search?q=        - substring search over the joined view
GET    /api/resources/search/count?q=  - number of matches
POST   /api/resources/ids              - a given set of resources
POST   /api/resources/ids/count        - how many of them exist
POST   /api/resources                  - create (signed in)
GET    /api/resources/{id}             - one resource
PATCH  /api/resources/{id}             - merge-patch (owner only)
DELETE /api/resources/{id}             - delete (owner only)
POST   /api/resources/{id}/download    - count a download
GET    /api/resources/{id}/comments    - comments, oldest first
POST   /api/resources/{id}/comments    - add a comment (signed in)

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from resourcehub.dependencies import require_principal
from resourcehub.schemas import (
    CommentCreate,
    CommentOut,
    CountResponse,
    DownloadResponse,
    PopularPage,
    ResourceCreate,
    ResourceIdsRequest,
    ResourceOut,
    ResourcePage,
    ResourceUpdate,
    SearchPage,
)
from resourcehub.services.auth import Principal
from resourcehub.services.comments import add_comment, list_comments
from resourcehub.services.pagination import resolve_page_size
from resourcehub.services.ranking import list_popular
from resourcehub.services.resources import (
    UnknownReferenceError,
    count_resources,
    count_resources_by_ids,
    create_resource,
    delete_resource,
    get_resource,
    increment_downloads,
    list_resources,
    list_resources_by_ids,
    update_resource,
)
from resourcehub.services.search import count_search, search_resources

router = APIRouter()

PAGE_QUERY = Query(default=0, ge=0, description="Zero-indexed page")


def _page(resources, page: int) -> ResourcePage:
    return ResourcePage(
        resources=[ResourceOut.model_validate(r) for r in resources],
        page=page,
        page_size=resolve_page_size(),
    )


@router.get("", response_model=ResourcePage)
async def get_resources(page: int = PAGE_QUERY) -> ResourcePage:
    """List every resource, newest first."""
    return _page(await list_resources(page), page)


@router.get("/count", response_model=CountResponse)
async def get_resources_count() -> CountResponse:
    return CountResponse(count=await count_resources())


@router.get("/newest", response_model=ResourcePage)
async def get_newest(page: int = PAGE_QUERY) -> ResourcePage:
    """Newest uploads first."""
    return _page(await list_resources(page), page)


@router.get("/popular", response_model=PopularPage)
async def get_popular(page: int = PAGE_QUERY) -> PopularPage:
    """Resources ranked by popularity, newest first on ties."""
    return PopularPage(
        resources=await list_popular(page),
        page=page,
        page_size=resolve_page_size(),
    )


@router.get("/search", response_model=SearchPage)
async def get_search(
    q: str = Query(default="", max_length=200, description="Free-text query"),
    page: int = PAGE_QUERY,
) -> SearchPage:
    """Case-insensitive substring search across resource, subject, course and type."""
    return SearchPage(
        query=q,
        resources=await search_resources(q, page),
        page=page,
        page_size=resolve_page_size(),
    )


@router.get("/search/count", response_model=CountResponse)
async def get_search_count(
    q: str = Query(default="", max_length=200, description="Free-text query"),
) -> CountResponse:
    """Total number of matches (runs the full search, cost grows with matches)."""
    return CountResponse(count=await count_search(q))


@router.post("/ids", response_model=ResourcePage)
async def post_resources_by_ids(
    request: ResourceIdsRequest,
    page: int = PAGE_QUERY,
) -> ResourcePage:
    """List the given resources, newest first. Unknown ids are skipped."""
    return _page(await list_resources_by_ids(request.ids, page), page)


@router.post("/ids/count", response_model=CountResponse)
async def post_resources_by_ids_count(request: ResourceIdsRequest) -> CountResponse:
    return CountResponse(count=await count_resources_by_ids(request.ids))


@router.post("", response_model=ResourceOut, status_code=status.HTTP_201_CREATED)
async def post_resource(
    request: ResourceCreate,
    principal: Principal = Depends(require_principal),
) -> ResourceOut:
    """Create a resource owned by the signed-in user."""
    try:
        resource = await create_resource(
            request.model_dump(),
            owner_email=principal.email,
            owner_name=principal.name or "",
        )
    except UnknownReferenceError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return ResourceOut.model_validate(resource)


@router.get("/{resource_id}", response_model=ResourceOut)
async def get_one_resource(resource_id: str) -> ResourceOut:
    resource = await get_resource(resource_id)
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource does not exist")
    return ResourceOut.model_validate(resource)


async def _owned_resource(resource_id: str, principal: Principal):
    resource = await get_resource(resource_id)
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource does not exist")
    if resource.user_email != principal.email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Only the owner can change this resource",
        )
    return resource


@router.patch("/{resource_id}", response_model=ResourceOut)
async def patch_resource(
    resource_id: str,
    request: ResourceUpdate,
    principal: Principal = Depends(require_principal),
) -> ResourceOut:
    """Merge-patch a resource the caller owns."""
    await _owned_resource(resource_id, principal)
    try:
        resource = await update_resource(resource_id, request.model_dump(exclude_unset=True))
    except UnknownReferenceError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource does not exist")
    return ResourceOut.model_validate(resource)


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_resource(
    resource_id: str,
    principal: Principal = Depends(require_principal),
) -> Response:
    await _owned_resource(resource_id, principal)
    await delete_resource(resource_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{resource_id}/download", response_model=DownloadResponse)
async def post_download(resource_id: str) -> DownloadResponse:
    """Count one download."""
    downloads = await increment_downloads(resource_id)
    if downloads is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource does not exist")
    return DownloadResponse(downloads_nr=downloads)


@router.get("/{resource_id}/comments", response_model=list[CommentOut])
async def get_comments(resource_id: str) -> list[CommentOut]:
    return [CommentOut.model_validate(c) for c in await list_comments(resource_id)]


@router.post("/{resource_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def post_comment(
    resource_id: str,
    request: CommentCreate,
    principal: Principal = Depends(require_principal),
) -> CommentOut:
    if await get_resource(resource_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource does not exist")
    comment = await add_comment(resource_id, principal.email, principal.name or "", request.body)
    return CommentOut.model_validate(comment)
