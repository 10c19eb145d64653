"""Pydantic schemas for API request/response validation."""

from resourcehub.schemas.auth import SessionResponse, SessionUser
from resourcehub.schemas.common import ErrorDetail, ErrorResponse
from resourcehub.schemas.reference import (
    CommentCreate,
    CommentOut,
    CourseOut,
    DocumentTypeOut,
    SubjectOut,
)
from resourcehub.schemas.resource import (
    CountResponse,
    CourseRef,
    DocumentTypeRef,
    DownloadResponse,
    PopularPage,
    PopularResource,
    ResourceCreate,
    ResourceIdsRequest,
    ResourceOut,
    ResourcePage,
    ResourceUpdate,
    SearchPage,
    SearchResource,
    SubjectRef,
)
from resourcehub.schemas.user import (
    FavoritesResponse,
    MessageResponse,
    ResourceIdRequest,
    UserVotes,
)

__all__ = [
    "CommentCreate",
    "CommentOut",
    "CountResponse",
    "CourseOut",
    "CourseRef",
    "DocumentTypeOut",
    "DocumentTypeRef",
    "DownloadResponse",
    "ErrorDetail",
    "ErrorResponse",
    "FavoritesResponse",
    "MessageResponse",
    "PopularPage",
    "PopularResource",
    "ResourceCreate",
    "ResourceIdRequest",
    "ResourceIdsRequest",
    "ResourceOut",
    "ResourcePage",
    "ResourceUpdate",
    "SearchPage",
    "SearchResource",
    "SessionResponse",
    "SessionUser",
    "SubjectOut",
    "SubjectRef",
]
