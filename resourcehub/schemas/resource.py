"""Schemas for resource listings, search and mutations (/api/resources)."""

from datetime import datetime

from pydantic import BaseModel, Field


class ResourceOut(BaseModel):
    """A resource as stored, with its engagement counters."""

    id: str
    title: str
    description: str = ""
    document_type_id: int | None = Field(alias="documentTypeId", default=None)
    document_format: str = Field(alias="documentFormat", default="")
    hashtags: str = ""
    subject_id: int | None = Field(alias="subjectId", default=None)
    course_id: int | None = Field(alias="courseId", default=None)
    user_email: str = Field(alias="userEmail")
    user_name: str = Field(alias="userName", default="")
    created_at: datetime = Field(alias="createdAt")
    favorites_nr: int = Field(alias="favoritesNr", ge=0, default=0)
    upvotes_nr: int = Field(alias="upvotesNr", ge=0, default=0)
    downvotes_nr: int = Field(alias="downvotesNr", ge=0, default=0)
    downloads_nr: int = Field(alias="downloadsNr", ge=0, default=0)

    model_config = {"populate_by_name": True, "from_attributes": True}


class PopularResource(ResourceOut):
    """A resource with the score it was ranked by."""

    comment_count: int = Field(alias="commentCount", ge=0, default=0)
    popularity: float


class DocumentTypeRef(BaseModel):
    id: int
    name: str


class SubjectRef(BaseModel):
    id: int
    course_id: int = Field(alias="courseId")
    name: str

    model_config = {"populate_by_name": True}


class CourseRef(BaseModel):
    id: int
    name: str


class SearchResource(BaseModel):
    """Reduced shape returned by search: a resource joined with its references."""

    id: str
    title: str
    description: str
    document_type: DocumentTypeRef = Field(alias="documentType")
    document_format: str = Field(alias="documentFormat")
    user_email: str = Field(alias="userEmail")
    user_name: str = Field(alias="userName")
    hashtags: str
    subject: SubjectRef
    course: CourseRef
    created_at: datetime = Field(alias="createdAt")
    favorites_nr: int = Field(alias="favoritesNr", ge=0)
    upvotes_nr: int = Field(alias="upvotesNr", ge=0)
    downvotes_nr: int = Field(alias="downvotesNr", ge=0)
    downloads_nr: int = Field(alias="downloadsNr", ge=0)

    model_config = {"populate_by_name": True}


class ResourcePage(BaseModel):
    """One page of resources sorted newest first."""

    resources: list[ResourceOut]
    page: int = Field(ge=0)
    page_size: int = Field(alias="pageSize", ge=1)

    model_config = {"populate_by_name": True}


class PopularPage(BaseModel):
    """One page of resources sorted by popularity."""

    resources: list[PopularResource]
    page: int = Field(ge=0)
    page_size: int = Field(alias="pageSize", ge=1)

    model_config = {"populate_by_name": True}


class SearchPage(BaseModel):
    """One page of search matches."""

    query: str
    resources: list[SearchResource]
    page: int = Field(ge=0)
    page_size: int = Field(alias="pageSize", ge=1)

    model_config = {"populate_by_name": True}


class CountResponse(BaseModel):
    count: int = Field(ge=0)


class ResourceIdsRequest(BaseModel):
    """Request body for listing a set of resources by id."""

    ids: list[str] = Field(default_factory=list)


class ResourceCreate(BaseModel):
    """Request body for creating a resource. The owner comes from the session."""

    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    document_type_id: int | None = Field(alias="documentTypeId", default=None)
    document_format: str = Field(alias="documentFormat", default="", max_length=50)
    hashtags: str = ""
    subject_id: int | None = Field(alias="subjectId", default=None)
    course_id: int | None = Field(alias="courseId", default=None)

    model_config = {"populate_by_name": True}


class ResourceUpdate(BaseModel):
    """Merge-patch body: only the fields that are sent get updated."""

    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = None
    document_type_id: int | None = Field(alias="documentTypeId", default=None)
    document_format: str | None = Field(alias="documentFormat", default=None, max_length=50)
    hashtags: str | None = None
    subject_id: int | None = Field(alias="subjectId", default=None)
    course_id: int | None = Field(alias="courseId", default=None)

    model_config = {"populate_by_name": True}


class DownloadResponse(BaseModel):
    downloads_nr: int = Field(alias="downloadsNr", ge=0)

    model_config = {"populate_by_name": True}
