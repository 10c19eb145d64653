"""Search service.

Matches a free-text query as a case-insensitive substring against nine
fields of a resource joined with its subject, course and document type:

- resource: title, description, document_format, user_email, user_name, hashtags
- document type name, subject name, course name

The joins are INNER joins: a resource whose subject, course or document type
is missing (or points at a row that no longer exists) never shows up in
search, whatever its text.

Results are sorted newest first and paginated like every other listing.
"""

from sqlalchemy import Select, func, or_, select

from resourcehub.models import Course, DocumentType, Resource, Subject
from resourcehub.schemas import CourseRef, DocumentTypeRef, SearchResource, SubjectRef
from resourcehub.services.pagination import paginate, resolve_page_size
from resourcehub.stores.postgres import get_session

LIKE_ESCAPE = "\\"

SEARCH_FIELDS = (
    Resource.title,
    Resource.description,
    DocumentType.name,
    Resource.document_format,
    Resource.user_email,
    Resource.user_name,
    Resource.hashtags,
    Subject.name,
    Course.name,
)


def like_pattern(query: str) -> str:
    """Turn a raw query into a LIKE pattern matching it as a literal substring."""
    escaped = (
        query.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def _joined(query: Select) -> Select:
    return (
        query.join(Subject, Resource.subject_id == Subject.id)
        .join(Course, Resource.course_id == Course.id)
        .join(DocumentType, Resource.document_type_id == DocumentType.id)
    )


def _matches(query: str):
    pattern = like_pattern(query)
    return or_(*(field.ilike(pattern, escape=LIKE_ESCAPE) for field in SEARCH_FIELDS))


def build_search_query(query: str) -> Select:
    """Build the (unpaginated) search query projecting the reduced shape."""
    return (
        _joined(
            select(
                Resource.id,
                Resource.title,
                Resource.description,
                DocumentType.id.label("document_type_id"),
                DocumentType.name.label("document_type_name"),
                Resource.document_format,
                Resource.user_email,
                Resource.user_name,
                Resource.hashtags,
                Subject.id.label("subject_id"),
                Subject.course_id.label("subject_course_id"),
                Subject.name.label("subject_name"),
                Course.id.label("course_id"),
                Course.name.label("course_name"),
                Resource.created_at,
                Resource.favorites_nr,
                Resource.upvotes_nr,
                Resource.downvotes_nr,
                Resource.downloads_nr,
            )
        )
        .where(_matches(query))
        .order_by(Resource.created_at.desc(), Resource.id.desc())
    )


def _to_search_resource(row) -> SearchResource:
    return SearchResource(
        id=row.id,
        title=row.title,
        description=row.description,
        document_type=DocumentTypeRef(id=row.document_type_id, name=row.document_type_name),
        document_format=row.document_format,
        user_email=row.user_email,
        user_name=row.user_name,
        hashtags=row.hashtags,
        subject=SubjectRef(
            id=row.subject_id,
            course_id=row.subject_course_id,
            name=row.subject_name,
        ),
        course=CourseRef(id=row.course_id, name=row.course_name),
        created_at=row.created_at,
        favorites_nr=row.favorites_nr,
        upvotes_nr=row.upvotes_nr,
        downvotes_nr=row.downvotes_nr,
        downloads_nr=row.downloads_nr,
    )


async def search_resources(
    query: str,
    page: int = 0,
    page_size: int | None = None,
) -> list[SearchResource]:
    """Get one page of resources matching ``query``.

    Args:
        query: Free text; matched literally (``%`` and ``_`` are not wildcards).
        page: Zero-indexed page number.
        page_size: Override for the configured page size.
    """
    size = resolve_page_size(page_size)
    async with get_session() as session:
        result = await session.execute(paginate(build_search_query(query), page, size))
        return [_to_search_resource(row) for row in result.all()]


async def count_search(query: str) -> int:
    """Count every match of ``query``, before pagination.

    The count runs the whole join + filter, so its cost grows with the
    number of matches (O(matches), not O(1)). Callers paging through results
    should fetch it once per query.
    """
    matches = _joined(select(Resource.id)).where(_matches(query)).subquery()
    async with get_session() as session:
        result = await session.execute(select(func.count()).select_from(matches))
        return result.scalar() or 0
