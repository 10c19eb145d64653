"""Resource store.

Point lookups, newest-first listings (all / by id set / by owner) with their
counts, create, merge-patch update, delete and the atomic download counter.

Absent ids are not errors: lookups and updates return None. Writes that
point at a course, subject or document type that does not exist raise
UnknownReferenceError before anything is written.
"""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from resourcehub.models import (
    Comment,
    Course,
    DocumentType,
    Resource,
    Subject,
    user_downvotes,
    user_favorites,
    user_upvotes,
)
from resourcehub.services.pagination import paginate, resolve_page_size
from resourcehub.services.ranking import invalidate_popular_cache
from resourcehub.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

# Columns a merge-patch may touch, and which of them cannot be cleared.
UPDATABLE_FIELDS = (
    "title",
    "description",
    "document_type_id",
    "document_format",
    "hashtags",
    "subject_id",
    "course_id",
)
NON_NULLABLE_FIELDS = ("title", "description", "document_format", "hashtags")

NEWEST_FIRST = (Resource.created_at.desc(), Resource.id.desc())

# Reference columns and the table each one points at.
REFERENCES = {
    "document_type_id": DocumentType,
    "subject_id": Subject,
    "course_id": Course,
}


class UnknownReferenceError(ValueError):
    """A reference id (course, subject or document type) matches no row."""

    def __init__(self, field: str, value: int):
        super().__init__(f"Unknown {field}: {value}")
        self.field = field
        self.value = value


async def _check_references(session: AsyncSession, fields: dict[str, Any]) -> None:
    for field, model in REFERENCES.items():
        value = fields.get(field)
        if value is not None and await session.get(model, value) is None:
            raise UnknownReferenceError(field, value)


async def get_resource(resource_id: str) -> Resource | None:
    """Get a resource by id, or None if it does not exist."""
    async with get_session() as session:
        return await session.get(Resource, resource_id)


async def _list(query, page: int, page_size: int | None) -> list[Resource]:
    size = resolve_page_size(page_size)
    async with get_session() as session:
        result = await session.execute(paginate(query.order_by(*NEWEST_FIRST), page, size))
        return list(result.scalars().all())


async def _count(query) -> int:
    async with get_session() as session:
        result = await session.execute(query)
        return result.scalar() or 0


async def list_resources(page: int = 0, page_size: int | None = None) -> list[Resource]:
    """List all resources, newest first.

    Args:
        page: Zero-indexed page number.
        page_size: Override for the configured page size.
    """
    return await _list(select(Resource), page, page_size)


async def count_resources() -> int:
    """Count all resources."""
    return await _count(select(func.count(Resource.id)))


async def list_resources_by_ids(
    ids: Sequence[str],
    page: int = 0,
    page_size: int | None = None,
) -> list[Resource]:
    """List the resources whose id is in ``ids``, newest first. Unknown ids are skipped."""
    return await _list(select(Resource).where(Resource.id.in_(list(ids))), page, page_size)


async def count_resources_by_ids(ids: Sequence[str]) -> int:
    """Count the resources whose id is in ``ids``."""
    return await _count(select(func.count(Resource.id)).where(Resource.id.in_(list(ids))))


async def list_resources_by_owner(
    email: str,
    page: int = 0,
    page_size: int | None = None,
) -> list[Resource]:
    """List the resources uploaded by ``email``, newest first."""
    return await _list(select(Resource).where(Resource.user_email == email), page, page_size)


async def count_resources_by_owner(email: str) -> int:
    """Count the resources uploaded by ``email``."""
    return await _count(select(func.count(Resource.id)).where(Resource.user_email == email))


async def create_resource(
    data: dict[str, Any],
    owner_email: str,
    owner_name: str = "",
) -> Resource:
    """Insert a new resource with a fresh id and zeroed counters.

    Args:
        data: Field values (see UPDATABLE_FIELDS); unknown keys are ignored.
        owner_email: Email of the uploading user.
        owner_name: Display name of the uploading user.

    Raises:
        UnknownReferenceError: If a reference id matches no row.
    """
    fields = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
    resource = Resource(**fields, user_email=owner_email, user_name=owner_name)
    async with get_session() as session:
        await _check_references(session, fields)
        session.add(resource)
        await session.flush()
    logger.info(f"Resource created id={resource.id} owner={owner_email}")
    return resource


async def update_resource(resource_id: str, patch: dict[str, Any]) -> Resource | None:
    """Merge-patch a resource. Fields absent from ``patch`` are left untouched.

    Returns:
        The updated resource, or None if the id does not exist.

    Raises:
        UnknownReferenceError: If a patched reference id matches no row.
    """
    values = {
        k: v
        for k, v in patch.items()
        if k in UPDATABLE_FIELDS and not (v is None and k in NON_NULLABLE_FIELDS)
    }
    async with get_session() as session:
        resource = await session.get(Resource, resource_id)
        if resource is None:
            return None
        await _check_references(session, values)
        for key, value in values.items():
            setattr(resource, key, value)
        await session.flush()

    await invalidate_popular_cache()
    return resource


async def increment_downloads(resource_id: str) -> int | None:
    """Atomically add one download.

    A single ``UPDATE ... SET downloads_nr = downloads_nr + 1`` so concurrent
    downloads never lose an increment.

    Returns:
        The new download count, or None if the id does not exist.
    """
    async with get_session() as session:
        result = await session.execute(
            update(Resource)
            .where(Resource.id == resource_id)
            .values(downloads_nr=Resource.downloads_nr + 1)
            .returning(Resource.downloads_nr)
        )
        downloads = result.scalar_one_or_none()

    if downloads is not None:
        await invalidate_popular_cache()
    return downloads


async def delete_resource(resource_id: str) -> bool:
    """Delete a resource with its comments and ledger entries.

    Returns:
        True if the resource existed.
    """
    async with get_session() as session:
        for table in (user_favorites, user_upvotes, user_downvotes):
            await session.execute(delete(table).where(table.c.resource_id == resource_id))
        await session.execute(delete(Comment).where(Comment.resource_id == resource_id))
        result = await session.execute(
            delete(Resource).where(Resource.id == resource_id).returning(Resource.id)
        )
        deleted = result.scalar_one_or_none() is not None

    if deleted:
        logger.info(f"Resource deleted id={resource_id}")
        await invalidate_popular_cache()
    return deleted
