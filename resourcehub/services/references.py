"""Reference data: courses, subjects and document types."""

from sqlalchemy import select

from resourcehub.models import Course, DocumentType, Subject
from resourcehub.stores.postgres import get_session


async def list_courses() -> list[Course]:
    async with get_session() as session:
        result = await session.execute(select(Course).order_by(Course.name))
        return list(result.scalars().all())


async def list_subjects(course_id: int | None = None) -> list[Subject]:
    """List subjects, optionally only those of one course."""
    query = select(Subject).order_by(Subject.name)
    if course_id is not None:
        query = query.where(Subject.course_id == course_id)
    async with get_session() as session:
        result = await session.execute(query)
        return list(result.scalars().all())


async def list_document_types() -> list[DocumentType]:
    async with get_session() as session:
        result = await session.execute(select(DocumentType).order_by(DocumentType.name))
        return list(result.scalars().all())
