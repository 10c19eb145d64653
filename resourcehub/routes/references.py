"""Reference data endpoints (courses, subjects, document types)."""

from fastapi import APIRouter, Query

from resourcehub.schemas import CourseOut, DocumentTypeOut, SubjectOut
from resourcehub.services.references import list_courses, list_document_types, list_subjects

router = APIRouter()


@router.get("/courses", response_model=list[CourseOut])
async def get_courses() -> list[CourseOut]:
    return [CourseOut.model_validate(c) for c in await list_courses()]


@router.get("/subjects", response_model=list[SubjectOut])
async def get_subjects(
    course_id: int | None = Query(default=None, alias="courseId", description="Only this course"),
) -> list[SubjectOut]:
    return [SubjectOut.model_validate(s) for s in await list_subjects(course_id)]


@router.get("/document-types", response_model=list[DocumentTypeOut])
async def get_document_types() -> list[DocumentTypeOut]:
    return [DocumentTypeOut.model_validate(d) for d in await list_document_types()]
