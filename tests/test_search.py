"""Tests for search over resources joined with subject, course and document type."""

import pytest

from resourcehub.services.resources import update_resource
from resourcehub.services.search import count_search, like_pattern, search_resources
from tests.factories import make_resource


def test_like_pattern_escapes_wildcards() -> None:
    assert like_pattern("50%_off") == "%50\\%\\_off%"
    assert like_pattern("") == "%%"


@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(refs) -> None:
    r = await make_resource(refs, title="Midterm Solutions")

    results = await search_resources("TERM sol", page_size=10)

    assert [s.id for s in results] == [r.id]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "query",
    ["threads", "pdf", "alice@uni", "Alice Doe", "#exam2023", "operating", "engineering", "EXAM", "scheduling"],
)
async def test_search_matches_every_field(refs, query: str) -> None:
    r = await make_resource(
        refs,
        title="Kernel threads",
        description="Notes on scheduling",
        document_format="pdf",
        hashtags="#exam2023",
        user_email="alice@uni.example",
        user_name="Alice Doe",
    )

    results = await search_resources(query, page_size=10)

    assert [s.id for s in results] == [r.id]


@pytest.mark.asyncio
async def test_search_projection_shape(refs) -> None:
    r = await make_resource(refs, title="Paging", upvotes_nr=2, downloads_nr=7)

    [result] = await search_resources("paging", page_size=10)

    assert result.id == r.id
    assert result.document_type.id == refs["document_type"].id
    assert result.document_type.name == "Exam"
    assert result.subject.id == refs["subject"].id
    assert result.subject.course_id == refs["course"].id
    assert result.subject.name == "Operating Systems"
    assert result.course.name == "Computer Engineering"
    assert result.upvotes_nr == 2
    assert result.downloads_nr == 7

    payload = result.model_dump(by_alias=True)
    assert set(payload["subject"]) == {"id", "courseId", "name"}
    assert "documentType" in payload


@pytest.mark.asyncio
async def test_resource_without_subject_is_excluded(refs) -> None:
    orphan = await make_resource(refs, title="Lonely notes")
    linked = await make_resource(refs, title="Linked notes", minutes=1)

    await update_resource(orphan.id, {"subject_id": None})

    results = await search_resources("notes", page_size=10)

    assert [s.id for s in results] == [linked.id]


@pytest.mark.asyncio
async def test_resource_with_dangling_subject_is_excluded(refs) -> None:
    await make_resource(refs, title="Dangling notes", subject_id=9999)

    assert await search_resources("dangling", page_size=10) == []
    assert await count_search("dangling") == 0


@pytest.mark.asyncio
async def test_percent_is_matched_literally(refs) -> None:
    discount = await make_resource(refs, title="100% coverage")
    await make_resource(refs, title="100 points", minutes=1)

    results = await search_resources("100%", page_size=10)

    assert [s.id for s in results] == [discount.id]


@pytest.mark.asyncio
async def test_count_search_is_total_not_page(refs) -> None:
    for i in range(5):
        await make_resource(refs, title=f"Lecture {i}", minutes=i)
    await make_resource(refs, title="Unrelated", minutes=10)

    page = await search_resources("lecture", page=0, page_size=2)
    last = await search_resources("lecture", page=2, page_size=2)

    assert len(page) == 2
    assert len(last) == 1
    assert await count_search("lecture") == 5
    # Newest first within the matches.
    assert page[0].title == "Lecture 4"
