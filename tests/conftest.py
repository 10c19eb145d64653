"""Shared fixtures: an in-memory database, an HTTP client and reference rows."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from resourcehub.dependencies import get_optional_principal
from resourcehub.main import app
from resourcehub.models import Course, DocumentType, Subject
from resourcehub.services.auth import Principal
from resourcehub.stores import postgres

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db():
    """Fresh schema in an in-memory SQLite database."""
    await postgres.init_db(TEST_DATABASE_URL)
    await postgres.create_tables()
    yield
    await postgres.drop_tables()
    await postgres.close_db()


@pytest.fixture
async def foreign_keys(db):
    """Enforce foreign keys like Postgres does (SQLite leaves them off by default)."""
    async with postgres.get_session() as session:
        await session.execute(text("PRAGMA foreign_keys=ON"))


@pytest.fixture
async def file_db(tmp_path):
    """Schema in a SQLite file, so concurrent sessions get their own connections."""
    await postgres.init_db(f"sqlite+aiosqlite:///{tmp_path / 'hub.db'}")
    await postgres.create_tables()
    yield
    await postgres.drop_tables()
    await postgres.close_db()


@pytest.fixture
async def client():
    """Create test client (lifespan is not run: no Postgres/Redis)."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def sign_in():
    """Act as a signed-in user without going through GitHub/Redis."""

    def _sign_in(email: str, name: str = "Test User") -> Principal:
        principal = Principal(email=email, name=name)
        app.dependency_overrides[get_optional_principal] = lambda: principal
        return principal

    yield _sign_in
    app.dependency_overrides.pop(get_optional_principal, None)


@pytest.fixture
async def refs(db):
    """One course, one subject in it and one document type."""
    async with postgres.get_session() as session:
        course = Course(name="Computer Engineering")
        doc_type = DocumentType(name="Exam")
        session.add_all([course, doc_type])
        await session.flush()
        subject = Subject(name="Operating Systems", course_id=course.id)
        session.add(subject)
        await session.flush()
    return {"course": course, "subject": subject, "document_type": doc_type}
