#!/usr/bin/env python3
"""Seed database with reference data.

Creates:
- Courses
- Subjects per course
- Document types

Seed script is idempotent (existing rows are looked up by name and skipped).

Usage:
    python -m scripts.seed
"""

import asyncio
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from resourcehub.models import Course, DocumentType, Subject
from resourcehub.settings import get_settings

load_dotenv()

# Course name -> subjects taught in it
COURSES = {
    "Computer Engineering": [
        "Algorithms and Data Structures",
        "Computer Architecture",
        "Databases",
        "Operating Systems",
        "Computer Networks",
    ],
    "Electrical Engineering": [
        "Circuit Theory",
        "Electronics",
        "Signals and Systems",
    ],
    "Mathematics": [
        "Calculus",
        "Linear Algebra",
        "Probability and Statistics",
    ],
}

DOCUMENT_TYPES = [
    "Notes",
    "Exam",
    "Exercises",
    "Slides",
    "Summary",
    "Project",
]


async def seed_database() -> None:
    """Main seed function."""
    settings = get_settings()

    engine = create_async_engine(
        settings.async_database_url,
        echo=False,
    )
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        print("Seeding database...")

        print("\nCreating courses and subjects...")
        await seed_courses(session)

        print("\nCreating document types...")
        await seed_document_types(session)

        await session.commit()
        print("\nDatabase seeded successfully!")

    await engine.dispose()


async def seed_courses(session: AsyncSession) -> dict[str, int]:
    """Create courses and their subjects. Returns course name -> id."""
    course_map: dict[str, int] = {}

    for course_name, subjects in COURSES.items():
        result = await session.execute(select(Course).where(Course.name == course_name))
        course = result.scalar_one_or_none()
        if course:
            print(f"  - {course_name} (exists)")
        else:
            course = Course(name=course_name)
            session.add(course)
            await session.flush()
            print(f"  + {course_name}")
        course_map[course_name] = course.id

        for subject_name in subjects:
            result = await session.execute(
                select(Subject).where(
                    Subject.course_id == course.id,
                    Subject.name == subject_name,
                )
            )
            if result.scalar_one_or_none():
                print(f"      - {subject_name} (exists)")
                continue
            session.add(Subject(name=subject_name, course_id=course.id))
            print(f"      + {subject_name}")

    await session.flush()
    return course_map


async def seed_document_types(session: AsyncSession) -> None:
    """Create document types."""
    for name in DOCUMENT_TYPES:
        result = await session.execute(select(DocumentType).where(DocumentType.name == name))
        if result.scalar_one_or_none():
            print(f"  - {name} (exists)")
            continue
        session.add(DocumentType(name=name))
        print(f"  + {name}")


if __name__ == "__main__":
    asyncio.run(seed_database())
