"""SQLAlchemy ORM models.

Models represent database tables:
- resources: Shared study resources with engagement counters
- users: Signed-in users (+ favorites/upvotes/downvotes ledger tables)
- comments: Comments on resources (count towards popularity)
- courses, subjects, document_types: Reference data joined into search
"""

from resourcehub.models.comment import Comment
from resourcehub.models.course import Course
from resourcehub.models.document_type import DocumentType
from resourcehub.models.resource import Resource
from resourcehub.models.subject import Subject
from resourcehub.models.user import User, user_downvotes, user_favorites, user_upvotes

__all__ = [
    "Comment",
    "Course",
    "DocumentType",
    "Resource",
    "Subject",
    "User",
    "user_downvotes",
    "user_favorites",
    "user_upvotes",
]
