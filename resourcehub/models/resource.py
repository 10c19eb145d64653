"""Resource model.

A shared study resource. Owner identity is denormalized (email + display
name) so listings never need to join users.

Counters are only ever changed through single UPDATE statements of the form
``counter = counter + n`` (see services.votes and services.resources).
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from resourcehub.stores.postgres import Base


def generate_resource_id() -> str:
    """Generate unique resource ID."""
    return str(uuid4())


class Resource(Base):
    """Shared resource with engagement counters."""

    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_resource_id)

    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[str] = mapped_column(Text, default="")

    # References (nullable: an unresolved reference excludes the resource from search)
    document_type_id: Mapped[int | None] = mapped_column(ForeignKey("document_types.id"), index=True)
    subject_id: Mapped[int | None] = mapped_column(ForeignKey("subjects.id"), index=True)
    course_id: Mapped[int | None] = mapped_column(ForeignKey("courses.id"), index=True)

    document_format: Mapped[str] = mapped_column(String(50), default="")  # pdf, docx, zip, ...
    hashtags: Mapped[str] = mapped_column(Text, default="")  # free text, e.g. "#exam #2023"

    # Owner
    user_email: Mapped[str] = mapped_column(String(320), index=True)
    user_name: Mapped[str] = mapped_column(String(200), default="")

    # Engagement counters
    favorites_nr: Mapped[int] = mapped_column(default=0, server_default="0")
    upvotes_nr: Mapped[int] = mapped_column(default=0, server_default="0")
    downvotes_nr: Mapped[int] = mapped_column(default=0, server_default="0")
    downloads_nr: Mapped[int] = mapped_column(default=0, server_default="0")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Resource {self.id} {self.title!r}>"
