"""Subject model.

A subject belongs to exactly one course.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from resourcehub.stores.postgres import Base


class Subject(Base):
    """Subject - reference entity joined into search results."""

    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id"), index=True)

    def __repr__(self) -> str:
        return f"<Subject {self.name}>"
