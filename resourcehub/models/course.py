"""Course model.

A course groups subjects (e.g. "Computer Engineering").
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from resourcehub.stores.postgres import Base


class Course(Base):
    """Course - reference entity joined into search results."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), unique=True)

    def __repr__(self) -> str:
        return f"<Course {self.name}>"
