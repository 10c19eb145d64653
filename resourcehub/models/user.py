"""User model and vote ledger tables.

The ledger is three sets per user (favorites, upvotes, downvotes), each
stored as a (user_id, resource_id) table with a composite primary key so
that membership has set semantics at the database level.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, func
from sqlalchemy.orm import Mapped, mapped_column

from resourcehub.stores.postgres import Base


def _ledger_table(name: str) -> Table:
    return Table(
        name,
        Base.metadata,
        Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        Column("resource_id", ForeignKey("resources.id", ondelete="CASCADE"), primary_key=True),
        Column("created_at", DateTime(timezone=True), server_default=func.now()),
    )


user_favorites = _ledger_table("user_favorites")
user_upvotes = _ledger_table("user_upvotes")
user_downvotes = _ledger_table("user_downvotes")


class User(Base):
    """Signed-in user, keyed by email."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(200))
    image: Mapped[str | None] = mapped_column(String(500))

    # GitHub account id (string, as returned by the provider)
    github_id: Mapped[str | None] = mapped_column(String(50), unique=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
