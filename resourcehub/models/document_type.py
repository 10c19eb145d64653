"""Document type model (notes, exam, exercises, ...)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from resourcehub.stores.postgres import Base


class DocumentType(Base):
    """Kind of document a resource is."""

    __tablename__ = "document_types"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)

    def __repr__(self) -> str:
        return f"<DocumentType {self.name}>"
