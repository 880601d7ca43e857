from __future__ import annotations

from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from docvault.db.base import Base, CreatedAtMixin, UUIDMixin


class Document(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "documents"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    storage_path: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    file_size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Document id={self.id} owner={self.created_by} path={self.storage_path!r}>"
