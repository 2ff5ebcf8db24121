"""Media library records. The files themselves are stored elsewhere."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from blockcms.db.base import Base


class Media(Base):
    __tablename__ = "media"

    filename: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(128), nullable=False)
    alt: Mapped[str | None] = mapped_column(String(500), nullable=True)
