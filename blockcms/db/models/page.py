from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from blockcms.blocks.schema import PageStatus
from blockcms.db.base import Base


class Page(Base):
    """A composed page.

    ``body`` is the whole page document (version, SEO, ordered blocks) stored
    as one JSON value and replaced wholesale on every save.
    """

    __tablename__ = "pages"

    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PageStatus.DRAFT.value, index=True
    )
    body: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    publish_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    updated_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    @property
    def is_published(self) -> bool:
        return self.status == PageStatus.PUBLISHED.value
