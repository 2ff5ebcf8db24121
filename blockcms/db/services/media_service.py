"""Media library records.

Uploading and storing the files is handled outside this package; these
functions only keep the catalogue that editors pick images from.
"""

from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from pydantic import Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blockcms.blocks.base import DocumentModel, Url
from blockcms.db.models import Media
from blockcms.db.services.collection_service import parse_input
from blockcms.lib.exceptions import ConflictError


class MediaInput(DocumentModel):
    filename: str = Field(min_length=1, max_length=255)
    original_name: str = Field(min_length=1, max_length=255)
    url: Url
    size: int = Field(ge=0)
    mime_type: str = Field(min_length=1, max_length=128)
    alt: str | None = Field(None, max_length=500)


async def list_media(
    db_session: AsyncSession,
    mime_prefix: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Media]:
    """List media newest first, optionally only ``image/`` or similar."""
    query = select(Media)
    if mime_prefix:
        query = query.where(Media.mime_type.startswith(mime_prefix))
    query = query.order_by(Media.created_at.desc())
    if offset:
        query = query.offset(offset)
    if limit:
        query = query.limit(limit)
    result = await db_session.execute(query)
    return list(result.scalars().all())


async def get_media(db_session: AsyncSession, media_id: UUID) -> Media | None:
    result = await db_session.execute(select(Media).where(Media.id == media_id))
    return result.scalar_one_or_none()


async def create_media(db_session: AsyncSession, data: MediaInput | Mapping[str, Any]) -> Media:
    values = parse_input(MediaInput, data)
    media = Media(**values.model_dump())
    db_session.add(media)
    try:
        await db_session.commit()
    except IntegrityError as exc:
        await db_session.rollback()
        raise ConflictError(detail=f"Media file '{values.filename}' already exists") from exc
    await db_session.refresh(media)
    return media


async def update_media_alt(db_session: AsyncSession, media_id: UUID, alt: str | None) -> Media | None:
    media = await get_media(db_session, media_id)
    if media is None:
        return None
    media.alt = alt or None
    await db_session.commit()
    await db_session.refresh(media)
    return media


async def delete_media(db_session: AsyncSession, media_id: UUID) -> bool:
    media = await get_media(db_session, media_id)
    if media is None:
        return False
    await db_session.delete(media)
    await db_session.commit()
    return True


def media_to_dict(media: Media) -> dict[str, Any]:
    return {
        "id": str(media.id),
        "filename": media.filename,
        "originalName": media.original_name,
        "url": media.url,
        "size": media.size,
        "mimeType": media.mime_type,
        "alt": media.alt,
        "createdAt": media.created_at.isoformat() if media.created_at else None,
    }
