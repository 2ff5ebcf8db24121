"""Media library administration API (records only)."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, delete, get, post, put
from litestar.status_codes import HTTP_204_NO_CONTENT
from sqlalchemy.ext.asyncio import AsyncSession

from blockcms.admin.helpers import require_found
from blockcms.auth.guards import AnyPermission, Permission, auth_guard
from blockcms.auth.roles import MANAGE_CONTENT, MANAGE_MEDIA
from blockcms.db.services import media_service
from blockcms.db.services.media_service import media_to_dict


class MediaAdminController(Controller):
    path = "/api/admin/media"
    guards = [auth_guard]

    @get("/", guards=[AnyPermission(MANAGE_MEDIA, MANAGE_CONTENT)])
    async def list_media(
        self,
        db_session: AsyncSession,
        type: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """List media; ``type=image`` narrows to images for the block editor."""
        prefix = f"{type}/" if type else None
        items = await media_service.list_media(db_session, mime_prefix=prefix, limit=limit, offset=offset)
        return [media_to_dict(m) for m in items]

    @get("/{media_id:uuid}", guards=[AnyPermission(MANAGE_MEDIA, MANAGE_CONTENT)])
    async def get_media(self, db_session: AsyncSession, media_id: UUID) -> dict[str, Any]:
        media = await media_service.get_media(db_session, media_id)
        return media_to_dict(require_found(media, "Media", media_id))

    @post("/", guards=[Permission(MANAGE_MEDIA)])
    async def create_media(self, db_session: AsyncSession, data: dict[str, Any]) -> dict[str, Any]:
        return media_to_dict(await media_service.create_media(db_session, data))

    @put("/{media_id:uuid}", guards=[Permission(MANAGE_MEDIA)])
    async def update_media(
        self, db_session: AsyncSession, media_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        alt = data.get("alt")
        media = await media_service.update_media_alt(
            db_session, media_id, alt if isinstance(alt, str) else None
        )
        return media_to_dict(require_found(media, "Media", media_id))

    @delete("/{media_id:uuid}", guards=[Permission(MANAGE_MEDIA)], status_code=HTTP_204_NO_CONTENT)
    async def delete_media(self, db_session: AsyncSession, media_id: UUID) -> None:
        require_found(await media_service.delete_media(db_session, media_id), "Media", media_id)
