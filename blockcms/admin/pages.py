"""Page administration API."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, Request, delete, get, post, put
from litestar.status_codes import HTTP_200_OK, HTTP_204_NO_CONTENT
from sqlalchemy.ext.asyncio import AsyncSession

from blockcms.admin.helpers import current_user_id, page_to_dict, require_found
from blockcms.auth.guards import AnyPermission, Permission, auth_guard
from blockcms.auth.roles import MANAGE_CONTENT, PUBLISH_CONTENT
from blockcms.blocks.registry import BLOCK_DEFINITIONS, default_block_data
from blockcms.blocks.schema import PageStatus
from blockcms.blocks.validation import ValidationIssue, dump_page_input, validate_page
from blockcms.db.services import page_service
from blockcms.lib.exceptions import DocumentValidationError


def _parse_status(data: dict[str, Any]) -> PageStatus:
    try:
        return PageStatus(data.get("status"))
    except ValueError:
        allowed = ", ".join(s.value for s in PageStatus)
        raise DocumentValidationError(
            [ValidationIssue(path="status", message=f"Status must be one of {allowed}")]
        ) from None


class PageAdminController(Controller):
    path = "/api/admin"
    guards = [auth_guard]

    @get("/blocks", guards=[AnyPermission(MANAGE_CONTENT, PUBLISH_CONTENT)])
    async def block_types(self) -> list[dict[str, Any]]:
        """Block types the editor can add, with their starter data."""
        return [
            {
                "type": definition.type,
                "label": definition.label,
                "icon": definition.icon,
                "collection": definition.collection,
                "defaults": default_block_data(definition.type),
            }
            for definition in BLOCK_DEFINITIONS.values()
        ]

    @get("/pages", guards=[AnyPermission(MANAGE_CONTENT, PUBLISH_CONTENT)])
    async def list_pages(
        self,
        db_session: AsyncSession,
        status: PageStatus | None = None,
    ) -> list[dict[str, Any]]:
        pages = await page_service.list_pages(db_session, status=status)
        return [page_to_dict(page, include_body=False) for page in pages]

    @get("/pages/{page_id:uuid}", guards=[AnyPermission(MANAGE_CONTENT, PUBLISH_CONTENT)])
    async def get_page(self, db_session: AsyncSession, page_id: UUID) -> dict[str, Any]:
        page = require_found(await page_service.get_page_by_id(db_session, page_id), "Page", page_id)
        return page_to_dict(page)

    @post("/pages", guards=[Permission(MANAGE_CONTENT)])
    async def create_page(
        self, request: Request, db_session: AsyncSession, data: dict[str, Any]
    ) -> dict[str, Any]:
        page = await page_service.create_page(db_session, data, user_id=current_user_id(request))
        return page_to_dict(page)

    @put("/pages/{page_id:uuid}", guards=[Permission(MANAGE_CONTENT)])
    async def update_page(
        self, request: Request, db_session: AsyncSession, page_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        page = await page_service.update_page(
            db_session, page_id, data, user_id=current_user_id(request)
        )
        return page_to_dict(require_found(page, "Page", page_id))

    @delete("/pages/{page_id:uuid}", guards=[Permission(MANAGE_CONTENT)], status_code=HTTP_204_NO_CONTENT)
    async def delete_page(self, db_session: AsyncSession, page_id: UUID) -> None:
        require_found(await page_service.delete_page(db_session, page_id), "Page", page_id)

    @post("/pages/{page_id:uuid}/publish", guards=[Permission(PUBLISH_CONTENT)], status_code=HTTP_200_OK)
    async def publish_page(self, request: Request, db_session: AsyncSession, page_id: UUID) -> dict[str, Any]:
        page = await page_service.publish_page(db_session, page_id, user_id=current_user_id(request))
        return page_to_dict(require_found(page, "Page", page_id))

    @put("/pages/{page_id:uuid}/status", guards=[Permission(PUBLISH_CONTENT)])
    async def set_status(
        self, request: Request, db_session: AsyncSession, page_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        page = await page_service.set_page_status(
            db_session, page_id, _parse_status(data), user_id=current_user_id(request)
        )
        return page_to_dict(require_found(page, "Page", page_id))

    @post("/pages/validate", guards=[Permission(MANAGE_CONTENT)], status_code=HTTP_200_OK)
    async def validate(self, data: dict[str, Any]) -> dict[str, Any]:
        """Dry-run validation for the editor; never stores anything."""
        result = validate_page(data)
        if not result.ok:
            return {"valid": False, "errors": [issue.as_dict() for issue in result.errors]}
        return {"valid": True, "errors": [], "page": dump_page_input(result.value)}
