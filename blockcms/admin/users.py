"""User administration API."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, delete, get, post, put
from litestar.status_codes import HTTP_204_NO_CONTENT
from sqlalchemy.ext.asyncio import AsyncSession

from blockcms.admin.helpers import require_found
from blockcms.auth.guards import Permission, auth_guard
from blockcms.auth.roles import MANAGE_USERS
from blockcms.blocks.validation import ValidationIssue
from blockcms.db.services import user_service
from blockcms.db.services.user_service import user_to_dict
from blockcms.lib.exceptions import DocumentValidationError


class UserAdminController(Controller):
    path = "/api/admin/users"
    guards = [auth_guard]

    @get("/", guards=[Permission(MANAGE_USERS)])
    async def list_users(self, db_session: AsyncSession) -> list[dict[str, Any]]:
        return [user_to_dict(user) for user in await user_service.list_users(db_session)]

    @get("/{user_id:uuid}", guards=[Permission(MANAGE_USERS)])
    async def get_user(self, db_session: AsyncSession, user_id: UUID) -> dict[str, Any]:
        user = await user_service.get_user(db_session, user_id)
        return user_to_dict(require_found(user, "User", user_id))

    @post("/", guards=[Permission(MANAGE_USERS)])
    async def create_user(self, db_session: AsyncSession, data: dict[str, Any]) -> dict[str, Any]:
        return user_to_dict(await user_service.create_user(db_session, data))

    @put("/{user_id:uuid}", guards=[Permission(MANAGE_USERS)])
    async def update_user(
        self, db_session: AsyncSession, user_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        user = await user_service.update_user(db_session, user_id, data)
        return user_to_dict(require_found(user, "User", user_id))

    @put("/{user_id:uuid}/roles", guards=[Permission(MANAGE_USERS)])
    async def set_roles(
        self, db_session: AsyncSession, user_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        roles = data.get("roles")
        if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
            raise DocumentValidationError(
                [ValidationIssue(path="roles", message="Roles must be a list of role names")]
            )
        user = await user_service.set_user_roles(db_session, user_id, roles)
        return user_to_dict(require_found(user, "User", user_id))

    @delete("/{user_id:uuid}", guards=[Permission(MANAGE_USERS)], status_code=HTTP_204_NO_CONTENT)
    async def delete_user(self, db_session: AsyncSession, user_id: UUID) -> None:
        require_found(await user_service.delete_user(db_session, user_id), "User", user_id)
