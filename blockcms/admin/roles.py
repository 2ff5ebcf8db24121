"""Role and permission administration API."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, delete, get, post, put
from litestar.status_codes import HTTP_204_NO_CONTENT
from sqlalchemy.ext.asyncio import AsyncSession

from blockcms.admin.helpers import require_found
from blockcms.auth.guards import AnyPermission, Permission, auth_guard
from blockcms.auth.roles import MANAGE_PERMISSIONS, MANAGE_ROLES, MANAGE_USERS
from blockcms.db.services import role_service
from blockcms.db.services.role_service import role_to_dict


class RoleAdminController(Controller):
    path = "/api/admin"
    guards = [auth_guard]

    @get("/roles", guards=[AnyPermission(MANAGE_ROLES, MANAGE_USERS)])
    async def list_roles(self, db_session: AsyncSession) -> list[dict[str, Any]]:
        return [role_to_dict(role) for role in await role_service.list_roles(db_session)]

    @get("/roles/{role_id:uuid}", guards=[Permission(MANAGE_ROLES)])
    async def get_role(self, db_session: AsyncSession, role_id: UUID) -> dict[str, Any]:
        role = await role_service.get_role(db_session, role_id)
        return role_to_dict(require_found(role, "Role", role_id))

    @post("/roles", guards=[Permission(MANAGE_ROLES)])
    async def create_role(self, db_session: AsyncSession, data: dict[str, Any]) -> dict[str, Any]:
        return role_to_dict(await role_service.create_role(db_session, data))

    @put("/roles/{role_id:uuid}", guards=[Permission(MANAGE_ROLES)])
    async def update_role(
        self, db_session: AsyncSession, role_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        role = await role_service.update_role(db_session, role_id, data)
        return role_to_dict(require_found(role, "Role", role_id))

    @delete("/roles/{role_id:uuid}", guards=[Permission(MANAGE_ROLES)], status_code=HTTP_204_NO_CONTENT)
    async def delete_role(self, db_session: AsyncSession, role_id: UUID) -> None:
        require_found(await role_service.delete_role(db_session, role_id), "Role", role_id)

    @get("/permissions", guards=[AnyPermission(MANAGE_PERMISSIONS, MANAGE_ROLES)])
    async def list_permissions(self, db_session: AsyncSession) -> list[dict[str, Any]]:
        permissions = await role_service.list_permissions(db_session)
        return [
            {"id": str(p.id), "name": p.name, "description": p.description}
            for p in permissions
        ]

    @post("/permissions", guards=[Permission(MANAGE_PERMISSIONS)])
    async def create_permission(self, db_session: AsyncSession, data: dict[str, Any]) -> dict[str, Any]:
        permission = await role_service.create_permission(db_session, data)
        return {"id": str(permission.id), "name": permission.name, "description": permission.description}
