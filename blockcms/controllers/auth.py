"""Session introspection for the admin UI.

Signing in is done by the authentication provider in front of this app,
which stores the user's id in the session under ``user_id``.
"""

from __future__ import annotations

from typing import Any

from litestar import Controller, Request, get, post
from litestar.exceptions import NotAuthorizedException
from litestar.status_codes import HTTP_200_OK
from sqlalchemy.ext.asyncio import AsyncSession

from blockcms.admin.helpers import current_user_id
from blockcms.auth.services import get_user_permissions
from blockcms.db.services import user_service


class AuthController(Controller):
    path = "/api/auth"

    @get("/me")
    async def me(self, request: Request, db_session: AsyncSession) -> dict[str, Any]:
        """The signed-in user with their roles and effective permissions."""
        user_id = current_user_id(request)
        user = await user_service.get_user(db_session, user_id) if user_id else None
        if user is None or not user.is_active:
            request.clear_session()
            raise NotAuthorizedException("Authentication required")

        perms = await get_user_permissions(db_session, user_id)
        return {
            "id": str(user.id),
            "email": user.email,
            "name": user.name,
            "roles": sorted(perms.roles),
            "permissions": sorted(perms.permissions),
        }

    @post("/logout", status_code=HTTP_200_OK)
    async def logout(self, request: Request) -> dict[str, Any]:
        request.clear_session()
        return {"ok": True}
