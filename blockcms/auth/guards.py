"""Litestar guards that gate handlers on roles and permissions.

Attach ``auth_guard`` to a controller or handler and list the requirements
next to it::

    guards=[auth_guard, Permission("manage_content") | Permission("publish_content")]

``auth_guard`` evaluates every ``AuthRequirement`` found in the handler's
guard list. Requirements themselves are inert when Litestar calls them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from litestar.exceptions import NotAuthorizedException, PermissionDeniedException

from blockcms.auth import services
from blockcms.auth.session_keys import SESSION_USER_ID

if TYPE_CHECKING:
    from litestar.connection import ASGIConnection
    from litestar.handlers.base import BaseRouteHandler

    from blockcms.auth.services import UserPermissions


class AuthRequirement(ABC):
    """A check against a user's roles and permissions."""

    @abstractmethod
    async def check(self, permissions: "UserPermissions") -> bool: ...

    async def __call__(self, connection: "ASGIConnection", handler: "BaseRouteHandler") -> None:
        # Evaluated by auth_guard with the loaded permissions
        return None

    def __or__(self, other: "AuthRequirement") -> "OrRequirement":
        return OrRequirement(self, other)

    def __and__(self, other: "AuthRequirement") -> "AndRequirement":
        return AndRequirement(self, other)


class OrRequirement(AuthRequirement):
    def __init__(self, left: AuthRequirement, right: AuthRequirement):
        self.left = left
        self.right = right

    async def check(self, permissions: "UserPermissions") -> bool:
        return await self.left.check(permissions) or await self.right.check(permissions)

    def __repr__(self) -> str:
        return f"({self.left!r} | {self.right!r})"


class AndRequirement(AuthRequirement):
    def __init__(self, left: AuthRequirement, right: AuthRequirement):
        self.left = left
        self.right = right

    async def check(self, permissions: "UserPermissions") -> bool:
        return await self.left.check(permissions) and await self.right.check(permissions)

    def __repr__(self) -> str:
        return f"({self.left!r} & {self.right!r})"


class Permission(AuthRequirement):
    """Requires one named permission."""

    def __init__(self, permission: str):
        self.permission = permission

    async def check(self, permissions: "UserPermissions") -> bool:
        return self.permission in permissions.permissions

    def __repr__(self) -> str:
        return f"Permission({self.permission!r})"


class Role(AuthRequirement):
    """Requires membership of one named role."""

    def __init__(self, role: str):
        self.role = role

    async def check(self, permissions: "UserPermissions") -> bool:
        return self.role in permissions.roles

    def __repr__(self) -> str:
        return f"Role({self.role!r})"


class AnyPermission(AuthRequirement):
    def __init__(self, *permissions: str):
        self.permissions = frozenset(permissions)

    async def check(self, permissions: "UserPermissions") -> bool:
        return not self.permissions.isdisjoint(permissions.permissions)

    def __repr__(self) -> str:
        return f"AnyPermission({', '.join(sorted(self.permissions))})"


class AllPermissions(AuthRequirement):
    def __init__(self, *permissions: str):
        self.permissions = frozenset(permissions)

    async def check(self, permissions: "UserPermissions") -> bool:
        return self.permissions <= permissions.permissions

    def __repr__(self) -> str:
        return f"AllPermissions({', '.join(sorted(self.permissions))})"


async def auth_guard(connection: "ASGIConnection", handler: "BaseRouteHandler") -> None:
    """Require a signed-in user who satisfies every requirement on the handler.

    Raises:
        NotAuthorizedException: No user in the session (401)
        PermissionDeniedException: The user fails a requirement (403)
    """
    session = connection.session
    user_id = session.get(SESSION_USER_ID) if session else None
    if not user_id:
        raise NotAuthorizedException("Authentication required")

    requirements = [g for g in (handler.guards or []) if isinstance(g, AuthRequirement)]
    if not requirements:
        return

    async with connection.app.state.session_maker_class() as db_session:
        permissions = await services.get_user_permissions(db_session, user_id)

    for requirement in requirements:
        if not await requirement.check(permissions):
            raise PermissionDeniedException("Insufficient permissions")
