"""Permission aggregation and role assignment.

A user's effective permissions are the union of the permissions granted by
every role currently assigned to them. They are read from the database on
each call, so a role change takes effect on the next request in every
worker process.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blockcms.auth.roles import PERMISSION_DESCRIPTIONS, ROLE_DEFINITIONS
from blockcms.db.models.role import Permission, Role
from blockcms.db.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class UserPermissions:
    """Roles and effective permissions of one user."""

    user_id: str
    roles: set[str] = field(default_factory=set)
    permissions: set[str] = field(default_factory=set)


def _parse_user_id(user_id: str | UUID) -> UUID | None:
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(str(user_id))
    except ValueError:
        return None


async def get_user_permissions(
    db_session: AsyncSession,
    user_id: str | UUID,
) -> UserPermissions:
    """Load a user's roles and the union of their permissions.

    Unknown or malformed user ids and deactivated users yield an empty
    permission set rather than an error.
    """
    key = str(user_id)
    uid = _parse_user_id(user_id)
    if uid is None:
        logger.debug("Malformed user id %r has no permissions", user_id)
        return UserPermissions(user_id=key)

    result = await db_session.execute(
        select(User)
        .where(User.id == uid)
        .options(selectinload(User.roles).selectinload(Role.permissions))
    )
    user = result.scalar_one_or_none()

    perms = UserPermissions(user_id=key)
    if user is None:
        return perms
    if not user.is_active:
        logger.debug("User %s is deactivated and has no permissions", key)
        return perms

    for role in user.roles:
        perms.roles.add(role.name)
        perms.permissions.update(p.name for p in role.permissions)
    return perms


async def resolve_permissions(db_session: AsyncSession, user_id: str | UUID) -> set[str]:
    perms = await get_user_permissions(db_session, user_id)
    return set(perms.permissions)


async def has_permission(db_session: AsyncSession, user_id: str | UUID, name: str) -> bool:
    return name in await resolve_permissions(db_session, user_id)


async def has_any_permission(
    db_session: AsyncSession, user_id: str | UUID, names: Iterable[str]
) -> bool:
    """True when the user holds at least one of ``names``; False for an empty list."""
    return not (await resolve_permissions(db_session, user_id)).isdisjoint(names)


async def has_all_permissions(
    db_session: AsyncSession, user_id: str | UUID, names: Iterable[str]
) -> bool:
    """True when the user holds every one of ``names``; True for an empty list."""
    return set(names) <= await resolve_permissions(db_session, user_id)


async def _get_user(db_session: AsyncSession, user_id: str | UUID) -> User | None:
    uid = _parse_user_id(user_id)
    if uid is None:
        return None
    result = await db_session.execute(
        select(User).where(User.id == uid).options(selectinload(User.roles))
    )
    return result.scalar_one_or_none()


async def _get_role(db_session: AsyncSession, role_name: str) -> Role | None:
    result = await db_session.execute(select(Role).where(Role.name == role_name))
    return result.scalar_one_or_none()


async def assign_role_to_user(
    db_session: AsyncSession,
    user_id: str | UUID,
    role_name: str,
) -> bool:
    """Assign a role to a user.

    Returns:
        True if the user now holds the role, False if the user or role is missing
    """
    user = await _get_user(db_session, user_id)
    role = await _get_role(db_session, role_name)
    if user is None or role is None:
        return False

    if role not in user.roles:
        user.roles.append(role)
        await db_session.commit()

    return True


async def remove_role_from_user(
    db_session: AsyncSession,
    user_id: str | UUID,
    role_name: str,
) -> bool:
    """Remove a role from a user.

    Returns:
        True if the role was removed, False if the user is missing or lacked it
    """
    user = await _get_user(db_session, user_id)
    if user is None:
        return False

    for role in list(user.roles):
        if role.name == role_name:
            user.roles.remove(role)
            await db_session.commit()
            return True

    return False


async def sync_roles_to_database(db_session: AsyncSession) -> None:
    """Create missing permissions and roles from the default catalogue.

    Existing roles gain any catalogue permissions they lack; permissions an
    operator added by hand are left alone.
    """
    result = await db_session.execute(select(Permission))
    permissions = {p.name: p for p in result.scalars().all()}
    for name, description in PERMISSION_DESCRIPTIONS.items():
        if name not in permissions:
            permission = Permission(name=name, description=description or None)
            db_session.add(permission)
            permissions[name] = permission

    result = await db_session.execute(select(Role).options(selectinload(Role.permissions)))
    roles = {r.name: r for r in result.scalars().all()}
    for definition in ROLE_DEFINITIONS.values():
        role = roles.get(definition.name)
        if role is None:
            role = Role(
                name=definition.name,
                description=definition.description,
                is_active=True,
                permissions=[],
            )
            db_session.add(role)
        held = {p.name for p in role.permissions}
        for name in sorted(definition.permissions - held):
            role.permissions.append(permissions[name])

    await db_session.commit()
    logger.info("Synced %d roles and %d permissions", len(ROLE_DEFINITIONS), len(permissions))
