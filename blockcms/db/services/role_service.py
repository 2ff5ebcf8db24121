"""Roles and permissions as operators edit them in the admin."""

from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from pydantic import Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blockcms.blocks.base import DocumentModel
from blockcms.blocks.validation import ValidationIssue
from blockcms.db.models import Permission, Role
from blockcms.db.services.collection_service import parse_input
from blockcms.lib.exceptions import ConflictError, DocumentValidationError


class RoleInput(DocumentModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    permissions: list[str] = Field(default_factory=list)
    is_active: bool = True


class PermissionInput(DocumentModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None


async def list_permissions(db_session: AsyncSession) -> list[Permission]:
    result = await db_session.execute(select(Permission).order_by(Permission.name))
    return list(result.scalars().all())


async def create_permission(
    db_session: AsyncSession, data: PermissionInput | Mapping[str, Any]
) -> Permission:
    values = parse_input(PermissionInput, data)
    permission = Permission(name=values.name, description=values.description)
    db_session.add(permission)
    try:
        await db_session.commit()
    except IntegrityError as exc:
        await db_session.rollback()
        raise ConflictError(detail=f"Permission '{values.name}' already exists") from exc
    await db_session.refresh(permission)
    return permission


async def _permissions_by_name(db_session: AsyncSession, names: list[str]) -> list[Permission]:
    """Resolve permission names, reporting every unknown one."""
    if not names:
        return []
    result = await db_session.execute(select(Permission).where(Permission.name.in_(names)))
    found = {p.name: p for p in result.scalars().all()}
    missing = [
        ValidationIssue(path=f"permissions.{i}", message=f"Unknown permission '{name}'")
        for i, name in enumerate(names)
        if name not in found
    ]
    if missing:
        raise DocumentValidationError(missing)
    return [found[name] for name in dict.fromkeys(names)]


async def list_roles(db_session: AsyncSession) -> list[Role]:
    result = await db_session.execute(
        select(Role).options(selectinload(Role.permissions)).order_by(Role.name)
    )
    return list(result.scalars().all())


async def get_role(db_session: AsyncSession, role_id: UUID) -> Role | None:
    result = await db_session.execute(
        select(Role).where(Role.id == role_id).options(selectinload(Role.permissions))
    )
    return result.scalar_one_or_none()


async def get_role_by_name(db_session: AsyncSession, name: str) -> Role | None:
    result = await db_session.execute(
        select(Role).where(Role.name == name).options(selectinload(Role.permissions))
    )
    return result.scalar_one_or_none()


async def _commit_role(db_session: AsyncSession, name: str) -> None:
    try:
        await db_session.commit()
    except IntegrityError as exc:
        await db_session.rollback()
        raise ConflictError(detail=f"Role '{name}' already exists") from exc


async def create_role(db_session: AsyncSession, data: RoleInput | Mapping[str, Any]) -> Role:
    values = parse_input(RoleInput, data)
    role = Role(
        name=values.name,
        description=values.description,
        is_active=values.is_active,
        permissions=await _permissions_by_name(db_session, values.permissions),
    )
    db_session.add(role)
    await _commit_role(db_session, values.name)
    await db_session.refresh(role)
    return role


async def update_role(
    db_session: AsyncSession, role_id: UUID, data: RoleInput | Mapping[str, Any]
) -> Role | None:
    role = await get_role(db_session, role_id)
    if role is None:
        return None

    values = parse_input(RoleInput, data)
    role.name = values.name
    role.description = values.description
    role.is_active = values.is_active
    role.permissions = await _permissions_by_name(db_session, values.permissions)

    await _commit_role(db_session, values.name)
    await db_session.refresh(role)
    return role


async def delete_role(db_session: AsyncSession, role_id: UUID) -> bool:
    role = await get_role(db_session, role_id)
    if role is None:
        return False
    await db_session.delete(role)
    await db_session.commit()
    return True


def role_to_dict(role: Role) -> dict[str, Any]:
    return {
        "id": str(role.id),
        "name": role.name,
        "description": role.description,
        "isActive": role.is_active,
        "permissions": role.permission_names,
    }
