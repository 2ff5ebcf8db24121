"""Operator accounts and their role assignments."""

from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from pydantic import EmailStr, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blockcms.blocks.base import DocumentModel
from blockcms.blocks.validation import ValidationIssue
from blockcms.db.models import Role, User
from blockcms.db.services.collection_service import parse_input
from blockcms.lib.exceptions import ConflictError, DocumentValidationError


class UserInput(DocumentModel):
    email: EmailStr
    name: str | None = Field(None, max_length=255)
    is_active: bool = True
    roles: list[str] = Field(default_factory=list)


def _user_query():
    return select(User).options(selectinload(User.roles).selectinload(Role.permissions))


async def list_users(db_session: AsyncSession) -> list[User]:
    result = await db_session.execute(_user_query().order_by(User.email))
    return list(result.scalars().all())


async def get_user(db_session: AsyncSession, user_id: UUID) -> User | None:
    result = await db_session.execute(_user_query().where(User.id == user_id))
    return result.scalar_one_or_none()


async def _roles_by_name(db_session: AsyncSession, names: list[str]) -> list[Role]:
    if not names:
        return []
    result = await db_session.execute(select(Role).where(Role.name.in_(names)))
    found = {r.name: r for r in result.scalars().all()}
    missing = [
        ValidationIssue(path=f"roles.{i}", message=f"Unknown role '{name}'")
        for i, name in enumerate(names)
        if name not in found
    ]
    if missing:
        raise DocumentValidationError(missing)
    return [found[name] for name in dict.fromkeys(names)]


async def _commit_user(db_session: AsyncSession, email: str) -> None:
    try:
        await db_session.commit()
    except IntegrityError as exc:
        await db_session.rollback()
        raise ConflictError(detail=f"A user with email '{email}' already exists") from exc


async def create_user(db_session: AsyncSession, data: UserInput | Mapping[str, Any]) -> User:
    values = parse_input(UserInput, data)
    email = values.email.lower()
    user = User(
        email=email,
        name=values.name,
        is_active=values.is_active,
        roles=await _roles_by_name(db_session, values.roles),
    )
    db_session.add(user)
    await _commit_user(db_session, email)
    await db_session.refresh(user)
    return user


async def update_user(
    db_session: AsyncSession, user_id: UUID, data: UserInput | Mapping[str, Any]
) -> User | None:
    user = await get_user(db_session, user_id)
    if user is None:
        return None

    values = parse_input(UserInput, data)
    user.email = values.email.lower()
    user.name = values.name
    user.is_active = values.is_active
    user.roles = await _roles_by_name(db_session, values.roles)

    await _commit_user(db_session, user.email)
    await db_session.refresh(user)
    return user


async def set_user_roles(db_session: AsyncSession, user_id: UUID, role_names: list[str]) -> User | None:
    """Replace the full set of roles assigned to a user."""
    user = await get_user(db_session, user_id)
    if user is None:
        return None
    user.roles = await _roles_by_name(db_session, role_names)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def delete_user(db_session: AsyncSession, user_id: UUID) -> bool:
    user = await get_user(db_session, user_id)
    if user is None:
        return False
    await db_session.delete(user)
    await db_session.commit()
    return True


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "email": user.email,
        "name": user.name,
        "isActive": user.is_active,
        "roles": sorted(role.name for role in user.roles),
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }
