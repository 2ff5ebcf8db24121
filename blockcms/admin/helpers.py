"""Shared helpers for the admin API controllers."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Request
from litestar.exceptions import NotFoundException

from blockcms.auth.session_keys import SESSION_USER_ID
from blockcms.db.models import Page


def current_user_id(request: Request) -> UUID | None:
    """The signed-in user's id, or None if the session holds no valid id."""
    raw = request.session.get(SESSION_USER_ID) if request.session else None
    if not raw:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        return None


def require_found(value, what: str, item_id: UUID | str):
    if value is None or value is False:
        raise NotFoundException(f"{what} '{item_id}' not found")
    return value


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def page_to_dict(page: Page, include_body: bool = True) -> dict[str, Any]:
    result: dict[str, Any] = {
        "id": str(page.id),
        "slug": page.slug,
        "title": page.title,
        "status": page.status,
        "publishAt": _iso(page.publish_at),
        "createdById": str(page.created_by_id) if page.created_by_id else None,
        "updatedById": str(page.updated_by_id) if page.updated_by_id else None,
        "createdAt": _iso(page.created_at),
        "updatedAt": _iso(page.updated_at),
    }
    if include_body:
        result["body"] = page.body
    return result
