"""Page storage: validated documents in, page rows out.

Every write goes through ``validate_page`` first, so a stored ``body`` is
always a complete, valid document. Status changes are the one exception:
they never touch the body and never revalidate it.
"""

from datetime import UTC, datetime
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blockcms.blocks.schema import PageInput, PageStatus
from blockcms.blocks.validation import validate_page
from blockcms.db.models import Page
from blockcms.lib.exceptions import ConflictError
from blockcms.lib.hooks import (
    AFTER_PAGE_DELETE,
    AFTER_PAGE_SAVE,
    BEFORE_PAGE_DELETE,
    BEFORE_PAGE_SAVE,
    PAGE_STATUS_CHANGED,
    hooks,
)


def _coerce_input(page: PageInput | Mapping[str, Any]) -> PageInput:
    if isinstance(page, PageInput):
        return page
    return validate_page(page).unwrap()


def _visible_now():
    now = datetime.now(UTC)
    return and_(
        Page.status == PageStatus.PUBLISHED.value,
        or_(Page.publish_at.is_(None), Page.publish_at <= now),
    )


async def list_pages(
    db_session: AsyncSession,
    status: PageStatus | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Page]:
    """List pages, most recently updated first.

    Args:
        db_session: Database session
        status: Only return pages with this status
        limit: Maximum number of results
        offset: Number of results to skip
    """
    query = select(Page)
    if status is not None:
        query = query.where(Page.status == PageStatus(status).value)
    query = query.order_by(Page.updated_at.desc())

    if offset:
        query = query.offset(offset)
    if limit:
        query = query.limit(limit)

    result = await db_session.execute(query)
    return list(result.scalars().all())


async def get_page_by_id(db_session: AsyncSession, page_id: UUID) -> Page | None:
    result = await db_session.execute(select(Page).where(Page.id == page_id))
    return result.scalar_one_or_none()


async def get_page_by_slug(
    db_session: AsyncSession,
    slug: str,
    status: PageStatus | None = None,
) -> Page | None:
    """Get a single page by slug.

    Asking for ``PageStatus.PUBLISHED`` also hides pages whose ``publish_at``
    is still in the future.
    """
    query = select(Page).where(Page.slug == slug)
    if status is not None:
        if PageStatus(status) is PageStatus.PUBLISHED:
            query = query.where(_visible_now())
        else:
            query = query.where(Page.status == PageStatus(status).value)

    result = await db_session.execute(query)
    return result.scalar_one_or_none()


async def _ensure_slug_free(db_session: AsyncSession, slug: str, page_id: UUID | None = None) -> None:
    query = select(Page.id).where(Page.slug == slug)
    if page_id is not None:
        query = query.where(Page.id != page_id)
    result = await db_session.execute(query)
    if result.scalar_one_or_none() is not None:
        raise ConflictError(detail=f"A page with slug '{slug}' already exists")


async def _commit(db_session: AsyncSession, slug: str) -> None:
    try:
        await db_session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent save of the same slug
        await db_session.rollback()
        raise ConflictError(detail=f"A page with slug '{slug}' already exists") from exc


async def create_page(
    db_session: AsyncSession,
    page: PageInput | Mapping[str, Any],
    user_id: UUID | None = None,
) -> Page:
    """Validate and store a new page.

    Raises:
        DocumentValidationError: The submission is not a valid page
        ConflictError: The slug is taken
    """
    data = _coerce_input(page)
    await _ensure_slug_free(db_session, data.slug)

    record = Page(
        slug=data.slug,
        title=data.title,
        status=data.status.value,
        body=data.body.to_document(),
        publish_at=data.publish_at,
        created_by_id=user_id,
        updated_by_id=user_id,
    )

    await hooks.do_action(BEFORE_PAGE_SAVE, record, is_new=True)

    db_session.add(record)
    await _commit(db_session, data.slug)
    await db_session.refresh(record)

    await hooks.do_action(AFTER_PAGE_SAVE, record, is_new=True)
    return record


async def update_page(
    db_session: AsyncSession,
    page_id: UUID,
    page: PageInput | Mapping[str, Any],
    user_id: UUID | None = None,
) -> Page | None:
    """Replace a page's slug, title, status and whole body.

    Returns:
        The updated page, or None if no page has ``page_id``
    """
    record = await get_page_by_id(db_session, page_id)
    if record is None:
        return None

    data = _coerce_input(page)
    if data.slug != record.slug:
        await _ensure_slug_free(db_session, data.slug, page_id)

    await hooks.do_action(BEFORE_PAGE_SAVE, record, is_new=False)

    record.slug = data.slug
    record.title = data.title
    record.status = data.status.value
    record.body = data.body.to_document()
    record.publish_at = data.publish_at
    record.updated_by_id = user_id

    await _commit(db_session, data.slug)
    await db_session.refresh(record)

    await hooks.do_action(AFTER_PAGE_SAVE, record, is_new=False)
    return record


async def upsert_page(
    db_session: AsyncSession,
    page: PageInput | Mapping[str, Any],
    user_id: UUID | None = None,
) -> Page:
    """Create the page, or replace the existing page with the same slug."""
    data = _coerce_input(page)
    existing = await get_page_by_slug(db_session, data.slug)
    if existing is None:
        return await create_page(db_session, data, user_id)
    return await update_page(db_session, existing.id, data, user_id)


async def set_page_status(
    db_session: AsyncSession,
    page_id: UUID,
    status: PageStatus | str,
    user_id: UUID | None = None,
) -> Page | None:
    """Move a page between DRAFT, PUBLISHED and ARCHIVED.

    The body is left as stored. Publishing stamps ``publish_at`` with the
    current time.
    """
    record = await get_page_by_id(db_session, page_id)
    if record is None:
        return None

    new_status = PageStatus(status)
    old_status = record.status
    record.status = new_status.value
    if new_status is PageStatus.PUBLISHED:
        record.publish_at = datetime.now(UTC)
    record.updated_by_id = user_id

    await db_session.commit()
    await db_session.refresh(record)

    if old_status != new_status.value:
        await hooks.do_action(PAGE_STATUS_CHANGED, record, old_status=old_status)
    return record


async def publish_page(db_session: AsyncSession, page_id: UUID, user_id: UUID | None = None) -> Page | None:
    return await set_page_status(db_session, page_id, PageStatus.PUBLISHED, user_id)


async def delete_page(db_session: AsyncSession, page_id: UUID) -> bool:
    """Delete a page.

    Returns:
        True if deleted, False if not found
    """
    record = await get_page_by_id(db_session, page_id)
    if record is None:
        return False

    await hooks.do_action(BEFORE_PAGE_DELETE, record)

    await db_session.delete(record)
    await db_session.commit()

    await hooks.do_action(AFTER_PAGE_DELETE, record)
    return True
