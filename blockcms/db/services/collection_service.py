"""Services, projects and news: the collections that blocks list.

The ``list_*`` functions are the queries the render-time prefetch uses and
each returns a stable order: services and projects by ascending ``order``,
news by descending ``published_at``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Mapping, TypeVar
from uuid import UUID

from pydantic import Field, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blockcms.blocks.base import DocumentModel, UrlOrEmpty
from blockcms.blocks.schema import SLUG_PATTERN
from blockcms.blocks.validation import issues_from_pydantic
from blockcms.db.base import Base
from blockcms.db.models import News, Project, Service
from blockcms.lib.exceptions import ConflictError, DocumentValidationError
from blockcms.rendering.collections import NewsItem, ProjectItem, ServiceItem

ModelT = TypeVar("ModelT", bound=Base)
InputT = TypeVar("InputT", bound=DocumentModel)


class ServiceInput(DocumentModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    icon: str | None = None
    order: int = 0
    is_active: bool = True


class ProjectInput(DocumentModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    image_url: UrlOrEmpty | None = None
    url: UrlOrEmpty | None = None
    category: str | None = None
    order: int = 0
    is_active: bool = True


class NewsInput(DocumentModel):
    slug: str = Field(min_length=1, max_length=255, pattern=SLUG_PATTERN.pattern)
    title: str = Field(min_length=1, max_length=255)
    excerpt: str | None = None
    content: str = Field(min_length=1)
    image_url: UrlOrEmpty | None = None
    category: str | None = None
    published_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def parse_input(model: type[InputT], data: InputT | Mapping[str, Any]) -> InputT:
    """Validate a raw submission, raising ``DocumentValidationError`` on failure."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise DocumentValidationError(issues_from_pydantic(exc)) from exc


async def _get(db_session: AsyncSession, model: type[ModelT], item_id: UUID) -> ModelT | None:
    result = await db_session.execute(select(model).where(model.id == item_id))
    return result.scalar_one_or_none()


async def _commit(db_session: AsyncSession, what: str) -> None:
    try:
        await db_session.commit()
    except IntegrityError as exc:
        await db_session.rollback()
        raise ConflictError(detail=f"{what} conflicts with an existing entry") from exc


async def _create(
    db_session: AsyncSession,
    model: type[ModelT],
    values: DocumentModel,
    user_id: UUID | None,
) -> ModelT:
    item = model(**values.model_dump(), created_by_id=user_id)
    db_session.add(item)
    await _commit(db_session, model.__name__)
    await db_session.refresh(item)
    return item


async def _update(
    db_session: AsyncSession,
    model: type[ModelT],
    item_id: UUID,
    values: DocumentModel,
) -> ModelT | None:
    item = await _get(db_session, model, item_id)
    if item is None:
        return None
    for key, value in values.model_dump().items():
        setattr(item, key, value)
    await _commit(db_session, model.__name__)
    await db_session.refresh(item)
    return item


async def _delete(db_session: AsyncSession, model: type[ModelT], item_id: UUID) -> bool:
    item = await _get(db_session, model, item_id)
    if item is None:
        return False
    await db_session.delete(item)
    await db_session.commit()
    return True


# Services

async def list_services(
    db_session: AsyncSession,
    is_active_only: bool = True,
    limit: int | None = None,
) -> list[Service]:
    query = select(Service)
    if is_active_only:
        query = query.where(Service.is_active == True)
    query = query.order_by(Service.order.asc(), Service.created_at.asc())
    if limit:
        query = query.limit(limit)
    result = await db_session.execute(query)
    return list(result.scalars().all())


async def get_service(db_session: AsyncSession, service_id: UUID) -> Service | None:
    return await _get(db_session, Service, service_id)


async def create_service(
    db_session: AsyncSession, data: ServiceInput | Mapping[str, Any], user_id: UUID | None = None
) -> Service:
    return await _create(db_session, Service, parse_input(ServiceInput, data), user_id)


async def update_service(
    db_session: AsyncSession, service_id: UUID, data: ServiceInput | Mapping[str, Any]
) -> Service | None:
    return await _update(db_session, Service, service_id, parse_input(ServiceInput, data))


async def delete_service(db_session: AsyncSession, service_id: UUID) -> bool:
    return await _delete(db_session, Service, service_id)


# Projects

async def list_projects(
    db_session: AsyncSession,
    is_active_only: bool = True,
    category: str | None = None,
    limit: int | None = None,
) -> list[Project]:
    query = select(Project)
    if is_active_only:
        query = query.where(Project.is_active == True)
    if category:
        query = query.where(Project.category == category)
    query = query.order_by(Project.order.asc(), Project.created_at.asc())
    if limit:
        query = query.limit(limit)
    result = await db_session.execute(query)
    return list(result.scalars().all())


async def get_project(db_session: AsyncSession, project_id: UUID) -> Project | None:
    return await _get(db_session, Project, project_id)


async def create_project(
    db_session: AsyncSession, data: ProjectInput | Mapping[str, Any], user_id: UUID | None = None
) -> Project:
    return await _create(db_session, Project, parse_input(ProjectInput, data), user_id)


async def update_project(
    db_session: AsyncSession, project_id: UUID, data: ProjectInput | Mapping[str, Any]
) -> Project | None:
    return await _update(db_session, Project, project_id, parse_input(ProjectInput, data))


async def delete_project(db_session: AsyncSession, project_id: UUID) -> bool:
    return await _delete(db_session, Project, project_id)


# News

async def list_news(
    db_session: AsyncSession,
    category: str | None = None,
    limit: int | None = None,
) -> list[News]:
    query = select(News)
    if category:
        query = query.where(News.category == category)
    query = query.order_by(News.published_at.desc())
    if limit:
        query = query.limit(limit)
    result = await db_session.execute(query)
    return list(result.scalars().all())


async def get_news(db_session: AsyncSession, news_id: UUID) -> News | None:
    return await _get(db_session, News, news_id)


async def create_news(
    db_session: AsyncSession, data: NewsInput | Mapping[str, Any], user_id: UUID | None = None
) -> News:
    return await _create(db_session, News, parse_input(NewsInput, data), user_id)


async def update_news(
    db_session: AsyncSession, news_id: UUID, data: NewsInput | Mapping[str, Any]
) -> News | None:
    return await _update(db_session, News, news_id, parse_input(NewsInput, data))


async def delete_news(db_session: AsyncSession, news_id: UUID) -> bool:
    return await _delete(db_session, News, news_id)


class SQLCollectionSource:
    """Collection source for page rendering backed by the database.

    Prefetch runs its queries concurrently, and an ``AsyncSession`` must not
    be shared between concurrent tasks, so every query opens its own session.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def list_services(self, *, is_active_only: bool = True, limit: int | None = None) -> list[ServiceItem]:
        async with self.session_maker() as session:
            rows = await list_services(session, is_active_only=is_active_only, limit=limit)
            return [ServiceItem.model_validate(row) for row in rows]

    async def list_projects(
        self,
        *,
        is_active_only: bool = True,
        category: str | None = None,
        limit: int | None = None,
    ) -> list[ProjectItem]:
        async with self.session_maker() as session:
            rows = await list_projects(session, is_active_only=is_active_only, category=category, limit=limit)
            return [ProjectItem.model_validate(row) for row in rows]

    async def list_news(self, *, category: str | None = None, limit: int | None = None) -> list[NewsItem]:
        async with self.session_maker() as session:
            rows = await list_news(session, category=category, limit=limit)
            return [NewsItem.model_validate(row) for row in rows]
