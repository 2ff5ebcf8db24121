"""Services, projects and news administration API."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, Request, delete, get, post, put
from litestar.status_codes import HTTP_204_NO_CONTENT
from sqlalchemy.ext.asyncio import AsyncSession

from blockcms.admin.helpers import current_user_id, require_found
from blockcms.auth.guards import Permission, auth_guard
from blockcms.auth.roles import MANAGE_CONTENT
from blockcms.db.models import News, Project, Service
from blockcms.db.services import collection_service


def service_to_dict(service: Service) -> dict[str, Any]:
    return {
        "id": str(service.id),
        "title": service.title,
        "description": service.description,
        "icon": service.icon,
        "order": service.order,
        "isActive": service.is_active,
    }


def project_to_dict(project: Project) -> dict[str, Any]:
    return {
        "id": str(project.id),
        "title": project.title,
        "description": project.description,
        "imageUrl": project.image_url,
        "url": project.url,
        "category": project.category,
        "order": project.order,
        "isActive": project.is_active,
    }


def news_to_dict(news: News) -> dict[str, Any]:
    return {
        "id": str(news.id),
        "slug": news.slug,
        "title": news.title,
        "excerpt": news.excerpt,
        "content": news.content,
        "imageUrl": news.image_url,
        "category": news.category,
        "publishedAt": news.published_at.isoformat() if news.published_at else None,
    }


class CollectionAdminController(Controller):
    path = "/api/admin"
    guards = [auth_guard]

    # Services

    @get("/services", guards=[Permission(MANAGE_CONTENT)])
    async def list_services(self, db_session: AsyncSession, active_only: bool = False) -> list[dict[str, Any]]:
        services = await collection_service.list_services(db_session, is_active_only=active_only)
        return [service_to_dict(s) for s in services]

    @get("/services/{item_id:uuid}", guards=[Permission(MANAGE_CONTENT)])
    async def get_service(self, db_session: AsyncSession, item_id: UUID) -> dict[str, Any]:
        service = await collection_service.get_service(db_session, item_id)
        return service_to_dict(require_found(service, "Service", item_id))

    @post("/services", guards=[Permission(MANAGE_CONTENT)])
    async def create_service(
        self, request: Request, db_session: AsyncSession, data: dict[str, Any]
    ) -> dict[str, Any]:
        service = await collection_service.create_service(db_session, data, current_user_id(request))
        return service_to_dict(service)

    @put("/services/{item_id:uuid}", guards=[Permission(MANAGE_CONTENT)])
    async def update_service(
        self, db_session: AsyncSession, item_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        service = await collection_service.update_service(db_session, item_id, data)
        return service_to_dict(require_found(service, "Service", item_id))

    @delete("/services/{item_id:uuid}", guards=[Permission(MANAGE_CONTENT)], status_code=HTTP_204_NO_CONTENT)
    async def delete_service(self, db_session: AsyncSession, item_id: UUID) -> None:
        require_found(await collection_service.delete_service(db_session, item_id), "Service", item_id)

    # Projects

    @get("/projects", guards=[Permission(MANAGE_CONTENT)])
    async def list_projects(
        self,
        db_session: AsyncSession,
        active_only: bool = False,
        category: str | None = None,
    ) -> list[dict[str, Any]]:
        projects = await collection_service.list_projects(
            db_session, is_active_only=active_only, category=category
        )
        return [project_to_dict(p) for p in projects]

    @get("/projects/{item_id:uuid}", guards=[Permission(MANAGE_CONTENT)])
    async def get_project(self, db_session: AsyncSession, item_id: UUID) -> dict[str, Any]:
        project = await collection_service.get_project(db_session, item_id)
        return project_to_dict(require_found(project, "Project", item_id))

    @post("/projects", guards=[Permission(MANAGE_CONTENT)])
    async def create_project(
        self, request: Request, db_session: AsyncSession, data: dict[str, Any]
    ) -> dict[str, Any]:
        project = await collection_service.create_project(db_session, data, current_user_id(request))
        return project_to_dict(project)

    @put("/projects/{item_id:uuid}", guards=[Permission(MANAGE_CONTENT)])
    async def update_project(
        self, db_session: AsyncSession, item_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        project = await collection_service.update_project(db_session, item_id, data)
        return project_to_dict(require_found(project, "Project", item_id))

    @delete("/projects/{item_id:uuid}", guards=[Permission(MANAGE_CONTENT)], status_code=HTTP_204_NO_CONTENT)
    async def delete_project(self, db_session: AsyncSession, item_id: UUID) -> None:
        require_found(await collection_service.delete_project(db_session, item_id), "Project", item_id)

    # News

    @get("/news", guards=[Permission(MANAGE_CONTENT)])
    async def list_news(self, db_session: AsyncSession, category: str | None = None) -> list[dict[str, Any]]:
        articles = await collection_service.list_news(db_session, category=category)
        return [news_to_dict(n) for n in articles]

    @get("/news/{item_id:uuid}", guards=[Permission(MANAGE_CONTENT)])
    async def get_news(self, db_session: AsyncSession, item_id: UUID) -> dict[str, Any]:
        article = await collection_service.get_news(db_session, item_id)
        return news_to_dict(require_found(article, "News", item_id))

    @post("/news", guards=[Permission(MANAGE_CONTENT)])
    async def create_news(
        self, request: Request, db_session: AsyncSession, data: dict[str, Any]
    ) -> dict[str, Any]:
        article = await collection_service.create_news(db_session, data, current_user_id(request))
        return news_to_dict(article)

    @put("/news/{item_id:uuid}", guards=[Permission(MANAGE_CONTENT)])
    async def update_news(
        self, db_session: AsyncSession, item_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        article = await collection_service.update_news(db_session, item_id, data)
        return news_to_dict(require_found(article, "News", item_id))

    @delete("/news/{item_id:uuid}", guards=[Permission(MANAGE_CONTENT)], status_code=HTTP_204_NO_CONTENT)
    async def delete_news(self, db_session: AsyncSession, item_id: UUID) -> None:
        require_found(await collection_service.delete_news(db_session, item_id), "News", item_id)
