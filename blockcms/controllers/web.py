"""Public pages: ``/`` serves the page with slug ``home``."""

from __future__ import annotations

from litestar import Controller, Request, get
from litestar.exceptions import NotFoundException
from litestar.response import Template as TemplateResponse
from sqlalchemy.ext.asyncio import AsyncSession

from blockcms.blocks.schema import PageStatus, is_valid_slug
from blockcms.db.services import page_service
from blockcms.db.services.collection_service import SQLCollectionSource
from blockcms.lib.seo import get_page_og_meta, get_page_seo_meta
from blockcms.rendering import render_page

HOME_SLUG = "home"


class WebController(Controller):
    path = "/"

    async def _render(self, request: Request, db_session: AsyncSession, slug: str) -> TemplateResponse:
        page = None
        if is_valid_slug(slug):
            page = await page_service.get_page_by_slug(db_session, slug, PageStatus.PUBLISHED)
        if page is None:
            raise NotFoundException(f"Page '{slug}' not found")

        settings = request.app.state.settings
        source = SQLCollectionSource(request.app.state.session_maker_class)
        rendered = await render_page(
            page.body,
            source,
            policy=settings.rendering.collection_failure_policy,
            fallback_limit=settings.rendering.fallback_collection_limit,
            show_details=settings.debug,
        )

        seo = await get_page_seo_meta(page, settings.site.name, settings.site.base_url)
        og = await get_page_og_meta(page, settings.site.name, settings.site.base_url)
        return TemplateResponse(
            "page.html",
            context={"page": page, "rendered": rendered, "seo": seo, "og": og},
        )

    @get("/")
    async def index(self, request: Request, db_session: AsyncSession) -> TemplateResponse:
        return await self._render(request, db_session, HOME_SLUG)

    @get("/{slug:str}")
    async def view_page(self, request: Request, db_session: AsyncSession, slug: str) -> TemplateResponse:
        return await self._render(request, db_session, slug)
