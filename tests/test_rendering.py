"""Tests for block dispatch and page rendering."""

import logging
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from markupsafe import Markup

from blockcms.blocks import get_block_definition, validate_page_body
from blockcms.lib.hooks import BLOCK_RENDER_CONTEXT, hooks
from blockcms.rendering import (
    CollectionData,
    NewsItem,
    RenderOutcome,
    ServiceItem,
    dispatch,
    render_blocks,
    render_page,
)


def _services(*titles):
    return [ServiceItem(id=str(i), title=t, order=i) for i, t in enumerate(titles)]


class TestDispatch:
    async def test_hero_renders(self, hero_block):
        rendered = await dispatch(hero_block)

        assert rendered.outcome is RenderOutcome.RENDERED
        assert rendered.block_id == "b1"
        assert "Welcome" in rendered.html
        assert 'data-block-id="b1"' in rendered.html

    async def test_typed_block_renders(self, hero_block):
        body = validate_page_body({"seo": {"title": "t", "description": "d"}, "blocks": [hero_block]})
        rendered = await dispatch(body.value.blocks[0])
        assert rendered.outcome is RenderOutcome.RENDERED

    async def test_text_is_escaped(self):
        rendered = await dispatch({"id": "b1", "type": "hero", "data": {"title": "<script>x</script>"}})
        assert "<script>" not in rendered.html
        assert "&lt;script&gt;" in rendered.html

    async def test_unknown_type_falls_back_and_logs(self, caplog):
        with caplog.at_level(logging.WARNING, logger="blockcms.rendering.dispatcher"):
            rendered = await dispatch({"id": "b2", "type": "carousel", "data": {}})

        assert rendered.outcome is RenderOutcome.UNKNOWN_TYPE
        assert rendered.block_type == "carousel"
        assert "Unknown block type: carousel" in rendered.html
        assert "carousel" in caplog.text

    async def test_invalid_data_is_an_error_fallback(self):
        rendered = await dispatch({"id": "b3", "type": "hero", "data": {}})

        assert rendered.outcome is RenderOutcome.ERROR
        assert "Error rendering block" in rendered.html

    async def test_renderer_exception_is_contained(self, monkeypatch, hero_block):
        definition = get_block_definition("hero")
        monkeypatch.setattr(definition, "renderer", AsyncMock(side_effect=RuntimeError("boom")))

        rendered = await dispatch(hero_block)

        assert rendered.outcome is RenderOutcome.ERROR
        assert isinstance(rendered.error.cause, RuntimeError)
        assert "boom" not in rendered.html

    async def test_error_details_shown_when_asked(self, monkeypatch, hero_block):
        definition = get_block_definition("hero")
        monkeypatch.setattr(definition, "renderer", AsyncMock(side_effect=RuntimeError("boom")))

        rendered = await dispatch(hero_block, show_details=True)
        assert "boom" in rendered.html

    async def test_rendered_block_is_markup_friendly(self, hero_block):
        rendered = await dispatch(hero_block)
        assert Markup("{}").format(rendered) == rendered.html

    async def test_settings_become_wrapper_attributes(self):
        rendered = await dispatch({
            "id": "b1",
            "type": "richtext",
            "settings": {"className": "narrow", "backgroundColor": "#fff", "padding": "2rem"},
            "data": {"content": "<p>Hi</p>"},
        })
        assert "narrow" in rendered.html
        assert "background-color: #fff; padding: 2rem" in rendered.html


class TestRenderers:
    async def test_services_empty_state(self):
        block = {"id": "s", "type": "services", "data": {}}
        rendered = await dispatch(block, CollectionData(services=[]))

        assert rendered.outcome is RenderOutcome.RENDERED
        assert "No services available yet." in rendered.html

    async def test_services_respect_limit(self):
        block = {"id": "s", "type": "services", "data": {"limit": 2}}
        rendered = await dispatch(block, CollectionData(services=_services("One", "Two", "Three")))

        assert "One" in rendered.html and "Two" in rendered.html
        assert "Three" not in rendered.html

    async def test_news_shows_date(self):
        item = NewsItem(id="n1", slug="launch", title="Launch", published_at=datetime(2026, 3, 1, tzinfo=UTC))
        rendered = await dispatch({"id": "n", "type": "news", "data": {}}, CollectionData(news=[item]))

        assert "Launch" in rendered.html
        assert "March 01, 2026" in rendered.html

    async def test_markdown_richtext(self):
        rendered = await dispatch({"id": "r", "type": "richtext", "data": {"content": "# Title", "format": "markdown"}})
        assert "<h1>Title</h1>" in rendered.html

    async def test_html_richtext_is_inserted_as_is(self):
        rendered = await dispatch({"id": "r", "type": "richtext", "data": {"content": "<em>hi</em>"}})
        assert "<em>hi</em>" in rendered.html

    async def test_contact_flags_gate_details(self):
        block = {
            "id": "c",
            "type": "contact",
            "data": {"title": "Hi", "email": "team@example.com", "phone": "555", "showEmail": False},
        }
        rendered = await dispatch(block)

        assert "team@example.com" not in rendered.html
        assert "555" in rendered.html
        assert "Contact Us" in rendered.html

    async def test_gallery_prefers_thumbnail(self):
        block = {
            "id": "g",
            "type": "gallery",
            "data": {"images": [{"id": "1", "url": "https://a.test/big.jpg", "thumbnail": "https://a.test/t.jpg", "caption": "Cap"}]},
        }
        rendered = await dispatch(block)
        assert 'src="https://a.test/t.jpg"' in rendered.html
        assert "Cap" in rendered.html

    async def test_render_context_filter(self, clean_hooks, hero_block):
        def shout(context, block):
            context["data"] = context["data"].model_copy(update={"title": "LOUD"})
            return context

        hooks.add_filter(BLOCK_RENDER_CONTEXT, shout)
        rendered = await dispatch(hero_block)
        assert "LOUD" in rendered.html


class TestRenderBlocks:
    async def test_unknown_block_does_not_affect_siblings(self, hero_block):
        blocks = [
            hero_block,
            {"id": "x", "type": "carousel", "data": {}},
            {"id": "s", "type": "services", "data": {}},
        ]
        rendered = await render_blocks(blocks, CollectionData(services=_services("Design")))

        assert [r.outcome for r in rendered] == [
            RenderOutcome.RENDERED,
            RenderOutcome.UNKNOWN_TYPE,
            RenderOutcome.RENDERED,
        ]
        assert [r.block_id for r in rendered] == ["b1", "x", "s"]
        assert "Design" in rendered[2].html

    async def test_empty_list(self):
        assert await render_blocks([]) == []


class TestRenderPage:
    async def test_prefetches_once_and_renders_in_order(self, hero_block):
        source = AsyncMock()
        source.list_services.return_value = _services("Consulting")
        body = {
            "version": 1,
            "seo": {"title": "t", "description": "d"},
            "blocks": [
                {"id": "s1", "type": "services", "data": {"limit": 4}},
                hero_block,
                {"id": "s2", "type": "services", "data": {"limit": 1}},
            ],
        }

        page = await render_page(body, source)

        source.list_services.assert_awaited_once_with(is_active_only=True, limit=4)
        source.list_projects.assert_not_awaited()
        source.list_news.assert_not_awaited()
        assert [b.block_id for b in page.blocks] == ["s1", "b1", "s2"]
        assert page.failed == []
        assert str(page.html).count("Consulting") == 2

    async def test_bad_block_in_stored_body_is_isolated(self, hero_block):
        body = {"seo": {}, "blocks": [hero_block, {"id": "bad", "type": "hero", "data": {}}]}

        page = await render_page(body, AsyncMock())

        assert [b.outcome for b in page.blocks] == [RenderOutcome.RENDERED, RenderOutcome.ERROR]
        assert [b.block_id for b in page.failed] == ["bad"]

    async def test_accepts_validated_body(self, hero_block):
        body = validate_page_body({"seo": {"title": "t", "description": "d"}, "blocks": [hero_block]}).value
        page = await render_page(body, AsyncMock())
        assert "Welcome" in page.html
