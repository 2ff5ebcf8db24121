"""One renderer per block type.

Each renderer builds a template context, passes it through the
``block_render_context`` filter and renders ``blocks/<type>.html``.
Collection-backed renderers read only from the prefetched lists and show at
most ``limit`` items.
"""

from __future__ import annotations

from typing import Any

from markupsafe import Markup

from blockcms.blocks.registry import register_renderer
from blockcms.blocks.types import BlockType
from blockcms.lib.hooks import BLOCK_RENDER_CONTEXT, apply_filters
from blockcms.lib.markdown import render_markdown
from blockcms.rendering.collections import CollectionData
from blockcms.rendering.templates import get_block_environment, wrapper_attributes


async def render_block_template(block: Any, template_name: str, **context: Any) -> Markup:
    """Render a block template with the shared context plus ``context``."""
    ctx: dict[str, Any] = {
        "block": block,
        "data": block.data,
        "settings": block.settings,
        **wrapper_attributes(block.settings),
        **context,
    }
    ctx = await apply_filters(BLOCK_RENDER_CONTEXT, ctx, block)
    template = get_block_environment().get_template(template_name)
    return Markup(template.render(ctx))


@register_renderer(BlockType.HERO.value)
async def render_hero(block, collections: CollectionData) -> Markup:
    return await render_block_template(block, "blocks/hero.html")


@register_renderer(BlockType.SERVICES.value)
async def render_services(block, collections: CollectionData) -> Markup:
    items = collections.services[: block.data.limit]
    return await render_block_template(block, "blocks/services.html", items=items)


@register_renderer(BlockType.PROJECTS.value)
async def render_projects(block, collections: CollectionData) -> Markup:
    items = collections.projects[: block.data.limit]
    return await render_block_template(block, "blocks/projects.html", items=items)


@register_renderer(BlockType.NEWS.value)
async def render_news(block, collections: CollectionData) -> Markup:
    items = collections.news[: block.data.limit]
    return await render_block_template(block, "blocks/news.html", items=items)


@register_renderer(BlockType.RICHTEXT.value)
async def render_richtext(block, collections: CollectionData) -> Markup:
    # Operator-authored HTML is trusted and inserted as-is
    if block.data.format == "markdown":
        body = Markup(render_markdown(block.data.content))
    else:
        body = Markup(block.data.content)
    return await render_block_template(block, "blocks/richtext.html", body=body)


@register_renderer(BlockType.GALLERY.value)
async def render_gallery(block, collections: CollectionData) -> Markup:
    return await render_block_template(block, "blocks/gallery.html")


@register_renderer(BlockType.CONTACT.value)
async def render_contact(block, collections: CollectionData) -> Markup:
    data = block.data
    details = {
        "email": data.email if data.show_email else None,
        "phone": data.phone if data.show_phone else None,
        "address": data.address if data.show_address else None,
    }
    return await render_block_template(block, "blocks/contact.html", details=details)
