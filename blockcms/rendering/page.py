from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from markupsafe import Markup

from blockcms.blocks.schema import PageBody
from blockcms.rendering.collections import (
    CollectionData,
    CollectionSource,
    FailurePolicy,
    prefetch_collections,
)
from blockcms.rendering.dispatcher import RenderedBlock, RenderOutcome, render_blocks


@dataclass
class RenderedPage:
    blocks: list[RenderedBlock] = field(default_factory=list)
    collections: CollectionData = field(default_factory=CollectionData)

    @property
    def html(self) -> Markup:
        return Markup("\n").join(block.html for block in self.blocks)

    @property
    def failed(self) -> list[RenderedBlock]:
        return [b for b in self.blocks if b.outcome is not RenderOutcome.RENDERED]

    def __html__(self) -> str:
        return str(self.html)


async def render_page(
    body: PageBody | Mapping[str, Any],
    source: CollectionSource,
    *,
    policy: FailurePolicy = "empty",
    fallback_limit: int = 100,
    show_details: bool = False,
) -> RenderedPage:
    """Prefetch the collections a page needs, then render all of its blocks.

    ``body`` may be a validated ``PageBody`` or the stored JSON document; in
    the latter case each block is validated as it is rendered, so one bad
    block cannot take down the page.
    """
    if isinstance(body, PageBody):
        blocks: list[Any] = list(body.blocks)
    else:
        raw_blocks = body.get("blocks")
        blocks = list(raw_blocks) if isinstance(raw_blocks, list) else []

    collections = await prefetch_collections(
        blocks, source, policy=policy, fallback_limit=fallback_limit
    )
    rendered = await render_blocks(blocks, collections, show_details=show_details)
    return RenderedPage(blocks=rendered, collections=collections)
