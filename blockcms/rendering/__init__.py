from blockcms.rendering.collections import (
    CollectionData,
    CollectionQuery,
    CollectionSource,
    NewsItem,
    ProjectItem,
    ServiceItem,
    plan_collection_queries,
    prefetch_collections,
)
from blockcms.rendering.dispatcher import RenderedBlock, RenderOutcome, dispatch, render_blocks
from blockcms.rendering.page import RenderedPage, render_page

__all__ = [
    "CollectionData",
    "CollectionQuery",
    "CollectionSource",
    "NewsItem",
    "ProjectItem",
    "RenderOutcome",
    "RenderedBlock",
    "RenderedPage",
    "ServiceItem",
    "dispatch",
    "plan_collection_queries",
    "prefetch_collections",
    "render_blocks",
    "render_page",
]
