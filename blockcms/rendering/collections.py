"""Collection data for collection-backed blocks, and how it is prefetched.

A page may contain several services, projects or news blocks. Each
collection is queried at most once per page render, all needed queries run
concurrently, and the first block of each type decides the query's ``limit``
and ``category``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Literal, Mapping, Protocol
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from blockcms.blocks.registry import collection_block_types
from blockcms.lib import observability

logger = logging.getLogger(__name__)

FailurePolicy = Literal["empty", "raise"]


class CollectionItem(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID | str


class ServiceItem(CollectionItem):
    title: str
    description: str | None = None
    icon: str | None = None
    order: int = 0


class ProjectItem(CollectionItem):
    title: str
    description: str | None = None
    image_url: str | None = None
    url: str | None = None
    category: str | None = None
    order: int = 0


class NewsItem(CollectionItem):
    slug: str
    title: str
    excerpt: str | None = None
    content: str = ""
    image_url: str | None = None
    category: str | None = None
    published_at: datetime | None = None


@dataclass
class CollectionData:
    """The lists collection-backed renderers read from."""

    services: list[ServiceItem] = field(default_factory=list)
    projects: list[ProjectItem] = field(default_factory=list)
    news: list[NewsItem] = field(default_factory=list)

    def for_collection(self, name: str) -> list[Any]:
        return getattr(self, name)


class CollectionSource(Protocol):
    """Whatever answers the three collection queries (normally the database)."""

    async def list_services(self, *, is_active_only: bool = True, limit: int | None = None) -> list[ServiceItem]: ...

    async def list_projects(
        self,
        *,
        is_active_only: bool = True,
        category: str | None = None,
        limit: int | None = None,
    ) -> list[ProjectItem]: ...

    async def list_news(self, *, category: str | None = None, limit: int | None = None) -> list[NewsItem]: ...


@dataclass(frozen=True)
class CollectionQuery:
    collection: str
    limit: int
    category: str | None = None


def _block_parts(block: Any) -> tuple[str | None, Any]:
    """Return ``(type, data)`` for a typed block model or a raw block mapping."""
    if isinstance(block, Mapping):
        return block.get("type"), block.get("data")
    return getattr(block, "type", None), getattr(block, "data", None)


def _data_value(data: Any, name: str, alias: str | None = None) -> Any:
    if isinstance(data, Mapping):
        return data.get(alias or name, data.get(name))
    return getattr(data, name, None)


def plan_collection_queries(
    blocks: Iterable[Any],
    fallback_limit: int = 100,
) -> dict[str, CollectionQuery]:
    """Work out which collections a block list needs, in one pass.

    Only the first block of each collection-backed type contributes its
    ``limit`` and ``category``; later blocks of the same type reuse that
    result. A first block with no usable limit falls back to
    ``fallback_limit``.
    """
    collections = collection_block_types()
    plan: dict[str, CollectionQuery] = {}

    for block in blocks:
        block_type, data = _block_parts(block)
        collection = collections.get(block_type) if isinstance(block_type, str) else None
        if collection is None or collection in plan:
            continue

        limit = _data_value(data, "limit")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            limit = fallback_limit

        category = None
        if collection != "services":
            category = _data_value(data, "category") or None

        plan[collection] = CollectionQuery(collection=collection, limit=limit, category=category)

    return plan


def _run_query(source: CollectionSource, query: CollectionQuery):
    if query.collection == "services":
        return source.list_services(is_active_only=True, limit=query.limit)
    if query.collection == "projects":
        return source.list_projects(is_active_only=True, category=query.category, limit=query.limit)
    return source.list_news(category=query.category, limit=query.limit)


async def prefetch_collections(
    blocks: Iterable[Any],
    source: CollectionSource,
    policy: FailurePolicy = "empty",
    fallback_limit: int = 100,
) -> CollectionData:
    """Fetch every collection the blocks need, concurrently.

    With the ``empty`` policy a failed query leaves its collection empty and
    the rest of the page still renders. With ``raise`` the first failure
    propagates once every query has settled.
    """
    plan = plan_collection_queries(blocks, fallback_limit=fallback_limit)
    data = CollectionData()
    if not plan:
        return data

    queries = list(plan.values())
    with observability.span("prefetch collections", collections=[q.collection for q in queries]):
        results = await asyncio.gather(
            *(_run_query(source, query) for query in queries),
            return_exceptions=True,
        )

    failure: BaseException | None = None
    for query, result in zip(queries, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            if policy == "raise":
                failure = failure or result
                continue
            logger.warning(
                "Fetching %s failed, rendering it as empty: %s", query.collection, result
            )
            observability.warning(
                "Collection fetch failed for {collection}",
                collection=query.collection,
                error=str(result),
            )
            continue
        setattr(data, query.collection, list(result))

    if failure is not None:
        raise failure
    return data
