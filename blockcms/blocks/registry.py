"""Registry of block types.

Each block type tag maps to one :class:`BlockDefinition` that carries the
data schema used for validation, the renderer used for presentation, the
collection it reads from (if any) and the starter data the editor uses when
an operator adds a new block.
"""

from __future__ import annotations

import copy
import secrets
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal

from pydantic import BaseModel

from blockcms.blocks.types import (
    BlockType,
    ContactData,
    GalleryData,
    HeroData,
    NewsData,
    ProjectsData,
    RichTextData,
    ServicesData,
)

if TYPE_CHECKING:
    from markupsafe import Markup

CollectionName = Literal["services", "projects", "news"]
Renderer = Callable[..., Awaitable["Markup"]]


@dataclass
class BlockDefinition:
    """Everything the system knows about one block type."""

    type: str
    data_model: type[BaseModel]
    label: str
    icon: str = ""
    collection: CollectionName | None = None
    starter_data: dict[str, Any] = field(default_factory=dict)
    renderer: Renderer | None = None


BLOCK_DEFINITIONS: dict[str, BlockDefinition] = {}


def register_block(definition: BlockDefinition) -> BlockDefinition:
    """Add or replace a block type definition."""
    BLOCK_DEFINITIONS[definition.type] = definition
    return definition


def get_block_definition(block_type: str) -> BlockDefinition | None:
    return BLOCK_DEFINITIONS.get(block_type)


def is_known_block_type(block_type: str) -> bool:
    return block_type in BLOCK_DEFINITIONS


def collection_block_types() -> dict[str, CollectionName]:
    """Block type tag -> collection name, for collection-backed types only."""
    return {
        name: definition.collection
        for name, definition in BLOCK_DEFINITIONS.items()
        if definition.collection is not None
    }


def register_renderer(block_type: str) -> Callable[[Renderer], Renderer]:
    """Attach the decorated function as the renderer for ``block_type``.

    Raises:
        KeyError: If the block type has not been registered.
    """

    def decorator(func: Renderer) -> Renderer:
        definition = BLOCK_DEFINITIONS.get(block_type)
        if definition is None:
            raise KeyError(f"Cannot attach renderer to unknown block type {block_type!r}")
        definition.renderer = func
        return func

    return decorator


def default_block_data(block_type: str) -> dict[str, Any]:
    """Starter ``data`` for a freshly added block; empty for unknown types."""
    definition = get_block_definition(block_type)
    if definition is None:
        return {}
    return copy.deepcopy(definition.starter_data)


def new_block_id() -> str:
    return secrets.token_urlsafe(8)


def new_block(block_type: str) -> dict[str, Any]:
    """Build a new block document with a fresh id and starter data.

    Raises:
        KeyError: If the block type is not registered.
    """
    if not is_known_block_type(block_type):
        raise KeyError(f"Unknown block type {block_type!r}")
    return {
        "id": new_block_id(),
        "type": block_type,
        "settings": {},
        "data": default_block_data(block_type),
    }


register_block(BlockDefinition(
    type=BlockType.HERO.value,
    data_model=HeroData,
    label="Hero",
    icon="🎯",
    starter_data={"title": "Hero Title", "alignment": "center", "height": "medium"},
))

register_block(BlockDefinition(
    type=BlockType.SERVICES.value,
    data_model=ServicesData,
    label="Services",
    icon="⚙️",
    collection="services",
    starter_data={
        "limit": 6,
        "displayStyle": "grid",
        "columns": 3,
        "showIcon": True,
        "showDescription": True,
    },
))

register_block(BlockDefinition(
    type=BlockType.PROJECTS.value,
    data_model=ProjectsData,
    label="Projects",
    icon="📁",
    collection="projects",
    starter_data={"limit": 6, "displayStyle": "grid", "columns": 3, "showDescription": True},
))

register_block(BlockDefinition(
    type=BlockType.NEWS.value,
    data_model=NewsData,
    label="News",
    icon="📰",
    collection="news",
    starter_data={
        "limit": 6,
        "displayStyle": "grid",
        "columns": 3,
        "showExcerpt": True,
        "showImage": True,
        "showDate": True,
    },
))

register_block(BlockDefinition(
    type=BlockType.RICHTEXT.value,
    data_model=RichTextData,
    label="Rich Text",
    icon="📝",
    starter_data={"content": "<p>Enter your content here...</p>", "format": "html"},
))

register_block(BlockDefinition(
    type=BlockType.GALLERY.value,
    data_model=GalleryData,
    label="Gallery",
    icon="🖼️",
    starter_data={
        "images": [],
        "displayStyle": "grid",
        "columns": 3,
        "showCaptions": True,
        "lightbox": True,
    },
))

register_block(BlockDefinition(
    type=BlockType.CONTACT.value,
    data_model=ContactData,
    label="Contact",
    icon="📧",
    starter_data={
        "title": "Get in Touch",
        "ctaText": "Contact Us",
        "showEmail": True,
        "showPhone": True,
        "showAddress": False,
    },
))
