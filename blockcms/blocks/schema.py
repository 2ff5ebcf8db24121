"""Page document model: an ordered list of typed blocks plus SEO metadata."""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Union

from pydantic import Field

from blockcms.blocks.base import SEO, DocumentModel
from blockcms.blocks.types import (
    ContactBlock,
    GalleryBlock,
    HeroBlock,
    NewsBlock,
    ProjectsBlock,
    RichTextBlock,
    ServicesBlock,
)

CURRENT_DOCUMENT_VERSION = 1

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class PageStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


Block = Annotated[
    Union[
        HeroBlock,
        ServicesBlock,
        ProjectsBlock,
        NewsBlock,
        RichTextBlock,
        GalleryBlock,
        ContactBlock,
    ],
    Field(discriminator="type"),
]


class PageBody(DocumentModel):
    """The whole content document of one page.

    ``blocks`` order is rendering order. The document is stored and replaced
    as a single value.
    """

    version: int = Field(CURRENT_DOCUMENT_VERSION, gt=0)
    seo: SEO
    blocks: list[Block] = Field(default_factory=list)


class PageInput(DocumentModel):
    """A page as submitted from the admin: identity, status and body."""

    slug: str = Field(min_length=1, max_length=100, pattern=SLUG_PATTERN.pattern)
    title: str = Field(min_length=1, max_length=200)
    status: PageStatus = PageStatus.DRAFT
    body: PageBody
    publish_at: datetime | None = None


def is_valid_slug(slug: str) -> bool:
    return len(slug) <= 100 and SLUG_PATTERN.match(slug) is not None
