"""Data shapes for each block type.

A block's ``type`` tag selects exactly one of the ``*Data`` models below for
its ``data`` payload.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import EmailStr, Field

from blockcms.blocks.base import BlockBase, DocumentModel, Link, Url, UrlOrEmpty


class BlockType(str, Enum):
    HERO = "hero"
    SERVICES = "services"
    PROJECTS = "projects"
    NEWS = "news"
    RICHTEXT = "richtext"
    GALLERY = "gallery"
    CONTACT = "contact"


class HeroData(DocumentModel):
    """Large header section; presentation only."""

    title: str = Field(min_length=1, max_length=100)
    subtitle: str | None = Field(None, max_length=200)
    cta_text: str | None = Field(None, max_length=50)
    cta_link: Link | None = None
    background_image: UrlOrEmpty | None = None
    background_video: UrlOrEmpty | None = None
    alignment: Literal["left", "center", "right"] = "center"
    height: Literal["small", "medium", "large", "full"] = "medium"
    overlay: bool = False
    overlay_opacity: float = Field(0.5, ge=0, le=1)


class ServicesData(DocumentModel):
    """Lists entries from the services collection."""

    title: str | None = None
    description: str | None = None
    limit: int = Field(6, ge=1, le=50)
    display_style: Literal["grid", "list", "carousel"] = "grid"
    columns: int = Field(3, ge=1, le=6)
    show_icon: bool = True
    show_description: bool = True
    category: str | None = None


class ProjectsData(DocumentModel):
    """Lists entries from the projects collection."""

    title: str | None = None
    description: str | None = None
    limit: int = Field(6, ge=1, le=50)
    display_style: Literal["grid", "masonry", "carousel"] = "grid"
    columns: int = Field(3, ge=1, le=6)
    show_description: bool = True
    category: str | None = None


class NewsData(DocumentModel):
    """Lists articles from the news collection."""

    title: str | None = None
    description: str | None = None
    limit: int = Field(6, ge=1, le=50)
    display_style: Literal["grid", "list", "featured"] = "grid"
    columns: int = Field(3, ge=1, le=6)
    show_excerpt: bool = True
    show_image: bool = True
    show_date: bool = True
    category: str | None = None


class RichTextData(DocumentModel):
    content: str = Field(min_length=1)
    format: Literal["html", "markdown"] = "html"


class GalleryImage(DocumentModel):
    id: str
    url: Url
    alt: str | None = None
    caption: str | None = None
    thumbnail: Url | None = None


class GalleryData(DocumentModel):
    title: str | None = None
    images: list[GalleryImage] = Field(min_length=1)
    display_style: Literal["grid", "masonry", "carousel", "slideshow"] = "grid"
    columns: int = Field(3, ge=1, le=6)
    show_captions: bool = True
    lightbox: bool = True


class ContactData(DocumentModel):
    """Call to action with optional contact details.

    The ``show_*`` flags gate whether the matching detail is displayed.
    """

    title: str = Field(min_length=1)
    description: str | None = None
    cta_text: str = "Contact Us"
    cta_link: Link | None = None
    show_email: bool = True
    show_phone: bool = True
    show_address: bool = False
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None


class HeroBlock(BlockBase):
    type: Literal["hero"] = "hero"
    data: HeroData


class ServicesBlock(BlockBase):
    type: Literal["services"] = "services"
    data: ServicesData


class ProjectsBlock(BlockBase):
    type: Literal["projects"] = "projects"
    data: ProjectsData


class NewsBlock(BlockBase):
    type: Literal["news"] = "news"
    data: NewsData


class RichTextBlock(BlockBase):
    type: Literal["richtext"] = "richtext"
    data: RichTextData


class GalleryBlock(BlockBase):
    type: Literal["gallery"] = "gallery"
    data: GalleryData


class ContactBlock(BlockBase):
    type: Literal["contact"] = "contact"
    data: ContactData
