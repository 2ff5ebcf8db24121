"""Search and social metadata for public pages, read from ``body.seo``."""

from dataclasses import dataclass
from html import escape
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from blockcms.lib.hooks import PAGE_OG_META, PAGE_SEO_META, hooks

if TYPE_CHECKING:
    from blockcms.db.models import Page

# OpenGraph has no "blog" type; blog posts are articles
OG_TYPES = {"website": "website", "article": "article", "blog": "article"}


def _meta_tag(name: str, content: str) -> str:
    return f'<meta name="{escape(name)}" content="{escape(content)}">'


def _og_tag(prop: str, content: str) -> str:
    return f'<meta property="{escape(prop)}" content="{escape(content)}">'


def _page_url(page: "Page", base_url: str) -> str:
    base = base_url.rstrip("/")
    slug = page.slug.strip("/")
    if not slug or slug == "home":
        return base or "/"
    return f"{base}/{slug}"


def _seo_section(page: "Page") -> dict[str, Any]:
    seo = (page.body or {}).get("seo")
    return seo if isinstance(seo, dict) else {}


@dataclass
class SEOMeta:
    title: str
    description: str | None
    keywords: str | None
    canonical_url: str

    def __html__(self) -> str:
        parts: list[str] = []
        if self.description:
            parts.append(_meta_tag("description", self.description))
        if self.keywords:
            parts.append(_meta_tag("keywords", self.keywords))
        if self.canonical_url:
            parts.append(f'<link rel="canonical" href="{escape(self.canonical_url)}">')
        return Markup("\n    ".join(parts))


@dataclass
class OpenGraphMeta:
    title: str
    description: str | None
    image: str | None
    url: str
    site_name: str
    type: str = "website"

    def __html__(self) -> str:
        parts = [
            _og_tag("og:title", self.title),
            _og_tag("og:type", self.type),
            _og_tag("og:url", self.url),
            _og_tag("og:site_name", self.site_name),
        ]
        if self.description:
            parts.append(_og_tag("og:description", self.description))
        if self.image:
            parts.append(_og_tag("og:image", self.image))
        return Markup("\n    ".join(parts))


async def get_page_seo_meta(page: "Page", site_name: str, base_url: str) -> SEOMeta:
    """Build the ``<head>`` metadata for a page.

    The SEO title falls back to the page title; the ``page_seo_meta`` filter
    gets the last word.
    """
    seo = _seo_section(page)
    title = seo.get("title") or page.title
    if site_name:
        title = f"{title} | {site_name}"
    keywords = seo.get("keywords")

    meta = SEOMeta(
        title=title,
        description=seo.get("description") or None,
        keywords=", ".join(keywords) if isinstance(keywords, list) and keywords else None,
        canonical_url=_page_url(page, base_url),
    )
    return await hooks.apply_filters(PAGE_SEO_META, meta, page, site_name, base_url)


async def get_page_og_meta(page: "Page", site_name: str, base_url: str) -> OpenGraphMeta:
    seo = _seo_section(page)
    meta = OpenGraphMeta(
        title=seo.get("title") or page.title,
        description=seo.get("description") or None,
        image=seo.get("ogImage") or None,
        url=_page_url(page, base_url),
        site_name=site_name,
        type=OG_TYPES.get(seo.get("ogType") or "website", "website"),
    )
    return await hooks.apply_filters(PAGE_OG_META, meta, page, site_name, base_url)
