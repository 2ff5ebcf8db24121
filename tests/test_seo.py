"""Tests for the SEO metadata utilities."""

from unittest.mock import MagicMock

import pytest
from markupsafe import Markup

from blockcms.lib.hooks import PAGE_OG_META, PAGE_SEO_META, hooks
from blockcms.lib.seo import OpenGraphMeta, SEOMeta, get_page_og_meta, get_page_seo_meta


@pytest.fixture
def mock_page():
    page = MagicMock()
    page.slug = "about"
    page.title = "About Us"
    page.body = {
        "version": 1,
        "seo": {
            "title": "About",
            "description": "Who we are",
            "keywords": ["team", "history"],
            "ogImage": "https://cdn.example.com/og.png",
            "ogType": "blog",
        },
        "blocks": [],
    }
    return page


class TestSEOMetaHtml:
    def test_renders_tags(self):
        meta = SEOMeta(title="T", description="D", keywords="a, b", canonical_url="https://x.test/p")
        html = str(Markup(meta.__html__()))

        assert '<meta name="description" content="D">' in html
        assert '<meta name="keywords" content="a, b">' in html
        assert '<link rel="canonical" href="https://x.test/p">' in html

    def test_escapes_content(self):
        meta = SEOMeta(title="T", description='"><script>', keywords=None, canonical_url="")
        assert "<script>" not in meta.__html__()

    def test_og_defaults_to_website(self):
        meta = OpenGraphMeta(title="T", description=None, image=None, url="/", site_name="S")
        assert meta.type == "website"
        assert "og:image" not in meta.__html__()


class TestGetPageSeoMeta:
    async def test_reads_body_seo(self, mock_page):
        meta = await get_page_seo_meta(mock_page, "Acme", "https://acme.test/")

        assert meta.title == "About | Acme"
        assert meta.description == "Who we are"
        assert meta.keywords == "team, history"
        assert meta.canonical_url == "https://acme.test/about"

    async def test_falls_back_to_page_title(self, mock_page):
        mock_page.body = {"blocks": []}

        meta = await get_page_seo_meta(mock_page, "", "https://acme.test")

        assert meta.title == "About Us"
        assert meta.description is None
        assert meta.keywords is None

    async def test_home_is_site_root(self, mock_page):
        mock_page.slug = "home"

        meta = await get_page_seo_meta(mock_page, "Acme", "https://acme.test/")

        assert meta.canonical_url == "https://acme.test"

    async def test_filter_can_replace(self, mock_page, clean_hooks):
        def noindex(meta, page, site_name, base_url):
            meta.description = "filtered"
            return meta

        hooks.add_filter(PAGE_SEO_META, noindex)

        meta = await get_page_seo_meta(mock_page, "Acme", "https://acme.test")
        assert meta.description == "filtered"


class TestGetPageOgMeta:
    async def test_blog_maps_to_article(self, mock_page):
        meta = await get_page_og_meta(mock_page, "Acme", "https://acme.test")

        assert meta.type == "article"
        assert meta.image == "https://cdn.example.com/og.png"
        assert meta.title == "About"
        assert meta.url == "https://acme.test/about"
        assert meta.site_name == "Acme"

    async def test_unknown_type_falls_back(self, mock_page):
        mock_page.body["seo"]["ogType"] = "video"

        meta = await get_page_og_meta(mock_page, "Acme", "https://acme.test")
        assert meta.type == "website"

    async def test_filter_applied(self, mock_page, clean_hooks):
        hooks.add_filter(PAGE_OG_META, lambda meta, *args: OpenGraphMeta(
            title="X", description=None, image=None, url=meta.url, site_name=meta.site_name,
        ))

        meta = await get_page_og_meta(mock_page, "Acme", "https://acme.test")
        assert meta.title == "X"
