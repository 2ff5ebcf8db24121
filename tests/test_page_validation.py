"""Tests for whole-page validation and document round-trips."""

import copy

from blockcms.blocks import PageStatus, validate_page, validate_page_body
from blockcms.blocks.schema import is_valid_slug
from blockcms.blocks.types import HeroBlock
from blockcms.blocks.validation import dump_page_input


def _issues(result):
    return {issue.path: issue.message for issue in result.errors}


class TestValidatePage:
    def test_home_page_example(self, home_page):
        result = validate_page(home_page)

        assert result.ok
        page = result.value
        assert page.slug == "home"
        assert page.status is PageStatus.DRAFT
        hero = page.body.blocks[0]
        assert isinstance(hero, HeroBlock)
        assert hero.data.alignment == "center"
        assert hero.data.height == "medium"

    def test_status_defaults_to_draft(self, home_page):
        del home_page["status"]
        assert validate_page(home_page).value.status is PageStatus.DRAFT

    def test_empty_block_list_is_valid(self, home_page):
        home_page["body"]["blocks"] = []
        assert validate_page(home_page).ok

    def test_version_must_be_positive(self, home_page):
        home_page["body"]["version"] = 0
        assert "body.version" in _issues(validate_page(home_page))

    def test_seo_is_required(self, home_page):
        del home_page["body"]["seo"]
        assert _issues(validate_page(home_page)) == {"body.seo": "seo is required"}

    def test_seo_lengths(self, home_page):
        home_page["body"]["seo"] = {"title": "x" * 61, "description": "y" * 161}
        assert set(_issues(validate_page(home_page))) == {
            "body.seo.title",
            "body.seo.description",
        }

    def test_seo_og_type_blog_allowed(self, home_page):
        home_page["body"]["seo"]["ogType"] = "blog"
        assert validate_page(home_page).ok

    def test_invalid_slug_message(self, home_page):
        home_page["slug"] = "Not A Slug"
        assert _issues(validate_page(home_page)) == {
            "slug": "Slug must be lowercase alphanumeric with hyphens",
        }

    def test_every_invalid_block_is_reported(self, home_page):
        home_page["body"]["blocks"] = [
            {"id": "b1", "type": "hero", "data": {}},
            {"id": "b2", "type": "richtext", "data": {"content": "ok"}},
            {"id": "b3", "type": "services", "data": {"limit": 99}},
        ]
        issues = _issues(validate_page(home_page))

        assert set(issues) == {"body.blocks.0.data.title", "body.blocks.2.data.limit"}
        assert issues["body.blocks.0.data.title"] == "title is required"

    def test_unknown_block_type_rejects_page_and_names_index(self, home_page):
        home_page["body"]["blocks"].append({"id": "b2", "type": "carousel", "data": {}})
        result = validate_page(home_page)

        assert not result.ok
        assert result.value is None
        assert _issues(result) == {"body.blocks.1": "Unknown block type 'carousel'"}

    def test_block_without_type(self, home_page):
        home_page["body"]["blocks"] = [{"id": "b1", "data": {}}]
        assert _issues(validate_page(home_page)) == {"body.blocks.0": "Block type is required"}

    def test_block_settings_are_kept_opaque(self, home_page):
        home_page["body"]["blocks"][0]["settings"] = {"className": "wide", "anything": 1}
        block = validate_page(home_page).value.body.blocks[0]
        assert block.settings == {"className": "wide", "anything": 1}

    def test_publish_at_parsed(self, home_page):
        home_page["publishAt"] = "2026-01-01T09:00:00+00:00"
        assert validate_page(home_page).value.publish_at.year == 2026


class TestRoundTrip:
    def test_dump_validates_to_the_same_document(self, home_page):
        home_page["body"]["blocks"] += [
            {"id": "b2", "type": "services", "data": {"limit": 3, "title": "What we do"}},
            {
                "id": "b3",
                "type": "gallery",
                "settings": {"padding": "2rem"},
                "data": {"images": [{"id": "i1", "url": "https://cdn.test/1.jpg", "alt": "One"}]},
            },
            {"id": "b4", "type": "contact", "data": {"title": "Hi", "email": "hi@example.com"}},
        ]
        first = dump_page_input(validate_page(home_page).value)
        second = dump_page_input(validate_page(copy.deepcopy(first)).value)

        assert first == second
        assert [b["id"] for b in second["body"]["blocks"]] == ["b1", "b2", "b3", "b4"]

    def test_dump_uses_stored_field_names(self, home_page):
        document = dump_page_input(validate_page(home_page).value)
        hero = document["body"]["blocks"][0]

        assert hero["type"] == "hero"
        assert hero["data"]["overlayOpacity"] == 0.5
        assert "subtitle" not in hero["data"]
        assert document["status"] == "DRAFT"

    def test_body_alone_round_trips(self, home_page):
        body = validate_page_body(home_page["body"]).value.to_document()
        assert validate_page_body(body).value.to_document() == body


class TestSlug:
    def test_valid_slugs(self):
        assert is_valid_slug("home")
        assert is_valid_slug("about-us-2")

    def test_invalid_slugs(self):
        assert not is_valid_slug("About")
        assert not is_valid_slug("-leading")
        assert not is_valid_slug("double--hyphen")
        assert not is_valid_slug("x" * 101)
