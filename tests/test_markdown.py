"""Tests for markdown rendering."""

import pytest

from blockcms.lib.markdown import create_markdown_renderer, get_renderer, render_markdown


class TestRenderMarkdown:
    @pytest.mark.parametrize("content", [None, "", "   \n"])
    def test_empty_input(self, content):
        assert render_markdown(content) == ""

    def test_paragraph(self):
        assert render_markdown("Hello world") == "<p>Hello world</p>\n"

    def test_headings_and_emphasis(self):
        result = render_markdown("## Our work\n\nWe build **bridges** and *roads*.")

        assert "<h2>Our work</h2>" in result
        assert "<strong>bridges</strong>" in result
        assert "<em>roads</em>" in result

    def test_links(self):
        result = render_markdown("[Contact](https://example.com/contact)")
        assert '<a href="https://example.com/contact">Contact</a>' in result

    def test_lists(self):
        result = render_markdown("- one\n- two")
        assert result.count("<li>") == 2

    def test_tables(self):
        result = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |")
        assert "<table>" in result
        assert "<td>1</td>" in result

    def test_strikethrough(self):
        assert "<s>old</s>" in render_markdown("~~old~~")

    def test_footnotes(self):
        result = render_markdown("Claim[^1]\n\n[^1]: Source.")
        assert "footnote" in result

    def test_inline_html_passes_through(self):
        result = render_markdown('<div class="note">Hi</div>')
        assert '<div class="note">Hi</div>' in result


class TestRenderer:
    def test_renderer_is_cached(self):
        assert get_renderer() is get_renderer()

    def test_factory_returns_fresh_instance(self):
        assert create_markdown_renderer() is not create_markdown_renderer()
