"""Markdown rendering for rich text blocks."""

from markdown_it import MarkdownIt
from mdit_py_plugins.footnote import footnote_plugin

_renderer: MarkdownIt | None = None


def create_markdown_renderer() -> MarkdownIt:
    """Build a CommonMark renderer with tables, strikethrough and footnotes."""
    return (
        MarkdownIt("commonmark", {"html": True})
        .enable("table")
        .enable("strikethrough")
        .use(footnote_plugin)
    )


def get_renderer() -> MarkdownIt:
    global _renderer
    if _renderer is None:
        _renderer = create_markdown_renderer()
    return _renderer


def render_markdown(content: str | None) -> str:
    """Render markdown to HTML; empty or missing input gives an empty string."""
    if not content or not content.strip():
        return ""
    return get_renderer().render(content)
