"""Jinja environment used by the block renderers.

Block templates live under ``blocks/`` in the same search path as the page
templates, so a site can override any of them from ``./templates/blocks/``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping

import jinja2

from blockcms.lib.markdown import render_markdown

SETTINGS_STYLES = {
    "backgroundColor": "background-color",
    "textColor": "color",
    "padding": "padding",
    "margin": "margin",
}


@lru_cache
def get_block_environment() -> jinja2.Environment:
    from blockcms.app_factory import get_template_directories

    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader([str(d) for d in get_template_directories()]),
        autoescape=jinja2.select_autoescape(default=True, default_for_string=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["markdown"] = render_markdown
    return env


def wrapper_attributes(settings: Mapping[str, Any] | None) -> dict[str, str]:
    """CSS class and inline style for a block's outer element from its settings."""
    settings = settings or {}
    style = "; ".join(
        f"{css}: {settings[key]}"
        for key, css in SETTINGS_STYLES.items()
        if isinstance(settings.get(key), str) and settings[key]
    )
    class_name = settings.get("className")
    return {
        "wrapper_class": class_name if isinstance(class_name, str) else "",
        "wrapper_style": style,
    }
