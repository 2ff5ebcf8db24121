from blockcms.lib.hooks import hooks, action, filter, do_action, apply_filters
from blockcms.lib.markdown import render_markdown

__all__ = [
    "render_markdown",
    "hooks",
    "action",
    "filter",
    "do_action",
    "apply_filters",
]
