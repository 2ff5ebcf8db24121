"""Turn stored blocks into HTML, one block at a time.

``dispatch`` never raises for a bad block. An unregistered type renders a
visible placeholder, and a block whose renderer fails renders an error
placeholder; both are logged and neither affects the blocks around it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, NamedTuple

from markupsafe import Markup

from blockcms.blocks.base import BlockBase
from blockcms.blocks.registry import get_block_definition
from blockcms.blocks.validation import UnknownBlock, validate_block_entry
from blockcms.lib import observability
from blockcms.lib.exceptions import BlockRenderError, DocumentValidationError
from blockcms.rendering import renderers  # noqa: F401  registers the built-in renderers
from blockcms.rendering.collections import CollectionData
from blockcms.rendering.templates import get_block_environment

logger = logging.getLogger(__name__)


class RenderOutcome(str, Enum):
    RENDERED = "rendered"
    UNKNOWN_TYPE = "unknown_type"
    ERROR = "error"


@dataclass
class RenderedBlock:
    block_id: str | None
    block_type: str | None
    outcome: RenderOutcome
    html: Markup
    error: BaseException | None = None

    def __html__(self) -> str:
        return str(self.html)


class BlockView(NamedTuple):
    """A validated block as renderers see it; ``data`` is the typed model."""

    id: str
    type: str
    settings: dict[str, Any]
    data: Any


def _unknown(block_id: str | None, block_type: str | None) -> RenderedBlock:
    logger.warning("Unknown block type %r (block %s)", block_type, block_id)
    observability.warning("Unknown block type {block_type}", block_type=block_type, block_id=block_id)
    html = Markup(
        get_block_environment()
        .get_template("blocks/_unknown.html")
        .render(block_id=block_id, block_type=block_type)
    )
    return RenderedBlock(block_id, block_type, RenderOutcome.UNKNOWN_TYPE, html)


def _failed(
    block_id: str | None,
    block_type: str | None,
    exc: Exception,
    show_details: bool,
) -> RenderedBlock:
    error = BlockRenderError(block_id or "", block_type or "", exc)
    if not observability.exception(
        "Error rendering block {block_id} ({block_type})",
        block_id=block_id,
        block_type=block_type,
    ):
        logger.exception("Error rendering block %s (%s)", block_id, block_type)
    html = Markup(
        get_block_environment()
        .get_template("blocks/_error.html")
        .render(
            block_id=block_id,
            block_type=block_type,
            detail=str(exc) if show_details else None,
        )
    )
    return RenderedBlock(block_id, block_type, RenderOutcome.ERROR, html, error)


def _to_view(block: Any) -> BlockView | UnknownBlock:
    """Normalise a typed block model or a raw stored block.

    Raises:
        DocumentValidationError: A raw block of a known type has invalid data
    """
    if isinstance(block, BlockBase):
        return BlockView(block.id, block.type, block.settings, block.data)

    result = validate_block_entry(block)
    if isinstance(result, UnknownBlock):
        return result
    value = result.unwrap()
    return BlockView(value["id"], value["type"], value["settings"], value["data"])


def _identity(block: Any) -> tuple[str | None, str | None]:
    if isinstance(block, Mapping):
        return block.get("id"), block.get("type")
    return getattr(block, "id", None), getattr(block, "type", None)


async def dispatch(
    block: Any,
    collections: CollectionData | None = None,
    *,
    show_details: bool = False,
) -> RenderedBlock:
    """Render one block with its registered renderer, or a fallback.

    Args:
        block: A typed block model or a raw stored block mapping
        collections: Prefetched collection lists for collection-backed blocks
        show_details: Include the exception text in error placeholders
    """
    collections = collections or CollectionData()
    block_id, block_type = _identity(block)

    try:
        view = _to_view(block)
    except DocumentValidationError as exc:
        return _failed(block_id, block_type, exc, show_details)

    if isinstance(view, UnknownBlock):
        return _unknown(view.block_id, view.block_type)

    definition = get_block_definition(view.type)
    if definition is None or definition.renderer is None:
        return _unknown(view.id, view.type)

    try:
        with observability.span("render block", block_type=view.type, block_id=view.id):
            html = await definition.renderer(view, collections)
    except Exception as exc:
        return _failed(view.id, view.type, exc, show_details)

    return RenderedBlock(view.id, view.type, RenderOutcome.RENDERED, Markup(html))


async def render_blocks(
    blocks: Iterable[Any],
    collections: CollectionData | None = None,
    *,
    show_details: bool = False,
) -> list[RenderedBlock]:
    """Render every block, keeping input order, one output per input."""
    return [await dispatch(block, collections, show_details=show_details) for block in blocks]
