from blockcms.blocks.base import SEO
from blockcms.blocks.registry import (
    BLOCK_DEFINITIONS,
    BlockDefinition,
    default_block_data,
    get_block_definition,
    new_block,
    register_block,
    register_renderer,
)
from blockcms.blocks.schema import Block, PageBody, PageInput, PageStatus
from blockcms.blocks.types import BlockType
from blockcms.blocks.validation import (
    UnknownBlock,
    ValidationIssue,
    ValidationResult,
    validate_block,
    validate_block_entry,
    validate_page,
    validate_page_body,
)

__all__ = [
    "BLOCK_DEFINITIONS",
    "Block",
    "BlockDefinition",
    "BlockType",
    "PageBody",
    "PageInput",
    "PageStatus",
    "SEO",
    "UnknownBlock",
    "ValidationIssue",
    "ValidationResult",
    "default_block_data",
    "get_block_definition",
    "new_block",
    "register_block",
    "register_renderer",
    "validate_block",
    "validate_block_entry",
    "validate_page",
    "validate_page_body",
]
