"""Whole-list edits on a page's block sequence.

The admin editor keeps the full block list in memory and saves it in one
piece. Each helper here takes the current list and returns a new one; the
input list is never mutated. Blocks are addressed by their ``id``.
"""

from __future__ import annotations

from typing import Any

from blockcms.blocks.registry import new_block

BlockDoc = dict[str, Any]


def _index_of(blocks: list[BlockDoc], block_id: str) -> int:
    for i, block in enumerate(blocks):
        if block.get("id") == block_id:
            return i
    raise KeyError(f"No block with id {block_id!r}")


def add_block(blocks: list[BlockDoc], block_type: str, position: int | None = None) -> list[BlockDoc]:
    """Append (or insert at ``position``) a new block with starter data."""
    result = list(blocks)
    block = new_block(block_type)
    if position is None:
        result.append(block)
    else:
        result.insert(max(0, min(position, len(result))), block)
    return result


def remove_block(blocks: list[BlockDoc], block_id: str) -> list[BlockDoc]:
    return [b for b in blocks if b.get("id") != block_id]


def update_block(blocks: list[BlockDoc], block_id: str, updated: BlockDoc) -> list[BlockDoc]:
    """Replace one block, keeping its position and id."""
    index = _index_of(blocks, block_id)
    result = list(blocks)
    result[index] = {**updated, "id": block_id}
    return result


def move_block(blocks: list[BlockDoc], old_index: int, new_index: int) -> list[BlockDoc]:
    """Move the block at ``old_index`` to ``new_index`` (drag and drop)."""
    if not 0 <= old_index < len(blocks):
        raise IndexError(f"Block index {old_index} out of range")
    new_index = max(0, min(new_index, len(blocks) - 1))
    result = list(blocks)
    result.insert(new_index, result.pop(old_index))
    return result


def move_block_up(blocks: list[BlockDoc], block_id: str) -> list[BlockDoc]:
    index = _index_of(blocks, block_id)
    if index == 0:
        return list(blocks)
    return move_block(blocks, index, index - 1)


def move_block_down(blocks: list[BlockDoc], block_id: str) -> list[BlockDoc]:
    index = _index_of(blocks, block_id)
    if index == len(blocks) - 1:
        return list(blocks)
    return move_block(blocks, index, index + 1)
