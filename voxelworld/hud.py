"""Heads-up display state: the block the player holds."""

from __future__ import annotations

from dataclasses import dataclass

from voxelworld.block import BlockType


@dataclass
class HUD:
    """Tracks the selected block type, changed by scrolling."""

    selected: BlockType = BlockType.ERROR

    def update(self, scroll_offset: float) -> BlockType:
        """Move the selection by the whole part of a scroll offset and return it."""
        offset = int(scroll_offset)
        if offset:
            target = int(self.selected) + offset
            self.selected = BlockType(max(0, min(target, len(BlockType) - 1)))
        return self.selected