"""The grid of chunks that makes up a voxel world."""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Sequence
from typing import Union

from voxelworld.block import Block, BlockType
from voxelworld.chunk import Chunk
from voxelworld.coords import IVec3, LocalPos, world_to_local
from voxelworld.light import Light

WorldPos = Union[Sequence[int], LocalPos]


class VoxelWorld:
    """A fixed-size grid of chunks.

    The grid holds a one-chunk border around the requested size, so a world
    of dimension (x, y, z) keeps its chunks at positions 1..x, 1..y, 1..z
    inside a grid of (x + 2, y + 2, z + 2) slots.
    """

    def __init__(self, dim: Sequence[int] | None = None) -> None:
        self._chunks: list[Chunk | None] = []
        self.virtual_dim: IVec3 = (0, 0, 0)
        self.actual_dim: IVec3 = (0, 0, 0)
        if dim is not None:
            self.set_dim(dim)

    def set_dim(self, new_dim: Sequence[int]) -> None:
        """Size the world and create its chunks; only allowed once."""
        if self._chunks:
            raise RuntimeError("world dimensions are already set")
        vx, vy, vz = new_dim
        self.virtual_dim = (vx, vy, vz)
        ax, ay, az = vx + 2, vy + 2, vz + 2
        self.actual_dim = (ax, ay, az)
        self._chunks = [None] * (ax * ay * az)
        for z, y, x in itertools.product(range(az), range(ay), range(ax)):
            if 0 < x <= vx and 0 < y <= vy and 0 < z <= vz:
                self._chunks[self._flatten((x, y, z))] = Chunk((x, y, z))

    def _flatten(self, p: Sequence[int]) -> int:
        ax, ay, _ = self.actual_dim
        return p[0] + ax * (p[1] + ay * p[2])

    def _in_bounds(self, p: Sequence[int]) -> bool:
        return all(0 <= c < d for c, d in zip(p, self.actual_dim))

    def get_chunk(self, cpos: Sequence[int]) -> Chunk | None:
        """Return the chunk at a chunk position, or None."""
        if self._in_bounds(cpos):
            return self._chunks[self._flatten(cpos)]
        return None

    def get_chunk_no_check(self, cpos: Sequence[int]) -> Chunk | None:
        """Return the slot at a chunk position, which must be inside the grid."""
        if not self._in_bounds(cpos):
            raise IndexError(f"chunk position outside world: {tuple(cpos)}")
        return self._chunks[self._flatten(cpos)]

    def create_chunk(self, cpos: Sequence[int]) -> Chunk:
        """Put an empty chunk at a grid slot; an existing chunk is returned as is."""
        existing = self.get_chunk_no_check(cpos)
        if existing is not None:
            return existing
        chunk = Chunk(cpos)
        self._chunks[self._flatten(cpos)] = chunk
        return chunk

    def chunks(self) -> Iterator[Chunk]:
        """Iterate over every chunk that exists, in grid order."""
        return (chunk for chunk in self._chunks if chunk is not None)

    def chunks_region(self, low_cpos: Sequence[int], high_cpos: Sequence[int]) -> list[Chunk]:
        """Chunks in the box spanned by two chunk positions, x varying fastest."""
        low = [min(a, b) for a, b in zip(low_cpos, high_cpos)]
        high = [max(a, b) for a, b in zip(low_cpos, high_cpos)]
        region = []
        for z, y, x in itertools.product(
            range(low[2], high[2] + 1),
            range(low[1], high[1] + 1),
            range(low[0], high[0] + 1),
        ):
            found = self.get_chunk((x, y, z))
            if found is not None:
                region.append(found)
        return region

    def chunks_region_world(
        self, low_wpos: Sequence[int], high_wpos: Sequence[int]
    ) -> list[Chunk]:
        """Chunks in the box spanned by two world block positions."""
        return self.chunks_region(
            world_to_local(low_wpos).chunk_pos, world_to_local(high_wpos).chunk_pos
        )

    def _locate(self, wpos: WorldPos) -> tuple[Chunk | None, LocalPos]:
        local = wpos if isinstance(wpos, LocalPos) else world_to_local(wpos)
        return self.get_chunk(local.chunk_pos), local

    def get_block(self, wpos: WorldPos) -> Block:
        """Return the block at a world position; raise LookupError if no chunk holds it."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            raise LookupError(f"no chunk at {local.chunk_pos}")
        return chunk.block_at(local.block_pos)

    def try_get_block(self, wpos: WorldPos) -> Block | None:
        """Return the block at a world position, or None if no chunk holds it."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            return None
        return chunk.block_at(local.block_pos)

    def set_block(self, wpos: WorldPos, block: Block) -> bool:
        """Set type and light of a block; False if no chunk holds the position."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            return False
        with chunk:
            chunk.set_block_type_at(local.block_pos, block.type)
            chunk.set_light_at(local.block_pos, block.light)
        return True

    def set_block_type(self, wpos: WorldPos, block_type: BlockType) -> bool:
        """Set the type of a block; False if no chunk holds the position."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            return False
        chunk.set_block_type_at(local.block_pos, block_type)
        return True

    def set_block_light(self, wpos: WorldPos, light: Light) -> bool:
        """Set the light of a block; False if no chunk holds the position."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            return False
        chunk.set_light_at(local.block_pos, light)
        return True