"""Block storage and chunks of the voxel world."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Union

from voxelworld.block import Block, BlockType
from voxelworld.coords import (
    CHUNK_SIZE,
    CHUNK_SIZE_CUBED,
    IVec3,
    index_from_3d,
)
from voxelworld.light import Light
from voxelworld.shapes import AABB

Position = Union[int, Sequence[int]]


class ArrayBlockStorage:
    """Uncompressed storage of block types and light levels for a chunk."""

    def __init__(self, size: int = CHUNK_SIZE_CUBED) -> None:
        self._types: list[BlockType] = [BlockType.AIR] * size
        self._lights: list[Light] = [Light()] * size

    def _check(self, index: int) -> int:
        if not 0 <= index < len(self._types):
            raise IndexError(f"block index out of range: {index}")
        return index

    def __len__(self) -> int:
        return len(self._types)

    def __getitem__(self, index: int) -> Block:
        index = self._check(index)
        return Block(self._types[index], self._lights[index])

    def block_type(self, index: int) -> BlockType:
        return self._types[self._check(index)]

    def light(self, index: int) -> Light:
        return self._lights[self._check(index)]

    def set_block(self, index: int, block_type: BlockType) -> None:
        """Change the type of a block, keeping its light."""
        self._types[self._check(index)] = BlockType(block_type)

    def set_light(self, index: int, light: Light) -> None:
        """Change the light of a block, keeping its type."""
        self._lights[self._check(index)] = light

    def copy(self) -> ArrayBlockStorage:
        """Return an independent copy of this storage."""
        other = ArrayBlockStorage(0)
        other._types = list(self._types)
        other._lights = list(self._lights)
        return other


def _to_index(pos: Position) -> int:
    if isinstance(pos, int):
        return pos
    x, y, z = pos
    if not all(0 <= c < CHUNK_SIZE for c in (x, y, z)):
        raise IndexError(f"position outside chunk: {tuple(pos)}")
    return index_from_3d(x, y, z, CHUNK_SIZE, CHUNK_SIZE)


class Chunk:
    """A cube of CHUNK_SIZE blocks per side.

    Positions are either a flat index or an in-chunk (x, y, z) tuple.
    Every access takes the chunk's lock; the lock is reentrant, so holding
    the chunk with ``with chunk:`` groups several accesses into one.
    """

    CHUNK_SIZE = CHUNK_SIZE
    CHUNK_SIZE_CUBED = CHUNK_SIZE_CUBED

    def __init__(self, pos: Sequence[int] = (0, 0, 0)) -> None:
        self._pos: IVec3 = tuple(pos)  # type: ignore[assignment]
        self._storage = ArrayBlockStorage()
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Chunk(pos={self._pos})"

    @property
    def pos(self) -> IVec3:
        """Position relative to other chunks (one chunk per unit)."""
        return self._pos

    @property
    def storage(self) -> ArrayBlockStorage:
        return self._storage

    def block_at(self, pos: Position) -> Block:
        index = _to_index(pos)
        with self._lock:
            return self._storage[index]

    def block_type_at(self, pos: Position) -> BlockType:
        index = _to_index(pos)
        with self._lock:
            return self._storage.block_type(index)

    def light_at(self, pos: Position) -> Light:
        index = _to_index(pos)
        with self._lock:
            return self._storage.light(index)

    def set_block_type_at(self, pos: Position, block_type: BlockType) -> None:
        index = _to_index(pos)
        with self._lock:
            self._storage.set_block(index, block_type)

    def set_light_at(self, pos: Position, light: Light) -> None:
        index = _to_index(pos)
        with self._lock:
            self._storage.set_light(index, light)

    def aabb(self) -> AABB:
        """World-space bounds of the chunk."""
        lo = tuple(float(c * CHUNK_SIZE) for c in self._pos)
        hi = tuple(float(c * CHUNK_SIZE + CHUNK_SIZE) for c in self._pos)
        return AABB(lo, hi)  # type: ignore[arg-type]

    def copy(self) -> Chunk:
        """Return a chunk with the same position and a copy of the blocks."""
        with self._lock:
            other = Chunk(self._pos)
            other._storage = self._storage.copy()
        return other

    def __enter__(self) -> Chunk:
        self._lock.acquire()
        return self

    def __exit__(self, *args: object) -> None:
        self._lock.release()