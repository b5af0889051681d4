"""Conversions between world, chunk and in-chunk block coordinates."""

from __future__ import annotations

from dataclasses import dataclass

CHUNK_SIZE = 32
CHUNK_SIZE_LOG2 = 5
CHUNK_SIZE_SQRED = CHUNK_SIZE * CHUNK_SIZE
CHUNK_SIZE_CUBED = CHUNK_SIZE * CHUNK_SIZE * CHUNK_SIZE

IVec3 = tuple[int, int, int]


@dataclass(frozen=True)
class LocalPos:
    """A position split into its chunk and the block within that chunk."""

    chunk_pos: IVec3 = (0, 0, 0)
    block_pos: IVec3 = (0, 0, 0)


def world_to_local(wpos: IVec3) -> LocalPos:
    """Split a world block position into chunk and in-chunk positions."""
    mask = CHUNK_SIZE - 1
    block = tuple(c & mask for c in wpos)
    chunk = tuple(c >> CHUNK_SIZE_LOG2 for c in wpos)
    return LocalPos(chunk, block)  # type: ignore[arg-type]


def local_to_world(local: IVec3, cpos: IVec3) -> IVec3:
    """Combine an in-chunk position and a chunk position into a world position."""
    return tuple(l + c * CHUNK_SIZE for l, c in zip(local, cpos))  # type: ignore[return-value]


def index_from_3d(x: int, y: int, z: int, h: int, w: int) -> int:
    """Flatten 3D coordinates into an index, x varying fastest."""
    return x + h * (y + w * z)


def index_from_2d(x: int, y: int, w: int) -> int:
    """Flatten 2D coordinates into an index, x varying fastest."""
    return w * y + x


def position_from_index(index: int) -> IVec3:
    """Recover the in-chunk position of a flat chunk index."""
    return (
        index % CHUNK_SIZE,
        (index // CHUNK_SIZE) % CHUNK_SIZE,
        index // CHUNK_SIZE_SQRED,
    )