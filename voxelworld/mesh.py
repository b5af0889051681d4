"""Chunk meshing: packed quads with light, ambient occlusion and collision data."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from voxelworld.block import Block, BlockType, Visibility
from voxelworld.chunk import Chunk
from voxelworld.coords import (
    CHUNK_SIZE,
    CHUNK_SIZE_CUBED,
    IVec3,
    index_from_3d,
    local_to_world,
    position_from_index,
    world_to_local,
)
from voxelworld.light import Light

if TYPE_CHECKING:
    from voxelworld.world import VoxelWorld

HEADER_PADDING = 0xDEADBEEF
"""Fills the fourth word of a mesh header."""

AO_MIN = 0
AO_MAX = 3


class Face(enum.IntEnum):
    """Faces of a block, in meshing order."""

    FAR = 0
    NEAR = 1
    LEFT = 2
    RIGHT = 3
    TOP = 4
    BOTTOM = 5

    @property
    def direction(self) -> IVec3:
        """Unit vector pointing out of this face."""
        return _FACE_DIRECTIONS[self]


_FACE_DIRECTIONS: tuple[IVec3, ...] = (
    (0, 0, 1),
    (0, 0, -1),
    (-1, 0, 0),
    (1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
)

# Corners of each face, in order, as signs of a unit cube centred on the block.
_FACE_CORNERS: tuple[tuple[IVec3, ...], ...] = (
    ((1, -1, 1), (1, 1, 1), (-1, 1, 1), (-1, -1, 1)),
    ((-1, -1, -1), (-1, 1, -1), (1, 1, -1), (1, -1, -1)),
    ((-1, -1, 1), (-1, 1, 1), (-1, 1, -1), (-1, -1, -1)),
    ((1, -1, -1), (1, 1, -1), (1, 1, 1), (1, -1, 1)),
    ((-1, 1, -1), (-1, 1, 1), (1, 1, 1), (1, 1, -1)),
    ((-1, -1, 1), (-1, -1, -1), (1, -1, -1), (1, -1, 1)),
)

_QUAD_INDICES = (0, 1, 3, 3, 1, 2)

_NULL_NEIGHBOUR_LIGHT = Light.from_channels(0, 0, 0, 15)


@dataclass(frozen=True)
class QuadInfo:
    """The fields packed into one encoded quad."""

    block_pos: IVec3
    face: Face
    tex_idx: int


def encode_quad(block_pos: tuple[int, int, int], normal_idx: int, tex_idx: int) -> int:
    """Pack a block position, face index and texture index into 32 bits."""
    if not all(0 <= c <= 31 for c in block_pos):
        raise ValueError(f"block position outside 0..31: {tuple(block_pos)}")
    if not 0 <= normal_idx <= 5:
        raise ValueError(f"face index outside 0..5: {normal_idx}")
    if not 0 <= tex_idx < 1 << 10:
        raise ValueError(f"texture index does not fit in 10 bits: {tex_idx}")
    x, y, z = block_pos
    return x | (y << 5) | (z << 10) | (normal_idx << 15) | (tex_idx << 18)


def decode_quad(encoded: int) -> QuadInfo:
    """Unpack a value made by encode_quad."""
    face = (encoded >> 15) & 0x7
    if face > 5:
        raise ValueError(f"encoded face index outside 0..5: {face}")
    block_pos = (encoded & 0x1F, (encoded >> 5) & 0x1F, (encoded >> 10) & 0x1F)
    return QuadInfo(block_pos, Face(face), (encoded >> 18) & 0x3FF)


def encode_quad_light(light_encoding: int, ao: int) -> int:
    """Pack a 16-bit light value with 8 bits of per-vertex ambient occlusion."""
    if not 0 <= light_encoding <= 0xFFFF:
        raise ValueError(f"light encoding does not fit in 16 bits: {light_encoding}")
    if not 0 <= ao <= 0xFF:
        raise ValueError(f"ambient occlusion does not fit in 8 bits: {ao}")
    return light_encoding | (ao << 16)


def _in_chunk(pos: tuple[int, int, int]) -> bool:
    return all(0 <= c < CHUNK_SIZE for c in pos)


def _block(chunk: Chunk, pos: tuple[int, int, int]) -> Block:
    return chunk.storage[index_from_3d(*pos, CHUNK_SIZE, CHUNK_SIZE)]


class ChunkMesh:
    """Builds the renderable and collision mesh of one chunk.

    ``build_mesh`` reads a snapshot of the chunk and its six neighbours and
    fills ``pending`` with a four-word header (the chunk's world position and
    padding) followed by two words per visible quad. ``build_buffers`` then
    publishes that data as ``buffer`` and drops the pending data.
    """

    def __init__(self, chunk: Chunk, world: VoxelWorld | None = None) -> None:
        self.chunk = chunk
        self.world = world
        self.pending: list[int] = []
        self.collider_vertices: list[IVec3] = []
        self.collider_indices: list[int] = []
        self.buffer: tuple[int, ...] | None = None
        self._quad_count = 0
        self._needs_buffering = False
        self._lock = threading.Lock()
        self._parent: Chunk | None = None
        self._neighbours: list[Chunk | None] = [None] * len(Face)

    @property
    def quad_count(self) -> int:
        """Number of quads emitted by the last build."""
        return self._quad_count

    def build_mesh(self) -> None:
        """Regenerate the quads and collision geometry of the chunk."""
        with self._lock:
            self._needs_buffering = True
            self._quad_count = 0
            self.pending = []
            self.collider_vertices = []
            self.collider_indices = []

            parent = self.chunk.copy()
            self._parent = parent
            for face in Face:
                near = None
                if self.world is not None:
                    cpos = tuple(p + d for p, d in zip(parent.pos, face.direction))
                    near = self.world.get_chunk(cpos)
                self._neighbours[face] = near.copy() if near is not None else None

            self.pending.extend(c * CHUNK_SIZE & 0xFFFFFFFF for c in parent.pos)
            self.pending.append(HEADER_PADDING)

            storage = parent.storage
            try:
                for index in range(CHUNK_SIZE_CUBED):
                    block_type = storage.block_type(index)
                    if Block(block_type).visibility is Visibility.INVISIBLE:
                        continue
                    pos = position_from_index(index)
                    for face in Face:
                        self._build_block_face(face, pos, block_type)
            finally:
                self._parent = None
                self._neighbours = [None] * len(Face)

    def build_buffers(self) -> tuple[int, ...] | None:
        """Publish the pending mesh data; None if the chunk has no quads."""
        with self._lock:
            if not self._needs_buffering:
                return self.buffer
            self._needs_buffering = False
            self.buffer = None
            if self._quad_count == 0:
                return None
            self.buffer = tuple(self.pending)
            self.pending = []
            self.collider_vertices = []
            self.collider_indices = []
            return self.buffer

    def _build_block_face(self, face: Face, block_pos: IVec3, block_type: BlockType) -> None:
        parent = self._parent
        assert parent is not None
        near_pos = tuple(b + d for b, d in zip(block_pos, face.direction))
        near_chunk: Chunk | None = parent
        if not _in_chunk(near_pos):
            near_pos = world_to_local(local_to_world(near_pos, parent.pos)).block_pos
            near_chunk = self._neighbours[face]

        if near_chunk is None:
            self._add_quad(block_pos, block_type, face, _NULL_NEIGHBOUR_LIGHT)
            return

        other = _block(near_chunk, near_pos)
        light = other.light

        water_surface = (
            other.type != BlockType.WATER
            and block_type == BlockType.WATER
            and near_pos[1] - block_pos[1] > 0
        )
        if water_surface or other.visibility > Visibility.OPAQUE:
            self._add_quad(block_pos, block_type, face, light)
            return
        if other.type not in (BlockType.AIR, BlockType.WATER):
            return
        if other.type == BlockType.WATER and block_type == BlockType.WATER:
            return
        if Block(block_type).visibility is Visibility.INVISIBLE:
            return
        self._add_quad(block_pos, block_type, face, light)

    def _add_quad(self, lpos: IVec3, block_type: BlockType, face: Face, light: Light) -> None:
        self._quad_count += 1
        ao_values = 0
        for vertex_index, corner in enumerate(_FACE_CORNERS[face]):
            vertex = tuple(p + (1 if s > 0 else 0) for p, s in zip(lpos, corner))
            self.collider_vertices.append(vertex)  # type: ignore[arg-type]
            ao = self._vertex_face_ao(lpos, corner, face.direction)
            ao_values |= ao << (2 * vertex_index)

        self.pending.append(encode_quad(lpos, int(face), int(block_type)))
        self.pending.append(encode_quad_light(light.raw, ao_values))

        count = len(self.collider_vertices)
        base = count - (count % 4) - 4
        self.collider_indices.extend(base + i for i in _QUAD_INDICES)

    def _vertex_face_ao(self, lpos: IVec3, corner: IVec3, norm: IVec3) -> int:
        parent = self._parent
        assert parent is not None
        occluded = 0
        sides = tuple(c - n for c, n in zip(corner, norm))
        for axis, step in enumerate(sides):
            if step == 0:
                continue
            side_pos = tuple(
                p + n + (step if i == axis else 0)
                for i, (p, n) in enumerate(zip(lpos, norm))
            )
            if _in_chunk(side_pos) and _block(parent, side_pos).type != BlockType.AIR:
                occluded += 1

        if occluded == 2:
            return AO_MIN

        corner_pos = tuple(p + c for p, c in zip(lpos, corner))
        if _in_chunk(corner_pos) and _block(parent, corner_pos).type != BlockType.AIR:
            occluded += 1
        return AO_MAX - occluded