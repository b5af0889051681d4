"""Prefabs: groups of blocks meant to be pasted into the world."""

from __future__ import annotations

import enum
import logging
import struct
from dataclasses import dataclass, field
from pathlib import Path

from voxelworld.block import Block, BlockType
from voxelworld.coords import IVec3

log = logging.getLogger(__name__)

DEFAULT_PREFAB_DIR = Path("Resources") / "Prefabs"
ERROR_NAME = "Error"

_LENGTH = struct.Struct("<Q")
_ENTRY = struct.Struct("<iiiHB")


class PlacementType(enum.IntEnum):
    NO_RESTRICTIONS = 0
    """No spawning restrictions."""
    PRIORITY_REQUIRED = 1
    """Every spawned block has to pass a priority check."""
    NO_OVERWRITING = 2
    """No spawned block may overwrite an existing block."""


@dataclass
class Prefab:
    """Blocks with positions relative to the prefab's spawn point.

    Only the blocks' types, their positions and the name are stored by
    ``to_bytes``; the placement type and block light are not.
    """

    type: PlacementType = PlacementType.NO_RESTRICTIONS
    blocks: list[tuple[IVec3, Block]] = field(default_factory=list)
    name: str = ""

    def add(self, pos: tuple[int, int, int], block: Block) -> None:
        self.blocks.append((tuple(pos), block))  # type: ignore[arg-type]

    def copy(self) -> Prefab:
        return Prefab(self.type, list(self.blocks), self.name)

    def to_bytes(self) -> bytes:
        """Serialize to little-endian binary."""
        parts = [_LENGTH.pack(len(self.blocks))]
        for (x, y, z), block in self.blocks:
            parts.append(_ENTRY.pack(x, y, z, int(block.type), 0))
        name = self.name.encode("utf-8")
        parts.append(_LENGTH.pack(len(name)))
        parts.append(name)
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> Prefab:
        """Parse data written by to_bytes; raise ValueError if it is malformed."""
        view = memoryview(data)
        try:
            (count,) = _LENGTH.unpack_from(view, 0)
            offset = _LENGTH.size
            prefab = cls()
            for _ in range(count):
                x, y, z, type_value, _unused = _ENTRY.unpack_from(view, offset)
                offset += _ENTRY.size
                prefab.add((x, y, z), Block(BlockType(type_value)))
            (name_len,) = _LENGTH.unpack_from(view, offset)
            offset += _LENGTH.size
        except struct.error as exc:
            raise ValueError(f"truncated prefab data: {exc}") from exc
        name = bytes(view[offset : offset + name_len])
        if len(name) != name_len:
            raise ValueError("truncated prefab name")
        prefab.name = name.decode("utf-8")
        return prefab


def _oak_tree() -> Prefab:
    tree = Prefab(PlacementType.NO_RESTRICTIONS, name="Oak Tree")
    for i in range(5):
        tree.add((0, i, 0), Block(BlockType.OAK_WOOD))
        if i > 2:
            for dx, dz in ((-1, 0), (1, 0), (0, -1), (0, 1)):
                tree.add((dx, i, dz), Block(BlockType.OAK_LEAVES))
        if i == 4:
            tree.add((0, i + 1, 0), Block(BlockType.OAK_LEAVES))
    return tree


def _oak_tree_big() -> Prefab:
    tree = Prefab(PlacementType.PRIORITY_REQUIRED, name="Oak Tree Big")
    for i in range(8):
        trunk = BlockType.OAK_WOOD if i < 7 else BlockType.OAK_LEAVES
        tree.add((0, i, 0), Block(trunk))
        if i > 4:
            for dx, dz in (
                (-1, 0), (1, 0), (0, -1), (0, 1),
                (-1, -1), (1, 1), (1, -1), (-1, 1),
            ):
                tree.add((dx, i, dz), Block(BlockType.OAK_LEAVES))
    return tree


def _error_prefab() -> Prefab:
    error = Prefab(PlacementType.NO_OVERWRITING, name=ERROR_NAME)
    for x in range(3):
        for y in range(3):
            for z in range(3):
                error.add((x, y, z), Block(BlockType.ERROR))
    return error


class PrefabManager:
    """Named prefabs, loaded lazily from a directory of .bin files."""

    def __init__(self, directory: str | Path = DEFAULT_PREFAB_DIR) -> None:
        self.directory = Path(directory)
        self.prefabs: dict[str, Prefab] = {}

    def _path(self, filename: str) -> Path:
        return self.directory / f"{filename}.bin"

    def init_prefabs(self) -> None:
        """Register the built-in prefabs and save the error prefab to disk."""
        self.prefabs["OakTree"] = _oak_tree()
        self.prefabs["OakTreeBig"] = _oak_tree_big()
        error = _error_prefab()
        self.prefabs[ERROR_NAME] = error
        self.save_prefab_to_file(error, ERROR_NAME)

    def get_prefab(self, name: str) -> Prefab:
        """Return a prefab by name, loading it from disk the first time."""
        prefab = self.prefabs.get(name)
        if prefab is None:
            prefab = self.load_prefab_from_file(name)
            self.prefabs[name] = prefab
        return prefab

    def load_prefab_from_file(self, filename: str) -> Prefab:
        """Read a prefab; on any failure return a copy of the error prefab."""
        try:
            return Prefab.from_bytes(self._path(filename).read_bytes())
        except (OSError, ValueError):
            return self.prefabs.setdefault(ERROR_NAME, Prefab()).copy()

    def save_prefab_to_file(self, prefab: Prefab, filename: str) -> bool:
        """Write a prefab; return False if the file could not be written."""
        try:
            self._path(filename).write_bytes(prefab.to_bytes())
        except OSError:
            log.error("Error saving prefab %s", filename)
            return False
        return True