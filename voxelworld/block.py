"""Block types, their properties and block values."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from voxelworld.light import Light


class Visibility(enum.IntEnum):
    """How much a block hides what is behind it; larger is more see-through."""

    OPAQUE = 0
    PARTIAL = 1
    INVISIBLE = 2


@dataclass(frozen=True)
class BlockProperties:
    """Per-type properties of a block."""

    name: str
    emittance: tuple[int, int, int, int]
    priority: int
    ttk: float = 0.5
    destructible: bool = True
    visibility: Visibility = Visibility.OPAQUE
    texture: str = "<null>"


class BlockType(enum.IntEnum):
    """Every kind of block; the value indexes PROPERTIES_TABLE."""

    AIR = 0
    STONE = enum.auto()
    DIRT = enum.auto()
    METAL = enum.auto()
    ORE = enum.auto()
    GRASS = enum.auto()
    SAND = enum.auto()
    SNOW = enum.auto()
    WATER = enum.auto()
    OAK_WOOD = enum.auto()
    OAK_LEAVES = enum.auto()
    ERROR = enum.auto()
    DRY_GRASS = enum.auto()
    O_LIGHT = enum.auto()
    R_LIGHT = enum.auto()
    G_LIGHT = enum.auto()
    B_LIGHT = enum.auto()
    SM_LIGHT = enum.auto()
    Y_LIGHT = enum.auto()
    R_GLASS = enum.auto()
    G_GLASS = enum.auto()
    B_GLASS = enum.auto()
    DEV_VALUE_100 = enum.auto()
    DEV_VALUE_90 = enum.auto()
    DEV_VALUE_80 = enum.auto()
    DEV_VALUE_70 = enum.auto()
    DEV_VALUE_60 = enum.auto()
    DEV_VALUE_50 = enum.auto()
    DEV_VALUE_40 = enum.auto()
    DEV_VALUE_30 = enum.auto()
    DEV_VALUE_20 = enum.auto()
    DEV_VALUE_10 = enum.auto()
    DEV_VALUE_00 = enum.auto()


_NO_LIGHT = (0, 0, 0, 0)

PROPERTIES_TABLE: tuple[BlockProperties, ...] = (
    BlockProperties("air", _NO_LIGHT, 0, 0.0, False, Visibility.INVISIBLE),
    BlockProperties("stone", _NO_LIGHT, 1, 2.0, False),
    BlockProperties("dirt", _NO_LIGHT, 1, 0.5, True, Visibility.OPAQUE),
    BlockProperties("metal", _NO_LIGHT, 1),
    BlockProperties("ore", _NO_LIGHT, 1),
    BlockProperties("grass", _NO_LIGHT, 1, 0.25),
    BlockProperties("sand", _NO_LIGHT, 1),
    BlockProperties("snow", _NO_LIGHT, 1),
    BlockProperties("water", _NO_LIGHT, 1),
    BlockProperties("oak wood", _NO_LIGHT, 1),
    BlockProperties("oak leaves", _NO_LIGHT, 0, 0.1, True, Visibility.PARTIAL),
    BlockProperties("error", _NO_LIGHT, 1),
    BlockProperties("dry grass", _NO_LIGHT, 1),
    BlockProperties("Olight", (15, 8, 0, 0), 1, 0.1),
    BlockProperties("Rlight", (15, 0, 0, 0), 1, 0.1),
    BlockProperties("Glight", (0, 15, 0, 0), 1, 0.1),
    BlockProperties("Blight", (0, 0, 15, 0), 1, 0.1),
    BlockProperties("Smlight", (15, 15, 15, 0), 1, 0.1),
    BlockProperties("Ylight", (15, 15, 0, 0), 1, 0.1),
    BlockProperties("RGlass", _NO_LIGHT, 1, 0.1, True, Visibility.PARTIAL),
    BlockProperties("GGlass", _NO_LIGHT, 1, 0.1, True, Visibility.PARTIAL),
    BlockProperties("BGlass", _NO_LIGHT, 1, 0.1, True, Visibility.PARTIAL),
    BlockProperties("BGlass", _NO_LIGHT, 1, 0.1, True, Visibility.PARTIAL),
    BlockProperties("DevValue100", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue90", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue80", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue70", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue60", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue50", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue40", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue30", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue20", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue10", _NO_LIGHT, 1, 0.1),
    BlockProperties("DevValue00", _NO_LIGHT, 1, 0.1),
)


@dataclass(frozen=True)
class Block:
    """A block: its type and the light level in its cell."""

    type: BlockType = BlockType.AIR
    light: Light = Light()

    @property
    def properties(self) -> BlockProperties:
        return PROPERTIES_TABLE[self.type]

    @property
    def name(self) -> str:
        return self.properties.name

    @property
    def priority(self) -> int:
        return self.properties.priority

    @property
    def ttk(self) -> float:
        return self.properties.ttk

    @property
    def destructible(self) -> bool:
        return self.properties.destructible

    @property
    def emittance(self) -> tuple[int, int, int, int]:
        return self.properties.emittance

    @property
    def visibility(self) -> Visibility:
        return self.properties.visibility