"""Packed light levels for voxels."""

from __future__ import annotations

from dataclasses import dataclass

CHANNEL_MAX = 15
"""Largest value a single light channel can hold."""


@dataclass(frozen=True)
class Light:
    """Light level at a point, not the properties of an emitter.

    Holds 4 bits each of red, green, blue and sunlight in one 16-bit value,
    with red in the highest nibble and sunlight in the lowest.
    """

    raw: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.raw <= 0xFFFF:
            raise ValueError(f"raw light value out of 16-bit range: {self.raw}")

    @classmethod
    def from_channels(cls, r: int, g: int, b: int, s: int) -> Light:
        """Build a light from its red, green, blue and sunlight levels."""
        for name, value in zip(("r", "g", "b", "s"), (r, g, b, s)):
            if not 0 <= value <= CHANNEL_MAX:
                raise ValueError(f"light channel {name} out of range 0..{CHANNEL_MAX}: {value}")
        return cls((r << 12) | (g << 8) | (b << 4) | s)

    def channels(self) -> tuple[int, int, int, int]:
        """Return the (r, g, b, s) levels."""
        return (self.r, self.g, self.b, self.s)

    @property
    def r(self) -> int:
        return self.raw >> 12

    @property
    def g(self) -> int:
        return (self.raw >> 8) & 0xF

    @property
    def b(self) -> int:
        return (self.raw >> 4) & 0xF

    @property
    def s(self) -> int:
        return self.raw & 0xF