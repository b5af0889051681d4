"""Simple geometric shapes and frame timing."""

from __future__ import annotations

from dataclasses import dataclass

Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]


@dataclass(frozen=True)
class AABB:
    """Axis-aligned bounding box."""

    min: Vec3 = (0.0, 0.0, 0.0)
    max: Vec3 = (0.0, 0.0, 0.0)

    @classmethod
    def from_aabb16(cls, box: AABB16) -> AABB:
        """Drop the unused w components of a padded box."""
        return cls(tuple(box.min[:3]), tuple(box.max[:3]))  # type: ignore[arg-type]


@dataclass(frozen=True)
class AABB16:
    """Bounding box with four-component corners, padded for GPU use; w is unused."""

    min: Vec4 = (0.0, 0.0, 0.0, 0.0)
    max: Vec4 = (0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_aabb(cls, box: AABB) -> AABB16:
        """Pad a box's corners with w = 0."""
        return cls((*box.min, 0.0), (*box.max, 0.0))  # type: ignore[arg-type]


@dataclass(frozen=True)
class Timestep:
    """Frame time deltas.

    dt_actual ignores the time scale and suits real-time effects;
    dt_effective follows it and suits gameplay.
    """

    dt_actual: float = 0.0
    dt_effective: float = 0.0