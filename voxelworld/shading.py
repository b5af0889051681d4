"""Shading helpers: normal packing, depth conversion, hash noise and PBR terms.

Vectors are tuples of floats. A 4x4 matrix is given as four columns, and
multiplying it by a vector combines the columns.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]

PHI = 1.61803398874989484820459
"""Golden ratio, used by the hash noise functions."""

_UINT32_MAX = 0xFFFFFFFF
_INV_2_POW_32 = 2.3283064365386963e-10


def _fract(x: float) -> float:
    return x - math.floor(x)


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


def _length(v: Sequence[float]) -> float:
    return math.sqrt(_dot(v, v))


def _normalize(v: Sequence[float]) -> Vec3:
    length = _length(v)
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return tuple(c / length for c in v)  # type: ignore[return-value]


def _cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def sign_not_zero(v: Sequence[float]) -> Vec2:
    """Return +1 or -1 for each of the first two components, treating zero as positive."""
    if len(v) < 2:
        raise ValueError("sign_not_zero needs at least two components")
    x, y = (1.0 if c >= 0.0 else -1.0 for c in v[:2])
    return (x, y)


def float32x3_to_oct(v: Sequence[float]) -> Vec2:
    """Map a unit vector onto octahedral coordinates in [-1, 1]."""
    total = abs(v[0]) + abs(v[1]) + abs(v[2])
    if total == 0.0:
        raise ValueError("cannot encode a zero-length vector")
    p = (v[0] / total, v[1] / total)
    if v[2] <= 0.0:
        sign = sign_not_zero(p)
        return ((1.0 - abs(p[1])) * sign[0], (1.0 - abs(p[0])) * sign[1])
    return p


def oct_to_float32x3(e: Sequence[float]) -> Vec3:
    """Map octahedral coordinates back onto a unit vector."""
    x, y = e[0], e[1]
    z = 1.0 - abs(x) - abs(y)
    if z < 0:
        sign = sign_not_zero((x, y))
        x, y = (1.0 - abs(e[1])) * sign[0], (1.0 - abs(e[0])) * sign[1]
    return _normalize((x, y, z))


def unproject_uv(
    depth: float, uv: Sequence[float], inv_x_proj: Sequence[Sequence[float]]
) -> Vec3:
    """Turn a [0, 1] depth and screen UV into a position via an inverse matrix.

    Depth is taken to already lie in [0, 1] clip space.
    """
    clip = (uv[0] * 2.0 - 1.0, uv[1] * 2.0 - 1.0, depth, 1.0)
    result = [sum(inv_x_proj[col][row] * clip[col] for col in range(4)) for row in range(4)]
    w = result[3]
    if w == 0.0:
        raise ValueError("unprojected point has w = 0")
    return (result[0] / w, result[1] / w, result[2] / w)


def linearize_depth_zo(d: float, zn: float, zf: float) -> float:
    """Linearize a [0, 1] depth buffer value for the given near and far planes."""
    return zn / (zf + d * (zn - zf))


def invert_depth_zo(l: float, zn: float, zf: float) -> float:
    """Inverse of linearize_depth_zo."""
    return (zn - zf * l) / (l * (zn - zf))


def gold_noise(xy: Sequence[float], seed: float) -> float:
    """Hash noise in [0, 1) built on tan."""
    scaled = (xy[0] * PHI, xy[1] * PHI)
    return _fract(math.tan(_distance(scaled, xy) * seed) * xy[0])


def silver_noise(xy: Sequence[float], seed: float) -> float:
    """Hash noise in [0, 1) built on sin."""
    scaled = (xy[0] * PHI, xy[1] * PHI)
    return _fract(math.sin(_distance(scaled, xy) * seed) * xy[0])


def rand(co: Sequence[float]) -> float:
    """Classic sine hash of a 2D point, in [0, 1)."""
    return _fract(math.sin(_dot(co, (12.9898, 78.233))) * 43758.5453)


def random3(c: Sequence[float]) -> Vec3:
    """Pseudo-random 3-vector with components in [-0.5, 0.5)."""
    j = 4096.0 * math.sin(_dot(c, (17.0, 59.4, 15.0)))
    rz = _fract(512.0 * j)
    j *= 0.125
    rx = _fract(512.0 * j)
    j *= 0.125
    ry = _fract(512.0 * j)
    return (rx - 0.5, ry - 0.5, rz - 0.5)


def d_ggx(n: Sequence[float], h: Sequence[float], roughness: float) -> float:
    """GGX normal distribution term."""
    a = roughness * roughness
    cos_theta = max(_dot(n, h), 0.0)
    base = cos_theta * (a * a - 1.0) + 1.0
    return (a * a) / (math.pi * base * base)


def _bitfield_reverse(value: int) -> int:
    return int(f"{value:032b}"[::-1], 2)


def hammersley(i: int, n: int) -> Vec2:
    """The i-th point of an n-point Hammersley set."""
    if not 0 <= i <= _UINT32_MAX or not 0 <= n <= _UINT32_MAX:
        raise ValueError("hammersley arguments must be unsigned 32-bit integers")
    if n == 0:
        raise ValueError("hammersley set size must be positive")
    return (float(i) / float(n), float(_bitfield_reverse(i)) * _INV_2_POW_32)


def importance_sample_ggx(xi: Sequence[float], n: Sequence[float], roughness: float) -> Vec3:
    """Sample a half vector around n from the GGX distribution."""
    a = roughness * roughness
    phi = 2.0 * math.pi * xi[0]
    cos_theta = math.sqrt((1.0 - xi[1]) / (1.0 + (a * a - 1.0) * xi[1]))
    sin_theta = math.sqrt(max(1.0 - cos_theta * cos_theta, 0.0))

    hx = math.cos(phi) * sin_theta
    hy = math.sin(phi) * sin_theta
    hz = cos_theta

    up = (0.0, 0.0, 1.0) if abs(n[2]) < 0.999 else (1.0, 0.0, 0.0)
    tangent = _normalize(_cross(up, n))
    bitangent = _cross(n, tangent)

    sample = tuple(t * hx + b * hy + nc * hz for t, b, nc in zip(tangent, bitangent, n))
    return _normalize(sample)


def fresnel_schlick(cos_theta: float, f0: Sequence[float]) -> Vec3:
    """Schlick's approximation of Fresnel reflectance."""
    factor = max(1.0 - cos_theta, 0.0) ** 5.0
    return tuple(f + (1.0 - f) * factor for f in f0)  # type: ignore[return-value]


def fresnel_schlick_roughness(cos_theta: float, f0: Sequence[float], roughness: float) -> Vec3:
    """Schlick's Fresnel approximation damped by roughness."""
    factor = max(1.0 - cos_theta, 0.0) ** 5.0
    return tuple(f + (max(1.0 - roughness, f) - f) * factor for f in f0)  # type: ignore[return-value]


def g_schlick_ggx(n: Sequence[float], i: Sequence[float], roughness: float) -> float:
    """Schlick-GGX geometry term for one direction."""
    k = (roughness + 1.0) ** 2 / 8.0
    cos_theta = max(_dot(n, i), 0.0)
    return cos_theta / (cos_theta * (1.0 - k) + k)


def g_smith(n: Sequence[float], v: Sequence[float], l: Sequence[float], roughness: float) -> float:
    """Smith geometry term: the product of view and light Schlick-GGX terms."""
    return g_schlick_ggx(n, v, roughness) * g_schlick_ggx(n, l, roughness)