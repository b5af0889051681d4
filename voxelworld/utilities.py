"""Hashing, colour conversion, projection and noise helpers."""

from __future__ import annotations

import math
from collections.abc import Sequence

_SIZE_MASK = (1 << 64) - 1


def _wrap_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def djb2_hash(text: str | bytes) -> int:
    """djb2 (xor variant) hash of a string, stopping at the first NUL."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    data = data.split(b"\0", 1)[0]
    result = 5381
    for byte in data:
        result = ((33 * result) ^ byte) & _SIZE_MASK
    return result


def ivec3_hash(vec: Sequence[int]) -> int:
    """Condense an integer 3-vector into one hash value."""
    x, y, z = vec
    combined = _wrap_int32(x * 5209) ^ _wrap_int32(y * 1811) ^ _wrap_int32(z * 7297)
    return _wrap_int32(combined) & _SIZE_MASK


def rgb_to_hsl(rgb: Sequence[float]) -> tuple[float, float, float]:
    """Convert RGB in [0, 255] to HSL in [0, 1]."""
    r, g, b = (c / 255.0 for c in rgb)
    hi = max(r, g, b)
    lo = min(r, g, b)
    l = (hi + lo) / 2.0
    if hi == lo:
        return (0.0, 0.0, l)

    d = hi - lo
    s = d / (2.0 - hi - lo) if l > 0.5 else d / (hi + lo)
    if hi == r:
        h = (g - b) / d + (6.0 if g < b else 0.0)
    elif hi == g:
        h = (b - r) / d + 2.0
    else:
        h = (r - g) / d + 4.0
    return (h / 6.0, s, l)


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1.0 / 6.0:
        return p + (q - p) * 6.0 * t
    if t < 1.0 / 2.0:
        return q
    if t < 2.0 / 3.0:
        return p + (q - p) * (2.0 / 3.0 - t) * 6.0
    return p


def hsl_to_rgb(hsl: Sequence[float]) -> tuple[float, float, float]:
    """Convert HSL in [0, 1] to RGB in [0, 255]."""
    h, s, l = hsl
    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_rgb(p, q, h + 1.0 / 3.0)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1.0 / 3.0)
    return (r * 255, g * 255, b * 255)


def make_inf_reversed_z_proj_rh(
    fov_y_radians: float, aspect_w_by_h: float, z_near: float
) -> tuple[tuple[float, float, float, float], ...]:
    """Right-handed infinite reversed-Z projection, as four columns."""
    f = 1.0 / math.tan(fov_y_radians / 2.0)
    return (
        (f / aspect_w_by_h, 0.0, 0.0, 0.0),
        (0.0, f, 0.0, 0.0),
        (0.0, 0.0, 0.0, -1.0),
        (0.0, 0.0, z_near, 0.0),
    )


def _mod289(x: float) -> float:
    return x - math.floor(x * (1.0 / 289.0)) * 289.0


def _perm(v: Sequence[float]) -> list[float]:
    return [_mod289(((x * 34.0) + 1.0) * x) for x in v]


def _fract(x: float) -> float:
    return x - math.floor(x)


def noise(p: Sequence[float]) -> float:
    """Smooth 3D value noise in [0, 1]."""
    a = [math.floor(c) for c in p]
    d = [c - f for c, f in zip(p, a)]
    d = [c * c * (3.0 - 2.0 * c) for c in d]

    b = [a[0], a[0] + 1.0, a[1], a[1] + 1.0]
    k1 = _perm([b[0], b[1], b[0], b[1]])
    k2 = _perm([k1[0] + b[2], k1[1] + b[2], k1[0] + b[3], k1[1] + b[3]])

    c = [k + a[2] for k in k2]
    k3 = _perm(c)
    k4 = _perm([x + 1.0 for x in c])

    o1 = [_fract(k * (1.0 / 41.0)) for k in k3]
    o2 = [_fract(k * (1.0 / 41.0)) for k in k4]

    o3 = [y * d[2] + x * (1.0 - d[2]) for x, y in zip(o1, o2)]
    o4x = o3[1] * d[0] + o3[0] * (1.0 - d[0])
    o4y = o3[3] * d[0] + o3[2] * (1.0 - d[0])
    return o4y * d[1] + o4x * (1.0 - d[1])


def map_range(val: float, r1s: float, r1e: float, r2s: float, r2e: float) -> float:
    """Linearly map val from [r1s, r1e] onto [r2s, r2e]."""
    return (val - r1s) / (r1e - r1s) * (r2e - r2s) + r2s


def format_ivec3(v: Sequence[int]) -> str:
    """Format an integer 3-vector as (x, y, z)."""
    x, y, z = v
    return f"({x}, {y}, {z})"