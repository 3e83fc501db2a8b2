"""Small vector helpers shared by the generators.

Vectors are plain ``(x, y, z)`` tuples of floats.  Operations that can
collapse (normalising a zero vector, a triangle with no area) return
``None`` instead of raising, so callers can count and skip the sample.
"""

from __future__ import annotations

import colorsys
import math
from typing import Iterable, Optional, Sequence, Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]

epsilon = 1e-9

X_AXIS: Vec3 = (1.0, 0.0, 0.0)
Y_AXIS: Vec3 = (0.0, 1.0, 0.0)
Z_AXIS: Vec3 = (0.0, 0.0, 1.0)


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point-like sequence as a tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(a: Vec3) -> float:
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def mix(a: Vec3, b: Vec3, t: float) -> Vec3:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t, a[2] + (b[2] - a[2]) * t)


def is_finite(values: Iterable[float]) -> bool:
    """Return ``True`` if every component is a finite float."""

    return all(math.isfinite(v) for v in values)


def normalize(a: Vec3, tol: float = epsilon) -> Optional[Vec3]:
    """Return ``a`` scaled to unit length or ``None`` if that is impossible."""

    if not is_finite(a):
        return None
    n = length(a)
    if n <= tol or not math.isfinite(n):
        return None
    return (a[0] / n, a[1] / n, a[2] / n)


def normalize_or(a: Vec3, fallback: Vec3) -> Vec3:
    """Like :func:`normalize` but substitute ``fallback`` for degenerate input."""

    unit = normalize(a)
    return fallback if unit is None else unit


def triangle_normal(v0: Vec3, v1: Vec3, v2: Vec3, tol: float = epsilon) -> Optional[Vec3]:
    """Return the unit normal of a triangle or ``None`` if degenerate.

    ``tol`` bounds the length of the edge cross product, twice the area.
    """

    return normalize(cross(sub(v1, v0), sub(v2, v0)), tol)


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> Vec3:
    """Convert an HSL triple to RGB in ``[0, 1]``.

    Hue wraps around the unit interval (negative hues included);
    saturation and lightness are clamped.
    """

    h = hue % 1.0
    s = min(max(saturation, 0.0), 1.0)
    l = min(max(lightness, 0.0), 1.0)
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return (r, g, b)


__all__ = [
    'Vec2',
    'Vec3',
    'epsilon',
    'X_AXIS',
    'Y_AXIS',
    'Z_AXIS',
    'to_vec3',
    'add',
    'sub',
    'scale',
    'dot',
    'cross',
    'length',
    'mix',
    'is_finite',
    'normalize',
    'normalize_or',
    'triangle_normal',
    'hsl_to_rgb',
]
