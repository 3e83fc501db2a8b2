"""Catmull-Rom spline helpers.

Provides evaluation and sampling routines for Catmull-Rom curves through
a list of ``(x, y, z)`` control points, open or closed.  The Hopf tube
generator uses the closed form to smooth fiber samples before sweeping
a cross-section along them.
"""

from __future__ import annotations

from math import pow
from typing import List, Optional, Sequence, Tuple

from mathmesh.vec import Vec3, length, normalize, sub, to_vec3


def prepare_loop(points: Sequence[Sequence[float]], tol: float = 1e-9) -> List[Vec3]:
    """Drop consecutive duplicates and a repeated closing point."""

    loop: List[Vec3] = []
    for pt in points:
        v = to_vec3(pt)
        if loop and length(sub(loop[-1], v)) <= tol:
            continue
        loop.append(v)
    if len(loop) > 1 and length(sub(loop[0], loop[-1])) <= tol:
        loop.pop()
    return loop


def evaluate_catmullrom(points: Sequence[Vec3], u: float, *, closed: bool = False,
                        alpha: float = 0.5) -> Vec3:
    """Evaluate a Catmull-Rom spline at parameter ``u`` in ``[0, 1]``."""

    ctrl = [to_vec3(p) for p in points]
    count = len(ctrl)
    if count == 0:
        raise ValueError('Catmull-Rom spline has no control points')
    if count == 1:
        return ctrl[0]

    segment_count = count if closed else count - 1
    u_clamped = max(0.0, min(1.0, float(u)))
    span = u_clamped * segment_count
    idx = int(span)
    tau = span - idx
    if idx >= segment_count:
        idx = segment_count - 1
        tau = 1.0

    p0, p1, p2, p3 = _span_points(ctrl, idx, closed)
    return _catmullrom_point(p0, p1, p2, p3, alpha, tau)


def sample_catmullrom(points: Sequence[Vec3], samples: int, *, closed: bool = False,
                      alpha: float = 0.5) -> List[Vec3]:
    """Sample a Catmull-Rom spline at ``samples`` evenly spaced parameters.

    A closed curve is sampled on ``[0, 1)`` so the first point is not
    repeated at the end; an open curve includes both end points.
    """

    if samples < 2:
        raise ValueError('samples must be >= 2')
    ctrl = [to_vec3(p) for p in points]
    if len(ctrl) < 2:
        raise ValueError('Catmull-Rom spline needs at least 2 control points')

    denom = samples if closed else samples - 1
    return [evaluate_catmullrom(ctrl, i / denom, closed=closed, alpha=alpha)
            for i in range(samples)]


def polyline_tangents(points: Sequence[Vec3], *, closed: bool = False) -> List[Optional[Vec3]]:
    """Return central-difference unit tangents, ``None`` where degenerate."""

    count = len(points)
    tangents: List[Optional[Vec3]] = []
    for i in range(count):
        if closed:
            prev_pt = points[(i - 1) % count]
            next_pt = points[(i + 1) % count]
        else:
            prev_pt = points[max(i - 1, 0)]
            next_pt = points[min(i + 1, count - 1)]
        tangents.append(normalize(sub(next_pt, prev_pt)))
    return tangents


def _span_points(ctrl: Sequence[Vec3], i: int, closed: bool) -> Tuple[Vec3, Vec3, Vec3, Vec3]:
    count = len(ctrl)
    p0 = ctrl[(i - 1) % count] if closed else ctrl[max(i - 1, 0)]
    p1 = ctrl[i % count]
    p2 = ctrl[(i + 1) % count] if closed else ctrl[min(i + 1, count - 1)]
    p3 = ctrl[(i + 2) % count] if closed else ctrl[min(i + 2, count - 1)]
    return p0, p1, p2, p3


def _catmullrom_point(v0: Vec3, v1: Vec3, v2: Vec3, v3: Vec3, alpha: float, tau: float) -> Vec3:

    def tj(ti: float, pa: Vec3, pb: Vec3) -> float:
        return ti + pow(length(sub(pb, pa)), alpha)

    t0 = 0.0
    t1 = tj(t0, v0, v1)
    t2 = tj(t1, v1, v2)
    t3 = tj(t2, v2, v3)

    if t2 - t1 < 1e-12:
        return v2

    t = t1 + (t2 - t1) * tau

    A1 = _catmull_blend(v0, v1, t0, t1, t)
    A2 = _catmull_blend(v1, v2, t1, t2, t)
    A3 = _catmull_blend(v2, v3, t2, t3, t)

    B1 = _catmull_blend(A1, A2, t0, t2, t)
    B2 = _catmull_blend(A2, A3, t1, t3, t)

    return _catmull_blend(B1, B2, t1, t2, t)


def _catmull_blend(a: Vec3, b: Vec3, t0: float, t1: float, t: float) -> Vec3:
    denom = t1 - t0
    if abs(denom) < 1e-12:
        return b
    w0 = (t1 - t) / denom
    w1 = (t - t0) / denom
    return (
        a[0] * w0 + b[0] * w1,
        a[1] * w0 + b[1] * w1,
        a[2] * w0 + b[2] * w1,
    )


__all__ = [
    'prepare_loop',
    'evaluate_catmullrom',
    'sample_catmullrom',
    'polyline_tangents',
]
