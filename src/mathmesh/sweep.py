"""Sweep a cross-section along a centre line.

:func:`sweep_tube` carries a circle along a polyline using
rotation-minimising (parallel transport) frames; for closed curves the
accumulated twist is spread evenly along the loop so the last ring meets
the first one, and the result is a watertight tube.

:func:`sweep_ribbon` carries a ``width x thickness`` rectangle along the
line with a frame rebuilt per segment from the segment direction and a
fixed up-vector.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from mathmesh.mesh import MeshBuffers, MeshBuilder, Topology
from mathmesh.spline import polyline_tangents, prepare_loop
from mathmesh.vec import (Vec3, X_AXIS, Y_AXIS, add, cross, dot, normalize,
                          normalize_or, scale, sub)

Frame = Tuple[Vec3, Vec3, Vec3]


def rotate_about(v: Vec3, axis: Vec3, angle: float) -> Vec3:
    """Rotate ``v`` about the unit vector ``axis`` by ``angle`` radians."""

    c = math.cos(angle)
    s = math.sin(angle)
    k_dot_v = dot(axis, v)
    k_cross_v = cross(axis, v)
    return (
        v[0] * c + k_cross_v[0] * s + axis[0] * k_dot_v * (1 - c),
        v[1] * c + k_cross_v[1] * s + axis[1] * k_dot_v * (1 - c),
        v[2] * c + k_cross_v[2] * s + axis[2] * k_dot_v * (1 - c),
    )


def _initial_normal(tangent: Vec3) -> Vec3:
    # start from the axis least aligned with the tangent
    ax, ay, az = (abs(c) for c in tangent)
    if ax <= ay and ax <= az:
        axis = (1.0, 0.0, 0.0)
    elif ay <= az:
        axis = (0.0, 1.0, 0.0)
    else:
        axis = (0.0, 0.0, 1.0)
    side = normalize(cross(tangent, axis))
    return normalize(cross(tangent, side))


def parallel_frames(points: Sequence[Vec3], *, closed: bool = False) -> List[Frame]:
    """Return ``(tangent, normal, binormal)`` for each point.

    ``points`` must not contain consecutive duplicates.
    """

    tangents = polyline_tangents(points, closed=closed)
    if any(t is None for t in tangents):
        raise ValueError('polyline has degenerate tangents')

    normals: List[Vec3] = [_initial_normal(tangents[0])]
    for i in range(1, len(points)):
        normals.append(_transport(normals[-1], tangents[i - 1], tangents[i]))

    if closed and len(points) > 2:
        # twist left over after going once around the loop
        wrapped = _transport(normals[-1], tangents[-1], tangents[0])
        cos_theta = max(-1.0, min(1.0, dot(normals[0], wrapped)))
        theta = math.acos(cos_theta)
        if dot(tangents[0], cross(normals[0], wrapped)) > 0:
            theta = -theta
        count = len(points)
        normals = [rotate_about(n, t, theta * i / count)
                   for i, (n, t) in enumerate(zip(normals, tangents))]

    frames = []
    for t, n in zip(tangents, normals):
        n = normalize(n) or _initial_normal(t)
        frames.append((t, n, cross(t, n)))
    return frames


def _transport(normal: Vec3, t_prev: Vec3, t_next: Vec3) -> Vec3:
    axis = normalize(cross(t_prev, t_next))
    if axis is None:
        return normal
    angle = math.acos(max(-1.0, min(1.0, dot(t_prev, t_next))))
    return rotate_about(normal, axis, angle)


def sweep_tube(points: Sequence[Vec3], radius: float, radial_segments: int = 8, *,
               closed: bool = True, color: Optional[Vec3] = None) -> MeshBuffers:
    """Tube of constant ``radius`` around ``points``.

    Returns an empty mesh when fewer than three distinct points remain.
    When ``color`` is given every vertex carries it.
    """

    loop = prepare_loop(points) if closed else _dedupe(points)
    if len(loop) < 3:
        return MeshBuffers.empty(Topology.TRIANGLES, skipped=len(points))

    try:
        frames = parallel_frames(loop, closed=closed)
    except ValueError:
        return MeshBuffers.empty(Topology.TRIANGLES, skipped=len(points))
    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True, colors=color is not None)
    count = len(loop)
    for i, (p, (_t, n, b)) in enumerate(zip(loop, frames)):
        for k in range(radial_segments):
            angle = k / radial_segments * 2 * math.pi
            direction = add(scale(n, math.cos(angle)), scale(b, math.sin(angle)))
            mb.add_vertex(add(p, scale(direction, radius)), normal=direction,
                          uv=(i / count, k / radial_segments), color=color)

    rings = count if closed else count - 1
    for i in range(rings):
        i_next = (i + 1) % count
        for k in range(radial_segments):
            k_next = (k + 1) % radial_segments
            a = i * radial_segments + k
            b = i_next * radial_segments + k
            c = i_next * radial_segments + k_next
            d = i * radial_segments + k_next
            mb.add_triangle(a, d, b)
            mb.add_triangle(b, d, c)

    return mb.build()


def _dedupe(points: Sequence[Vec3]) -> List[Vec3]:
    out: List[Vec3] = []
    for p in points:
        if out and out[-1] == tuple(p):
            continue
        out.append(tuple(p))
    return out


def sweep_ribbon(points: Sequence[Vec3], width: float, thickness: float, *,
                 color: Optional[Vec3] = None) -> MeshBuffers:
    """Rectangular ribbon along ``points``.

    Each usable segment start contributes four vertices (bottom-left,
    bottom-right, top-left, top-right); consecutive sections are joined by
    bottom, top, left and right faces.  Segments shorter than ``1e-6`` are
    skipped and counted.  Corner normals blend the two faces meeting there.
    """

    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True, colors=color is not None)
    half_w = width / 2
    half_t = thickness / 2
    last = len(points) - 1
    prev_base = None
    for i in range(last):
        current = points[i]
        forward = normalize(sub(points[i + 1], current), tol=1e-6)
        if forward is None:
            mb.skip()
            continue
        right = normalize(cross(forward, Y_AXIS), tol=1e-3)
        if right is None:
            right = normalize(cross(forward, X_AXIS), tol=1e-3)
        if right is None:
            mb.skip()
            continue
        up = normalize(cross(right, forward))
        if up is None:
            mb.skip()
            continue

        u = i / last
        base = len(mb)
        for sw, st, v in ((-1, -1, 0.0), (1, -1, 1.0), (-1, 1, 0.0), (1, 1, 1.0)):
            pos = add(add(current, scale(right, sw * half_w)), scale(up, st * half_t))
            # side and top/bottom normals weighted by the face widths at the corner
            normal = normalize_or(add(scale(right, sw * thickness), scale(up, st * width)), up)
            mb.add_vertex(pos, normal=normal, uv=(u, v), color=color)

        if prev_base is not None:
            p = prev_base
            q = base
            # bottom
            mb.add_triangle(p, p + 1, q)
            mb.add_triangle(p + 1, q + 1, q)
            # top
            mb.add_triangle(p + 2, q + 2, p + 3)
            mb.add_triangle(p + 3, q + 2, q + 3)
            # left
            mb.add_triangle(p, q, p + 2)
            mb.add_triangle(p + 2, q, q + 2)
            # right
            mb.add_triangle(p + 1, p + 3, q + 1)
            mb.add_triangle(p + 3, q + 3, q + 1)
        prev_base = base

    return mb.build()


__all__ = [
    'rotate_about',
    'parallel_frames',
    'sweep_tube',
    'sweep_ribbon',
]
