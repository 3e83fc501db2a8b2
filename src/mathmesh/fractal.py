"""Recursive subdivision fractals.

``sierpinski`` replaces a tetrahedron by four half-size children until
the requested depth is reached, so depth ``d`` always yields ``4**d``
leaf tetrahedra.  ``koch_snowflake`` runs the Koch construction on an
equilateral triangle and decorates every final segment with a cluster of
pyramidal spikes.

All randomness in the snowflake comes from the ``random.Random``
instance passed in; two calls with generators seeded alike produce
identical meshes.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional

from mathmesh.config import DEFAULT_LIMITS
from mathmesh.errors import InvalidParameter
from mathmesh.mesh import MeshBuffers, MeshBuilder, Topology
from mathmesh.vec import Vec3, add, normalize_or, scale

logger = logging.getLogger(__name__)

SQRT_2_3 = math.sqrt(2.0 / 3.0)

# leaf faces in local vertex numbering: top, bottom-left, bottom-right, bottom-front
TETRA_FACES = ((0, 1, 2), (0, 2, 3), (0, 3, 1), (1, 3, 2))

# base quad then four sides; vertex 4 is the tip
SPIKE_FACES = ((0, 1, 2), (1, 3, 2), (0, 2, 4), (2, 3, 4), (3, 1, 4), (1, 0, 4))


def _check_depth(depth, ceiling: int) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        raise InvalidParameter('depth', depth, 'expected an integer >= 0')
    if depth > ceiling:
        raise InvalidParameter('depth', depth, f'must be <= {ceiling}')
    return depth


# ---------------------------------------------------------------------------
# Sierpinski tetrahedron
# ---------------------------------------------------------------------------

def _tetra_leaf(mb: MeshBuilder, x: float, y: float, z: float, s: float) -> None:
    h = s * SQRT_2_3
    base = len(mb)
    mb.add_vertex((x, y, z + h))
    mb.add_vertex((x - s, y - s, z - h / 3))
    mb.add_vertex((x + s, y - s, z - h / 3))
    mb.add_vertex((x, y + s, z - h / 3))
    for a, b, c in TETRA_FACES:
        mb.add_triangle(base + a, base + b, base + c)


def _tetra(mb: MeshBuilder, x: float, y: float, z: float, s: float, depth: int) -> None:
    if depth <= 0:
        _tetra_leaf(mb, x, y, z, s)
        return
    ns = s / 2
    h = ns * SQRT_2_3
    _tetra(mb, x, y, z + h, ns, depth - 1)
    _tetra(mb, x - ns, y - ns, z - h / 3, ns, depth - 1)
    _tetra(mb, x + ns, y - ns, z - h / 3, ns, depth - 1)
    _tetra(mb, x, y + ns, z - h / 3, ns, depth - 1)


def sierpinski(depth: int, size: float = 2.0,
               max_depth: int = DEFAULT_LIMITS.max_sierpinski_depth) -> MeshBuffers:
    """Sierpinski tetrahedron with ``4**depth`` leaves centred on the origin.

    Each leaf contributes 4 vertices and 4 triangles.  Normals are the
    area-weighted average of the faces meeting at each vertex.
    """

    _check_depth(depth, max_depth)
    if size <= 0 or not math.isfinite(size):
        raise InvalidParameter('size', size, 'must be a finite number > 0')

    mb = MeshBuilder(Topology.TRIANGLES)
    _tetra(mb, 0.0, 0.0, 0.0, size, depth)
    mb.compute_normals()
    mesh = mb.build(name='sierpinski')
    logger.debug('sierpinski depth %d: %d leaves', depth, mesh.vertex_count // 4)
    return mesh


# ---------------------------------------------------------------------------
# Koch snowflake
# ---------------------------------------------------------------------------

def _jitter(rng: random.Random, amount: float) -> float:
    return (rng.random() - 0.5) * amount


def add_spike(mb: MeshBuilder, rng: random.Random, origin: Vec3, direction: Vec3,
              size: float, height: float) -> None:
    """Append a five-vertex pyramid rising from ``origin`` along ``direction``."""

    x, y, z = origin
    width = size * 0.15
    corners = ((0.0, 0.0), (width, 0.0), (0.0, width), (width, width))
    uvs = ((0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0))

    base = len(mb)
    for (ox, oy), (u, v) in zip(corners, uvs):
        mb.add_vertex((x + ox + _jitter(rng, 0.1), y + oy + _jitter(rng, 0.1), z),
                      uv=(u + (0.1 if u == 0 else -0.1) * rng.random(),
                          v + (0.1 if v == 0 else -0.1) * rng.random()))
    lean = (direction[0] + _jitter(rng, 0.2), direction[1] + _jitter(rng, 0.2),
            direction[2] + _jitter(rng, 0.2))
    tip = add(origin, scale(normalize_or(lean, direction), size * height))
    mb.add_vertex(tip, uv=(0.5 + _jitter(rng, 0.1), 0.5 + _jitter(rng, 0.1)))

    for a, b, c in SPIKE_FACES:
        mb.add_triangle(base + a, base + b, base + c)


def _spike_cluster(mb: MeshBuilder, rng: random.Random, complexity: int,
                   x1: float, y1: float, x2: float, y2: float) -> None:
    mid = ((x1 + x2) / 2, (y1 + y2) / 2, 0.0)
    direction = normalize_or((x2 - x1, y2 - y1, 0.0), (1.0, 0.0, 0.0))
    size = math.hypot(x2 - x1, y2 - y1) * 0.5

    add_spike(mb, rng, mid, direction, size, 0.8 + complexity / 10)

    count = 4 + complexity // 2
    for i in range(count):
        angle = i / count * 2 * math.pi
        offset = (math.cos(angle) * size * 0.3, math.sin(angle) * size * 0.3, 0.0)
        spike_dir = normalize_or(
            (math.cos(angle), math.sin(angle), 0.5 + rng.random() * 0.5), (0.0, 0.0, 1.0))
        spike_size = size * (0.4 + rng.random() * 0.3)
        spike_height = 0.6 + rng.random() * 0.4
        add_spike(mb, rng, add(mid, offset), spike_dir, spike_size, spike_height)


def _koch_segment(mb: MeshBuilder, rng: random.Random, complexity: int,
                  x1: float, y1: float, x2: float, y2: float, depth: int) -> None:
    if depth == 0:
        _spike_cluster(mb, rng, complexity, x1, y1, x2, y2)
        return

    dx = x2 - x1
    dy = y2 - y1
    seg_len = math.hypot(dx, dy)
    angle = math.atan2(dy, dx)
    x3, y3 = x1 + dx / 3, y1 + dy / 3
    x4, y4 = x2 - dx / 3, y2 - dy / 3
    x5 = x3 + math.cos(angle - math.pi / 3) * seg_len / 3 + _jitter(rng, 0.1)
    y5 = y3 + math.sin(angle - math.pi / 3) * seg_len / 3 + _jitter(rng, 0.1)

    _koch_segment(mb, rng, complexity, x1, y1, x3, y3, depth - 1)
    _koch_segment(mb, rng, complexity, x3, y3, x5, y5, depth - 1)
    _koch_segment(mb, rng, complexity, x5, y5, x4, y4, depth - 1)
    _koch_segment(mb, rng, complexity, x4, y4, x2, y2, depth - 1)


def koch_snowflake(depth: int, complexity: int, size: Optional[float] = None,
                   rng: Optional[random.Random] = None,
                   max_depth: int = DEFAULT_LIMITS.max_koch_depth) -> MeshBuffers:
    """Spiky Koch snowflake, re-centred on its bounding box.

    ``size`` defaults to ``2 + complexity / 5``.  Every depth-0 segment
    carries ``5 + complexity // 2`` spikes, so the mesh has
    ``3 * 4**depth * (5 + complexity // 2)`` pyramids.
    """

    _check_depth(depth, max_depth)
    if size is None:
        size = 2 + complexity / 5
    if rng is None:
        rng = random.Random(0)

    corners = (
        (0.0, size * math.sqrt(3) / 3),
        (-size / 2, -size * math.sqrt(3) / 6),
        (size / 2, -size * math.sqrt(3) / 6),
    )
    mb = MeshBuilder(Topology.TRIANGLES, uvs=True)
    for k in range(3):
        (x1, y1), (x2, y2) = corners[k], corners[(k + 1) % 3]
        _koch_segment(mb, rng, complexity, x1, y1, x2, y2, depth)

    xs, ys, zs = zip(*mb.positions)
    centre = ((min(xs) + max(xs)) / 2, (min(ys) + max(ys)) / 2, (min(zs) + max(zs)) / 2)
    mb.translate(scale(centre, -1.0))
    mb.compute_normals()
    mesh = mb.build(name='koch_snowflake')
    logger.debug('koch snowflake depth %d: %d spikes', depth, mesh.vertex_count // 5)
    return mesh


__all__ = [
    'TETRA_FACES',
    'SPIKE_FACES',
    'sierpinski',
    'add_spike',
    'koch_snowflake',
]
