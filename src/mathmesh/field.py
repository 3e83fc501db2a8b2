"""Field-driven geometry.

* :func:`generate_quantum_field` -- nested spherical shells displaced by
  a hydrogen-like probability amplitude, then pushed outward by a
  tunnelling term.
* :func:`generate_julia_set` -- the non-escaping voxels of a 3D quadratic
  Julia iteration, as a point cloud.
* :func:`generate_neuronal` -- random nodes on a sphere joined by random
  links.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional, Tuple

import numpy as np

from mathmesh.config import DEFAULT_LIMITS
from mathmesh.errors import InvalidParameter
from mathmesh.mesh import MeshBuffers, MeshBuilder, Topology
from mathmesh.vec import Vec3, Z_AXIS, add, hsl_to_rgb, normalize_or, scale

logger = logging.getLogger(__name__)

TAU = 2.0 * math.pi

FIELD_RADIUS = 1.5
BARRIERS = (1.0, 1.5, 2.0)
PARTICLE_ENERGY = 0.8
ESCAPE_RADIUS_SQ = 4.0


# ---------------------------------------------------------------------------
# Quantum field
# ---------------------------------------------------------------------------

def probability(r: float, theta: float, phi: float, layer: int) -> float:
    """Interference-modulated amplitude ``|R Y|`` for shell ``layer``."""

    n = 2 + layer
    l = 1 + layer
    m = layer
    y = (math.sqrt((2 * l + 1) / (4 * math.pi)) * math.cos(theta)
         * math.cos(m * phi) * math.sin(n * theta))
    radial = math.exp(-r / n) * r ** l * math.sin(r * 2)
    return abs(radial * y) * (1 + math.sin(phi * 3) * 0.2)


def tunnelling(p: Vec3) -> float:
    """Outward displacement from the three concentric barriers."""

    r = math.sqrt(p[0] * p[0] + p[1] * p[1] + p[2] * p[2])
    total = 0.0
    for k, barrier in enumerate(BARRIERS):
        distance = abs(r - FIELD_RADIUS * (1 + k * 0.2))
        total += math.exp(-2 * math.sqrt(2 * (barrier - PARTICLE_ENERGY)) * distance)
    total /= len(BARRIERS)
    return total * 0.15 * (1 + math.sin(p[0] * 5) * math.cos(p[1] * 5) * 0.2)


def generate_quantum_field(complexity: int, layers: int = 3,
                           max_segments: int = DEFAULT_LIMITS.max_grid_segments) -> MeshBuffers:
    """``layers`` displaced shells of ``(segments + 1)**2`` vertices each.

    Every shell is triangulated on its own grid and each pair of
    consecutive shells is joined by bridging triangles.
    """

    if isinstance(layers, bool) or not isinstance(layers, int) or not 2 <= layers <= 3:
        raise InvalidParameter('layers', layers, 'must be 2 or 3')
    segments = min(max(32, complexity * 8), max_segments)
    side = segments + 1
    per_layer = side * side

    mb = MeshBuilder(Topology.TRIANGLES, uvs=True)
    for layer in range(layers):
        layer_radius = FIELD_RADIUS * (1 + layer * 0.1)
        for i in range(side):
            phi = i / segments * TAU
            for j in range(side):
                theta = j / segments * math.pi
                p = (layer_radius * math.sin(theta) * math.cos(phi),
                     layer_radius * math.sin(theta) * math.sin(phi),
                     layer_radius * math.cos(theta))
                amp = probability(layer_radius, theta, phi, layer)
                p = scale(p, 1 + amp * (0.1 + layer * 0.05))
                mb.add_vertex(p, uv=(phi / TAU + layer * 0.1, theta / math.pi + layer * 0.1))

    for layer in range(layers):
        here = layer * per_layer
        above = here + per_layer
        for i in range(segments):
            for j in range(segments):
                a = here + i * side + j
                b = a + 1
                c = here + (i + 1) * side + j
                d = c + 1
                mb.add_triangle(a, b, c)
                mb.add_triangle(b, d, c)
                if layer + 1 < layers:
                    e = above + i * side + j
                    f = e + 1
                    g = above + (i + 1) * side + j
                    h = g + 1
                    mb.add_triangle(a, e, b)
                    mb.add_triangle(b, e, f)
                    mb.add_triangle(c, g, d)
                    mb.add_triangle(d, g, h)

    mb.positions = [add(p, scale(normalize_or(p, Z_AXIS), tunnelling(p)))
                    for p in mb.positions]
    mb.compute_normals()
    mesh = mb.build(name='quantum_field')
    logger.debug('quantum field: %d layers, %d segments, %d vertices',
                 layers, segments, mesh.vertex_count)
    return mesh


# ---------------------------------------------------------------------------
# Julia set
# ---------------------------------------------------------------------------

def julia_iterate(x: float, y: float, z: float, c: Tuple[float, float],
                  max_iterations: int) -> Tuple[bool, int, Vec3]:
    """Run the escape-time iteration for one start point.

    Returns ``(escaped, iterations, final_point)``.  ``escaped`` is set
    as soon as the point is found outside radius 2; a point still inside
    after ``max_iterations`` updates is part of the set.
    """

    iterations = 0
    while iterations < max_iterations:
        x2, y2, z2 = x * x, y * y, z * z
        if x2 + y2 + z2 > ESCAPE_RADIUS_SQ:
            return True, iterations, (x, y, z)
        x, y, z = x2 - y2 - z2 + c[0], 2 * x * y + c[1], 2 * x * z
        iterations += 1
    return False, iterations, (x, y, z)


def julia_mask(max_iterations: int, c: Tuple[float, float], resolution: int,
               bounds: float) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(coords, inside)`` for the voxel grid.

    ``coords`` is the 1-D axis sample ``-bounds + k * step``; ``inside``
    is a boolean ``(resolution,)*3`` array indexed ``[x, y, z]``.
    """

    step = 2.0 * bounds / resolution
    coords = -bounds + np.arange(resolution, dtype=np.float64) * step
    x0, y0, z0 = np.meshgrid(coords, coords, coords, indexing='ij')
    x, y, z = x0.copy(), y0.copy(), z0.copy()
    escaped = np.zeros(x.shape, dtype=bool)

    with np.errstate(over='ignore', invalid='ignore'):
        for _ in range(max_iterations):
            escaped |= (x * x + y * y + z * z) > ESCAPE_RADIUS_SQ
            active = ~escaped
            if not active.any():
                break
            nx = x * x - y * y - z * z + c[0]
            ny = 2 * x * y + c[1]
            nz = 2 * x * z
            x = np.where(active, nx, x)
            y = np.where(active, ny, y)
            z = np.where(active, nz, z)
    return coords, ~escaped


def generate_julia_set(max_iterations: int = 50, c: Tuple[float, float] = (-0.4, 0.6),
                       resolution: int = 30, bounds: float = 2.0,
                       max_resolution: int = DEFAULT_LIMITS.max_julia_resolution
                       ) -> MeshBuffers:
    """Point cloud of the voxels that never escape.

    Points are emitted in ``x``, ``y``, ``z`` scan order, coloured by
    azimuth (hue) and height (lightness).
    """

    if isinstance(resolution, bool) or not isinstance(resolution, int) or resolution < 1:
        raise InvalidParameter('resolution', resolution, 'expected an integer >= 1')
    if resolution > max_resolution:
        raise InvalidParameter('resolution', resolution, f'must be <= {max_resolution}')
    if bounds <= 0 or not math.isfinite(bounds):
        raise InvalidParameter('bounds', bounds, 'must be a finite number > 0')
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int) \
            or max_iterations < 1:
        raise InvalidParameter('max_iterations', max_iterations, 'expected an integer >= 1')

    coords, inside = julia_mask(max_iterations, c, resolution, bounds)
    mb = MeshBuilder(Topology.POINTS, colors=True)
    for i, j, k in np.argwhere(inside):
        x, y, z = float(coords[i]), float(coords[j]), float(coords[k])
        hue = (math.atan2(y, x) + math.pi) / TAU
        idx = mb.add_vertex((x, y, z), color=hsl_to_rgb(hue, 1.0, 0.5 + z / (2 * bounds)))
        mb.add_point(idx)

    mesh = mb.build(name='julia_set')
    logger.debug('julia set c=%s res=%d: %d of %d voxels inside',
                 c, resolution, mesh.vertex_count, resolution ** 3)
    return mesh


# ---------------------------------------------------------------------------
# Neuronal network
# ---------------------------------------------------------------------------

def generate_neuronal(complexity: int, symmetry: int,
                      rng: Optional[random.Random] = None) -> MeshBuffers:
    """``max(4, 2 * complexity)`` nodes on a sphere of radius 2.

    Each node draws ``symmetry`` random link targets; a draw that lands
    on the node itself is discarded.
    """

    if rng is None:
        rng = random.Random(0)
    nodes = max(4, complexity * 2)
    connections = max(1, symmetry)
    r = 2.0

    mb = MeshBuilder(Topology.LINES, normals=True, uvs=True)
    for i in range(nodes):
        theta = i / nodes * TAU
        phi = math.acos(2 * rng.random() - 1)
        p = (r * math.sin(phi) * math.cos(theta),
             r * math.sin(phi) * math.sin(theta),
             r * math.cos(phi))
        mb.add_vertex(p, normal=normalize_or(p, Z_AXIS), uv=((p[0] + 2) / 4, (p[1] + 2) / 4))

    for i in range(nodes):
        for _ in range(connections):
            target = rng.randrange(nodes)
            if target == i:
                mb.skip()
                continue
            mb.add_line(i, target)
    return mb.build(name='neuronal')


__all__ = [
    'probability',
    'tunnelling',
    'generate_quantum_field',
    'julia_iterate',
    'julia_mask',
    'generate_julia_set',
    'generate_neuronal',
]
