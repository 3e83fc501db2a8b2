"""Closed-form parametric surfaces and curves.

Each surface owns a map ``f(u, v) -> (x, y, z)`` sampled on a regular
grid.  Where no analytic normal is available the normal comes from
central differences of ``f`` in ``u`` and ``v``; when that collapses
(the Klein bottle's branch seam, a pinched grid row) a spherical
direction built from the parameters is used instead, so every vertex
carries a finite unit normal.

Grid cells ``(i, j)`` are split into triangles ``(i,j) (i,j+1) (i+1,j)``
and ``(i,j+1) (i+1,j+1) (i+1,j)``.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional

from mathmesh.mesh import MeshBuffers, MeshBuilder, Topology
from mathmesh.vec import (Vec3, Z_AXIS, cross, hsl_to_rgb, normalize,
                          normalize_or, scale, sub)

logger = logging.getLogger(__name__)

PHI = (1.0 + math.sqrt(5.0)) / 2.0
TAU = 2.0 * math.pi

# first 200 decimals of pi, leading 3 included
PI_DIGITS = (
    '3'
    '1415926535897932384626433832795028841971693993751058209749445923078164'
    '0628620899862803482534211706798214808651328230664709384460955058223172'
    '535940812848111745028410270193852110555964462294895493038196'
)

SurfaceFn = Callable[[float, float], Vec3]


def spherical_direction(u: float, v: float) -> Vec3:
    """Unit direction ``(cos u cos v, sin u cos v, sin v)``."""

    return (math.cos(u) * math.cos(v), math.sin(u) * math.cos(v), math.sin(v))


def finite_difference_normal(f: SurfaceFn, u: float, v: float, du: float, dv: float,
                             *, u_period: Optional[float] = None) -> Optional[Vec3]:
    """Normal of ``f`` at ``(u, v)`` from central differences.

    When ``u_period`` is given the shifted ``u`` samples are wrapped back
    into ``[0, u_period)`` so piecewise maps evaluate the right branch.
    Returns ``None`` if the result is degenerate.
    """

    u_fwd = u + du
    u_bwd = u - du
    if u_period is not None:
        u_fwd %= u_period
        u_bwd %= u_period
    try:
        tangent_u = sub(f(u_fwd, v), f(u_bwd, v))
        tangent_v = sub(f(u, v + dv), f(u, v - dv))
    except (OverflowError, ValueError, ZeroDivisionError):
        return None
    return normalize(cross(tangent_u, tangent_v), tol=1e-15)


def grid_triangles(mb: MeshBuilder, rows: int, cols: int, base: int = 0) -> None:
    """Triangulate a ``rows x cols`` vertex grid stored row-major."""

    for i in range(rows - 1):
        for j in range(cols - 1):
            a = base + i * cols + j
            b = a + 1
            c = base + (i + 1) * cols + j
            d = c + 1
            mb.add_triangle(a, b, c)
            mb.add_triangle(b, d, c)


def strip_triangles(mb: MeshBuilder, count: int) -> None:
    """Triangle strip along a sampled curve, in-range triples only."""

    for i in range(count - 2):
        mb.add_triangle(i, i + 1, i + 2)
        if i + 3 < count:
            mb.add_triangle(i + 1, i + 3, i + 2)


# ---------------------------------------------------------------------------
# Klein bottle
# ---------------------------------------------------------------------------

def klein_point(u: float, v: float) -> Vec3:
    """Figure-8 immersion of the Klein bottle, unscaled.

    The map switches branch at ``u = pi``.
    """

    cu = math.cos(u)
    su = math.sin(u)
    r = 2 * (1 - cu / 2)
    if u < math.pi:
        x = 3 * cu * (1 + su) + r * cu * math.cos(v)
        y = 8 * su + r * su * math.cos(v)
    else:
        x = 3 * cu * (1 + su) + r * math.cos(v + math.pi)
        y = 8 * su
    z = r * math.sin(v)
    return (x, y, z)


def klein_triangles(mb: MeshBuilder, steps: int) -> None:
    """Triangulate the ``steps x steps`` Klein grid with both seams closed.

    ``v`` wraps directly.  ``klein_point(2 pi, v) == klein_point(0, pi - v)``
    so the last row is joined to row 0 with ``j -> (steps/2 - j) mod steps``.
    """

    half = steps // 2
    for i in range(steps):
        for j in range(steps):
            jn = (j + 1) % steps
            a = i * steps + j
            b = i * steps + jn
            if i + 1 < steps:
                c = (i + 1) * steps + j
                d = (i + 1) * steps + jn
            else:
                c = (half - j) % steps
                d = (half - jn) % steps
            mb.add_triangle(a, b, c)
            mb.add_triangle(b, d, c)


def generate_klein_bottle(complexity: int, radius: float = 1.0,
                          segments: Optional[int] = None) -> MeshBuffers:
    """Closed Klein bottle on a ``U x V`` grid, ``U = V >= 32``.

    An odd ``segments`` is rounded up so the grid can be sewn along
    ``u = 0`` (see :func:`klein_triangles`).
    """

    steps = max(segments if segments is not None else complexity * 4, 32)
    steps += steps % 2
    u_steps = v_steps = steps
    factor = radius * 0.1
    du = math.pi / (u_steps * 2)
    dv = math.pi / (v_steps * 2)

    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True)
    fallbacks = 0
    for i in range(u_steps):
        u = TAU * i / u_steps
        for j in range(v_steps):
            v = TAU * j / v_steps
            normal = finite_difference_normal(klein_point, u, v, du, dv, u_period=TAU)
            if normal is None:
                fallbacks += 1
                normal = normalize_or(spherical_direction(u, v), Z_AXIS)
            mb.add_vertex(scale(klein_point(u, v), factor), normal=normal,
                          uv=(i / (u_steps - 1), j / (v_steps - 1)))

    klein_triangles(mb, steps)
    mesh = mb.build(name='klein_bottle')
    logger.debug('klein bottle: %d vertices, %d faces, %d fallback normals',
                 mesh.vertex_count, mesh.primitive_count, fallbacks)
    return mesh


# ---------------------------------------------------------------------------
# Möbius strip
# ---------------------------------------------------------------------------

def mobius_point(theta: float, v: float, radius: float = 1.0, width: float = 0.2) -> Vec3:
    half = theta / 2
    r = radius + v * width * math.cos(half)
    return (r * math.cos(theta), r * math.sin(theta), v * width * math.sin(half))


def generate_mobius_strip(symmetry: int, radius: float = 1.0, width: float = 0.2,
                          segments: Optional[int] = None) -> MeshBuffers:
    """Möbius strip, ``(segments + 1) x (segments // 4 + 1)`` vertices."""

    if segments is None:
        segments = max(32, symmetry * 8)
    rows = max(2, segments // 4)

    def f(theta, v):
        return mobius_point(theta, v, radius, width)

    dtheta = math.pi / (segments * 2)
    dv = 1.0 / (rows * 2)
    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True, colors=True)
    for i in range(segments + 1):
        u = i / segments
        theta = u * TAU
        for j in range(rows + 1):
            v = j / rows - 0.5
            normal = finite_difference_normal(f, theta, v, dtheta, dv)
            if normal is None:
                normal = normalize_or(spherical_direction(theta, v), Z_AXIS)
            mb.add_vertex(f(theta, v), normal=normal, uv=(u, v + 0.5),
                          color=hsl_to_rgb((u + v + 0.5) / 2, 1.0, 0.5))

    grid_triangles(mb, segments + 1, rows + 1)
    return mb.build(name='mobius_strip')


# ---------------------------------------------------------------------------
# Torus knot
# ---------------------------------------------------------------------------

def torus_knot_point(t: float, p: int, q: int, radius: float = 1.0) -> Vec3:
    phi = t * p
    theta = t * q
    r = radius * (2 + math.cos(theta))
    return (r * math.cos(phi), r * math.sin(phi), radius * math.sin(theta))


def torus_knot_normal(t: float, p: int, q: int) -> Vec3:
    """Outward normal of the underlying torus at the knot point."""

    phi = t * p
    theta = t * q
    return (math.cos(theta) * math.cos(phi), math.cos(theta) * math.sin(phi), math.sin(theta))


def generate_torus_knot(complexity: int, p: int = 3, q: int = 2, radius: float = 1.0,
                        segments: Optional[int] = None) -> MeshBuffers:
    """(p, q) torus knot as a closed line strip of ``segments + 1`` points."""

    if segments is None:
        segments = max(64, complexity * 16)
    mb = MeshBuilder(Topology.LINES, normals=True, uvs=True, colors=True)
    for i in range(segments + 1):
        t = i / segments * TAU
        mb.add_vertex(torus_knot_point(t, p, q, radius),
                      normal=normalize_or(torus_knot_normal(t, p, q), Z_AXIS),
                      uv=(i / segments, 0.0),
                      color=hsl_to_rgb(i / segments, 1.0, 0.5))
    for i in range(segments):
        mb.add_line(i, i + 1)
    return mb.build(name=f'torus_knot_{p}_{q}')


# ---------------------------------------------------------------------------
# Spirals
# ---------------------------------------------------------------------------

def generate_golden_spiral(complexity: int, points_per_turn: int = 100) -> MeshBuffers:
    """Logarithmic spiral growing by ``PHI`` per radian/TAU, rising in z."""

    turns = complexity
    total = turns * points_per_turn
    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True)
    for i in range(total + 1):
        t = i / points_per_turn
        r = PHI ** (t / TAU)
        theta = t * TAU
        x = r * math.cos(theta)
        y = r * math.sin(theta)
        z = t * 0.5
        mb.add_vertex((x, y, z), normal=normalize_or((x, y, z), Z_AXIS),
                      uv=((x + r) / (2 * r), (y + r) / (2 * r)))
    strip_triangles(mb, total + 1)
    return mb.build(name='golden_spiral')


def generate_pi_spiral(complexity: int) -> MeshBuffers:
    """Turtle walk over the decimal digits of pi.

    Even digits turn left by 45 degrees, odd digits turn right; the step
    length and the climb grow with the digit value.
    """

    count = min(complexity * 10, len(PI_DIGITS))
    x = y = z = 0.0
    direction = 0.0
    last = (0.0, 0.0, 0.0)
    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True)
    for ch in PI_DIGITS[:count]:
        digit = int(ch)
        step = (digit + 1) * 0.1
        direction += math.pi / 4 if digit % 2 == 0 else -math.pi / 4
        x += step * math.cos(direction)
        y += step * math.sin(direction)
        z += digit * 0.05
        here = (x, y, z)
        mb.add_vertex(here, normal=normalize_or(sub(here, last), Z_AXIS),
                      uv=((x + 10) / 20, (y + 10) / 20))
        last = here
    strip_triangles(mb, count)
    return mb.build(name='pi_spiral')


# ---------------------------------------------------------------------------
# Radial grids
# ---------------------------------------------------------------------------

def _radial_grid(complexity: int, symmetry: int, radius: float, twist: bool) -> MeshBuilder:
    segments = max(3, symmetry)
    rings = max(1, complexity)
    outer = 2.0 * radius
    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True)
    for ring in range(rings + 1):
        r = ring / rings * outer
        for i in range(segments + 1):
            angle = i / segments * TAU
            if twist:
                angle += ring * math.pi / 4
            x = math.cos(angle) * r
            y = math.sin(angle) * r
            z = (ring / rings * 2 - 1) * radius if twist else 0.0
            mb.add_vertex((x, y, z), normal=Z_AXIS,
                          uv=((x + outer) / (2 * outer), (y + outer) / (2 * outer)))
    grid_triangles(mb, rings + 1, segments + 1)
    return mb


def generate_mandala(complexity: int, symmetry: int, radius: float = 1.0) -> MeshBuffers:
    """Flat disc of ``complexity`` rings and ``symmetry`` sectors."""

    return _radial_grid(complexity, symmetry, radius, twist=False).build(name='mandala')


def generate_vortex(complexity: int, symmetry: int, radius: float = 1.0) -> MeshBuffers:
    """Twisted, rising disc; each ring turns a further pi/4."""

    mb = _radial_grid(complexity, symmetry, radius, twist=True)
    mb.compute_normals()
    return mb.build(name='vortex')


__all__ = [
    'PHI',
    'TAU',
    'PI_DIGITS',
    'spherical_direction',
    'finite_difference_normal',
    'grid_triangles',
    'strip_triangles',
    'klein_point',
    'klein_triangles',
    'generate_klein_bottle',
    'mobius_point',
    'generate_mobius_strip',
    'torus_knot_point',
    'torus_knot_normal',
    'generate_torus_knot',
    'generate_golden_spiral',
    'generate_pi_spiral',
    'generate_mandala',
    'generate_vortex',
]
