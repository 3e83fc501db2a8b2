"""Hopf fibration visualisations.

Base points are spread over the 2-sphere with the golden angle: for
fiber ``i`` of ``N``, ``t = i / N``, latitude ``phi = acos(1 - 2t)`` and
longitude ``theta = TAU * t * PHI``.  Each base point lifts to a circle
on the 3-sphere which is brought into 3-space by stereographic
projection from ``w = 1``.

Samples that land on the projection pole, or turn non-finite anywhere
along the way, are skipped.  A fiber left with fewer than three samples
is dropped.  Neither is an error; both are counted.

Four representations share the sampling core:

* :func:`generate_hopf_fibration` -- one line mesh, per-vertex colour
* :func:`generate_hopf_tubes` -- one closed tube per fiber
* :func:`generate_hopf_ribbons` -- one rectangular ribbon per fiber
* :func:`generate_hopf_base_sphere` -- thin tubes plus the base sphere
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from mathmesh.mesh import FiberBundle, MeshBuffers, MeshBuilder, Topology
from mathmesh.request import HopfParams
from mathmesh.spline import prepare_loop, sample_catmullrom
from mathmesh.sweep import sweep_ribbon, sweep_tube
from mathmesh.vec import Vec3, Y_AXIS, hsl_to_rgb, is_finite, normalize, normalize_or, sub

logger = logging.getLogger(__name__)

PHI = (1.0 + math.sqrt(5.0)) / 2.0
TAU = 2.0 * math.pi

POLE_TOLERANCE = 1e-9

Vec4 = Tuple[float, float, float, float]
FiberMap = Callable[[float, float, float], Optional[Vec4]]


def base_point(i: int, count: int) -> Tuple[float, float, float]:
    """Return ``(t, phi, theta)`` for base point ``i`` of ``count``."""

    t = i / count
    phi = math.acos(1 - 2 * t)
    theta = TAU * t * PHI
    return t, phi, theta


def hopf_map(theta: float, phi: float, alpha: float) -> Optional[Vec4]:
    """Lift base point ``(theta, phi)`` at fiber phase ``alpha`` onto S3.

    ``(cos a bx, cos a by, sin a bx, sin a by)`` normalised, where
    ``(bx, by)`` are the planar components of the base point.  The base
    poles have ``bx = by = 0`` and yield ``None``.
    """

    s = math.sin(phi)
    bx = s * math.cos(theta)
    by = s * math.sin(theta)
    ca = math.cos(alpha)
    sa = math.sin(alpha)
    q = (ca * bx, ca * by, sa * bx, sa * by)
    norm = math.sqrt(q[0] * q[0] + q[1] * q[1] + q[2] * q[2] + q[3] * q[3])
    if norm <= POLE_TOLERANCE or not math.isfinite(norm):
        return None
    return (q[0] / norm, q[1] / norm, q[2] / norm, q[3] / norm)


def great_circle_map(theta: float, phi: float, alpha: float) -> Optional[Vec4]:
    """Alternate lift whose fibers are linked great circles.

    The raw quadruple has squared length
    ``cos(theta)**2 cos(phi)**2 + sin(theta)**2 + sin(phi)**2`` and is
    normalised onto S3 like :func:`hopf_map`.
    """

    ct, st = math.cos(theta), math.sin(theta)
    cp, sp = math.cos(phi), math.sin(phi)
    ca, sa = math.cos(alpha), math.sin(alpha)
    q = (ct * cp * ca - st * sa, ct * cp * sa + st * ca, ct * sp, st * sp)
    norm = math.sqrt(q[0] * q[0] + q[1] * q[1] + q[2] * q[2] + q[3] * q[3])
    if norm <= POLE_TOLERANCE or not math.isfinite(norm):
        return None
    return (q[0] / norm, q[1] / norm, q[2] / norm, q[3] / norm)


LIFTS: Dict[str, FiberMap] = {
    'circle': hopf_map,
    'great_circle': great_circle_map,
}


def stereographic(x: float, y: float, z: float, w: float) -> Optional[Vec3]:
    """Project ``(x, y, z, w)`` from the pole ``w = 1`` into 3-space."""

    denom = 1.0 - w
    if abs(denom) < POLE_TOLERANCE:
        return None
    f = 1.0 / denom
    p = (x * f, y * f, z * f)
    if not is_finite(p):
        return None
    return p


def inverse_stereographic(px: float, py: float, pz: float) -> Vec4:
    """Map a point of 3-space back onto the unit 3-sphere."""

    s = px * px + py * py + pz * pz
    d = s + 1.0
    return (2 * px / d, 2 * py / d, 2 * pz / d, (s - 1.0) / d)


@dataclass(frozen=True)
class FiberSample:
    index: int
    t: float
    points: Tuple[Vec3, ...]
    phases: Tuple[float, ...]
    skipped: int


def sample_fiber(i: int, count: int, samples: int, radius: float = 1.0,
                 fiber_map: str = 'circle') -> FiberSample:
    """Sample fiber ``i`` of ``count`` at ``samples + 1`` phases in ``[0, TAU]``."""

    lift = LIFTS[fiber_map]
    t, phi, theta = base_point(i, count)
    points: List[Vec3] = []
    phases: List[float] = []
    skipped = 0
    for j in range(samples + 1):
        alpha = j / samples * TAU
        q = lift(theta, phi, alpha)
        p = None if q is None else stereographic(*q)
        if p is None:
            skipped += 1
            continue
        p = (p[0] * radius, p[1] * radius, p[2] * radius)
        if not is_finite(p):
            skipped += 1
            continue
        points.append(p)
        phases.append(alpha)
    return FiberSample(i, t, tuple(points), tuple(phases), skipped)


def _fibers(count: int, samples: int, radius: float, fiber_map: str):
    for i in range(count):
        fiber = sample_fiber(i, count, samples, radius, fiber_map)
        if len(fiber.points) < 3:
            logger.debug('dropping fiber %d: %d valid samples', i, len(fiber.points))
            yield fiber, False
        else:
            yield fiber, True


# ---------------------------------------------------------------------------
# Representations
# ---------------------------------------------------------------------------

def generate_hopf_fibration(complexity: int, radius: float = 1.0,
                            params: Optional[HopfParams] = None,
                            max_fibers: int = 50) -> MeshBuffers:
    """All fibers as one line mesh with rainbow vertex colours."""

    params = params or HopfParams()
    count = min(complexity, max_fibers)
    samples = params.points_per_fiber or 60
    fiber_map = params.fiber_map or 'circle'

    mb = MeshBuilder(Topology.LINES, normals=True, colors=True)
    for fiber, usable in _fibers(count, samples, radius, fiber_map):
        mb.skip(fiber.skipped)
        if not usable:
            mb.skip(len(fiber.points))
            continue
        pts = fiber.points
        last = len(pts) - 1
        start = len(mb)
        for j, (p, alpha) in enumerate(zip(pts, fiber.phases)):
            if j == 0:
                tangent = sub(pts[1], p)
            elif j == last:
                tangent = sub(p, pts[j - 1])
            else:
                tangent = sub(pts[j + 1], pts[j - 1])
            hue = (fiber.t + math.sin(alpha) * 0.1) % 1.0
            color = hsl_to_rgb(hue, 0.9, 0.6 + math.cos(alpha) * 0.2)
            mb.add_vertex(p, normal=normalize_or(tangent, Y_AXIS), color=color)
        for j in range(last):
            mb.add_line(start + j, start + j + 1)

    mesh = mb.build(name='hopf_fibration')
    logger.debug('hopf fibration: %d fibers, %d vertices, %d skipped',
                 count, mesh.vertex_count, mesh.skipped)
    return mesh


def tube_tint(t: float) -> Vec3:
    return hsl_to_rgb(t * 0.9, 0.85 + math.sin(t * TAU * 2) * 0.1,
                      0.5 + math.cos(t * TAU * 5) * 0.15)


def ribbon_tint(t: float) -> Vec3:
    return hsl_to_rgb(t * 0.85 + math.sin(t * TAU * 3) * 0.05, 0.9,
                      0.55 + math.sin(t * TAU * 7) * 0.1)


def _tube_bundle(name: str, count: int, samples: int, radius: float, fiber_map: str,
                 tube_radius: Callable[[float], float], radial_segments: int,
                 segments: Callable[[int], int], tint: Callable[[float], Vec3],
                 prefix: Tuple[MeshBuffers, ...] = ()) -> FiberBundle:
    meshes: List[MeshBuffers] = list(prefix)
    dropped = 0
    for fiber, usable in _fibers(count, samples, radius, fiber_map):
        if not usable:
            dropped += 1
            continue
        loop = prepare_loop(fiber.points)
        if len(loop) < 3:
            dropped += 1
            continue
        smooth = sample_catmullrom(loop, segments(len(fiber.points)), closed=True)
        color = tint(fiber.t)
        tube = sweep_tube(smooth, tube_radius(fiber.t), radial_segments, closed=True)
        if tube.is_empty:
            dropped += 1
            continue
        meshes.append(MeshBuffers(
            positions=tube.positions, indices=tube.indices, topology=tube.topology,
            normals=tube.normals, uvs=tube.uvs, tint=color,
            skipped=fiber.skipped + tube.skipped, name=f'{name}[{fiber.index}]'))
    bundle = FiberBundle(tuple(meshes), skipped=dropped, name=name)
    logger.debug('%s: %d meshes, %d fibers dropped', name, len(bundle), dropped)
    return bundle


def generate_hopf_tubes(complexity: int, radius: float = 1.0,
                        params: Optional[HopfParams] = None,
                        max_fibers: int = 50, max_samples: int = 120) -> FiberBundle:
    """One closed tube per fiber, each with its own tint."""

    params = params or HopfParams()
    count = min(complexity, max_fibers)
    samples = min(params.points_per_fiber or 100, max_samples)
    base_radius = params.tube_radius

    return _tube_bundle(
        'hopf_tubes', count, samples, radius, params.fiber_map or 'great_circle',
        tube_radius=lambda t: base_radius * (0.8 + math.sin(t * TAU * 3) * 0.2),
        radial_segments=params.radial_segments,
        segments=lambda n: max(30, int(n * 1.2)),
        tint=tube_tint,
    )


def generate_hopf_ribbons(complexity: int, radius: float = 1.0,
                          params: Optional[HopfParams] = None,
                          max_fibers: int = 40) -> FiberBundle:
    """One rectangular ribbon per fiber."""

    params = params or HopfParams()
    count = min(complexity, max_fibers)
    samples = params.points_per_fiber or 80
    fiber_map = params.fiber_map or 'great_circle'

    meshes: List[MeshBuffers] = []
    dropped = 0
    for fiber, usable in _fibers(count, samples, radius, fiber_map):
        if not usable:
            dropped += 1
            continue
        ribbon = sweep_ribbon(fiber.points, params.ribbon_width, params.ribbon_thickness)
        if ribbon.is_empty:
            dropped += 1
            continue
        meshes.append(MeshBuffers(
            positions=ribbon.positions, indices=ribbon.indices, topology=ribbon.topology,
            normals=ribbon.normals, uvs=ribbon.uvs, tint=ribbon_tint(fiber.t),
            skipped=fiber.skipped + ribbon.skipped, name=f'hopf_ribbons[{fiber.index}]'))
    bundle = FiberBundle(tuple(meshes), skipped=dropped, name='hopf_ribbons')
    logger.debug('hopf ribbons: %d meshes, %d fibers dropped', len(bundle), dropped)
    return bundle


BASE_SPHERE_TINT: Vec3 = hsl_to_rgb(0.0, 0.0, 0.27)


def uv_sphere(radius: float, width_segments: int = 32, height_segments: int = 16) -> MeshBuffers:
    """Latitude/longitude sphere with outward normals."""

    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True)
    for iy in range(height_segments + 1):
        v = iy / height_segments
        polar = v * math.pi
        for ix in range(width_segments + 1):
            u = ix / width_segments
            azimuth = u * TAU
            n = (-math.cos(azimuth) * math.sin(polar), math.cos(polar),
                 math.sin(azimuth) * math.sin(polar))
            n = normalize(n) or Y_AXIS
            mb.add_vertex((n[0] * radius, n[1] * radius, n[2] * radius), normal=n,
                          uv=(u, 1 - v))
    cols = width_segments + 1
    for iy in range(height_segments):
        for ix in range(width_segments):
            a = iy * cols + ix + 1
            b = iy * cols + ix
            c = (iy + 1) * cols + ix
            d = (iy + 1) * cols + ix + 1
            if iy != 0:
                mb.add_triangle(a, b, d)
            if iy != height_segments - 1:
                mb.add_triangle(b, c, d)
    return mb.build(tint=BASE_SPHERE_TINT, name='base_sphere')


def generate_hopf_base_sphere(complexity: int, radius: float = 1.0,
                              params: Optional[HopfParams] = None,
                              max_fibers: int = 40) -> FiberBundle:
    """Thin fiber tubes, preceded by the base sphere when requested."""

    params = params or HopfParams()
    count = min(complexity, max_fibers)
    samples = params.points_per_fiber or 40
    prefix = (uv_sphere(radius * 0.3),) if params.show_base_sphere else ()

    return _tube_bundle(
        'hopf_base_sphere', count, samples, radius, params.fiber_map or 'circle',
        tube_radius=lambda t: radius * 0.01,
        radial_segments=8,
        segments=lambda n: max(20, n),
        tint=lambda t: hsl_to_rgb(t, 0.9, 0.6),
        prefix=prefix,
    )


__all__ = [
    'PHI',
    'TAU',
    'LIFTS',
    'FiberSample',
    'base_point',
    'hopf_map',
    'great_circle_map',
    'stereographic',
    'inverse_stereographic',
    'sample_fiber',
    'generate_hopf_fibration',
    'generate_hopf_tubes',
    'generate_hopf_ribbons',
    'generate_hopf_base_sphere',
    'uv_sphere',
    'tube_tint',
    'ribbon_tint',
]
