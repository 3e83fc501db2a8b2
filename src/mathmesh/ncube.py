"""N-dimensional cubes projected into 3D.

Vertices of the n-cube are enumerated by bit pattern: bit ``k`` of the
vertex number picks ``+size`` or ``-size`` on axis ``k``.  The first three
axes are kept as ``(x, y, z)``; the remaining axes are summed into a
single perspective coordinate ``w`` and the point is divided by
``w + (n + 1)``.  From ``n = 7`` the default size drives that divisor to
zero and past it, so cube vertices are projected with the divisor held at
least :data:`MIN_DIVISOR` away from zero, keeping its sign.  Two vertices
share an edge exactly when their numbers differ in one bit, which gives
the ``n * 2**(n-1)`` edges of the 1-skeleton for every ``n``.

Only the base 3-cube carries faces.  Higher dimensional variants are
wireframes.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from mathmesh.errors import InvalidParameter
from mathmesh.mesh import MeshBuffers, MeshBuilder, Topology
from mathmesh.vec import Vec3, normalize_or, scale

logger = logging.getLogger(__name__)

MIN_DIMENSION = 3
MAX_DIMENSION = 10

# smallest |w + (n + 1)| used when projecting cube vertices
MIN_DIVISOR = 0.5

# outward-wound quads of the base cube, vertex number = x + 2y + 4z
CUBE_FACES: Tuple[Tuple[int, int, int, int], ...] = (
    (0, 2, 3, 1),  # -z
    (4, 5, 7, 6),  # +z
    (0, 1, 5, 4),  # -y
    (2, 6, 7, 3),  # +y
    (0, 4, 6, 2),  # -x
    (1, 3, 7, 5),  # +x
)


def _check_dimension(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or not MIN_DIMENSION <= n <= MAX_DIMENSION:
        raise InvalidParameter('dimension', n,
                               f'must be an integer in [{MIN_DIMENSION}, {MAX_DIMENSION}]')


def divisor_values(n: int, size: float) -> List[float]:
    """Return every value the projection divisor takes for an n-cube.

    ``w`` is a sum of ``n - 3`` terms of ``+-size`` so it only takes
    ``n - 2`` distinct values.
    """

    extra = n - 3
    return [(n + 1) + size * (extra - 2 * k) for k in range(extra + 1)]


def check_size(n: int, size: float) -> int:
    """Validate a cube size and return how many divisor values get clamped.

    Any finite positive size projects to finite positions because cube
    vertices use :data:`MIN_DIVISOR`; the count is informational.
    """

    _check_dimension(n)
    if isinstance(size, bool) or not isinstance(size, (int, float)) \
            or not math.isfinite(size) or size <= 0:
        raise InvalidParameter('size', size, 'must be a finite number > 0')
    return sum(1 for d in divisor_values(n, size) if abs(d) < MIN_DIVISOR)


def ncube_vertices(n: int, size: float = 2.0) -> List[Tuple[float, ...]]:
    """Return the ``2**n`` vertices of an n-cube with half edge ``size``."""

    _check_dimension(n)
    return [tuple(size if (i >> k) & 1 else -size for k in range(n))
            for i in range(1 << n)]


def project_vertex(coords: Sequence[float], offset: Optional[float] = None,
                   min_divisor: Optional[float] = None) -> Optional[Vec3]:
    """Perspective-project an n-dimensional point into 3D.

    ``offset`` defaults to ``n + 1``.  With ``min_divisor`` set, a divisor
    smaller in magnitude is replaced by ``+-min_divisor`` (``+`` at zero).
    Otherwise returns ``None`` when the divisor vanishes; also ``None``
    when the result is not finite.
    """

    n = len(coords)
    if offset is None:
        offset = n + 1
    w = sum(coords[3:])
    divisor = w + offset
    if min_divisor is not None and abs(divisor) < min_divisor:
        divisor = -min_divisor if divisor < 0 else min_divisor
    if abs(divisor) < 1e-9:
        return None
    s = 1.0 / divisor
    p = (coords[0] * s, coords[1] * s, coords[2] * s)
    if not all(math.isfinite(c) for c in p):
        return None
    return p


def ncube_edges(n: int) -> List[Tuple[int, int]]:
    """Return the vertex pairs at Hamming distance one."""

    _check_dimension(n)
    edges = []
    for i in range(1 << n):
        for k in range(n):
            j = i ^ (1 << k)
            if i < j:
                edges.append((i, j))
    edges.sort()
    return edges


def ncube_faces() -> List[Tuple[int, int, int]]:
    """Triangulated faces of the base 3-cube."""

    tris = []
    for a, b, c, d in CUBE_FACES:
        tris.append((a, b, c))
        tris.append((a, c, d))
    return tris


def _cube_builder(n: int, size: float, topology: Topology) -> MeshBuilder:
    clamped = check_size(n, size)
    if clamped:
        logger.debug('ncube%d size=%g: %d divisor values held at +-%g',
                     n, size, clamped, MIN_DIVISOR)
    mb = MeshBuilder(topology, normals=True, uvs=True)
    for coords in ncube_vertices(n, size):
        p = project_vertex(coords, min_divisor=MIN_DIVISOR)
        if p is None:
            # unreachable for a finite size once the divisor is clamped
            raise InvalidParameter('size', size, 'projection failed')
        mb.add_vertex(
            p,
            normal=normalize_or((coords[0], coords[1], coords[2]), (0.0, 0.0, 1.0)),
            uv=((coords[0] + size) / (2 * size), (coords[1] + size) / (2 * size)),
        )
    return mb


def generate_ncube(n: int, size: float = 2.0) -> MeshBuffers:
    """Wireframe n-cube, ``3 <= n <= 10``."""

    mb = _cube_builder(n, size, Topology.LINES)
    for a, b in ncube_edges(n):
        mb.add_line(a, b)
    mesh = mb.build(name=f'ncube{n}')
    logger.debug('ncube%d: %d vertices, %d edges', n, mesh.vertex_count, mesh.primitive_count)
    return mesh


def generate_hypercube(size: float = 2.0) -> MeshBuffers:
    """Shaded 4-cube: the six faces of the base cube."""

    mb = _cube_builder(4, size, Topology.TRIANGLES)
    for a, b, c, d in CUBE_FACES:
        mb.add_quad(a, b, c, d)
    return mb.build(name='hypercube')


def generate_tesseract(complexity: int, size: float = 2.0) -> MeshBuffers:
    """4-cube wireframe plus an interior lattice folded through ``w``.

    The lattice has ``segments**3`` points with
    ``w = sin(i*j*k*pi/segments) * size`` and is projected with divisor
    ``w + 4``; neighbouring lattice points along each axis are linked.
    """

    segments = max(2, complexity)
    check_size(4, size)
    if size >= 4.0:
        raise InvalidParameter('size', size, 'lattice divisor w + 4 must stay positive')

    mb = MeshBuilder(Topology.LINES, normals=True, uvs=True)
    for coords in ncube_vertices(4, size):
        mb.add_vertex(
            project_vertex(coords, offset=4.0, min_divisor=MIN_DIVISOR),
            normal=normalize_or(coords[:3], (0.0, 0.0, 1.0)),
            uv=((coords[0] + size) / (2 * size), (coords[1] + size) / (2 * size)),
        )
    for a, b in ncube_edges(4):
        mb.add_line(a, b)

    base = len(mb)
    for i in range(segments):
        for j in range(segments):
            for k in range(segments):
                x = (i / segments) * 2 * size - size
                y = (j / segments) * 2 * size - size
                z = (k / segments) * 2 * size - size
                w = math.sin(i * j * k * math.pi / segments) * size
                mb.add_vertex(
                    project_vertex((x, y, z, w), offset=4.0, min_divisor=MIN_DIVISOR),
                    normal=normalize_or((x, y, z), (0.0, 0.0, 1.0)),
                    uv=((x + size) / (2 * size), (y + size) / (2 * size)),
                )

    def lattice(i, j, k):
        return base + (i * segments + j) * segments + k

    for i in range(segments):
        for j in range(segments):
            for k in range(segments):
                here = lattice(i, j, k)
                if i + 1 < segments:
                    mb.add_line(here, lattice(i + 1, j, k))
                if j + 1 < segments:
                    mb.add_line(here, lattice(i, j + 1, k))
                if k + 1 < segments:
                    mb.add_line(here, lattice(i, j, k + 1))
    return mb.build(name='tesseract')


def generate_hypersphere(complexity: int, radius: float = 1.0) -> MeshBuffers:
    """Latitude/longitude sphere with a fourth coordinate folded in.

    ``w = 2 sin(2 lat) cos(2 lon)`` on a sphere of radius 2 is divided
    out with ``w + 4`` and the result scaled by ``radius``.
    """

    segments = max(8, complexity * 2)
    r = 2.0
    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True)
    for i in range(segments + 1):
        lat = math.pi * i / segments
        for j in range(segments + 1):
            lon = 2 * math.pi * j / segments
            x = r * math.sin(lat) * math.cos(lon)
            y = r * math.sin(lat) * math.sin(lon)
            z = r * math.cos(lat)
            w = r * math.sin(lat * 2) * math.cos(lon * 2)
            p = scale(project_vertex((x, y, z, w), offset=4.0), radius)
            mb.add_vertex(p, normal=(0.0, 0.0, 1.0), uv=(j / segments, i / segments))

    for i in range(segments):
        for j in range(segments):
            a = i * (segments + 1) + j
            b = a + 1
            c = a + (segments + 1)
            d = c + 1
            mb.add_triangle(a, b, c)
            mb.add_triangle(b, d, c)
    mb.compute_normals()
    return mb.build(name='hypersphere')


__all__ = [
    'MIN_DIMENSION',
    'MAX_DIMENSION',
    'CUBE_FACES',
    'divisor_values',
    'check_size',
    'ncube_vertices',
    'project_vertex',
    'ncube_edges',
    'ncube_faces',
    'generate_ncube',
    'generate_hypercube',
    'generate_tesseract',
    'generate_hypersphere',
]
