"""Validation helpers for generated meshes."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence

from mathmesh.mesh import MeshBuffers, Topology
from mathmesh.vec import Vec3, epsilon, length, sub, triangle_normal


def is_closed_polyline(points: Sequence[Vec3], tol: float = 1e-6) -> bool:
    """Return ``True`` if a polyline ends where it starts within ``tol``."""

    if len(points) < 2:
        return False
    return length(sub(points[0], points[-1])) <= tol


def normals_unit(mesh: MeshBuffers, tol: float = 1e-6) -> "CheckResult":
    """Check that every normal is finite and of unit length."""

    if mesh.normals is None:
        return CheckResult(False, ['mesh has no normals'])
    bad = [idx for idx, n in enumerate(mesh.normals)
           if not all(math.isfinite(c) for c in n) or abs(length(n) - 1.0) > tol]
    if bad:
        return CheckResult(False, [f'{len(bad)} non-unit normals, first at {bad[0]}'])
    return CheckResult(True, [])


def faces_oriented(mesh: MeshBuffers) -> "CheckResult":
    """Check that adjacent triangles agree on winding.

    On a consistently oriented surface each directed edge is used by at
    most one triangle; a shared edge is traversed in opposite directions
    by its two faces.
    """

    if mesh.topology is not Topology.TRIANGLES:
        raise ValueError('faces_oriented expects a triangle mesh')

    directed = Counter()
    for a, b, c in mesh.primitives():
        directed[(a, b)] += 1
        directed[(b, c)] += 1
        directed[(c, a)] += 1

    repeated = [edge for edge, count in directed.items() if count > 1]
    if repeated:
        return CheckResult(False, [f'{len(repeated)} directed edges reused, e.g. {repeated[0]}'])
    return CheckResult(True, [])


def mesh_watertight(mesh: MeshBuffers) -> "CheckResult":
    """Check that every triangle edge is shared by exactly two faces."""

    if mesh.topology is not Topology.TRIANGLES:
        raise ValueError('mesh_watertight expects a triangle mesh')

    edges = Counter()
    for a, b, c in mesh.primitives():
        edges[_edge_key(a, b)] += 1
        edges[_edge_key(b, c)] += 1
        edges[_edge_key(c, a)] += 1

    boundary = [edge for edge, count in edges.items() if count == 1]
    invalid = [edge for edge, count in edges.items() if count > 2]

    warnings: List[str] = []
    ok = bool(edges)
    if not edges:
        warnings.append('mesh has no faces')
    if boundary:
        ok = False
        warnings.append(f'{len(boundary)} boundary edges detected')
    if invalid:
        ok = False
        warnings.append(f'edges with multiplicity >2: {invalid[:5]}')

    return CheckResult(ok, warnings)


def degenerate_faces(mesh: MeshBuffers, tol: float = epsilon) -> List[int]:
    """Return the primitive numbers of zero-area triangles."""

    if mesh.topology is not Topology.TRIANGLES:
        raise ValueError('degenerate_faces expects a triangle mesh')
    pts = mesh.positions
    return [idx for idx, (a, b, c) in enumerate(mesh.primitives())
            if triangle_normal(pts[a], pts[b], pts[c], tol=2 * tol) is None]


def _edge_key(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    'CheckResult',
    'is_closed_polyline',
    'normals_unit',
    'faces_oriented',
    'mesh_watertight',
    'degenerate_faces',
]
