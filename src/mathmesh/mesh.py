"""Mesh buffers produced by the generators.

:class:`MeshBuilder` is the mutable accumulator a generator owns for the
duration of one call.  :meth:`MeshBuilder.build` validates the
accumulated data and freezes it into a :class:`MeshBuffers` value, the
flat position/normal/uv/colour/index arrays a renderer uploads.  Hopf
tube and ribbon variants return a :class:`FiberBundle`, an ordered list
of independent sub-meshes each with its own tint.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from mathmesh.errors import MeshValidationError
from mathmesh.vec import Vec2, Vec3, add, normalize, sub, cross


class Topology(Enum):
    """Primitive type encoded by a mesh's index list."""

    POINTS = 1
    LINES = 2
    TRIANGLES = 3

    @property
    def arity(self) -> int:
        return self.value


@dataclass(frozen=True)
class MeshBuffers:
    """Immutable mesh data.

    ``indices`` holds ``topology.arity`` entries per primitive.  When
    present, ``normals``, ``uvs`` and ``colors`` carry one entry per
    position.  ``skipped`` counts degenerate samples dropped while the
    mesh was built.
    """

    positions: Tuple[Vec3, ...]
    indices: Tuple[int, ...]
    topology: Topology
    normals: Optional[Tuple[Vec3, ...]] = None
    uvs: Optional[Tuple[Vec2, ...]] = None
    colors: Optional[Tuple[Vec3, ...]] = None
    tint: Optional[Vec3] = None
    skipped: int = 0
    name: str = ''

    def __post_init__(self):
        check_buffers(self.positions, self.indices, self.topology,
                      normals=self.normals, uvs=self.uvs, colors=self.colors)

    @classmethod
    def empty(cls, topology: Topology, *, skipped: int = 0, name: str = '') -> 'MeshBuffers':
        return cls(positions=(), indices=(), topology=topology, skipped=skipped, name=name)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def primitive_count(self) -> int:
        return len(self.indices) // self.topology.arity

    @property
    def is_empty(self) -> bool:
        return not self.positions

    def primitives(self) -> Iterator[Tuple[int, ...]]:
        """Yield the index tuple of each primitive."""

        k = self.topology.arity
        for i in range(0, len(self.indices), k):
            yield tuple(self.indices[i:i + k])

    def bounds(self) -> Optional[Tuple[Vec3, Vec3]]:
        """Return ``(min, max)`` corners, or ``None`` for an empty mesh."""

        if not self.positions:
            return None
        xs, ys, zs = zip(*self.positions)
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Return the buffers as ``float32``/``uint32`` numpy arrays.

        Keys are ``position``, ``index`` and, when present, ``normal``,
        ``uv`` and ``color``.  Arrays are freshly allocated on every call.
        """

        arrays = {
            'position': np.asarray(self.positions, dtype=np.float32).reshape(-1, 3),
            'index': np.asarray(self.indices, dtype=np.uint32),
        }
        if self.normals is not None:
            arrays['normal'] = np.asarray(self.normals, dtype=np.float32).reshape(-1, 3)
        if self.uvs is not None:
            arrays['uv'] = np.asarray(self.uvs, dtype=np.float32).reshape(-1, 2)
        if self.colors is not None:
            arrays['color'] = np.asarray(self.colors, dtype=np.float32).reshape(-1, 3)
        return arrays


@dataclass(frozen=True)
class FiberBundle:
    """Ordered list of independent sub-meshes, one per fiber."""

    meshes: Tuple[MeshBuffers, ...]
    skipped: int = 0
    name: str = ''

    def __len__(self) -> int:
        return len(self.meshes)

    def __iter__(self) -> Iterator[MeshBuffers]:
        return iter(self.meshes)

    def __getitem__(self, idx: int) -> MeshBuffers:
        return self.meshes[idx]

    @property
    def total_vertices(self) -> int:
        return sum(m.vertex_count for m in self.meshes)

    @property
    def is_empty(self) -> bool:
        return all(m.is_empty for m in self.meshes)


def check_buffers(positions: Sequence[Vec3],
                  indices: Sequence[int],
                  topology: Topology,
                  *,
                  normals: Optional[Sequence[Vec3]] = None,
                  uvs: Optional[Sequence[Vec2]] = None,
                  colors: Optional[Sequence[Vec3]] = None) -> None:
    """Raise :class:`MeshValidationError` if the buffers are inconsistent."""

    count = len(positions)
    for label, attr in (('normals', normals), ('uvs', uvs), ('colors', colors)):
        if attr is not None and len(attr) != count:
            raise MeshValidationError(
                f'{label} has {len(attr)} entries for {count} positions')
    if len(indices) % topology.arity:
        raise MeshValidationError(
            f'{len(indices)} indices is not a multiple of {topology.arity} '
            f'for {topology.name}')
    for idx in indices:
        if idx < 0 or idx >= count:
            raise MeshValidationError(f'index {idx} out of range for {count} positions')


class MeshBuilder:
    """Accumulate vertices and primitives for a single mesh.

    Attribute channels are chosen up front; every :meth:`add_vertex`
    call must then supply a value for each enabled channel.
    """

    def __init__(self, topology: Topology, *, normals: bool = False,
                 uvs: bool = False, colors: bool = False):
        self.topology = topology
        self.positions: List[Vec3] = []
        self.indices: List[int] = []
        self.normals: Optional[List[Vec3]] = [] if normals else None
        self.uvs: Optional[List[Vec2]] = [] if uvs else None
        self.colors: Optional[List[Vec3]] = [] if colors else None
        self.skipped = 0

    def __len__(self) -> int:
        return len(self.positions)

    def add_vertex(self, position: Vec3, *, normal: Optional[Vec3] = None,
                   uv: Optional[Vec2] = None, color: Optional[Vec3] = None) -> int:
        """Append a vertex and return its index."""

        idx = len(self.positions)
        self.positions.append((float(position[0]), float(position[1]), float(position[2])))
        if self.normals is not None:
            if normal is None:
                raise MeshValidationError('normal required for this builder')
            self.normals.append((float(normal[0]), float(normal[1]), float(normal[2])))
        if self.uvs is not None:
            if uv is None:
                raise MeshValidationError('uv required for this builder')
            self.uvs.append((float(uv[0]), float(uv[1])))
        if self.colors is not None:
            if color is None:
                raise MeshValidationError('color required for this builder')
            self.colors.append((float(color[0]), float(color[1]), float(color[2])))
        return idx

    def add_point(self, i: int) -> None:
        self.indices.append(i)

    def add_line(self, a: int, b: int) -> None:
        self.indices.extend((a, b))

    def add_triangle(self, a: int, b: int, c: int) -> None:
        self.indices.extend((a, b, c))

    def add_quad(self, a: int, b: int, c: int, d: int) -> None:
        """Add quad ``a b c d`` as triangles ``(a, b, c)`` and ``(a, c, d)``."""

        self.indices.extend((a, b, c, a, c, d))

    def skip(self, count: int = 1) -> None:
        """Record ``count`` degenerate samples that were dropped."""

        self.skipped += count

    def extend(self, mesh: MeshBuffers) -> int:
        """Merge ``mesh`` into this builder and return the index offset used."""

        if mesh.topology is not self.topology:
            raise MeshValidationError(
                f'cannot merge {mesh.topology.name} mesh into {self.topology.name} builder')
        offset = len(self.positions)
        self.positions.extend(mesh.positions)
        for label in ('normals', 'uvs', 'colors'):
            mine = getattr(self, label)
            theirs = getattr(mesh, label)
            if mine is None:
                continue
            if theirs is None:
                raise MeshValidationError(f'merged mesh has no {label}')
            mine.extend(theirs)
        self.indices.extend(i + offset for i in mesh.indices)
        self.skipped += mesh.skipped
        return offset

    def translate(self, offset: Vec3) -> None:
        self.positions = [add(p, offset) for p in self.positions]

    def compute_normals(self) -> None:
        """Replace normals with area-weighted averages of adjacent faces.

        Only meaningful for triangle meshes.  Vertices that touch no
        non-degenerate face fall back to their radial direction, or
        ``+z`` at the origin.
        """

        if self.topology is not Topology.TRIANGLES:
            raise MeshValidationError('compute_normals requires a triangle mesh')
        acc = [[0.0, 0.0, 0.0] for _ in self.positions]
        pts = self.positions
        for i in range(0, len(self.indices), 3):
            a, b, c = self.indices[i:i + 3]
            n = cross(sub(pts[b], pts[a]), sub(pts[c], pts[a]))
            for idx in (a, b, c):
                acc[idx][0] += n[0]
                acc[idx][1] += n[1]
                acc[idx][2] += n[2]
        normals: List[Vec3] = []
        for p, n in zip(pts, acc):
            unit = normalize((n[0], n[1], n[2]))
            if unit is None:
                unit = normalize(p) or (0.0, 0.0, 1.0)
            normals.append(unit)
        self.normals = normals

    def build(self, *, tint: Optional[Vec3] = None, name: str = '') -> MeshBuffers:
        """Validate and freeze the accumulated data."""

        return MeshBuffers(
            positions=tuple(self.positions),
            indices=tuple(self.indices),
            topology=self.topology,
            normals=None if self.normals is None else tuple(self.normals),
            uvs=None if self.uvs is None else tuple(self.uvs),
            colors=None if self.colors is None else tuple(self.colors),
            tint=tint,
            skipped=self.skipped,
            name=name,
        )


__all__ = [
    'Topology',
    'MeshBuffers',
    'FiberBundle',
    'MeshBuilder',
    'check_buffers',
]
