"""Request dispatch.

:func:`generate` is the single entry point: it clamps a request against
the active :class:`~mathmesh.config.EngineLimits` and hands it to the
generator registered for its kind.  Every :class:`GeometryKind` must have
exactly one generator; the registry is checked when this module is
imported.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, Optional, Union

from mathmesh import fractal, field, hopf, ncube, parametric
from mathmesh.config import DEFAULT_LIMITS, EngineLimits
from mathmesh.errors import MathMeshError
from mathmesh.mesh import FiberBundle, MeshBuffers
from mathmesh.request import GeometryKind, GeometryRequest

logger = logging.getLogger(__name__)

Result = Union[MeshBuffers, FiberBundle]
Generator = Callable[[GeometryRequest, EngineLimits], Result]


def _ncube(n: int) -> Generator:
    def gen(req, limits):
        return ncube.generate_ncube(n, req.params.size)
    return gen


def _tesseract(req, limits):
    return ncube.generate_tesseract(req.complexity, req.params.size)


def _klein(req, limits):
    return parametric.generate_klein_bottle(req.complexity, req.radius, req.params.segments)


def _mobius(req, limits):
    return parametric.generate_mobius_strip(req.symmetry, req.radius, req.params.width,
                                            req.params.segments)


def _torus_knot(req, limits):
    p = req.params
    return parametric.generate_torus_knot(req.complexity, p.p, p.q, req.radius, p.segments)


def _hopf_tubes(req, limits):
    return hopf.generate_hopf_tubes(req.complexity, req.radius, req.params,
                                    max_fibers=limits.max_hopf_fibers,
                                    max_samples=limits.max_tube_samples)


def _sierpinski(req, limits):
    p = req.params
    depth = p.depth if p.depth is not None else req.complexity
    return fractal.sierpinski(depth, p.size or 2.0, max_depth=limits.max_sierpinski_depth)


def _koch(req, limits):
    p = req.params
    depth = p.depth if p.depth is not None else req.complexity
    return fractal.koch_snowflake(depth, req.complexity, p.size, random.Random(req.seed),
                                  max_depth=limits.max_koch_depth)


def _julia(req, limits):
    p = req.params
    return field.generate_julia_set(req.complexity, p.c, p.resolution, p.bounds,
                                    max_resolution=limits.max_julia_resolution)


REGISTRY: Dict[GeometryKind, Generator] = {
    **{GeometryKind(f'ncube{n}'): _ncube(n) for n in range(3, 11)},
    GeometryKind.HYPERCUBE: lambda req, limits: ncube.generate_hypercube(req.params.size),
    GeometryKind.TESSERACT: _tesseract,
    GeometryKind.HYPERSPHERE:
        lambda req, limits: ncube.generate_hypersphere(req.complexity, req.radius),
    GeometryKind.KLEIN_BOTTLE: _klein,
    GeometryKind.MOBIUS_STRIP: _mobius,
    GeometryKind.TORUS_KNOT: _torus_knot,
    GeometryKind.GOLDEN_SPIRAL:
        lambda req, limits: parametric.generate_golden_spiral(req.complexity),
    GeometryKind.PI_SPIRAL: lambda req, limits: parametric.generate_pi_spiral(req.complexity),
    GeometryKind.MANDALA:
        lambda req, limits: parametric.generate_mandala(req.complexity, req.symmetry, req.radius),
    GeometryKind.VORTEX:
        lambda req, limits: parametric.generate_vortex(req.complexity, req.symmetry, req.radius),
    GeometryKind.HOPF_FIBRATION: lambda req, limits: hopf.generate_hopf_fibration(
        req.complexity, req.radius, req.params, max_fibers=limits.max_hopf_fibers),
    GeometryKind.HOPF_TUBES: _hopf_tubes,
    GeometryKind.HOPF_RIBBONS: lambda req, limits: hopf.generate_hopf_ribbons(
        req.complexity, req.radius, req.params, max_fibers=limits.max_ribbon_fibers),
    GeometryKind.HOPF_BASE_SPHERE: lambda req, limits: hopf.generate_hopf_base_sphere(
        req.complexity, req.radius, req.params, max_fibers=limits.max_base_sphere_fibers),
    GeometryKind.SIERPINSKI: _sierpinski,
    GeometryKind.KOCH_SNOWFLAKE: _koch,
    GeometryKind.QUANTUM_FIELD: lambda req, limits: field.generate_quantum_field(
        req.complexity, req.params.layers, max_segments=limits.max_grid_segments),
    GeometryKind.JULIA_SET: _julia,
    GeometryKind.NEURONAL: lambda req, limits: field.generate_neuronal(
        req.complexity, req.symmetry, random.Random(req.seed)),
}


def _check_registry() -> None:
    missing = [kind.value for kind in GeometryKind if kind not in REGISTRY]
    if missing:
        raise MathMeshError(f'no generator registered for: {", ".join(missing)}')


_check_registry()


def generate(request: GeometryRequest, limits: Optional[EngineLimits] = None) -> Result:
    """Produce the mesh described by ``request``.

    Returns a :class:`FiberBundle` for the Hopf tube, ribbon and
    base-sphere kinds and a :class:`MeshBuffers` for everything else.
    """

    if not isinstance(request, GeometryRequest):
        raise TypeError(f'expected GeometryRequest, got {type(request).__name__}')
    limits = limits or DEFAULT_LIMITS
    request = limits.clamp(request)
    result = REGISTRY[request.kind](request, limits)
    if isinstance(result, FiberBundle):
        logger.debug('%s: %d meshes, %d vertices, %d skipped', request.kind.value,
                     len(result), result.total_vertices, result.skipped)
    else:
        logger.debug('%s: %d vertices, %d primitives, %d skipped', request.kind.value,
                     result.vertex_count, result.primitive_count, result.skipped)
    return result


def list_kinds():
    """Return ``(name, description)`` pairs for every kind."""

    return [(kind.value, DESCRIPTIONS[kind]) for kind in GeometryKind]


DESCRIPTIONS: Dict[GeometryKind, str] = {
    **{GeometryKind(f'ncube{n}'): f'{n}-cube wireframe' for n in range(3, 11)},
    GeometryKind.HYPERCUBE: 'shaded 4-cube',
    GeometryKind.TESSERACT: '4-cube with interior lattice',
    GeometryKind.HYPERSPHERE: 'sphere folded through a fourth coordinate',
    GeometryKind.KLEIN_BOTTLE: 'figure-8 Klein bottle',
    GeometryKind.MOBIUS_STRIP: 'Mobius strip',
    GeometryKind.TORUS_KNOT: '(p, q) torus knot',
    GeometryKind.GOLDEN_SPIRAL: 'golden ratio spiral',
    GeometryKind.PI_SPIRAL: 'turtle walk over the digits of pi',
    GeometryKind.MANDALA: 'flat radial grid',
    GeometryKind.VORTEX: 'twisted radial grid',
    GeometryKind.HOPF_FIBRATION: 'Hopf fibers as lines',
    GeometryKind.HOPF_TUBES: 'Hopf fibers as tubes',
    GeometryKind.HOPF_RIBBONS: 'Hopf fibers as ribbons',
    GeometryKind.HOPF_BASE_SPHERE: 'Hopf fibers with the base sphere',
    GeometryKind.SIERPINSKI: 'Sierpinski tetrahedron',
    GeometryKind.KOCH_SNOWFLAKE: 'spiky Koch snowflake',
    GeometryKind.QUANTUM_FIELD: 'layered probability shells',
    GeometryKind.JULIA_SET: '3D Julia set point cloud',
    GeometryKind.NEURONAL: 'random network on a sphere',
}


__all__ = [
    'REGISTRY',
    'DESCRIPTIONS',
    'generate',
    'list_kinds',
]
