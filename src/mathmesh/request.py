"""Geometry requests.

A :class:`GeometryRequest` names one :class:`GeometryKind` plus the
numeric knobs shared by every family (complexity, symmetry, radius, RNG
seed) and an optional kind-specific parameter record.  Requests are
validated when constructed and are immutable afterwards; clamping
against :class:`~mathmesh.config.EngineLimits` produces a new request.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Tuple, Type, Union

from mathmesh.errors import InvalidParameter

if TYPE_CHECKING:  # pragma: no cover
    from mathmesh.config import EngineLimits

logger = logging.getLogger(__name__)


class GeometryKind(Enum):
    NCUBE3 = 'ncube3'
    NCUBE4 = 'ncube4'
    NCUBE5 = 'ncube5'
    NCUBE6 = 'ncube6'
    NCUBE7 = 'ncube7'
    NCUBE8 = 'ncube8'
    NCUBE9 = 'ncube9'
    NCUBE10 = 'ncube10'
    HYPERCUBE = 'hypercube'
    TESSERACT = 'tesseract'
    HYPERSPHERE = 'hypersphere'
    KLEIN_BOTTLE = 'klein_bottle'
    MOBIUS_STRIP = 'mobius_strip'
    TORUS_KNOT = 'torus_knot'
    GOLDEN_SPIRAL = 'golden_spiral'
    PI_SPIRAL = 'pi_spiral'
    MANDALA = 'mandala'
    VORTEX = 'vortex'
    HOPF_FIBRATION = 'hopf_fibration'
    HOPF_TUBES = 'hopf_tubes'
    HOPF_RIBBONS = 'hopf_ribbons'
    HOPF_BASE_SPHERE = 'hopf_base_sphere'
    SIERPINSKI = 'sierpinski'
    KOCH_SNOWFLAKE = 'koch_snowflake'
    QUANTUM_FIELD = 'quantum_field'
    JULIA_SET = 'julia_set'
    NEURONAL = 'neuronal'

    @property
    def dimension(self) -> Optional[int]:
        """Cube dimension for the n-cube kinds, ``None`` otherwise."""

        if self.value.startswith('ncube'):
            return int(self.value[len('ncube'):])
        if self in (GeometryKind.HYPERCUBE, GeometryKind.TESSERACT):
            return 4
        return None

    @property
    def returns_bundle(self) -> bool:
        return self in (GeometryKind.HOPF_TUBES, GeometryKind.HOPF_RIBBONS,
                        GeometryKind.HOPF_BASE_SPHERE)

    @classmethod
    def parse(cls, name: Union[str, 'GeometryKind']) -> 'GeometryKind':
        """Resolve a kind from its value, enum name or an accepted alias."""

        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise InvalidParameter('kind', name, 'expected a geometry kind name')
        key = name.strip()
        for candidate in (key, key.lower()):
            try:
                return cls(candidate)
            except ValueError:
                pass
        if key.upper() in cls.__members__:
            return cls[key.upper()]
        alias = _ALIASES.get(key) or _ALIASES.get(key.lower())
        if alias is not None:
            return alias
        raise InvalidParameter('kind', name, 'unknown geometry kind')


# names used by the interactive front end
_ALIASES: Dict[str, GeometryKind] = {
    'hyperCube': GeometryKind.HYPERCUBE,
    'kleinBottle': GeometryKind.KLEIN_BOTTLE,
    'mobiusStrip': GeometryKind.MOBIUS_STRIP,
    'torusKnot': GeometryKind.TORUS_KNOT,
    'goldenSpiral': GeometryKind.GOLDEN_SPIRAL,
    'piSpiral': GeometryKind.PI_SPIRAL,
    'hopfFibration': GeometryKind.HOPF_FIBRATION,
    'hopfTubes': GeometryKind.HOPF_TUBES,
    'hopfRibbons': GeometryKind.HOPF_RIBBONS,
    'hopfEducational': GeometryKind.HOPF_BASE_SPHERE,
    'fractal': GeometryKind.SIERPINSKI,
    'kochSnowflake': GeometryKind.KOCH_SNOWFLAKE,
    'quantumField': GeometryKind.QUANTUM_FIELD,
    'juliaSet': GeometryKind.JULIA_SET,
}
_ALIASES.update({f'{n}d': GeometryKind(f'ncube{n}') for n in range(3, 11)})


def _check_int(name: str, value, minimum: int, maximum: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameter(name, value, 'expected an integer')
    if value < minimum:
        raise InvalidParameter(name, value, f'must be >= {minimum}')
    if maximum is not None and value > maximum:
        raise InvalidParameter(name, value, f'must be <= {maximum}')
    return value


def _check_positive(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameter(name, value, 'expected a number')
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameter(name, value, 'must be a finite number > 0')
    return float(value)


# ---------------------------------------------------------------------------
# Kind-specific parameter records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NCubeParams:
    """Half edge length of the cube before projection."""

    size: float = 2.0

    def __post_init__(self):
        _check_positive('size', self.size)


@dataclass(frozen=True)
class SurfaceParams:
    """Grid overrides for the Klein bottle and Möbius strip."""

    segments: Optional[int] = None
    width: float = 0.2

    def __post_init__(self):
        if self.segments is not None:
            _check_int('segments', self.segments, 4)
        _check_positive('width', self.width)


@dataclass(frozen=True)
class TorusKnotParams:
    p: int = 3
    q: int = 2
    segments: Optional[int] = None

    def __post_init__(self):
        _check_int('p', self.p, 1)
        _check_int('q', self.q, 1)
        if self.segments is not None:
            _check_int('segments', self.segments, 3)


FIBER_MAPS = ('circle', 'great_circle')


@dataclass(frozen=True)
class HopfParams:
    """Extras for the Hopf kinds.

    ``fiber_map`` picks the lift from the base sphere to S3.  ``None``
    uses the variant default: the circle map for the line and
    base-sphere variants, linked great circles for tubes and ribbons.
    """

    points_per_fiber: Optional[int] = None
    tube_radius: float = 0.02
    radial_segments: int = 12
    ribbon_width: float = 0.08
    ribbon_thickness: float = 0.015
    fiber_map: Optional[str] = None
    show_base_sphere: bool = True

    def __post_init__(self):
        if self.points_per_fiber is not None:
            _check_int('points_per_fiber', self.points_per_fiber, 3)
        _check_positive('tube_radius', self.tube_radius)
        _check_int('radial_segments', self.radial_segments, 3)
        _check_positive('ribbon_width', self.ribbon_width)
        _check_positive('ribbon_thickness', self.ribbon_thickness)
        if self.fiber_map is not None and self.fiber_map not in FIBER_MAPS:
            raise InvalidParameter('fiber_map', self.fiber_map,
                                   f'expected one of {", ".join(FIBER_MAPS)}')


@dataclass(frozen=True)
class FractalParams:
    """``depth`` overrides the complexity-derived recursion depth."""

    depth: Optional[int] = None
    size: Optional[float] = None

    def __post_init__(self):
        if self.depth is not None:
            _check_int('depth', self.depth, 0)
        if self.size is not None:
            _check_positive('size', self.size)


@dataclass(frozen=True)
class JuliaParams:
    c: Tuple[float, float] = (-0.4, 0.6)
    resolution: int = 30
    bounds: float = 2.0

    def __post_init__(self):
        if not isinstance(self.c, (tuple, list)) or len(self.c) != 2 or not all(
                isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)
                for v in self.c):
            raise InvalidParameter('c', self.c, 'expected two finite numbers')
        object.__setattr__(self, 'c', (float(self.c[0]), float(self.c[1])))
        _check_int('resolution', self.resolution, 1)
        _check_positive('bounds', self.bounds)


@dataclass(frozen=True)
class FieldParams:
    layers: int = 3

    def __post_init__(self):
        _check_int('layers', self.layers, 2, 3)


KindParams = Union[NCubeParams, SurfaceParams, TorusKnotParams, HopfParams,
                   FractalParams, JuliaParams, FieldParams]

_HOPF = (GeometryKind.HOPF_FIBRATION, GeometryKind.HOPF_TUBES,
         GeometryKind.HOPF_RIBBONS, GeometryKind.HOPF_BASE_SPHERE)

PARAMS_FOR_KIND: Dict[GeometryKind, Optional[Type]] = {
    **{GeometryKind(f'ncube{n}'): NCubeParams for n in range(3, 11)},
    GeometryKind.HYPERCUBE: NCubeParams,
    GeometryKind.TESSERACT: NCubeParams,
    GeometryKind.HYPERSPHERE: None,
    GeometryKind.KLEIN_BOTTLE: SurfaceParams,
    GeometryKind.MOBIUS_STRIP: SurfaceParams,
    GeometryKind.TORUS_KNOT: TorusKnotParams,
    GeometryKind.GOLDEN_SPIRAL: None,
    GeometryKind.PI_SPIRAL: None,
    GeometryKind.MANDALA: None,
    GeometryKind.VORTEX: None,
    **{kind: HopfParams for kind in _HOPF},
    GeometryKind.SIERPINSKI: FractalParams,
    GeometryKind.KOCH_SNOWFLAKE: FractalParams,
    GeometryKind.QUANTUM_FIELD: FieldParams,
    GeometryKind.JULIA_SET: JuliaParams,
    GeometryKind.NEURONAL: None,
}


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GeometryRequest:
    """Validated, immutable input to :func:`mathmesh.generate`.

    ``params`` defaults to the kind's parameter record with default
    values; kinds that take no extra parameters require ``None``.
    ``seed`` feeds the RNG of the randomised generators (Koch snowflake,
    neuronal network); the same request always yields the same mesh.
    """

    kind: GeometryKind
    complexity: int = 5
    symmetry: int = 8
    radius: float = 1.0
    params: Optional[KindParams] = None
    seed: int = 0

    def __post_init__(self):
        kind = GeometryKind.parse(self.kind)
        object.__setattr__(self, 'kind', kind)
        _check_int('complexity', self.complexity, 1)
        _check_int('symmetry', self.symmetry, 2)
        object.__setattr__(self, 'radius', _check_positive('radius', self.radius))
        if self.seed is None:
            object.__setattr__(self, 'seed', 0)
        else:
            _check_int('seed', self.seed, 0)

        expected = PARAMS_FOR_KIND[kind]
        if expected is None:
            if self.params is not None:
                raise InvalidParameter('params', self.params,
                                       f'{kind.value} takes no extra parameters')
        elif self.params is None:
            object.__setattr__(self, 'params', expected())
        elif not isinstance(self.params, expected):
            raise InvalidParameter('params', self.params,
                                   f'{kind.value} expects {expected.__name__}')

    @classmethod
    def create(cls, kind: Union[str, GeometryKind], *, complexity: int = 5,
               symmetry: int = 8, radius: float = 1.0, seed: Optional[int] = 0,
               **extra) -> 'GeometryRequest':
        """Build a request, routing loose keyword arguments into ``params``."""

        kind = GeometryKind.parse(kind)
        params = extra.pop('params', None)
        if extra:
            expected = PARAMS_FOR_KIND[kind]
            if expected is None:
                raise InvalidParameter('params', extra,
                                       f'{kind.value} takes no extra parameters')
            if params is not None:
                raise InvalidParameter('params', extra,
                                       'pass either params or keyword parameters, not both')
            try:
                params = expected(**extra)
            except TypeError as exc:
                raise InvalidParameter('params', extra, str(exc)) from exc
        return cls(kind=kind, complexity=complexity, symmetry=symmetry,
                   radius=radius, params=params, seed=seed)


def clamp_request(request: GeometryRequest, limits: 'EngineLimits') -> GeometryRequest:
    """Cap the size-driving values of ``request`` at ``limits``."""

    kind = request.kind
    changes = {}
    params_changes = {}

    if kind in _HOPF:
        cap = {
            GeometryKind.HOPF_RIBBONS: limits.max_ribbon_fibers,
            GeometryKind.HOPF_BASE_SPHERE: limits.max_base_sphere_fibers,
        }.get(kind, limits.max_hopf_fibers)
        if request.complexity > cap:
            changes['complexity'] = cap
        ppf = request.params.points_per_fiber
        if ppf is not None and ppf > limits.max_tube_samples:
            params_changes['points_per_fiber'] = limits.max_tube_samples
    elif kind in (GeometryKind.SIERPINSKI, GeometryKind.KOCH_SNOWFLAKE):
        cap = (limits.max_sierpinski_depth if kind is GeometryKind.SIERPINSKI
               else limits.max_koch_depth)
        depth = request.params.depth
        if depth is None:
            depth = request.complexity
        if depth > cap:
            params_changes['depth'] = cap
    elif kind is GeometryKind.JULIA_SET:
        if request.complexity > limits.max_julia_iterations:
            changes['complexity'] = limits.max_julia_iterations
        if request.params.resolution > limits.max_julia_resolution:
            params_changes['resolution'] = limits.max_julia_resolution
    elif kind in (GeometryKind.KLEIN_BOTTLE, GeometryKind.MOBIUS_STRIP):
        seg = request.params.segments
        if seg is not None and seg > limits.max_grid_segments:
            params_changes['segments'] = limits.max_grid_segments
    elif kind is GeometryKind.TORUS_KNOT:
        seg = request.params.segments
        if seg is not None and seg > limits.max_grid_segments * 4:
            params_changes['segments'] = limits.max_grid_segments * 4
    elif kind is GeometryKind.TESSERACT:
        if request.complexity > limits.max_tesseract_segments:
            changes['complexity'] = limits.max_tesseract_segments

    if params_changes:
        changes['params'] = replace(request.params, **params_changes)
    if not changes:
        return request
    logger.debug('clamped %s request: %s %s', kind.value,
                 {k: v for k, v in changes.items() if k != 'params'}, params_changes)
    return replace(request, **changes)


__all__ = [
    'GeometryKind',
    'GeometryRequest',
    'NCubeParams',
    'SurfaceParams',
    'TorusKnotParams',
    'HopfParams',
    'FractalParams',
    'JuliaParams',
    'FieldParams',
    'FIBER_MAPS',
    'PARAMS_FOR_KIND',
    'clamp_request',
]
