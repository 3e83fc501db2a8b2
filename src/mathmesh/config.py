"""
Engine limits
=============

Hard ceilings for the generators whose cost grows exponentially or
cubically with their inputs.  :func:`mathmesh.generate` clamps every
request against an :class:`EngineLimits` instance before dispatching it;
generator functions called directly check the same ceilings and reject
values above them.

``DEFAULT_LIMITS`` matches the bounds of the interactive application the
engine was written for: at most 50 Hopf fibers (40 for ribbons and the
base-sphere variant), Sierpinski depth 4 (256 leaves), Koch depth 5 and
a 60^3 Julia voxel grid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any, Dict

from mathmesh.errors import InvalidParameter

if TYPE_CHECKING:  # pragma: no cover
    from mathmesh.request import GeometryRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineLimits:
    max_hopf_fibers: int = 50
    max_ribbon_fibers: int = 40
    max_base_sphere_fibers: int = 40
    max_tube_samples: int = 120
    max_sierpinski_depth: int = 4
    max_koch_depth: int = 5
    max_julia_resolution: int = 60
    max_julia_iterations: int = 500
    max_grid_segments: int = 256
    max_tesseract_segments: int = 12

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidParameter(f.name, value, 'limits must be positive integers')

    @classmethod
    def from_mapping(cls, values: Dict[str, Any]) -> 'EngineLimits':
        """Build limits from a mapping, ignoring unknown keys."""

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning('ignoring unknown limit keys: %s', ', '.join(unknown))
        return cls(**{k: int(v) for k, v in values.items() if k in known})

    def clamp(self, request: 'GeometryRequest') -> 'GeometryRequest':
        """Return ``request`` with its size-driving values capped.

        The request itself is never modified; a new one is returned when
        anything changes.
        """

        from mathmesh.request import clamp_request

        return clamp_request(request, self)


DEFAULT_LIMITS = EngineLimits()


def with_overrides(limits: EngineLimits = DEFAULT_LIMITS, **overrides) -> EngineLimits:
    """Return a copy of ``limits`` with ``overrides`` applied."""

    return replace(limits, **overrides)


__all__ = [
    'EngineLimits',
    'DEFAULT_LIMITS',
    'with_overrides',
]
