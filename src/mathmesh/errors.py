"""Exceptions raised by mathmesh.

Only two conditions surface as exceptions.  Caller mistakes (bad
dimension, non-positive radius, zero resolution, parameters that do not
belong to the requested kind) raise :class:`InvalidParameter` before any
computation starts.  Broken mesh invariants raise
:class:`MeshValidationError`; that one points at a bug in a generator,
not at the caller.

Degenerate samples (non-finite projections, zero-length tangents) are
never raised.  Generators drop them and count them in the ``skipped``
field of the returned mesh.
"""

from __future__ import annotations


class MathMeshError(Exception):
    """Base class for all mathmesh exceptions."""


class InvalidParameter(MathMeshError, ValueError):
    """A request parameter is outside the range a generator accepts."""

    def __init__(self, name: str, value, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"invalid {name}={value!r}: {reason}")


class MeshValidationError(MathMeshError):
    """A built mesh violates one of the buffer invariants."""


__all__ = [
    'MathMeshError',
    'InvalidParameter',
    'MeshValidationError',
]
