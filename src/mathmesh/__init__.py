# -*- coding: utf-8 -*-
"""Procedural geometry for mathematical visualisation.

``generate(GeometryRequest(...))`` turns a geometry kind and a handful of
numeric knobs into renderable mesh buffers.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mathmesh")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from mathmesh.config import DEFAULT_LIMITS, EngineLimits
from mathmesh.engine import generate, list_kinds
from mathmesh.errors import InvalidParameter, MathMeshError, MeshValidationError
from mathmesh.mesh import FiberBundle, MeshBuffers, MeshBuilder, Topology
from mathmesh.request import (
    FieldParams,
    FractalParams,
    GeometryKind,
    GeometryRequest,
    HopfParams,
    JuliaParams,
    NCubeParams,
    SurfaceParams,
    TorusKnotParams,
)

__all__ = [
    '__version__',
    'generate',
    'list_kinds',
    'GeometryKind',
    'GeometryRequest',
    'NCubeParams',
    'SurfaceParams',
    'TorusKnotParams',
    'HopfParams',
    'FractalParams',
    'JuliaParams',
    'FieldParams',
    'EngineLimits',
    'DEFAULT_LIMITS',
    'MeshBuffers',
    'MeshBuilder',
    'FiberBundle',
    'Topology',
    'MathMeshError',
    'InvalidParameter',
    'MeshValidationError',
]
