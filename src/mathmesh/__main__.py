#!/usr/bin/env python3
"""
Command line front end for the mathmesh generators.

Usage:
    python -m mathmesh KIND [--complexity N] [--symmetry N] [--radius R]
                            [--seed S] [--param NAME=VALUE ...] [--json] [-v]
    python -m mathmesh --list

Examples:
    # Summary of a Klein bottle
    python -m mathmesh klein_bottle --complexity 8

    # Hopf tubes with thicker tubes, as JSON
    python -m mathmesh hopf_tubes --complexity 10 --param tube_radius=0.05 --json

    # Julia set for a different constant
    python -m mathmesh julia_set --complexity 50 --param c=-0.8,0.156
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from mathmesh.engine import generate, list_kinds
from mathmesh.errors import InvalidParameter
from mathmesh.logging_config import setup_logging
from mathmesh.mesh import FiberBundle, MeshBuffers
from mathmesh.request import GeometryRequest

logger = logging.getLogger(__name__)


def parse_param(param_str: str) -> tuple:
    """Parse a parameter string like 'name=value' into (name, typed_value).

    Comma separated values become a tuple of numbers.
    """
    if '=' not in param_str:
        raise ValueError(f"Invalid parameter format: {param_str} (expected name=value)")

    name, value_str = param_str.split('=', 1)
    name = name.strip()
    value_str = value_str.strip()

    if ',' in value_str:
        return (name, tuple(_scalar(v.strip()) for v in value_str.split(',')))
    return (name, _scalar(value_str))


def _scalar(value_str: str) -> Any:
    if value_str.lower() == 'true':
        return True
    elif value_str.lower() == 'false':
        return False
    elif value_str.lower() == 'none':
        return None

    try:
        return int(value_str)
    except ValueError:
        pass

    try:
        return float(value_str)
    except ValueError:
        pass

    if (value_str.startswith('"') and value_str.endswith('"')) or \
       (value_str.startswith("'") and value_str.endswith("'")):
        value_str = value_str[1:-1]
    return value_str


def mesh_summary(mesh: MeshBuffers) -> Dict[str, Any]:
    bounds = mesh.bounds()
    return {
        'name': mesh.name,
        'topology': mesh.topology.name,
        'vertices': mesh.vertex_count,
        'primitives': mesh.primitive_count,
        'skipped': mesh.skipped,
        'bounds': None if bounds is None else [list(bounds[0]), list(bounds[1])],
        'tint': None if mesh.tint is None else list(mesh.tint),
    }


def summarize(result) -> Dict[str, Any]:
    """JSON-friendly description of a generator result."""
    if isinstance(result, FiberBundle):
        return {
            'name': result.name,
            'meshes': [mesh_summary(m) for m in result],
            'total_vertices': result.total_vertices,
            'skipped': result.skipped,
        }
    return mesh_summary(result)


def _print_mesh(summary: Dict[str, Any], indent: str = '') -> None:
    print(f"{indent}{summary['name'] or '<mesh>'}: {summary['topology']} "
          f"{summary['vertices']} vertices, {summary['primitives']} primitives, "
          f"{summary['skipped']} skipped")
    if summary['bounds'] is not None:
        lo, hi = summary['bounds']
        print(f"{indent}  bounds: ({lo[0]:.4g}, {lo[1]:.4g}, {lo[2]:.4g}) .. "
              f"({hi[0]:.4g}, {hi[1]:.4g}, {hi[2]:.4g})")


def print_summary(summary: Dict[str, Any]) -> None:
    if 'meshes' in summary:
        print(f"{summary['name']}: {len(summary['meshes'])} meshes, "
              f"{summary['total_vertices']} vertices, {summary['skipped']} fibers dropped")
        for sub in summary['meshes']:
            _print_mesh(sub, indent='  ')
    else:
        _print_mesh(summary)


def cmd_list() -> int:
    print("Geometry kinds:")
    for name, description in list_kinds():
        print(f"  {name:<18} {description}")
    return 0


def cmd_generate(args) -> int:
    params = {}
    for param_str in args.param or []:
        try:
            name, value = parse_param(param_str)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
        params[name] = value

    try:
        request = GeometryRequest.create(
            args.kind, complexity=args.complexity, symmetry=args.symmetry,
            radius=args.radius, seed=args.seed, **params)
        result = generate(request)
    except InvalidParameter as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    summary = summarize(result)
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print_summary(summary)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='mathmesh',
        description='Generate procedural geometry and print a summary',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('kind', nargs='?', help='Geometry kind (see --list)')
    parser.add_argument('--list', action='store_true', help='List geometry kinds and exit')
    parser.add_argument('-c', '--complexity', type=int, default=5)
    parser.add_argument('-s', '--symmetry', type=int, default=8)
    parser.add_argument('-r', '--radius', type=float, default=1.0)
    parser.add_argument('--seed', type=int, default=0, help='RNG seed for randomised kinds')
    parser.add_argument('-p', '--param', action='append', metavar='NAME=VALUE',
                        help='Kind-specific parameter (can be repeated)')
    parser.add_argument('--json', action='store_true', help='Print the summary as JSON')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log progress (-vv for debug output)')

    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging(logging.DEBUG if args.verbose > 1 else logging.INFO)

    if args.list:
        return cmd_list()
    if not args.kind:
        parser.print_usage(sys.stderr)
        print("Error: a geometry kind is required", file=sys.stderr)
        return 2
    return cmd_generate(args)


if __name__ == '__main__':
    sys.exit(main())
