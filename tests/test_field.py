import math
import random

import numpy as np
import pytest

from mathmesh.errors import InvalidParameter
from mathmesh.field import (
    generate_julia_set,
    generate_neuronal,
    generate_quantum_field,
    julia_iterate,
    julia_mask,
    probability,
    tunnelling,
)
from mathmesh.geometry_checks import normals_unit
from mathmesh.mesh import Topology


class TestQuantumField:
    def test_counts(self):
        mesh = generate_quantum_field(1)
        segments = 32
        per_layer = (segments + 1) ** 2
        assert mesh.vertex_count == 3 * per_layer
        # every shell triangulated, consecutive shells bridged
        assert mesh.primitive_count == 3 * 2 * segments ** 2 + 2 * 4 * segments ** 2
        assert mesh.topology is Topology.TRIANGLES

    def test_two_layers(self):
        mesh = generate_quantum_field(1, layers=2)
        assert mesh.vertex_count == 2 * 33 * 33

    @pytest.mark.parametrize('layers', [1, 4, 2.0])
    def test_layer_range(self, layers):
        with pytest.raises(InvalidParameter):
            generate_quantum_field(1, layers=layers)

    def test_segment_cap(self):
        mesh = generate_quantum_field(10, layers=2, max_segments=40)
        assert mesh.vertex_count == 2 * 41 * 41

    def test_normals_and_finite(self):
        mesh = generate_quantum_field(1, layers=2)
        assert normals_unit(mesh)
        assert all(math.isfinite(c) for p in mesh.positions for c in p)

    def test_shell_is_displaced_outward(self):
        mesh = generate_quantum_field(1, layers=2)
        for p in mesh.positions[:200]:
            assert math.sqrt(sum(c * c for c in p)) >= 1.5 - 1e-9

    def test_probability_non_negative(self):
        assert probability(1.5, 0.3, 1.2, 0) >= 0.0
        assert probability(1.5, math.pi / 2, 1.2, 1) == pytest.approx(0.0)

    def test_tunnelling_peaks_at_barrier(self):
        assert tunnelling((1.5, 0.0, 0.0)) > tunnelling((4.0, 0.0, 0.0))


class TestJulia:
    def test_escape_immediately(self):
        escaped, iterations, final = julia_iterate(3.0, 0.0, 0.0, (-0.4, 0.6), 50)
        assert escaped
        assert iterations == 0
        assert final == (3.0, 0.0, 0.0)

    def test_fixed_point_never_escapes(self):
        assert julia_iterate(0.0, 0.0, 0.0, (0.0, 0.0), 10) == (False, 10, (0.0, 0.0, 0.0))

    def test_mask_matches_scalar_iteration(self):
        c = (-0.4, 0.6)
        coords, inside = julia_mask(20, c, 8, 2.0)
        assert inside.shape == (8, 8, 8)
        for i, j, k in np.ndindex(*inside.shape):
            escaped, _, _ = julia_iterate(float(coords[i]), float(coords[j]),
                                          float(coords[k]), c, 20)
            assert inside[i, j, k] == (not escaped)

    def test_reference_set(self):
        mesh = generate_julia_set(50, (-0.4, 0.6), 30, 2.0)
        assert mesh.topology is Topology.POINTS
        assert not mesh.is_empty
        assert mesh.primitive_count == mesh.vertex_count
        assert len(mesh.colors) == mesh.vertex_count
        for p in mesh.positions:
            assert all(-2.0 <= c <= 2.0 for c in p)

    def test_resolution_ceiling(self):
        with pytest.raises(InvalidParameter):
            generate_julia_set(10, resolution=61)
        with pytest.raises(InvalidParameter):
            generate_julia_set(10, resolution=0)

    def test_bad_bounds(self):
        with pytest.raises(InvalidParameter):
            generate_julia_set(10, bounds=-1.0)


class TestNeuronal:
    def test_nodes_on_sphere(self):
        mesh = generate_neuronal(3, 4, random.Random(5))
        assert mesh.vertex_count == 6
        for p in mesh.positions:
            assert math.sqrt(sum(c * c for c in p)) == pytest.approx(2.0)

    def test_no_self_links(self):
        mesh = generate_neuronal(3, 4, random.Random(5))
        assert mesh.primitive_count + mesh.skipped == 6 * 4
        assert all(a != b for a, b in mesh.primitives())

    def test_minimum_nodes(self):
        assert generate_neuronal(1, 2, random.Random(0)).vertex_count == 4

    def test_seeded(self):
        assert generate_neuronal(4, 3, random.Random(9)) == \
            generate_neuronal(4, 3, random.Random(9))
