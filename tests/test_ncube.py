import math

import pytest

from mathmesh.errors import InvalidParameter
from mathmesh.geometry_checks import normals_unit
from mathmesh.mesh import Topology
from mathmesh.ncube import (
    CUBE_FACES,
    MIN_DIVISOR,
    check_size,
    divisor_values,
    generate_hypercube,
    generate_hypersphere,
    generate_ncube,
    generate_tesseract,
    ncube_edges,
    ncube_faces,
    ncube_vertices,
    project_vertex,
)


@pytest.mark.parametrize('n', range(3, 11))
def test_ncube_counts(n):
    mesh = generate_ncube(n)
    assert mesh.topology is Topology.LINES
    assert mesh.vertex_count == 2 ** n
    assert mesh.primitive_count == n * 2 ** (n - 1)
    assert all(math.isfinite(c) for p in mesh.positions for c in p)


@pytest.mark.parametrize('n', [2, 11, 3.0, True])
def test_ncube_rejects_dimension(n):
    with pytest.raises(InvalidParameter):
        generate_ncube(n)


def test_edges_differ_in_one_bit():
    for a, b in ncube_edges(5):
        assert bin(a ^ b).count('1') == 1


def test_vertices_use_bit_pattern():
    verts = ncube_vertices(3, 1.0)
    assert verts[0] == (-1.0, -1.0, -1.0)
    assert verts[1] == (1.0, -1.0, -1.0)
    assert verts[6] == (-1.0, 1.0, 1.0)


def test_project_vertex():
    # 3-cube: no extra axes, divisor is n + 1
    assert project_vertex((4.0, 8.0, -4.0)) == pytest.approx((1.0, 2.0, -1.0))
    assert project_vertex((1.0, 1.0, 1.0, -4.0), offset=4.0) is None


def test_project_vertex_min_divisor():
    # w = -4, divisor 0 is held at +0.5
    assert project_vertex((1.0, 1.0, 1.0, -4.0), offset=4.0, min_divisor=MIN_DIVISOR) == \
        pytest.approx((2.0, 2.0, 2.0))
    # divisor -0.25 keeps its sign
    assert project_vertex((1.0, 0.0, 0.0, -4.25), offset=4.0, min_divisor=MIN_DIVISOR) == \
        pytest.approx((-2.0, 0.0, 0.0))
    # divisors already large enough are untouched
    assert project_vertex((3.0, 0.0, 0.0, 2.0), offset=4.0, min_divisor=MIN_DIVISOR) == \
        pytest.approx((0.5, 0.0, 0.0))


def test_divisor_values():
    assert divisor_values(4, 2.0) == [7.0, 3.0]
    assert divisor_values(3, 2.0) == [4.0]
    assert divisor_values(7, 2.0) == [16.0, 12.0, 8.0, 4.0, 0.0]


class TestSizeGuard:
    @pytest.mark.parametrize('n', range(3, 11))
    def test_default_size_accepted_everywhere(self, n):
        check_size(n, 2.0)
        mesh = generate_ncube(n, 2.0)
        assert mesh.vertex_count == 2 ** n

    def test_clamped_divisors_counted(self):
        assert check_size(4, 2.0) == 0
        # the all -2 vertex of the 7-cube sits on divisor 0
        assert check_size(7, 2.0) == 1

    def test_zero_divisor_vertex_is_finite(self):
        mesh = generate_ncube(7, 2.0)
        # vertex 0 has every axis at -2, so w = -8 and w + 8 = 0
        assert mesh.positions[0] == pytest.approx((-4.0, -4.0, -4.0))
        assert all(math.isfinite(c) for p in mesh.positions for c in p)

    def test_large_size_stays_finite(self):
        mesh = generate_ncube(4, 5.0)
        assert mesh.vertex_count == 16
        assert all(math.isfinite(c) for p in mesh.positions for c in p)

    @pytest.mark.parametrize('size', [0.0, -1.0, math.inf, math.nan, True, '2'])
    def test_invalid_size(self, size):
        with pytest.raises(InvalidParameter):
            check_size(5, size)


def test_hypercube_faces():
    mesh = generate_hypercube()
    assert mesh.topology is Topology.TRIANGLES
    assert mesh.vertex_count == 16
    assert mesh.primitive_count == 12
    assert len(ncube_faces()) == 2 * len(CUBE_FACES)
    assert max(mesh.indices) < 8
    assert mesh.indices == tuple(i for tri in ncube_faces() for i in tri)


def test_tesseract_lattice():
    mesh = generate_tesseract(3)
    segments = 3
    lattice_links = 3 * (segments - 1) * segments ** 2
    assert mesh.vertex_count == 16 + segments ** 3
    assert mesh.primitive_count == 32 + lattice_links
    assert all(math.isfinite(c) for p in mesh.positions for c in p)


def test_tesseract_rejects_large_size():
    with pytest.raises(InvalidParameter):
        generate_tesseract(3, size=4.0)


def test_hypersphere():
    mesh = generate_hypersphere(5, radius=2.0)
    segments = 10
    assert mesh.vertex_count == (segments + 1) ** 2
    assert mesh.primitive_count == 2 * segments ** 2
    assert normals_unit(mesh)
