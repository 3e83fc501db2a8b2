import numpy as np
import pytest

from mathmesh.errors import MeshValidationError
from mathmesh.mesh import FiberBundle, MeshBuffers, MeshBuilder, Topology, check_buffers


def _triangle():
    mb = MeshBuilder(Topology.TRIANGLES, normals=True, uvs=True)
    for p, uv in (((0, 0, 0), (0, 0)), ((1, 0, 0), (1, 0)), ((0, 1, 0), (0, 1))):
        mb.add_vertex(p, normal=(0, 0, 1), uv=uv)
    mb.add_triangle(0, 1, 2)
    return mb


def test_topology_arity():
    assert Topology.POINTS.arity == 1
    assert Topology.LINES.arity == 2
    assert Topology.TRIANGLES.arity == 3


def test_build_freezes_buffers():
    mesh = _triangle().build(tint=(1.0, 0.0, 0.0), name='tri')
    assert mesh.vertex_count == 3
    assert mesh.primitive_count == 1
    assert list(mesh.primitives()) == [(0, 1, 2)]
    assert mesh.tint == (1.0, 0.0, 0.0)
    assert mesh.name == 'tri'
    assert mesh.colors is None
    with pytest.raises(Exception):
        mesh.name = 'other'


def test_build_rejects_out_of_range_index():
    mb = MeshBuilder(Topology.TRIANGLES)
    mb.add_vertex((0, 0, 0))
    mb.add_vertex((1, 0, 0))
    mb.add_triangle(0, 1, 2)
    with pytest.raises(MeshValidationError):
        mb.build()


def test_build_rejects_partial_primitive():
    with pytest.raises(MeshValidationError):
        MeshBuffers(positions=((0, 0, 0), (1, 0, 0)), indices=(0, 1, 1, 0),
                    topology=Topology.TRIANGLES)


def test_attribute_length_mismatch():
    with pytest.raises(MeshValidationError):
        check_buffers([(0, 0, 0), (1, 0, 0)], [0, 1], Topology.LINES,
                      normals=[(0, 0, 1)])


def test_missing_attribute_on_add_vertex():
    mb = MeshBuilder(Topology.LINES, normals=True)
    with pytest.raises(MeshValidationError):
        mb.add_vertex((0, 0, 0))


def test_empty_mesh_is_legal():
    mesh = MeshBuffers.empty(Topology.TRIANGLES, skipped=3)
    assert mesh.is_empty
    assert mesh.skipped == 3
    assert mesh.bounds() is None
    assert mesh.primitive_count == 0


def test_extend_offsets_indices():
    first = _triangle().build()
    mb = _triangle()
    offset = mb.extend(first)
    merged = mb.build()
    assert offset == 3
    assert merged.indices == (0, 1, 2, 3, 4, 5)
    assert merged.vertex_count == 6


def test_extend_rejects_topology_mismatch():
    mb = MeshBuilder(Topology.LINES, normals=True, uvs=True)
    with pytest.raises(MeshValidationError):
        mb.extend(_triangle().build())


def test_skip_counter():
    mb = MeshBuilder(Topology.POINTS)
    mb.skip()
    mb.skip(4)
    assert mb.build().skipped == 5


def test_add_quad_splits_on_first_diagonal():
    mb = MeshBuilder(Topology.TRIANGLES)
    for p in ((0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)):
        mb.add_vertex(p)
    mb.add_quad(0, 1, 2, 3)
    mesh = mb.build()
    assert mesh.indices == (0, 1, 2, 0, 2, 3)
    assert mesh.primitive_count == 2


def test_compute_normals_single_triangle():
    mb = MeshBuilder(Topology.TRIANGLES)
    for p in ((0, 0, 0), (1, 0, 0), (0, 1, 0)):
        mb.add_vertex(p)
    mb.add_triangle(0, 1, 2)
    mb.compute_normals()
    mesh = mb.build()
    for n in mesh.normals:
        assert n == pytest.approx((0.0, 0.0, 1.0))


def test_compute_normals_requires_triangles():
    mb = MeshBuilder(Topology.LINES)
    with pytest.raises(MeshValidationError):
        mb.compute_normals()


def test_translate_and_bounds():
    mb = _triangle()
    mb.translate((1.0, 2.0, 3.0))
    lo, hi = mb.build().bounds()
    assert lo == pytest.approx((1.0, 2.0, 3.0))
    assert hi == pytest.approx((2.0, 3.0, 3.0))


def test_as_arrays():
    arrays = _triangle().build().as_arrays()
    assert arrays['position'].dtype == np.float32
    assert arrays['position'].shape == (3, 3)
    assert arrays['index'].dtype == np.uint32
    assert arrays['normal'].shape == (3, 3)
    assert arrays['uv'].shape == (3, 2)
    assert 'color' not in arrays


def test_as_arrays_empty_mesh():
    arrays = MeshBuffers.empty(Topology.LINES).as_arrays()
    assert arrays['position'].shape == (0, 3)
    assert arrays['index'].shape == (0,)


def test_fiber_bundle_behaves_like_a_sequence():
    a = _triangle().build(name='a')
    b = _triangle().build(name='b')
    bundle = FiberBundle((a, b), skipped=1, name='pair')
    assert len(bundle) == 2
    assert [m.name for m in bundle] == ['a', 'b']
    assert bundle[1] is b
    assert bundle.total_vertices == 6
    assert not bundle.is_empty
    assert FiberBundle(()).is_empty
