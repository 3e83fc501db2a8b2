from mathmesh.geometry_checks import (
    CheckResult,
    degenerate_faces,
    faces_oriented,
    is_closed_polyline,
    mesh_watertight,
    normals_unit,
)
from mathmesh.mesh import MeshBuffers, Topology


def _tetra(flip_one=False):
    verts = ((0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1))
    faces = [(0, 2, 1), (0, 1, 3), (1, 2, 3), (0, 3, 2)]
    if flip_one:
        a, b, c = faces[0]
        faces[0] = (a, c, b)
    return MeshBuffers(positions=verts, indices=tuple(i for f in faces for i in f),
                       topology=Topology.TRIANGLES)


def _square():
    verts = ((0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0))
    return MeshBuffers(positions=verts, indices=(0, 1, 2, 0, 2, 3),
                       topology=Topology.TRIANGLES,
                       normals=((0, 0, 1),) * 4)


def test_is_closed_polyline():
    assert is_closed_polyline([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 0, 0)])
    assert not is_closed_polyline([(0, 0, 0), (1, 0, 0), (1, 1, 0)])
    assert not is_closed_polyline([(0, 0, 0)])


def test_tetra_is_watertight():
    result = mesh_watertight(_tetra())
    assert isinstance(result, CheckResult)
    assert result
    assert result.warnings == []


def test_open_square_is_not_watertight():
    result = mesh_watertight(_square())
    assert not result
    assert any('boundary' in w for w in result.warnings)


def test_empty_mesh_is_not_watertight():
    result = mesh_watertight(MeshBuffers.empty(Topology.TRIANGLES))
    assert not result


def test_faces_oriented():
    assert faces_oriented(_tetra())
    assert faces_oriented(_square())
    assert not faces_oriented(_tetra(flip_one=True))


def test_normals_unit():
    assert normals_unit(_square())
    assert not normals_unit(_tetra())
    bad = MeshBuffers(positions=((0, 0, 0),), indices=(), topology=Topology.POINTS,
                      normals=((0, 0, 2),))
    assert not normals_unit(bad)


def test_degenerate_faces():
    mesh = MeshBuffers(positions=((0, 0, 0), (1, 0, 0), (2, 0, 0), (0, 1, 0)),
                       indices=(0, 1, 2, 0, 1, 3), topology=Topology.TRIANGLES)
    assert degenerate_faces(mesh) == [0]


def test_degenerate_faces_tolerance():
    # area 0.5e-6
    mesh = MeshBuffers(positions=((0, 0, 0), (1, 0, 0), (0, 1e-6, 0)),
                       indices=(0, 1, 2), topology=Topology.TRIANGLES)
    assert degenerate_faces(mesh) == []
    assert degenerate_faces(mesh, tol=1e-6) == [0]
