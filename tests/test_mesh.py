import numpy as np
import pytest

from dynmodeler.geom import point
from dynmodeler.mesh import Mesh, append_meshes, same_geometry
from dynmodeler.xform import Rotation, Translation


def _square():
    return Mesh([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], [(0, 1, 2, 3)])


def test_construction():
    m = _square()
    assert m.n_points == 4
    assert m.n_cells == 1
    assert not m.is_empty
    assert Mesh().is_empty
    assert Mesh().bounds() is None
    with pytest.raises(ValueError):
        Mesh([[0, 0], [1, 1]])
    with pytest.raises(ValueError):
        Mesh([[0, 0, 0]], [(0, 1, 2)])


def test_copy_is_independent():
    m = _square()
    c = m.copy()
    assert same_geometry(c, m)
    c.points[0, 0] = 9.0
    assert m.points[0, 0] == 0.0
    assert not same_geometry(c, m)


def test_transformed():
    m = _square().transformed(Translation(point(0, 0, 5)).mul(Rotation(point(0, 0, 1), 90)))
    lo, hi = m.bounds()
    assert lo == pytest.approx([-1, 0, 5])
    assert hi == pytest.approx([0, 1, 5])
    assert m.cells == [(0, 1, 2, 3)]


def test_append_offsets_cells():
    a = _square()
    b = Mesh([[0, 0, 1], [1, 0, 1], [0, 1, 1]], [(0, 1, 2)])
    out = append_meshes([a, Mesh(), b])
    assert out.n_points == 7
    assert out.cells == [(0, 1, 2, 3), (4, 5, 6)]
    assert append_meshes([]).is_empty


def test_trimesh_conversion():
    m = _square()
    assert m.triangles() == [(0, 1, 2), (0, 2, 3)]
    tm = m.to_trimesh()
    assert len(tm.faces) == 2
    assert tm.area == pytest.approx(1.0)
    back = Mesh.from_trimesh(tm)
    assert back.n_points == 4
    assert back.cells == [(0, 1, 2), (0, 2, 3)]


def test_same_geometry():
    a = _square()
    b = _square()
    assert same_geometry(a, b)
    b.points = b.points + np.array([0.0, 0.0, 1e-9])
    assert not same_geometry(a, b)
