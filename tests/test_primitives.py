import numpy as np
import pytest

from dynmodeler import primitives


def test_cube_bounds():
    m = primitives.cube(10, 25, 50)
    lo, hi = m.bounds()
    assert lo == pytest.approx([-5, -12.5, -25])
    assert hi == pytest.approx([5, 12.5, 25])
    assert m.to_trimesh().is_watertight
    assert m.n_points == 8
    assert [len(c) for c in m.cells] == [4] * 6


def test_sphere_radius():
    m = primitives.sphere(2.0, 12)
    radii = np.linalg.norm(m.points, axis=1)
    assert radii == pytest.approx(np.full(len(radii), 2.0))


def test_cylinder_and_cone():
    lo, hi = primitives.cylinder(1.0, 4.0, 8).bounds()
    assert lo[2] == pytest.approx(-2.0)
    assert hi[2] == pytest.approx(2.0)
    lo, hi = primitives.cone(1.0, 3.0, 8).bounds()
    assert lo[2] == pytest.approx(0.0)
    assert hi[2] == pytest.approx(3.0)


def test_capsule():
    m = primitives.capsule(1.0, 4.0, 8)
    assert m.n_cells > 0
    lo, hi = m.bounds()
    assert hi[0] == pytest.approx(1.0, abs=1e-6)


def test_arrow():
    m = primitives.arrow(50, 10, 3, 8, 1, 8)
    lo, hi = m.bounds()
    assert lo[2] == pytest.approx(0.0)
    assert hi[2] == pytest.approx(50.0)
    assert hi[0] == pytest.approx(3.0)
    shaft = m.points[m.points[:, 2] < 39.0]
    assert np.abs(shaft[:, :2]).max() <= 1.0 + 1e-9


def test_flat_shapes():
    square = primitives.plane(4.0)
    assert square.n_points == 4
    assert square.cells == [(0, 1, 2, 3)]
    hexagon = primitives.regular_polygon(2.0, 6)
    assert hexagon.n_cells == 1
    assert len(hexagon.cells[0]) == 6
    assert np.linalg.norm(hexagon.points, axis=1) == pytest.approx(np.full(6, 2.0))


def test_disk_ring():
    m = primitives.disk(1.0, 3.0, 8)
    assert m.n_points == 16
    assert m.n_cells == 8
    assert all(len(c) == 4 for c in m.cells)
    radii = sorted(set(np.round(np.linalg.norm(m.points, axis=1), 6)))
    assert radii == pytest.approx([1.0, 3.0])
    assert m.points[:, 2] == pytest.approx(np.zeros(16))


def test_ellipsoid_surface():
    m = primitives.ellipsoid(4.0, 2.0, 1.0, 12)
    scaled = m.points / np.array([4.0, 2.0, 1.0])
    assert np.linalg.norm(scaled, axis=1) == pytest.approx(np.ones(m.n_points))
    lo, hi = m.bounds()
    assert lo[2] == pytest.approx(-1.0)
    assert hi[2] == pytest.approx(1.0)


def test_torus_extent():
    m = primitives.torus(3.0, 1.0, 12)
    lo, hi = m.bounds()
    assert hi[0] == pytest.approx(4.0)
    assert hi[2] == pytest.approx(1.0, abs=0.05)
    rho = np.hypot(m.points[:, 0], m.points[:, 1])
    assert rho.min() >= 2.0 - 1e-9


@pytest.mark.parametrize("make", [
    lambda: primitives.cube(0, 1, 1),
    lambda: primitives.sphere(-1.0),
    lambda: primitives.cylinder(1.0, 1.0, 2),
    lambda: primitives.regular_polygon(1.0, 2),
    lambda: primitives.arrow(10, 10),
    lambda: primitives.disk(5.0, 2.0),
    lambda: primitives.torus(1.0, 0.0),
])
def test_invalid_sizes(make):
    with pytest.raises(ValueError):
        make()
