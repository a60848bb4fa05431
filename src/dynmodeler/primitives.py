"""Primitive mesh generators.

Each generator is a pure function of its size parameters and returns a
:class:`~dynmodeler.mesh.Mesh` centred on the origin (the arrow starts
at the origin and points along +Z).  Round solids come from
:mod:`trimesh.creation`; the box and the flat shapes are built
directly so they keep polygon cells.
"""

from __future__ import annotations

from math import cos, pi, sin

import numpy as np
import trimesh

from dynmodeler.mesh import Mesh, append_meshes


def _positive(**values: float) -> None:
    for key, value in values.items():
        if not value > 0:
            raise ValueError(f"{key} must be positive, got {value}")


def _resolution(key: str, value: int, minimum: int = 3) -> int:
    if int(value) < minimum:
        raise ValueError(f"{key} must be at least {minimum}, got {value}")
    return int(value)


def cube(x_length: float = 10.0, y_length: float = 25.0, z_length: float = 50.0) -> Mesh:
    """Axis-aligned box with the given edge lengths: eight points, six
    outward quad cells."""

    _positive(x_length=x_length, y_length=y_length, z_length=z_length)
    hx, hy, hz = x_length / 2.0, y_length / 2.0, z_length / 2.0
    # point index is dx + 2*dy + 4*dz
    pts = np.array([[(2 * dx - 1) * hx, (2 * dy - 1) * hy, (2 * dz - 1) * hz]
                    for dz in (0, 1) for dy in (0, 1) for dx in (0, 1)])
    faces = [
        (0, 2, 3, 1),  # -z
        (4, 5, 7, 6),  # +z
        (0, 1, 5, 4),  # -y
        (2, 6, 7, 3),  # +y
        (0, 4, 6, 2),  # -x
        (1, 3, 7, 5),  # +x
    ]
    return Mesh(pts, faces)


def sphere(radius: float = 5.0, resolution: int = 16) -> Mesh:
    _positive(radius=radius)
    count = _resolution("resolution", resolution)
    return Mesh.from_trimesh(trimesh.creation.uv_sphere(radius=radius, count=[count, count]))


def cylinder(radius: float = 5.0, height: float = 10.0, resolution: int = 16) -> Mesh:
    _positive(radius=radius, height=height)
    sections = _resolution("resolution", resolution)
    return Mesh.from_trimesh(trimesh.creation.cylinder(radius=radius, height=height, sections=sections))


def cone(radius: float = 5.0, height: float = 10.0, resolution: int = 16) -> Mesh:
    """Cone with its base centred on the origin and apex on +Z."""

    _positive(radius=radius, height=height)
    sections = _resolution("resolution", resolution)
    return Mesh.from_trimesh(trimesh.creation.cone(radius=radius, height=height, sections=sections))


def capsule(radius: float = 2.5, height: float = 10.0, resolution: int = 16) -> Mesh:
    _positive(radius=radius, height=height)
    count = _resolution("resolution", resolution)
    return Mesh.from_trimesh(trimesh.creation.capsule(height=height, radius=radius, count=[count, count]))


def arrow(length: float = 50.0, tip_length: float = 10.0, tip_radius: float = 3.0,
          tip_resolution: int = 8, shaft_radius: float = 1.0, shaft_resolution: int = 8) -> Mesh:
    """Shaft cylinder plus tip cone, from the origin to ``(0, 0, length)``."""

    _positive(length=length, tip_length=tip_length, tip_radius=tip_radius, shaft_radius=shaft_radius)
    if tip_length >= length:
        raise ValueError(f"tip_length ({tip_length}) must be shorter than length ({length})")
    shaft_height = length - tip_length
    shaft = trimesh.creation.cylinder(
        radius=shaft_radius, height=shaft_height,
        sections=_resolution("shaft_resolution", shaft_resolution),
        transform=trimesh.transformations.translation_matrix([0.0, 0.0, shaft_height / 2.0]))
    tip = trimesh.creation.cone(
        radius=tip_radius, height=tip_length,
        sections=_resolution("tip_resolution", tip_resolution),
        transform=trimesh.transformations.translation_matrix([0.0, 0.0, shaft_height]))
    return append_meshes([Mesh.from_trimesh(shaft), Mesh.from_trimesh(tip)])


def plane(size: float = 10.0) -> Mesh:
    """Square of side ``size`` in the XY plane, one quad cell."""

    _positive(size=size)
    h = size / 2.0
    pts = np.array([[-h, -h, 0.0], [h, -h, 0.0], [h, h, 0.0], [-h, h, 0.0]])
    return Mesh(pts, [(0, 1, 2, 3)])


def regular_polygon(radius: float = 5.0, sides: int = 6) -> Mesh:
    """Regular polygon in the XY plane, one n-gon cell."""

    _positive(radius=radius)
    n = _resolution("sides", sides)
    pts = np.array([[radius * cos(2.0 * pi * k / n), radius * sin(2.0 * pi * k / n), 0.0]
                    for k in range(n)])
    return Mesh(pts, [tuple(range(n))])


def disk(inner_radius: float = 2.5, outer_radius: float = 5.0, resolution: int = 16) -> Mesh:
    """Flat ring in the XY plane, one quad per sector."""

    _positive(inner_radius=inner_radius, outer_radius=outer_radius)
    if inner_radius >= outer_radius:
        raise ValueError(f"inner_radius ({inner_radius}) must be smaller than outer_radius ({outer_radius})")
    n = _resolution("resolution", resolution)
    pts = []
    for k in range(n):
        c, s = cos(2.0 * pi * k / n), sin(2.0 * pi * k / n)
        pts.append([inner_radius * c, inner_radius * s, 0.0])
        pts.append([outer_radius * c, outer_radius * s, 0.0])
    cells = []
    for k in range(n):
        j = (k + 1) % n
        cells.append((2 * k, 2 * k + 1, 2 * j + 1, 2 * j))
    return Mesh(np.array(pts), cells)


def ellipsoid(x_radius: float = 5.0, y_radius: float = 3.75, z_radius: float = 2.5,
              resolution: int = 16) -> Mesh:
    _positive(x_radius=x_radius, y_radius=y_radius, z_radius=z_radius)
    count = _resolution("resolution", resolution)
    unit = Mesh.from_trimesh(trimesh.creation.uv_sphere(radius=1.0, count=[count, count]))
    return Mesh(unit.points * np.array([x_radius, y_radius, z_radius]), unit.cells)


def torus(ring_radius: float = 10.0 / 3.0, cross_section_radius: float = 10.0 / 6.0,
          resolution: int = 16) -> Mesh:
    """Torus around the Z axis."""

    _positive(ring_radius=ring_radius, cross_section_radius=cross_section_radius)
    sections = _resolution("resolution", resolution)
    return Mesh.from_trimesh(trimesh.creation.torus(
        major_radius=ring_radius, minor_radius=cross_section_radius,
        major_sections=sections, minor_sections=sections))


__all__ = [
    "cube",
    "sphere",
    "cylinder",
    "cone",
    "capsule",
    "arrow",
    "plane",
    "regular_polygon",
    "disk",
    "ellipsoid",
    "torus",
]
