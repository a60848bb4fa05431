"""Single-tool access to every primitive generator."""

from __future__ import annotations

from typing import Any, Callable, Dict

from dynmodeler import primitives
from dynmodeler.descriptors import ParameterKind
from dynmodeler.mesh import Mesh
from dynmodeler.resolver import ReferenceResolver
from dynmodeler.tool import Tool


## proportions follow the unit sources of common toolkits, scaled by Size

def _arrow(size: float, res: int) -> Mesh:
    return primitives.arrow(size, 0.35 * size, 0.1 * size, res, 0.03 * size, res)


def _capsule(size: float, res: int) -> Mesh:
    return primitives.capsule(size / 4.0, size / 2.0, res)


def _cone(size: float, res: int) -> Mesh:
    return primitives.cone(size / 2.0, size, res)


def _cube(size: float, res: int) -> Mesh:
    return primitives.cube(size, size, size)


def _cylinder(size: float, res: int) -> Mesh:
    return primitives.cylinder(size / 2.0, size, res)


def _disk(size: float, res: int) -> Mesh:
    return primitives.disk(size / 4.0, size / 2.0, res)


def _ellipsoid(size: float, res: int) -> Mesh:
    return primitives.ellipsoid(size / 2.0, 0.375 * size, size / 4.0, res)


def _torus(size: float, res: int) -> Mesh:
    return primitives.torus(size / 3.0, size / 6.0, res)


def _plane(size: float, res: int) -> Mesh:
    return primitives.plane(size)


def _regular_polygon(size: float, res: int) -> Mesh:
    return primitives.regular_polygon(size / 2.0, res)


def _sphere(size: float, res: int) -> Mesh:
    return primitives.sphere(size / 2.0, res)


GENERATORS: Dict[str, Callable[[float, int], Mesh]] = {
    "ArrowSource": _arrow,
    "CapsuleSource": _capsule,
    "ConeSource": _cone,
    "CubeSource": _cube,
    "CylinderSource": _cylinder,
    "DiskSource": _disk,
    "ParametricEllipsoid": _ellipsoid,
    "ParametricTorus": _torus,
    "PlaneSource": _plane,
    "RegularPolygonSource": _regular_polygon,
    "SphereSource": _sphere,
}


class AddGeometryTool(Tool):
    """Writes the selected primitive, sized by ``Size``, to the output model."""

    name = "Add geometry"

    class Roles:
        OUTPUT_MODEL = "AddGeometry.OutputModel"

    def __init__(self):
        super().__init__()
        self.add_output("Output model", "Model receiving the generated geometry.",
                        ("Model",), self.Roles.OUTPUT_MODEL)
        self.add_parameter("Geometry source", "Primitive to generate.", "GeometrySource",
                           ParameterKind.ENUM, "CubeSource", tuple(GENERATORS))
        self.add_parameter("Size", "Overall size (edge, diameter or length).", "Size",
                           ParameterKind.DOUBLE, 10.0)
        self.add_parameter("Resolution", "Number of sides of round primitives.", "Resolution",
                           ParameterKind.INT, 16)

    def _run_internal(self, context: ReferenceResolver, outputs: Dict[str, Any]) -> bool:
        source = self.parameter_value(context, 0)
        size = self.parameter_value(context, 1)
        resolution = self.parameter_value(context, 2)
        mesh = GENERATORS[source](size, resolution)
        output = outputs[self.Roles.OUTPUT_MODEL]
        with output.batch_modify():
            output.set_mesh(mesh)
        return True
