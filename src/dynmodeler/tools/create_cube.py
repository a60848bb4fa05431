"""Box model generator."""

from __future__ import annotations

from typing import Any, Dict

from dynmodeler import primitives
from dynmodeler.descriptors import ParameterKind
from dynmodeler.resolver import ReferenceResolver
from dynmodeler.tool import Tool


class CreateCubeTool(Tool):
    name = "Create Cube"

    class Roles:
        OUTPUT_MODEL = "Cube.OutputModel"

    def __init__(self):
        super().__init__()
        self.add_output("Cube model", "Output model containing the box.",
                        ("Model",), self.Roles.OUTPUT_MODEL)
        self.add_parameter("X length", "Length of the box along X.", "XLength",
                           ParameterKind.DOUBLE, 10.0)
        self.add_parameter("Y length", "Length of the box along Y.", "YLength",
                           ParameterKind.DOUBLE, 25.0)
        self.add_parameter("Z length", "Length of the box along Z.", "ZLength",
                           ParameterKind.DOUBLE, 50.0)

    def _run_internal(self, context: ReferenceResolver, outputs: Dict[str, Any]) -> bool:
        x, y, z = (self.parameter_value(context, i) for i in range(3))
        mesh = primitives.cube(x, y, z)
        output = outputs[self.Roles.OUTPUT_MODEL]
        with output.batch_modify():
            output.set_mesh(mesh)
        return True
