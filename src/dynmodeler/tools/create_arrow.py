"""Arrow model generator with an optional placement transform."""

from __future__ import annotations

from typing import Any, Dict

from dynmodeler import primitives
from dynmodeler.descriptors import ParameterKind
from dynmodeler.geom import point
from dynmodeler.resolver import ReferenceResolver
from dynmodeler.tool import Tool
from dynmodeler.xform import Translation


class CreateArrowTool(Tool):
    """Arrow along +Z, from its origin to ``Length``.

    When an output transform is connected it is moved to the scene
    crosshair and made the parent of the arrow model.
    """

    name = "Create Arrow"

    class Roles:
        OUTPUT_MODEL = "Arrow.OutputModel"
        OUTPUT_TRANSFORM = "Arrow.OutputTransform"

    def __init__(self):
        super().__init__()
        self.add_output("Arrow model", "Output model containing the arrow.",
                        ("Model",), self.Roles.OUTPUT_MODEL)
        self.add_output("Arrow transform", "Transform placing the arrow at the crosshair.",
                        ("LinearTransform",), self.Roles.OUTPUT_TRANSFORM)

        self.add_parameter("Tip length", "Length of the tip cone.", "TipLength",
                           ParameterKind.DOUBLE, 10.0)
        self.add_parameter("Tip radius", "Base radius of the tip cone.", "TipRadius",
                           ParameterKind.DOUBLE, 3.0)
        self.add_parameter("Tip resolution", "Number of sides of the tip cone.", "TipResolution",
                           ParameterKind.INT, 8)
        self.add_parameter("Shaft radius", "Radius of the shaft.", "ShaftRadius",
                           ParameterKind.DOUBLE, 1.0)
        self.add_parameter("Shaft resolution", "Number of sides of the shaft.", "ShaftResolution",
                           ParameterKind.INT, 8)
        self.add_parameter("Length", "Total length of the arrow.", "Length",
                           ParameterKind.DOUBLE, 50.0)

    def _run_internal(self, context: ReferenceResolver, outputs: Dict[str, Any]) -> bool:
        tip_length, tip_radius, tip_res, shaft_radius, shaft_res, length = (
            self.parameter_value(context, i) for i in range(6))

        transform = outputs.get(self.Roles.OUTPUT_TRANSFORM)
        if transform is not None:
            scene = getattr(context, "scene", None)
            position = scene.crosshair if scene is not None else point(0, 0, 0)
            with transform.batch_modify():
                transform.set_matrix_to_parent(Translation(position))

        model = outputs.get(self.Roles.OUTPUT_MODEL)
        if model is not None:
            mesh = primitives.arrow(length, tip_length, tip_radius, tip_res,
                                    shaft_radius, shaft_res)
            with model.batch_modify():
                model.set_mesh(mesh)
                if transform is not None and model.parent is not transform:
                    model.set_parent(transform)
        return True
