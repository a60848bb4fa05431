"""Compose points, angles, planes and transforms into one transform."""

from __future__ import annotations

import logging
from typing import Any, Dict

from dynmodeler.composition import (
    IGNORE_PARENT_TRANSFORMS,
    USE_PARENT_TRANSFORMS,
    compose,
    sources_from_nodes,
)
from dynmodeler.descriptors import ParameterKind
from dynmodeler.resolver import ReferenceResolver, resolve_all
from dynmodeler.scene import Events
from dynmodeler.tool import Tool
from dynmodeler.xform import Matrix

logger = logging.getLogger(__name__)


class TransformMakerTool(Tool):
    """Post-multiplies its inputs in reference order.

    The result can be written as a point (translation), an angle
    (rotation), a plane (full frame) and a linear transform.
    """

    name = "Transform maker"

    class Roles:
        TRANSFORM_SOURCE = "TransformMaker.TransformSource"
        OUTPUT_POSITION = "TransformMaker.OutputFiducial"
        OUTPUT_ANGLE = "TransformMaker.OutputAngle"
        OUTPUT_PLANE = "TransformMaker.OutputPlane"
        OUTPUT_TRANSFORM = "TransformMaker.OutputLinearTransform"

    def __init__(self):
        super().__init__()
        roles = self.Roles

        self.add_input(
            "Input nodes",
            "The final transform is calculated from the inputs in post-multiply order.",
            ("PointList", "Angle", "Plane", "LinearTransform"),
            roles.TRANSFORM_SOURCE,
            multiple=True,
            required=True,
            events=(Events.MODIFIED, Events.POINT_MODIFIED, Events.TRANSFORM_MODIFIED),
        )

        self.add_output(
            "Final transform position",
            "Point list with one point at the translation of the final transform.",
            ("PointList",), roles.OUTPUT_POSITION)
        self.add_output(
            "Final transform angle",
            "Final rotation as an angle; the rotation axis passes through the "
            "second point, normal to the angle.",
            ("Angle",), roles.OUTPUT_ANGLE)
        self.add_output(
            "Final transform frame",
            "Final transform as a plane whose axes follow the rotation and whose "
            "origin is the translation.",
            ("Plane",), roles.OUTPUT_PLANE)
        self.add_output(
            "Full final transform",
            "Final transform as a 4x4 matrix.",
            ("LinearTransform",), roles.OUTPUT_TRANSFORM)

        self.add_parameter(
            "Use parent transforms?",
            "Choose whether parent transforms of the inputs are applied or ignored.",
            "UseParentTransforms",
            ParameterKind.ENUM,
            IGNORE_PARENT_TRANSFORMS,
            (IGNORE_PARENT_TRANSFORMS, USE_PARENT_TRANSFORMS),
        )

        # working matrix, reset to identity by every compose()
        self._result = Matrix()

    def _run_internal(self, context: ReferenceResolver, outputs: Dict[str, Any]) -> bool:
        roles = self.Roles
        use_parent = self.parameter_value(context, 0) == USE_PARENT_TRANSFORMS
        sources = sources_from_nodes(resolve_all(context, roles.TRANSFORM_SOURCE))
        composed = compose(sources, use_parent, result=self._result)
        logger.debug("%s: %d sources applied, %d skipped",
                     self.name, composed.applied, composed.skipped)

        node = outputs.get(roles.OUTPUT_POSITION)
        if node is not None:
            with node.batch_modify():
                node.set_control_points([composed.position()])

        node = outputs.get(roles.OUTPUT_ANGLE)
        if node is not None:
            # keep the vertex where the user placed it
            vertex = node.control_point(1) if node.n_control_points > 1 else None
            with node.batch_modify():
                node.set_control_points(composed.angle_points(vertex))

        node = outputs.get(roles.OUTPUT_PLANE)
        if node is not None:
            with node.batch_modify():
                node.set_plane_type(node.PLANE_TYPE_3POINTS)
                node.set_control_points(composed.plane_points())

        node = outputs.get(roles.OUTPUT_TRANSFORM)
        if node is not None:
            with node.batch_modify():
                node.set_matrix_to_parent(composed.matrix)

        return True
