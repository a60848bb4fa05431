"""Append models into one, removing duplicate geometry."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from dynmodeler.descriptors import ParameterKind
from dynmodeler.merge import MeshInput, merge_meshes
from dynmodeler.resolver import ReferenceResolver, resolve_all
from dynmodeler.scene import Events
from dynmodeler.tool import Tool

logger = logging.getLogger(__name__)


class AppendTool(Tool):
    """Merges every input model into the output model's frame."""

    name = "Append"

    class Roles:
        INPUT_MODEL = "Append.InputModel"
        OUTPUT_MODEL = "Append.OutputModel"

    def __init__(self):
        super().__init__()
        self.add_input(
            "Model",
            "Model to be appended to the output.",
            ("Model",),
            self.Roles.INPUT_MODEL,
            multiple=True,
            required=True,
            events=(Events.MODIFIED, Events.MESH_MODIFIED, Events.TRANSFORM_MODIFIED),
        )
        self.add_output(
            "Appended model",
            "Output model combining the input models.",
            ("Model",),
            self.Roles.OUTPUT_MODEL,
        )
        self.add_parameter(
            "Merge tolerance",
            "Points closer than this are merged; 0 merges exactly coincident points only.",
            "MergeTolerance",
            ParameterKind.DOUBLE,
            0.0,
        )

        # (mesh, parent-to-world) pairs, refilled on every run
        self._inputs: List[MeshInput] = []

    def _run_internal(self, context: ReferenceResolver, outputs: Dict[str, Any]) -> bool:
        output = outputs[self.Roles.OUTPUT_MODEL]
        port = self.input_ports[0]

        self._inputs.clear()
        for node in resolve_all(context, self.Roles.INPUT_MODEL):
            if node is None or not port.accepts(node) or node.mesh is None:
                continue
            self._inputs.append((node.mesh, node.transform_to_world()))

        if not self._inputs:
            logger.debug("%s: no input meshes, output left unchanged", self.name)
            return True

        tolerance = self.parameter_value(context, 0)
        merged = merge_meshes(self._inputs, output.transform_from_world(), tolerance)
        with output.batch_modify():
            output.set_mesh(merged)
        return True
