"""
Keeps operation nodes and their tools in step with the scene.

``ModelerLogic`` owns one tool instance per attached operation node and
observes the node's inputs with the events each input port declares.
With continuous update on, any of those events reruns the tool
synchronously.  A trigger that arrives while the same operation is
already running (for example because an output is also one of its
inputs) is ignored.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from dynmodeler.catalog import ToolCatalog, default_catalog
from dynmodeler.config import ModelerConfig
from dynmodeler.errors import UnknownToolError
from dynmodeler.resolver import Unsubscribe
from dynmodeler.scene import Events, Node, OperationNode, Scene
from dynmodeler.tool import Tool

logger = logging.getLogger(__name__)


class ModelerLogic:
    """Dispatches scene changes to the tools of operation nodes."""

    def __init__(self, scene: Optional[Scene] = None, catalog: Optional[ToolCatalog] = None,
                 config: Optional[ModelerConfig] = None):
        self.scene = scene
        self.catalog = catalog if catalog is not None else default_catalog()
        self.config = config if config is not None else ModelerConfig()
        self._tools: Dict[OperationNode, Tool] = {}
        self._node_subs: Dict[OperationNode, List[Unsubscribe]] = {}
        self._input_subs: Dict[OperationNode, List[Unsubscribe]] = {}
        self._running = set()

    def tool_for(self, op_node: OperationNode) -> Optional[Tool]:
        return self._tools.get(op_node)

    def is_attached(self, op_node: OperationNode) -> bool:
        return op_node in self._tools

    def is_continuous(self, op_node: OperationNode) -> bool:
        return bool(op_node.continuous_update or self.config.continuous_update)

    def attach(self, op_node: OperationNode) -> Tool:
        """Create the node's tool, apply presets and start observing inputs."""

        if op_node.tool_name is None:
            raise UnknownToolError("operation node has no tool selected", {"node": op_node.name})
        if op_node in self._tools:
            self.detach(op_node)
        tool = self.catalog.create_instance(op_node.tool_name)
        self._tools[op_node] = tool
        self._apply_presets(op_node, tool)

        self._node_subs[op_node] = [
            op_node.add_observer(Events.REFERENCE_MODIFIED, self._on_references_modified),
            op_node.add_observer(Events.MODIFIED, self._on_input_modified(op_node)),
        ]
        self._subscribe_inputs(op_node, tool)
        logger.debug("attached %r to %r", tool, op_node)
        return tool

    def attach_all(self) -> List[OperationNode]:
        """Attach every operation node of the scene that has a tool selected."""

        if self.scene is None:
            return []
        attached = []
        for node in self.scene.nodes(OperationNode.type_tag):
            if node.tool_name is not None and node not in self._tools:
                self.attach(node)
                attached.append(node)
        return attached

    def refresh(self, op_node: OperationNode) -> None:
        """Re-subscribe to the node's current references.

        A node whose tool selection changed gets a fresh tool instance.
        """

        tool = self._tools.get(op_node)
        if tool is None:
            return
        if op_node.tool_name != tool.get_name():
            self.attach(op_node)
            return
        self._unsubscribe(self._input_subs.pop(op_node, []))
        self._subscribe_inputs(op_node, tool)

    def detach(self, op_node: OperationNode) -> None:
        self._unsubscribe(self._node_subs.pop(op_node, []))
        self._unsubscribe(self._input_subs.pop(op_node, []))
        tool = self._tools.pop(op_node, None)
        if tool is not None:
            logger.debug("detached %r from %r", tool, op_node)

    def apply(self, op_node: OperationNode) -> bool:
        """Run the node's tool once, attaching it first if needed."""

        tool = self._tools.get(op_node)
        if tool is None:
            tool = self.attach(op_node)
        self._running.add(op_node)
        try:
            return tool.run(op_node)
        finally:
            self._running.discard(op_node)

    ## internals

    def _apply_presets(self, op_node: OperationNode, tool: Tool) -> None:
        keys = {p.key for p in tool.parameters}
        for key, value in self.config.presets_for(tool.get_name()).items():
            if key not in keys:
                logger.warning("preset %r does not match a parameter of %s", key, tool.get_name())
                continue
            if not op_node.has_parameter(key):
                op_node.set_parameter(key, value)

    def _subscribe_inputs(self, op_node: OperationNode, tool: Tool) -> None:
        callback = self._on_input_modified(op_node)
        self._input_subs[op_node] = [
            op_node.observe_role(role, events, callback) for role, events in tool.input_events()
        ]

    @staticmethod
    def _unsubscribe(removers: List[Unsubscribe]) -> None:
        for remove in removers:
            remove()

    def _on_references_modified(self, node: Node, event: str) -> None:
        self.refresh(node)

    def _on_input_modified(self, op_node: OperationNode):
        def _callback(node: Node, event: str) -> None:
            self._trigger(op_node, node, event)
        return _callback

    def _trigger(self, op_node: OperationNode, node: Node, event: str) -> None:
        if not self.is_continuous(op_node) or op_node not in self._tools:
            return
        if op_node in self._running:
            logger.debug("ignoring %s from %r while %r runs", event, node, op_node)
            return
        self.apply(op_node)


__all__ = ["ModelerLogic"]
