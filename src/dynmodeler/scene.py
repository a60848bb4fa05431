"""In-memory scene graph for driving modeler tools.

This is a small stand-in for a real host application: enough node
types to feed every tool, parent transforms, observers, and the
scoped ``batch_modify()`` guard that collapses the notifications of
several field writes into one.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from dynmodeler.geom import cross, normalize, point, sub
from dynmodeler.mesh import Mesh
from dynmodeler.resolver import Unsubscribe
from dynmodeler.xform import Identity, Matrix

logger = logging.getLogger(__name__)

Callback = Callable[["Node", str], None]


class Events:
    """Event tags emitted by scene nodes."""
    MODIFIED = "Modified"
    POINT_MODIFIED = "PointModified"
    TRANSFORM_MODIFIED = "TransformModified"
    MESH_MODIFIED = "MeshModified"
    REFERENCE_MODIFIED = "ReferenceModified"


class Node:
    """Base scene node with observers and deferred notifications."""

    type_tag = "Node"

    def __init__(self, name: Optional[str] = None):
        self.node_id: Optional[str] = None
        self.name = name or self.type_tag
        self.scene: Optional["Scene"] = None
        self._observers: Dict[str, List[Callback]] = defaultdict(list)
        self._batch_depth = 0
        self._pending: List[str] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.node_id or self.name!r})"

    def add_observer(self, event: str, callback: Callback) -> Unsubscribe:
        self._observers[event].append(callback)

        def _remove() -> None:
            self.remove_observer(event, callback)

        return _remove

    def remove_observer(self, event: str, callback: Callback) -> None:
        callbacks = self._observers.get(event)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def invoke_event(self, event: str) -> None:
        """Notify observers now, or once on guard release if batching."""

        if self._batch_depth:
            if event not in self._pending:
                self._pending.append(event)
            return
        for callback in list(self._observers.get(event, ())):
            callback(self, event)

    @property
    def is_batching(self) -> bool:
        return self._batch_depth > 0

    @contextmanager
    def batch_modify(self) -> Iterator["Node"]:
        """Defer notifications until the outermost guard exits.

        Each distinct event raised inside the guard is delivered exactly
        once, in first-raised order.
        """

        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                pending, self._pending = self._pending, []
                for event in pending:
                    self.invoke_event(event)


class TransformableNode(Node):
    """Node that may sit under a parent transform."""

    def __init__(self, name: Optional[str] = None):
        super().__init__(name)
        self.parent: Optional["TransformNode"] = None
        self._parent_unsubscribe: Optional[Unsubscribe] = None

    def set_parent(self, parent: Optional["TransformNode"]) -> None:
        if parent is self.parent:
            return
        ancestor = parent
        while ancestor is not None:
            if ancestor is self:
                raise ValueError(f"{parent!r} cannot be a parent of {self!r}: cycle")
            ancestor = ancestor.parent
        if self._parent_unsubscribe is not None:
            self._parent_unsubscribe()
            self._parent_unsubscribe = None
        self.parent = parent
        if parent is not None:
            self._parent_unsubscribe = parent.add_observer(
                Events.TRANSFORM_MODIFIED, self._on_parent_transform_modified)
        with self.batch_modify():
            self.invoke_event(Events.TRANSFORM_MODIFIED)
            self.invoke_event(Events.MODIFIED)

    def _on_parent_transform_modified(self, node: Node, event: str) -> None:
        self.invoke_event(Events.TRANSFORM_MODIFIED)

    def transform_to_world(self) -> Matrix:
        """Parent-to-world transform, identity when unparented."""

        if self.parent is None:
            return Identity()
        return self.parent.matrix_to_world()

    def transform_from_world(self) -> Matrix:
        if self.parent is None:
            return Identity()
        return self.parent.matrix_to_world().inverse()


class TransformNode(TransformableNode):
    """Rigid (or general linear) transform node."""

    type_tag = "LinearTransform"

    def __init__(self, name: Optional[str] = None, matrix: Optional[Matrix] = None):
        super().__init__(name)
        self.matrix_to_parent = Matrix(matrix) if matrix is not None else Identity()

    def set_matrix_to_parent(self, matrix: Matrix) -> None:
        self.matrix_to_parent = Matrix(matrix)
        with self.batch_modify():
            self.invoke_event(Events.TRANSFORM_MODIFIED)
            self.invoke_event(Events.MODIFIED)

    def matrix_to_world(self) -> Matrix:
        return self.transform_to_world().mul(self.matrix_to_parent)


class MarkupsNode(TransformableNode):
    """Node holding an ordered list of control points in local coordinates."""

    def __init__(self, name: Optional[str] = None, points: Optional[Sequence] = None):
        super().__init__(name)
        self.control_points: List[list] = [point(p) for p in (points or [])]

    @property
    def n_control_points(self) -> int:
        return len(self.control_points)

    def set_control_points(self, points: Sequence) -> None:
        self.control_points = [point(p) for p in points]
        with self.batch_modify():
            self.invoke_event(Events.POINT_MODIFIED)
            self.invoke_event(Events.MODIFIED)

    def control_point(self, index: int) -> list:
        return list(self.control_points[index])

    def control_point_world(self, index: int) -> list:
        return self.transform_to_world().transform_point(self.control_points[index])


class PointListNode(MarkupsNode):
    type_tag = "PointList"


class AngleNode(MarkupsNode):
    type_tag = "Angle"


class PlaneNode(MarkupsNode):
    """Plane defined by three control points.

    The first point is the origin, the second fixes the x axis, and
    the normal follows the right-hand rule through the third.
    """

    type_tag = "Plane"
    PLANE_TYPE_3POINTS = "3Points"

    def __init__(self, name: Optional[str] = None, points: Optional[Sequence] = None):
        super().__init__(name, points)
        self.plane_type = self.PLANE_TYPE_3POINTS

    def set_plane_type(self, plane_type: str) -> None:
        if plane_type != self.PLANE_TYPE_3POINTS:
            raise ValueError(f"unsupported plane type: {plane_type}")
        self.plane_type = plane_type
        self.invoke_event(Events.MODIFIED)

    def _axes(self):
        if self.n_control_points != 3:
            return None
        p0, p1, p2 = self.control_points
        x = normalize(sub(p1, p0))
        if x is None:
            return None
        n = normalize(cross(sub(p1, p0), sub(p2, p0)))
        if n is None:
            return None
        y = cross(n, x)
        return p0, x, y, n

    @property
    def is_plane_valid(self) -> bool:
        return self._axes() is not None

    def object_to_node_matrix(self) -> Matrix:
        axes = self._axes()
        if axes is None:
            raise ValueError(f"{self!r} does not define a plane")
        origin, x, y, n = axes
        m = Matrix()
        for i in range(3):
            m.set(i, 0, x[i])
            m.set(i, 1, y[i])
            m.set(i, 2, n[i])
            m.set(i, 3, origin[i])
        return m


class ModelNode(TransformableNode):
    """Node holding a polygon mesh."""

    type_tag = "Model"

    def __init__(self, name: Optional[str] = None, mesh: Optional[Mesh] = None):
        super().__init__(name)
        self.mesh = mesh

    def set_mesh(self, mesh: Optional[Mesh]) -> None:
        self.mesh = mesh
        with self.batch_modify():
            self.invoke_event(Events.MESH_MODIFIED)
            self.invoke_event(Events.MODIFIED)


class OperationNode(Node):
    """Per-operation node: chosen tool, references by role, parameters.

    Implements :class:`dynmodeler.resolver.ReferenceResolver`.
    """

    type_tag = "DynamicModeler"

    def __init__(self, name: Optional[str] = None, tool_name: Optional[str] = None,
                 continuous_update: bool = False):
        super().__init__(name)
        self.tool_name = tool_name
        self.continuous_update = continuous_update
        self._references: Dict[str, List[Optional[Node]]] = {}
        self._parameters: Dict[str, Any] = {}

    def _references_changed(self) -> None:
        with self.batch_modify():
            self.invoke_event(Events.REFERENCE_MODIFIED)
            self.invoke_event(Events.MODIFIED)

    def set_reference(self, role: str, node: Optional[Node]) -> None:
        """Replace all references under ``role`` with ``node`` (or none)."""

        if node is None:
            self._references.pop(role, None)
        else:
            self._references[role] = [node]
        self._references_changed()

    def set_references(self, role: str, nodes: Iterable[Optional[Node]]) -> None:
        nodes = list(nodes)
        if nodes:
            self._references[role] = nodes
        else:
            self._references.pop(role, None)
        self._references_changed()

    def add_reference(self, role: str, node: Optional[Node]) -> None:
        self._references.setdefault(role, []).append(node)
        self._references_changed()

    def references(self, role: str) -> List[Optional[Node]]:
        return list(self._references.get(role, ()))

    def roles(self) -> List[str]:
        return list(self._references)

    def resolve(self, role: str, index: int = 0) -> Optional[Node]:
        refs = self._references.get(role, ())
        if index < 0 or index >= len(refs):
            return None
        return refs[index]

    def count(self, role: str) -> int:
        return len(self._references.get(role, ()))

    def set_parameter(self, key: str, value: Any) -> None:
        self._parameters[key] = value
        self.invoke_event(Events.MODIFIED)

    def parameter(self, key: str) -> Any:
        return self._parameters.get(key)

    def has_parameter(self, key: str) -> bool:
        return key in self._parameters

    def observe_role(self, role: str, events: Iterable[str], callback: Callback) -> Unsubscribe:
        """Observe ``events`` on every node currently referenced under ``role``."""

        removers: List[Unsubscribe] = []
        events = list(events)
        seen = set()
        for node in self._references.get(role, ()):
            if node is None or id(node) in seen:
                continue
            seen.add(id(node))
            for event in events:
                removers.append(node.add_observer(event, callback))

        def _unsubscribe() -> None:
            for remove in removers:
                remove()
            removers.clear()

        return _unsubscribe


class Scene:
    """Registry of nodes with generated ids."""

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self._counters: Dict[str, int] = defaultdict(int)
        self.crosshair = point(0, 0, 0)

    def add_node(self, node: Node) -> Node:
        if node.node_id is not None and self._nodes.get(node.node_id) is node:
            return node
        self._counters[node.type_tag] += 1
        node_id = f"{node.type_tag}{self._counters[node.type_tag]}"
        while node_id in self._nodes:
            self._counters[node.type_tag] += 1
            node_id = f"{node.type_tag}{self._counters[node.type_tag]}"
        node.node_id = node_id
        node.scene = self
        self._nodes[node_id] = node
        logger.debug("added %s", node_id)
        return node

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def remove_node(self, node: Node) -> None:
        if node.node_id in self._nodes:
            del self._nodes[node.node_id]
            node.scene = None
            logger.debug("removed %s", node.node_id)

    def nodes(self, type_tag: Optional[str] = None) -> List[Node]:
        return [n for n in self._nodes.values() if type_tag is None or n.type_tag == type_tag]

    def set_crosshair(self, position: Sequence[float]) -> None:
        self.crosshair = point(position)


__all__ = [
    "Events",
    "Node",
    "TransformableNode",
    "TransformNode",
    "MarkupsNode",
    "PointListNode",
    "AngleNode",
    "PlaneNode",
    "ModelNode",
    "OperationNode",
    "Scene",
]
