"""Fold an ordered list of geometric sources into one transform.

Host nodes are inspected in exactly one place,
:func:`source_from_node`, which turns them into :class:`GeometricSource`
values.  :func:`compose` then works on those values only.  Composition
is post-multiply: ``result = result * contribution`` for each source in
list order, starting from the identity on every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from dynmodeler.errors import DegenerateGeometryError
from dynmodeler.geom import add, cross, normalize, perpendicular, point, scale3, signed_angle, sub
from dynmodeler.xform import Identity, Matrix, Rotation, Translation, axis_angle

logger = logging.getLogger(__name__)

# Size of the reference triangle used for the angle and plane outputs.
ARM_LENGTH = 50.0

USE_PARENT_TRANSFORMS = "Use ParentTransforms"
IGNORE_PARENT_TRANSFORMS = "Ignore ParentTransforms"


class SourceKind(Enum):
    POINT = "point"
    ANGLE = "angle"
    PLANE = "plane"
    TRANSFORM = "transform"
    MESH = "mesh"


@dataclass(frozen=True)
class GeometricSource:
    """One input of a composition.

    ``value`` is expressed in the node's own frame:

    * POINT: a point (the first control point)
    * ANGLE: a tuple of control points, normally three
    * PLANE: the object-to-node matrix, ``None`` while the plane is not
      well defined
    * TRANSFORM: the matrix to parent
    * MESH: the mesh
    """

    kind: SourceKind
    value: Any
    parent_to_world: Optional[Matrix] = None
    label: str = ""

    def to_world(self) -> Matrix:
        return self.parent_to_world if self.parent_to_world is not None else Identity()


def source_from_node(node: Any) -> Optional[GeometricSource]:
    """Build a source from a scene node, or ``None`` for unsupported nodes."""

    if node is None:
        return None
    tag = getattr(node, "type_tag", None)
    label = getattr(node, "node_id", None) or getattr(node, "name", "")
    to_world = node.transform_to_world() if hasattr(node, "transform_to_world") else None

    if tag == "PointList":
        value = node.control_point(0) if node.n_control_points > 0 else None
        return GeometricSource(SourceKind.POINT, value, to_world, label)
    if tag == "Angle":
        pts = tuple(node.control_point(i) for i in range(node.n_control_points))
        return GeometricSource(SourceKind.ANGLE, pts, to_world, label)
    if tag == "Plane":
        value = node.object_to_node_matrix() if node.is_plane_valid else None
        return GeometricSource(SourceKind.PLANE, value, to_world, label)
    if tag == "LinearTransform":
        return GeometricSource(SourceKind.TRANSFORM, Matrix(node.matrix_to_parent), to_world, label)
    if tag == "Model":
        return GeometricSource(SourceKind.MESH, node.mesh, to_world, label)
    logger.debug("no geometric source for %r", node)
    return None


def sources_from_nodes(nodes: Iterable[Any]) -> List[GeometricSource]:
    """Sources for ``nodes`` in order, dropping unsupported nodes."""

    sources = []
    for node in nodes:
        source = source_from_node(node)
        if source is not None:
            sources.append(source)
    return sources


## per-kind contributions.  Each returns the matrix to post-multiply,
## or raises DegenerateGeometryError when the source cannot define one.

def _point_contribution(source: GeometricSource, use_parent_transforms: bool) -> Matrix:
    if source.value is None:
        raise DegenerateGeometryError("point list has no control points", {"source": source.label})
    pos = source.value
    if use_parent_transforms:
        pos = source.to_world().transform_point(pos)
    return Translation(pos)


def _angle_contribution(source: GeometricSource, use_parent_transforms: bool) -> Matrix:
    pts = source.value
    if len(pts) != 3:
        raise DegenerateGeometryError("angle needs exactly three control points",
                                      {"source": source.label, "points": len(pts)})
    if use_parent_transforms:
        m = source.to_world()
        pts = [m.transform_point(p) for p in pts]
    p0, p1, p2 = pts
    va = sub(p0, p1)
    vb = sub(p2, p1)
    axis = normalize(cross(va, vb))
    if axis is None:
        raise DegenerateGeometryError("angle arms are coincident or collinear",
                                      {"source": source.label})
    return Rotation(axis, signed_angle(va, vb, axis))


def _plane_contribution(source: GeometricSource, use_parent_transforms: bool) -> Matrix:
    if source.value is None:
        raise DegenerateGeometryError("plane is not well defined", {"source": source.label})
    if use_parent_transforms:
        return source.to_world().mul(source.value)
    return Matrix(source.value)


def _transform_contribution(source: GeometricSource, use_parent_transforms: bool) -> Matrix:
    if use_parent_transforms:
        return source.to_world().mul(source.value)
    return Matrix(source.value)


def _mesh_contribution(source: GeometricSource, use_parent_transforms: bool) -> Matrix:
    # meshes carry no pose of their own
    return Identity()


_CONTRIBUTIONS: Dict[SourceKind, Callable[[GeometricSource, bool], Matrix]] = {
    SourceKind.POINT: _point_contribution,
    SourceKind.ANGLE: _angle_contribution,
    SourceKind.PLANE: _plane_contribution,
    SourceKind.TRANSFORM: _transform_contribution,
    SourceKind.MESH: _mesh_contribution,
}

_missing = set(SourceKind) - set(_CONTRIBUTIONS)
if _missing:  # pragma: no cover - guards edits to SourceKind
    raise RuntimeError(f"no contribution handler for {sorted(k.value for k in _missing)}")


def contribution(source: GeometricSource, use_parent_transforms: bool = False) -> Matrix:
    """The matrix ``source`` post-multiplies into a composition."""

    return _CONTRIBUTIONS[source.kind](source, use_parent_transforms)


@dataclass
class ComposedTransform:
    """Result of :func:`compose` and its derived representations."""

    matrix: Matrix
    applied: int = 0
    skipped: int = 0

    def position(self) -> list:
        """Translation column of the result."""

        return self.matrix.translation()

    def angle_points(self, vertex: Optional[Sequence[float]] = None) -> List[list]:
        """Three control points whose angle reproduces the rotation.

        The first arm is perpendicular to the rotation axis, the second
        arm is its rotated image, and both hang off ``vertex`` (origin
        by default).  Feeding these points back as an angle source gives
        the same rotation.
        """

        axis, _ = axis_angle(self.matrix)
        arm0 = scale3(perpendicular(axis), ARM_LENGTH)
        arm2 = self.matrix.transform_vector(arm0)
        v = point(vertex) if vertex is not None else point(0, 0, 0)
        return [add(v, arm0), v, add(v, arm2)]

    def plane_points(self) -> List[list]:
        """Origin, x-arm and y-arm of the transformed reference frame."""

        refs = [point(0, 0, 0), point(ARM_LENGTH, 0, 0), point(0, ARM_LENGTH, 0)]
        return [self.matrix.transform_point(p) for p in refs]


def compose(sources: Sequence[GeometricSource], use_parent_transforms: bool = False,
            result: Optional[Matrix] = None) -> ComposedTransform:
    """Post-multiply the contributions of ``sources`` in order.

    ``result`` is an optional working matrix that is reset to identity
    and reused.  Degenerate sources contribute identity and are
    counted in ``skipped``.
    """

    if result is None:
        result = Matrix()
    else:
        result.identity()

    applied = skipped = 0
    for source in sources:
        try:
            step = contribution(source, use_parent_transforms)
        except DegenerateGeometryError as exc:
            logger.debug("skipping source: %s", exc)
            skipped += 1
            continue
        result.concatenate(step)
        applied += 1

    return ComposedTransform(result.copy(), applied, skipped)


__all__ = [
    "ARM_LENGTH",
    "USE_PARENT_TRANSFORMS",
    "IGNORE_PARENT_TRANSFORMS",
    "SourceKind",
    "GeometricSource",
    "source_from_node",
    "sources_from_nodes",
    "contribution",
    "ComposedTransform",
    "compose",
]
