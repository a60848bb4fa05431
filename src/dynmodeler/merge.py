"""Merge meshes from different frames into one mesh in an output frame.

Pipeline: world-space copies -> append -> merge coincident points ->
drop collapsed and duplicate cells -> drop unused points -> output
frame.  Points are coincident only when their world coordinates are
exactly equal, unless a positive ``tolerance`` is given.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from dynmodeler.mesh import Cell, Mesh, append_meshes
from dynmodeler.xform import Matrix

logger = logging.getLogger(__name__)

MeshInput = Tuple[Mesh, Optional[Matrix]]


def _point_key(coords, tolerance: float):
    if tolerance > 0.0:
        return tuple(int(round(c / tolerance)) for c in coords)
    return tuple(coords)


def merge_points(mesh: Mesh, tolerance: float = 0.0) -> Mesh:
    """Collapse coincident points, keeping the first occurrence.

    Cells are re-indexed onto the surviving points.  With
    ``tolerance > 0`` coordinates are snapped to a grid of that pitch
    before comparison.
    """

    if tolerance < 0.0:
        raise ValueError(f"merge tolerance must be non-negative, got {tolerance}")

    point_map: Dict[tuple, int] = {}
    remap: List[int] = []
    kept: List[List[float]] = []
    for coords in mesh.points.tolist():
        key = _point_key(coords, tolerance)
        idx = point_map.get(key)
        if idx is None:
            idx = len(kept)
            point_map[key] = idx
            kept.append(coords)
        remap.append(idx)

    cells = [tuple(remap[i] for i in cell) for cell in mesh.cells]
    return Mesh(np.asarray(kept, dtype=float) if kept else None, cells)


def _collapse(cell: Cell) -> Cell:
    """Drop repeated neighbours (including the wrap-around pair)."""

    out: List[int] = []
    for idx in cell:
        if not out or out[-1] != idx:
            out.append(idx)
    while len(out) > 1 and out[0] == out[-1]:
        out.pop()
    return tuple(out)


def remove_duplicate_cells(mesh: Mesh) -> Mesh:
    """Remove collapsed cells and cells that repeat an earlier vertex set."""

    seen = set()
    cells: List[Cell] = []
    collapsed = duplicates = 0
    for cell in mesh.cells:
        reduced = _collapse(cell)
        distinct = set(reduced)
        if len(distinct) < min(3, len(cell)):
            collapsed += 1
            continue
        key = tuple(sorted(distinct))
        if key in seen:
            duplicates += 1
            continue
        seen.add(key)
        cells.append(reduced)
    if collapsed or duplicates:
        logger.debug("removed %d collapsed and %d duplicate cells", collapsed, duplicates)
    return Mesh(mesh.points.copy(), cells)


def remove_unused_points(mesh: Mesh) -> Mesh:
    """Drop points no cell references; point-only meshes are left alone."""

    if not mesh.cells:
        return mesh.copy()
    used = sorted({i for cell in mesh.cells for i in cell})
    if len(used) == mesh.n_points:
        return mesh.copy()
    remap = {old: new for new, old in enumerate(used)}
    cells = [tuple(remap[i] for i in cell) for cell in mesh.cells]
    return Mesh(mesh.points[used], cells)


def merge_meshes(inputs: Iterable[MeshInput], world_to_output: Optional[Matrix] = None,
                 tolerance: float = 0.0) -> Mesh:
    """Combine ``(mesh, parent_to_world)`` pairs into one output-frame mesh.

    A ``None`` transform means the mesh is already in world space; a
    ``None`` ``world_to_output`` leaves the result in world space.
    Inputs are appended in the order given, which only decides which
    copy of a duplicate survives.
    """

    world: List[Mesh] = []
    for mesh, to_world in inputs:
        if mesh is None:
            continue
        world.append(mesh.transformed(to_world) if to_world is not None else mesh.copy())

    appended = append_meshes(world)
    merged = merge_points(appended, tolerance)
    cleaned = remove_unused_points(remove_duplicate_cells(merged))
    logger.debug("merged %d meshes: %d -> %d points, %d -> %d cells",
                 len(world), appended.n_points, cleaned.n_points,
                 appended.n_cells, cleaned.n_cells)

    if world_to_output is None:
        return cleaned
    return cleaned.transformed(world_to_output)


__all__ = [
    "MeshInput",
    "merge_points",
    "remove_duplicate_cells",
    "remove_unused_points",
    "merge_meshes",
]
