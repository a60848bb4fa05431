"""Polygon mesh value type shared by the mesh tools."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import trimesh

from dynmodeler.xform import Matrix

Cell = Tuple[int, ...]


class Mesh:
    """Points plus polygonal cells that index into them.

    ``points`` is an ``(N, 3)`` float array.  Each cell is a tuple of
    point indices; polygons of any size are allowed, so a quad stays a
    quad through merging.
    """

    def __init__(self, points=None, cells: Optional[Iterable[Sequence[int]]] = None):
        if points is None:
            pts = np.zeros((0, 3), dtype=float)
        else:
            pts = np.asarray(points, dtype=float)
            if pts.size == 0:
                pts = np.zeros((0, 3), dtype=float)
            elif pts.ndim != 2 or pts.shape[1] != 3:
                raise ValueError(f"points must have shape (N, 3), got {pts.shape}")
        self.points = pts
        self.cells: List[Cell] = [tuple(int(i) for i in cell) for cell in (cells or [])]
        n = len(self.points)
        for cell in self.cells:
            for idx in cell:
                if idx < 0 or idx >= n:
                    raise ValueError(f"cell {cell} references missing point {idx}")

    def __repr__(self) -> str:
        return f"Mesh(n_points={self.n_points}, n_cells={self.n_cells})"

    @property
    def n_points(self) -> int:
        return int(len(self.points))

    @property
    def n_cells(self) -> int:
        return len(self.cells)

    @property
    def is_empty(self) -> bool:
        return self.n_points == 0

    def copy(self) -> "Mesh":
        return Mesh(self.points.copy(), list(self.cells))

    def transformed(self, matrix: Matrix) -> "Mesh":
        """Return a copy with every point mapped through ``matrix``."""

        if self.is_empty:
            return self.copy()
        m = matrix.as_array()
        homo = np.hstack([self.points, np.ones((self.n_points, 1))])
        out = homo @ m.T
        w = out[:, 3:4]
        return Mesh(out[:, :3] / w, list(self.cells))

    def bounds(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        if self.is_empty:
            return None
        return self.points.min(axis=0), self.points.max(axis=0)

    def triangles(self) -> List[Tuple[int, int, int]]:
        """Fan-triangulate every polygon cell."""

        tris = []
        for cell in self.cells:
            for k in range(1, len(cell) - 1):
                tris.append((cell[0], cell[k], cell[k + 1]))
        return tris

    @classmethod
    def from_trimesh(cls, tm: "trimesh.Trimesh") -> "Mesh":
        return cls(np.asarray(tm.vertices, dtype=float),
                   [tuple(face) for face in np.asarray(tm.faces, dtype=np.int64).tolist()])

    def to_trimesh(self) -> "trimesh.Trimesh":
        tris = self.triangles()
        faces = np.asarray(tris, dtype=np.int64) if tris else np.zeros((0, 3), dtype=np.int64)
        return trimesh.Trimesh(vertices=self.points.copy(), faces=faces, process=False)


def append_meshes(meshes: Iterable[Mesh]) -> Mesh:
    """Concatenate meshes in order, offsetting cell indices."""

    blocks = []
    cells: List[Cell] = []
    offset = 0
    for mesh in meshes:
        if mesh.is_empty:
            continue
        blocks.append(mesh.points)
        cells.extend(tuple(i + offset for i in cell) for cell in mesh.cells)
        offset += mesh.n_points
    if not blocks:
        return Mesh()
    return Mesh(np.vstack(blocks), cells)


def same_geometry(a: Mesh, b: Mesh) -> bool:
    """Exact comparison of point coordinates and cell connectivity."""

    return (a.points.shape == b.points.shape
            and bool(np.array_equal(a.points, b.points))
            and a.cells == b.cells)


__all__ = ["Cell", "Mesh", "append_meshes", "same_geometry"]
