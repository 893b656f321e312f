"""Triangle mesh container."""

from __future__ import annotations

import numpy as np

from cavern.exceptions import MeshGenerationError


class MeshData:
    """Vertex and triangle buffers of one mesh.

    Args:
        vertices: Vertex positions, shape (n, 3).
        triangles: Vertex indices, shape (m, 3).
        name: Optional name used in exports.

    Raises:
        MeshGenerationError: If the buffers have the wrong shape or a
            triangle references a vertex that does not exist.
    """

    def __init__(
        self,
        vertices: np.ndarray,
        triangles: np.ndarray,
        name: str | None = None,
    ):
        vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        triangles = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)

        if len(triangles) and (
            triangles.min() < 0 or triangles.max() >= len(vertices)
        ):
            raise MeshGenerationError(
                f"Triangle indices must be in [0, {len(vertices)}), got range "
                f"[{triangles.min()}, {triangles.max()}]"
            )

        self._vertices = vertices
        self._triangles = triangles
        self.name = name

    @property
    def vertices(self) -> np.ndarray:
        """Vertex positions, shape (n_vertices, 3)."""
        return self._vertices

    @property
    def triangles(self) -> np.ndarray:
        """Triangle vertex indices, shape (n_triangles, 3)."""
        return self._triangles

    @property
    def n_vertices(self) -> int:
        """Number of vertices."""
        return len(self._vertices)

    @property
    def n_triangles(self) -> int:
        """Number of triangles."""
        return len(self._triangles)

    @property
    def is_empty(self) -> bool:
        """Return True if the mesh has no triangles."""
        return self.n_triangles == 0

    @property
    def bounds(self) -> tuple[np.ndarray, np.ndarray] | None:
        """Return (min_corner, max_corner), or None for an empty mesh."""
        if self.n_vertices == 0:
            return None
        return self._vertices.min(axis=0), self._vertices.max(axis=0)

    def _face_cross(self) -> np.ndarray:
        v = self._vertices
        t = self._triangles
        return np.cross(v[t[:, 1]] - v[t[:, 0]], v[t[:, 2]] - v[t[:, 0]])

    def face_normals(self) -> np.ndarray:
        """Unit normal per triangle, zero for degenerate triangles.

        Normals follow the right-hand rule on the stored winding, so the
        floor triangles point along +y.
        """
        cross = self._face_cross()
        length = np.linalg.norm(cross, axis=1, keepdims=True)
        return np.divide(
            cross, length, out=np.zeros_like(cross), where=length > 0
        )

    def vertex_normals(self) -> np.ndarray:
        """Area-weighted unit normal per vertex.

        Vertices that belong to no (non-degenerate) triangle get a zero
        normal.
        """
        normals = np.zeros_like(self._vertices)
        if self.n_triangles:
            cross = self._face_cross()
            for corner in range(3):
                np.add.at(normals, self._triangles[:, corner], cross)
        length = np.linalg.norm(normals, axis=1, keepdims=True)
        return np.divide(
            normals, length, out=np.zeros_like(normals), where=length > 0
        )

    @property
    def surface_area(self) -> float:
        """Total area of all triangles."""
        if self.is_empty:
            return 0.0
        return float(np.linalg.norm(self._face_cross(), axis=1).sum() / 2)

    def copy(self) -> MeshData:
        """Return a deep copy."""
        return MeshData(self._vertices.copy(), self._triangles.copy(), self.name)

    def __repr__(self) -> str:
        return (
            f"MeshData(name={self.name!r}, n_vertices={self.n_vertices}, "
            f"n_triangles={self.n_triangles})"
        )
