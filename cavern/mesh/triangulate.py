"""Marching-squares triangulation of a SquareGrid.

Each square is looked up in a 16-entry table by its configuration index.
The table gives the polygon covering the wall part of the cell, which is
emitted as a triangle fan. Vertices are assigned lazily: a node gets a
vertex index the first time a triangle uses it, and every later triangle
reuses that index, so nodes shared between squares become one vertex.

All polygons share one winding, so every floor normal points along +y.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import NamedTuple, Sequence

import numpy as np

from cavern.exceptions import TriangulationError
from cavern.mesh.data import MeshData
from cavern.mesh.grid import Square, SquareGrid

logger = logging.getLogger(__name__)

UNASSIGNED = -1

FULL_CONFIGURATION = 15

CONFIGURATION_TABLE: tuple[tuple[str, ...], ...] = (
    # 0: no walls
    (),
    # one corner
    ("left", "bottom", "bottom_left"),
    ("bottom_right", "bottom", "right"),
    # 3: bottom edge
    ("right", "bottom_right", "bottom_left", "left"),
    ("top_right", "right", "top"),
    # 5: saddle
    ("top", "top_right", "right", "bottom", "bottom_left", "left"),
    # 6: right edge
    ("top", "top_right", "bottom_right", "bottom"),
    ("top", "top_right", "bottom_right", "bottom_left", "left"),
    ("top_left", "top", "left"),
    # 9: left edge
    ("top_left", "top", "bottom", "bottom_left"),
    # 10: saddle
    ("top_left", "top", "right", "bottom_right", "bottom", "left"),
    ("top_left", "top", "right", "bottom_right", "bottom_left"),
    # 12: top edge
    ("top_left", "top_right", "right", "left"),
    ("top_left", "top_right", "right", "bottom", "bottom_left"),
    ("top_left", "top_right", "bottom_right", "bottom", "left"),
    # 15: solid
    ("top_left", "top_right", "bottom_right", "bottom_left"),
)


class Triangle(NamedTuple):
    """Three vertex indices."""

    a: int
    b: int
    c: int

    def contains(self, vertex: int) -> bool:
        """Return True if the triangle uses the given vertex."""
        return vertex == self.a or vertex == self.b or vertex == self.c

    def edges(self) -> tuple[tuple[int, int], ...]:
        """Return the three directed edges in winding order."""
        return ((self.a, self.b), (self.b, self.c), (self.c, self.a))


def fan(points: Sequence[int]) -> list[tuple[int, int, int]]:
    """Split a convex polygon into a fan around its first point."""
    return [
        (points[0], points[i], points[i + 1]) for i in range(1, len(points) - 1)
    ]


@dataclass
class Triangulation:
    """Floor mesh of a grid plus the lookups the outline tracer needs.

    Attributes:
        vertices: Vertex positions, shape (n_vertices, 3).
        triangles: Vertex indices per triangle, shape (n_triangles, 3).
        adjacency: Vertex index to the triangles that contain it, in
            creation order.
        checked_vertices: Corners of fully walled squares. No outline can
            pass through them.
        vertex_of_node: Vertex index per grid node, -1 for unused nodes.
    """

    vertices: np.ndarray
    triangles: np.ndarray
    adjacency: dict[int, list[Triangle]]
    checked_vertices: frozenset[int]
    vertex_of_node: np.ndarray

    @property
    def n_vertices(self) -> int:
        """Number of floor vertices."""
        return len(self.vertices)

    @property
    def n_triangles(self) -> int:
        """Number of floor triangles."""
        return len(self.triangles)

    def triangles_containing(self, vertex: int) -> list[Triangle]:
        """Return the triangles that use a vertex.

        Raises:
            TriangulationError: If the vertex has no adjacency entry.
        """
        try:
            return self.adjacency[vertex]
        except KeyError:
            raise TriangulationError(
                f"Vertex {vertex} is missing from the adjacency index"
            ) from None

    def to_mesh(self, name: str | None = "floor") -> MeshData:
        """Return the floor as a MeshData."""
        return MeshData(self.vertices, self.triangles, name=name)


@dataclass
class _TriangulationContext:
    """Mutable state of a single triangulate() call."""

    grid: SquareGrid
    vertex_of_node: np.ndarray
    positions: list[np.ndarray] = field(default_factory=list)
    triangles: list[Triangle] = field(default_factory=list)
    adjacency: dict[int, list[Triangle]] = field(
        default_factory=lambda: defaultdict(list)
    )
    checked: set[int] = field(default_factory=set)

    def vertex(self, node_id: int) -> int:
        index = int(self.vertex_of_node[node_id])
        if index == UNASSIGNED:
            index = len(self.positions)
            self.vertex_of_node[node_id] = index
            self.positions.append(self.grid.position(node_id))
        return index

    def add_triangle(self, a: int, b: int, c: int) -> None:
        triangle = Triangle(a, b, c)
        self.triangles.append(triangle)
        for vertex in triangle:
            self.adjacency[vertex].append(triangle)

    def mesh_from_points(self, node_ids: Sequence[int]) -> None:
        vertices = [self.vertex(node_id) for node_id in node_ids]
        for a, b, c in fan(vertices):
            self.add_triangle(a, b, c)


def _triangulate_square(context: _TriangulationContext, square: Square) -> None:
    index = square.configuration_index
    if not 0 <= index < len(CONFIGURATION_TABLE):
        raise TriangulationError(
            f"Square ({square.x}, {square.y}) has configuration index {index}, "
            f"expected 0-15"
        )

    roles = CONFIGURATION_TABLE[index]
    if not roles:
        return

    context.mesh_from_points([getattr(square, role) for role in roles])

    if index == FULL_CONFIGURATION:
        for node_id in square.corners:
            context.checked.add(int(context.vertex_of_node[node_id]))


def triangulate(grid: SquareGrid) -> Triangulation:
    """Triangulate every square of a grid.

    Squares are processed x outer, y inner, so vertex numbering is
    deterministic for a given field.

    Args:
        grid: Grid to triangulate.

    Returns:
        Triangulation holding the floor buffers and adjacency index.

    Raises:
        TriangulationError: If a square carries an invalid configuration index.
    """
    context = _TriangulationContext(
        grid=grid,
        vertex_of_node=np.full(grid.node_count, UNASSIGNED, dtype=np.int64),
    )
    for square in grid.squares():
        _triangulate_square(context, square)

    if context.positions:
        vertices = np.array(context.positions, dtype=np.float64)
    else:
        vertices = np.zeros((0, 3), dtype=np.float64)
    triangles = np.array(context.triangles, dtype=np.int64).reshape(-1, 3)

    logger.debug(
        "Triangulated %d squares: %d vertices, %d triangles",
        grid.shape[0] * grid.shape[1],
        len(vertices),
        len(triangles),
    )

    context.vertex_of_node.flags.writeable = False
    return Triangulation(
        vertices=vertices,
        triangles=triangles,
        adjacency=dict(context.adjacency),
        checked_vertices=frozenset(context.checked),
        vertex_of_node=context.vertex_of_node,
    )
