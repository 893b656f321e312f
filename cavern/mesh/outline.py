"""Boundary loops of a triangulated floor.

An edge is on the boundary when exactly one triangle uses it. Loops are
recovered by walking from vertex to vertex along such edges, consuming
each vertex once.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Mapping, Sequence

from cavern.exceptions import TriangulationError
from cavern.geometry.outline import Outline
from cavern.mesh.triangulate import Triangle, Triangulation

logger = logging.getLogger(__name__)

Adjacency = Mapping[int, Sequence[Triangle]]


def _triangles_of(adjacency: Adjacency, vertex: int) -> Sequence[Triangle]:
    try:
        return adjacency[vertex]
    except KeyError:
        raise TriangulationError(
            f"Vertex {vertex} is missing from the adjacency index"
        ) from None


def is_outline_edge(adjacency: Adjacency, a: int, b: int) -> bool:
    """Return True if exactly one triangle contains both a and b."""
    shared = sum(1 for t in _triangles_of(adjacency, a) if t.contains(b))
    return shared == 1


def connected_outline_vertex(
    adjacency: Adjacency,
    checked: AbstractSet[int],
    vertex: int,
) -> int | None:
    """Find the next unchecked vertex along a boundary edge.

    Triangles are scanned in creation order and their vertices in winding
    order; the first match wins.

    Returns:
        The neighbouring vertex index, or None if there is none.
    """
    for triangle in _triangles_of(adjacency, vertex):
        for other in triangle:
            if (
                other != vertex
                and other not in checked
                and is_outline_edge(adjacency, vertex, other)
            ):
                return other
    return None


def boundary_edges(adjacency: Adjacency) -> set[frozenset[int]]:
    """Return every boundary edge as an unordered vertex pair."""
    counts: dict[frozenset[int], int] = {}
    seen: set[Triangle] = set()
    for triangles in adjacency.values():
        for triangle in triangles:
            if triangle in seen:
                continue
            seen.add(triangle)
            for a, b in triangle.edges():
                edge = frozenset((a, b))
                counts[edge] = counts.get(edge, 0) + 1
    return {edge for edge, count in counts.items() if count == 1}


def extract_outlines(
    n_vertices: int,
    adjacency: Adjacency,
    checked_vertices: AbstractSet[int] = frozenset(),
) -> list[Outline]:
    """Recover the closed boundary loops of a triangle mesh.

    Vertices are visited in ascending order. An unchecked vertex with a
    boundary neighbour starts a new loop, which is followed until no
    unchecked boundary neighbour is left and then closed by repeating the
    start vertex.

    Args:
        n_vertices: Number of vertices in the mesh.
        adjacency: Vertex index to the triangles containing it.
        checked_vertices: Vertices that may not start or extend a loop.
            The set is copied, not modified.

    Returns:
        One Outline per boundary loop.

    Raises:
        TriangulationError: If a vertex has no adjacency entry.
    """
    checked = set(checked_vertices)
    outlines = []

    for start in range(n_vertices):
        if start in checked:
            continue

        current = connected_outline_vertex(adjacency, checked, start)
        checked.add(start)
        if current is None:
            continue

        loop = [start]
        while current is not None:
            loop.append(current)
            checked.add(current)
            current = connected_outline_vertex(adjacency, checked, current)
        loop.append(start)
        outlines.append(Outline(loop))

    logger.debug("Traced %d outlines over %d vertices", len(outlines), n_vertices)
    return outlines


def trace_outlines(triangulation: Triangulation) -> list[Outline]:
    """Convenience function to extract the outlines of a Triangulation."""
    return extract_outlines(
        triangulation.n_vertices,
        triangulation.adjacency,
        triangulation.checked_vertices,
    )
