import sys

import pytest

from cavern import CavernError, Outline, TriangulationError
from cavern.field import generate_field
from cavern.mesh import (
    SquareGrid,
    Triangle,
    boundary_edges,
    connected_outline_vertex,
    extract_outlines,
    is_outline_edge,
    trace_outlines,
    triangulate,
)


def adjacency_of(*triangles):
    adjacency = {}
    for triangle in triangles:
        for vertex in triangle:
            adjacency.setdefault(vertex, []).append(triangle)
    return adjacency


QUAD = adjacency_of(Triangle(0, 1, 2), Triangle(0, 2, 3))


def edge_counts(outlines):
    counts = {}
    for outline in outlines:
        for a, b in outline.edges():
            edge = frozenset((a, b))
            counts[edge] = counts.get(edge, 0) + 1
    return counts


def test_outline_edge_classification():
    assert is_outline_edge(QUAD, 0, 1)
    assert is_outline_edge(QUAD, 2, 3)
    assert not is_outline_edge(QUAD, 0, 2)


def test_connected_outline_vertex_skips_checked():
    assert connected_outline_vertex(QUAD, set(), 0) == 1
    assert connected_outline_vertex(QUAD, {1}, 0) == 3
    assert connected_outline_vertex(QUAD, {1, 3}, 0) is None


def test_quad_outline():
    outlines = extract_outlines(4, QUAD)
    assert outlines == [Outline([0, 1, 2, 3, 0])]


def test_checked_vertices_are_not_modified():
    checked = {3}
    extract_outlines(4, QUAD, checked)
    assert checked == {3}


def test_missing_adjacency_is_an_invariant_violation():
    adjacency = {0: [Triangle(0, 1, 2)]}
    with pytest.raises(TriangulationError):
        extract_outlines(3, adjacency)


def test_room_has_outer_and_inner_outline(ring_triangulation):
    outlines = trace_outlines(ring_triangulation)
    assert len(outlines) == 2
    assert all(outline.is_closed for outline in outlines)
    assert sorted(outline.n_edges for outline in outlines) == [12, 16]


def test_room_outlines_cover_every_boundary_edge_once(ring_triangulation):
    outlines = trace_outlines(ring_triangulation)
    edges = boundary_edges(ring_triangulation.adjacency)
    assert len(edges) == 28
    counts = edge_counts(outlines)
    assert set(counts) == edges
    assert all(count == 1 for count in counts.values())


def test_fully_walled_field_has_no_outlines(solid_field):
    triangulation = triangulate(SquareGrid(solid_field, 1.0))
    assert trace_outlines(triangulation) == []


@pytest.mark.parametrize("seed", ["a", "b", "c", "d"])
def test_cave_contours_are_closed_and_traced_once(seed):
    field = generate_field(36, 28, fill_percent=48, smoothing_steps=5, seed=seed)
    grid = SquareGrid(field, 1.0)
    triangulation = triangulate(grid)
    outlines = trace_outlines(triangulation)
    assert all(outline.is_closed for outline in outlines)

    # Contour edges inside the grid join two edge midpoints
    corner_vertices = {
        int(v)
        for v in triangulation.vertex_of_node[: grid.node_count // 3]
        if v >= 0
    }
    contour = {
        edge
        for edge in boundary_edges(triangulation.adjacency)
        if not edge & corner_vertices
    }
    counts = edge_counts(outlines)
    for edge in contour:
        assert counts.get(edge) == 1


def test_long_outline_does_not_recurse():
    # The outer ring of a 300x300 room has more vertices than the
    # default recursion limit
    field = generate_field(300, 300, fill_percent=0, smoothing_steps=0, seed="x")
    triangulation = triangulate(SquareGrid(field, 1.0))
    outlines = trace_outlines(triangulation)
    assert max(o.n_edges for o in outlines) > sys.getrecursionlimit()
    assert len(outlines) == 2


def test_outline_geometry(ring_triangulation):
    outlines = trace_outlines(ring_triangulation)
    vertices = ring_triangulation.vertices
    outer, inner = sorted(outlines, key=lambda o: o.n_edges, reverse=True)
    # Corners span [-2, 2]; the room is a 3x3 square with cut corners
    assert outer.area(vertices) == pytest.approx(16.0)
    assert inner.area(vertices) == pytest.approx(3 * 3 - 4 * 0.125)
    assert outer.to_shapely(vertices).is_valid
    assert outer.coords(vertices).shape == (17, 2)


def test_outline_requires_closure():
    with pytest.raises(CavernError, match="not closed"):
        Outline([0, 1, 2])
    assert Outline.from_open([0, 1, 2]) == [0, 1, 2, 0]
