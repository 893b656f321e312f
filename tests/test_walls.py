import numpy as np
import pytest

from cavern import ConfigurationError, Outline
from cavern.mesh import extrude_walls, trace_outlines

SQUARE = np.array(
    [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 0.0, 1.0], [0.0, 0.0, 1.0]]
)


def test_wall_sizes_per_outline(ring_triangulation):
    outlines = trace_outlines(ring_triangulation)
    walls = extrude_walls(outlines, ring_triangulation.vertices, 2.0)
    n_edges = sum(len(outline) - 1 for outline in outlines)
    assert walls.n_vertices == 4 * n_edges == 4 * 28
    assert walls.n_triangles == 2 * n_edges


def test_quad_vertices_and_winding():
    walls = extrude_walls([Outline([0, 1, 2, 3, 0])], SQUARE, 3.0)
    assert walls.n_vertices == 16
    first = walls.vertices[:4]
    assert np.allclose(first[0], SQUARE[0])
    assert np.allclose(first[1], SQUARE[1])
    assert np.allclose(first[2], SQUARE[0] - [0.0, 3.0, 0.0])
    assert np.allclose(first[3], SQUARE[1] - [0.0, 3.0, 0.0])
    assert walls.triangles[:2].tolist() == [[0, 2, 3], [3, 1, 0]]
    assert walls.triangles[2:4].tolist() == [[4, 6, 7], [7, 5, 4]]


def test_segments_do_not_share_vertices():
    walls = extrude_walls([[0, 1, 2, 3, 0]], SQUARE, 1.0)
    for segment in range(4):
        quad = walls.triangles[2 * segment : 2 * segment + 2]
        assert set(quad.ravel()) == set(range(4 * segment, 4 * segment + 4))


def test_wall_normals_are_horizontal():
    walls = extrude_walls([[0, 1, 2, 3, 0]], SQUARE, 1.0)
    normals = walls.face_normals()
    assert np.allclose(normals[:, 1], 0.0)
    assert np.allclose(np.linalg.norm(normals, axis=1), 1.0)
    # Both halves of a quad face the same way
    assert np.allclose(normals[0::2], normals[1::2])


def test_zero_height_keeps_counts():
    walls = extrude_walls([[0, 1, 2, 3, 0]], SQUARE, 0.0)
    assert walls.n_vertices == 16
    assert walls.surface_area == 0.0


def test_no_outlines_gives_empty_mesh():
    walls = extrude_walls([], SQUARE, 1.0)
    assert walls.is_empty
    assert walls.n_vertices == 0


def test_negative_height_is_rejected():
    with pytest.raises(ConfigurationError):
        extrude_walls([[0, 1, 2, 3, 0]], SQUARE, -1.0)
