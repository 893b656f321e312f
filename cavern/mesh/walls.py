"""Vertical wall quads extruded down from floor outlines."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from cavern.config import validate_wall_height
from cavern.geometry.outline import Outline
from cavern.mesh.data import MeshData

logger = logging.getLogger(__name__)

UP = np.array([0.0, 1.0, 0.0])

# Per-quad vertex order is top-left, top-right, bottom-left, bottom-right
_QUAD_TRIANGLES = np.array([[0, 2, 3], [3, 1, 0]], dtype=np.int64)


def extrude_walls(
    outlines: Sequence[Outline | Sequence[int]],
    vertices: np.ndarray,
    wall_height: float,
) -> MeshData:
    """Build the wall mesh for a set of closed outlines.

    Every outline edge gets its own four vertices, so the wall mesh shares
    no indices with the floor or between segments.

    Args:
        outlines: Closed loops of floor vertex indices.
        vertices: Floor vertex positions, shape (n, 3).
        wall_height: How far the walls reach below the floor (>= 0).

    Returns:
        MeshData with 4 vertices and 2 triangles per outline edge.

    Raises:
        ConfigurationError: If wall_height is negative or not finite.
    """
    wall_height = validate_wall_height(wall_height)
    vertices = np.asarray(vertices, dtype=np.float64)
    drop = UP * wall_height

    starts = []
    ends = []
    for outline in outlines:
        indices = np.asarray(list(outline), dtype=np.int64)
        starts.append(indices[:-1])
        ends.append(indices[1:])

    if sum(len(s) for s in starts) == 0:
        return MeshData(
            np.zeros((0, 3)), np.zeros((0, 3), dtype=np.int64), name="walls"
        )

    top_left = vertices[np.concatenate(starts)]
    top_right = vertices[np.concatenate(ends)]
    n_segments = len(top_left)

    wall_vertices = np.stack(
        [top_left, top_right, top_left - drop, top_right - drop], axis=1
    ).reshape(-1, 3)

    offsets = (np.arange(n_segments, dtype=np.int64) * 4)[:, np.newaxis, np.newaxis]
    wall_triangles = (offsets + _QUAD_TRIANGLES).reshape(-1, 3)

    logger.debug(
        "Extruded %d wall segments from %d outlines", n_segments, len(outlines)
    )
    return MeshData(wall_vertices, wall_triangles, name="walls")
