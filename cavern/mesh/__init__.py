"""Mesh generation utilities."""

from cavern.mesh.builder import (
    CaveBuilder,
    CaveResult,
    build_from_field,
    generate,
    generate_meshes,
)
from cavern.mesh.data import MeshData
from cavern.mesh.grid import (
    NodeKind,
    Square,
    SquareGrid,
    build_grid,
    configuration_index,
)
from cavern.mesh.outline import (
    boundary_edges,
    connected_outline_vertex,
    extract_outlines,
    is_outline_edge,
    trace_outlines,
)
from cavern.mesh.triangulate import (
    CONFIGURATION_TABLE,
    Triangle,
    Triangulation,
    triangulate,
)
from cavern.mesh.walls import extrude_walls

__all__ = [
    "CaveBuilder",
    "CaveResult",
    "build_from_field",
    "generate",
    "generate_meshes",
    "MeshData",
    "NodeKind",
    "Square",
    "SquareGrid",
    "build_grid",
    "configuration_index",
    "boundary_edges",
    "connected_outline_vertex",
    "extract_outlines",
    "is_outline_edge",
    "trace_outlines",
    "CONFIGURATION_TABLE",
    "Triangle",
    "Triangulation",
    "triangulate",
    "extrude_walls",
]
