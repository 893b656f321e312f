"""Mesh export utilities."""

from __future__ import annotations

import logging
from pathlib import Path

import gmsh
import numpy as np

from cavern.exceptions import ExportError
from cavern.mesh.data import MeshData

logger = logging.getLogger(__name__)

# gmsh element type of a 3-node triangle
_GMSH_TRIANGLE = 2


def _prepare(path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def save_npz(path: str | Path, floor: MeshData, walls: MeshData) -> None:
    """Save floor and wall buffers to a compressed numpy archive.

    Args:
        path: Output path (typically .npz extension).
        floor: Floor mesh.
        walls: Wall mesh.

    Example:
        >>> save_npz("output/cave.npz", result.floor, result.walls)
        >>> floor, walls = load_npz("output/cave.npz")
    """
    path = _prepare(path)
    try:
        np.savez_compressed(
            path,
            floor_vertices=floor.vertices,
            floor_triangles=floor.triangles,
            wall_vertices=walls.vertices,
            wall_triangles=walls.triangles,
        )
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e
    logger.info("NPZ written: %s", path)


def load_npz(path: str | Path) -> tuple[MeshData, MeshData]:
    """Load floor and wall meshes saved with save_npz().

    Returns:
        Tuple of (floor, walls).
    """
    with np.load(Path(path)) as data:
        floor = MeshData(
            data["floor_vertices"], data["floor_triangles"], name="floor"
        )
        walls = MeshData(data["wall_vertices"], data["wall_triangles"], name="walls")
    return floor, walls


def save_obj(path: str | Path, *meshes: MeshData) -> None:
    """Write one or more meshes to a Wavefront OBJ file.

    Each mesh becomes an ``o`` object; face indices are 1-based and
    continue across objects.

    Args:
        path: Output path (typically .obj extension).
        *meshes: Meshes to write.
    """
    path = _prepare(path)
    offset = 1
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write("# cavern mesh export\n")
            for i, mesh in enumerate(meshes):
                f.write(f"o {mesh.name or f'mesh_{i}'}\n")
                for x, y, z in mesh.vertices:
                    f.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
                for a, b, c in mesh.triangles + offset:
                    f.write(f"f {a} {b} {c}\n")
                offset += mesh.n_vertices
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e

    logger.info(
        "OBJ written: %s (%d verts, %d faces)",
        path,
        sum(m.n_vertices for m in meshes),
        sum(m.n_triangles for m in meshes),
    )


def save_gmsh(
    path: str | Path,
    mesh: MeshData,
    mesh_format: str = "msh2",
) -> None:
    """Write a mesh through gmsh as a discrete surface.

    The output format follows the file extension (e.g. ``.msh``, ``.stl``,
    ``.vtk``).

    Args:
        path: Output path.
        mesh: Mesh to write. Must not be empty.
        mesh_format: Gmsh mesh format version for .msh files ('msh2' or
            'msh4'). Default: 'msh2'.

    Raises:
        ExportError: If the mesh is empty or gmsh fails.
    """
    if mesh.is_empty:
        raise ExportError("Cannot export an empty mesh")

    path = _prepare(path)
    gmsh.initialize()
    try:
        gmsh.option.setNumber("General.Terminal", 0)
        if mesh_format == "msh2":
            gmsh.option.setNumber("Mesh.MshFileVersion", 2.2)
        elif mesh_format == "msh4":
            gmsh.option.setNumber("Mesh.MshFileVersion", 4.1)

        gmsh.model.add(mesh.name or "cavern")
        surface = gmsh.model.addDiscreteEntity(2)

        node_tags = np.arange(1, mesh.n_vertices + 1)
        gmsh.model.mesh.addNodes(2, surface, node_tags, mesh.vertices.ravel())

        element_tags = np.arange(1, mesh.n_triangles + 1)
        gmsh.model.mesh.addElementsByType(
            surface, _GMSH_TRIANGLE, element_tags, (mesh.triangles + 1).ravel()
        )

        group = gmsh.model.addPhysicalGroup(2, [surface])
        gmsh.model.setPhysicalName(2, group, mesh.name or "surface")

        gmsh.write(str(path))
    except Exception as e:
        raise ExportError(f"gmsh export to {path} failed: {e}") from e
    finally:
        gmsh.finalize()

    logger.info("gmsh mesh written: %s", path)
