"""
Random Cave Demo

This script generates a cave with cavern and exports the floor and wall
meshes.

Usage:
    python random_cave.py [seed]

The script will:
1. Fill a 96x64 field at random and smooth it with 5 automaton passes
2. Triangulate the walls with marching squares
3. Trace the outlines and extrude them into wall quads
4. Save both meshes as OBJ and NPZ next to this script
"""

import logging
import sys
from pathlib import Path

from cavern import CaveBuilder
from cavern.io import save_npz, save_obj


def main(seed="granite"):
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    width, height = 96, 64
    fill_percent = 47

    print("Building cave...")
    print(f"  Field: {width}x{height} cells, {fill_percent}% fill")
    print(f"  Seed: {seed!r}")

    builder = (
        CaveBuilder(width, height)
        .set_fill_percent(fill_percent)
        .set_smoothing_steps(5)
        .set_seed(seed)
        .set_cell_size(1.0)
        .set_wall_height(5.0)
    )
    result = builder.build()

    info = builder.get_mesh_info()
    print(f"\nCave generated successfully:")
    print(f"  Floor: {info['floor_vertices']} vertices, {info['floor_triangles']} triangles")
    print(f"  Walls: {info['wall_vertices']} vertices, {info['wall_triangles']} triangles")
    print(f"  Outlines: {info['n_outlines']}")

    output_dir = Path(__file__).parent
    save_obj(output_dir / "random_cave.obj", result.floor, result.walls)
    save_npz(output_dir / "random_cave.npz", result.floor, result.walls)
    print(f"\nMeshes saved to: {output_dir}")

    return result


if __name__ == "__main__":
    main(*sys.argv[1:2])
