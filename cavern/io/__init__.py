"""I/O utilities for reading fields and writing meshes."""

from cavern.io.readers import FieldReader, read_field
from cavern.io.writers import load_npz, save_gmsh, save_npz, save_obj

__all__ = [
    "FieldReader",
    "read_field",
    "load_npz",
    "save_gmsh",
    "save_npz",
    "save_obj",
]
