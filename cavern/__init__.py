"""cavern - cellular-automaton caves as floor and wall meshes.

Generates a random binary field, smooths it with a cellular automaton,
contours it with marching squares and extrudes the boundary loops into
walls.

Example:
    >>> from cavern import CaveBuilder
    >>> result = (
    ...     CaveBuilder(96, 64)
    ...     .set_fill_percent(47)
    ...     .set_smoothing_steps(5)
    ...     .set_seed("granite")
    ...     .set_wall_height(5.0)
    ...     .build()
    ... )
    >>> from cavern.io import save_obj
    >>> save_obj("cave.obj", result.floor, result.walls)
"""

from cavern.config import GenerationConfig
from cavern.exceptions import (
    CavernError,
    ConfigurationError,
    DataLoadError,
    ExportError,
    MeshGenerationError,
    TriangulationError,
)
from cavern.field import BinaryField, generate_field
from cavern.geometry import Outline
from cavern.mesh import (
    CaveBuilder,
    CaveResult,
    MeshData,
    generate,
    generate_meshes,
)

__version__ = "0.1.0"

__all__ = [
    # Main API
    "CaveBuilder",
    "CaveResult",
    "GenerationConfig",
    "generate",
    "generate_meshes",
    "generate_field",
    "BinaryField",
    "MeshData",
    "Outline",
    # Exceptions
    "CavernError",
    "ConfigurationError",
    "TriangulationError",
    "MeshGenerationError",
    "DataLoadError",
    "ExportError",
]
