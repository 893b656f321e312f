"""High-level CaveBuilder API for cave mesh generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cavern.config import GenerationConfig
from cavern.exceptions import CavernError, MeshGenerationError
from cavern.field.automaton import BinaryField, generate_field
from cavern.geometry.outline import Outline
from cavern.mesh.data import MeshData
from cavern.mesh.grid import SquareGrid
from cavern.mesh.outline import trace_outlines
from cavern.mesh.triangulate import Triangulation, triangulate
from cavern.mesh.walls import extrude_walls

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaveResult:
    """Everything produced by one run of the pipeline."""

    field: BinaryField
    grid: SquareGrid
    triangulation: Triangulation
    outlines: list[Outline]
    floor: MeshData
    walls: MeshData

    @property
    def seed(self) -> int | None:
        """Integer seed of the field, None for a user-supplied field."""
        return self.field.seed


def build_from_field(
    field: BinaryField,
    cell_size: float,
    wall_height: float,
) -> CaveResult:
    """Run grid, triangulation, outline and wall stages on a field.

    Args:
        field: Binary field to mesh.
        cell_size: Edge length of one grid cell.
        wall_height: Depth of the extruded walls.

    Returns:
        CaveResult with the floor and wall meshes.
    """
    grid = SquareGrid(field, cell_size)
    triangulation = triangulate(grid)
    outlines = trace_outlines(triangulation)
    walls = extrude_walls(outlines, triangulation.vertices, wall_height)
    return CaveResult(
        field=field,
        grid=grid,
        triangulation=triangulation,
        outlines=outlines,
        floor=triangulation.to_mesh(),
        walls=walls,
    )


def generate(config: GenerationConfig) -> CaveResult:
    """Run the full pipeline for a configuration.

    Field, grid, triangulation, outlines and walls are built in order and the
    result is only returned once every stage has finished.

    Args:
        config: Validated generation parameters.

    Returns:
        CaveResult with all intermediate products and both meshes.
    """
    field = generate_field(
        config.width,
        config.height,
        config.fill_percent,
        config.smoothing_steps,
        seed=config.seed,
        use_random_seed=config.use_random_seed,
    )
    result = build_from_field(field, config.cell_size, config.wall_height)
    logger.info(
        "Generated cave %dx%d (seed=%s): floor %d tris, walls %d tris, "
        "%d outlines",
        config.width,
        config.height,
        result.seed,
        result.floor.n_triangles,
        result.walls.n_triangles,
        len(result.outlines),
    )
    return result


def generate_meshes(config: GenerationConfig) -> tuple[MeshData, MeshData]:
    """Return only the (floor, walls) meshes for a configuration."""
    result = generate(config)
    return result.floor, result.walls


class CaveBuilder:
    """High-level API for building cave floor and wall meshes.

    Collects parameters through chained setters, then runs the whole
    pipeline in :meth:`build`. The last successful result is kept; a failed
    build leaves it untouched, so readers never see a half-built cave.

    Args:
        width: Number of field cells along x.
        height: Number of field cells along z.

    Example:
        >>> from cavern import CaveBuilder
        >>> result = (
        ...     CaveBuilder(64, 48)
        ...     .set_fill_percent(47)
        ...     .set_smoothing_steps(5)
        ...     .set_seed("mountain")
        ...     .set_wall_height(3.0)
        ...     .build()
        ... )
        >>> floor, walls = result.floor, result.walls
    """

    def __init__(self, width: int, height: int):
        self._config = GenerationConfig(width=width, height=height)
        # Pre-built field (set via set_field), bypasses random generation
        self._field: BinaryField | None = None
        self._result: CaveResult | None = None

    @classmethod
    def from_config(cls, config: GenerationConfig) -> CaveBuilder:
        """Create a builder preloaded with a configuration."""
        builder = cls(config.width, config.height)
        builder._config = config
        return builder

    @property
    def config(self) -> GenerationConfig:
        """Current generation parameters."""
        return self._config

    @property
    def result(self) -> CaveResult | None:
        """Result of the last successful build, or None."""
        return self._result

    def _update(self, **changes) -> CaveBuilder:
        self._config = self._config.replace(**changes)
        return self

    def set_size(self, width: int, height: int) -> CaveBuilder:
        """Set the field dimensions in cells.

        Returns:
            Self for method chaining.
        """
        return self._update(width=width, height=height)

    def set_fill_percent(self, fill_percent: int) -> CaveBuilder:
        """Set the initial wall probability (0-100).

        Returns:
            Self for method chaining.
        """
        return self._update(fill_percent=fill_percent)

    def set_smoothing_steps(self, smoothing_steps: int) -> CaveBuilder:
        """Set the number of smoothing passes.

        Returns:
            Self for method chaining.
        """
        return self._update(smoothing_steps=smoothing_steps)

    def set_seed(self, seed: str | int | None) -> CaveBuilder:
        """Set a reproducible seed and turn random seeding off.

        Returns:
            Self for method chaining.
        """
        return self._update(seed=seed, use_random_seed=False)

    def use_random_seed(self, enabled: bool = True) -> CaveBuilder:
        """Use a time-derived seed on every build.

        Returns:
            Self for method chaining.
        """
        return self._update(use_random_seed=enabled)

    def set_cell_size(self, cell_size: float) -> CaveBuilder:
        """Set the edge length of one grid cell.

        Returns:
            Self for method chaining.
        """
        return self._update(cell_size=cell_size)

    def set_wall_height(self, wall_height: float) -> CaveBuilder:
        """Set the depth of the extruded walls.

        Returns:
            Self for method chaining.
        """
        return self._update(wall_height=wall_height)

    def set_field(self, field: BinaryField | None) -> CaveBuilder:
        """Mesh a given field instead of generating one.

        Pass None to go back to random generation. The field size replaces
        the configured width and height.

        Returns:
            Self for method chaining.
        """
        self._field = field
        if field is not None:
            self._update(width=field.width, height=field.height)
        return self

    def build(self) -> CaveResult:
        """Run the pipeline and return the result.

        Returns:
            CaveResult with the field, intermediate products and both meshes.

        Raises:
            ConfigurationError: If the parameters are invalid.
            TriangulationError: If an internal invariant is broken.
            MeshGenerationError: If any other step fails.
        """
        try:
            if self._field is None:
                result = generate(self._config)
            else:
                result = build_from_field(
                    self._field, self._config.cell_size, self._config.wall_height
                )
        except CavernError:
            raise
        except Exception as e:
            raise MeshGenerationError(f"Cave generation failed: {e}") from e

        self._result = result
        return result

    def get_mesh_info(self) -> dict:
        """Return information about the configuration and last build.

        Returns:
            Dictionary with configuration and mesh statistics.
        """
        info = self._config.to_dict()
        info["custom_field"] = self._field is not None

        if self._result is not None:
            info.update(
                {
                    "seed_used": self._result.seed,
                    "floor_vertices": self._result.floor.n_vertices,
                    "floor_triangles": self._result.floor.n_triangles,
                    "wall_vertices": self._result.walls.n_vertices,
                    "wall_triangles": self._result.walls.n_triangles,
                    "n_outlines": len(self._result.outlines),
                }
            )

        return info
