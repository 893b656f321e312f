"""Generation parameters for the cave pipeline."""

from __future__ import annotations

import math
from typing import Any, Mapping

from cavern.exceptions import ConfigurationError


def _require_int(name: str, value: Any) -> int:
    # bool is an int subclass but never a sensible size
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            f"{name} must be an integer, got {type(value).__name__}"
        )
    return value


def _require_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(
            f"{name} must be a number, got {type(value).__name__}"
        )
    value = float(value)
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
    return value


def validate_dimensions(width: Any, height: Any) -> tuple[int, int]:
    """Check that a field is at least 2x2 cells.

    Returns:
        The validated (width, height).

    Raises:
        ConfigurationError: If either dimension is not an integer > 1.
    """
    width = _require_int("width", width)
    height = _require_int("height", height)
    if width <= 1 or height <= 1:
        raise ConfigurationError(
            f"Field must be at least 2x2 cells, got {width}x{height}"
        )
    return width, height


def validate_fill_percent(fill_percent: Any) -> int:
    """Check that fill_percent is an integer in [0, 100]."""
    fill_percent = _require_int("fill_percent", fill_percent)
    if not 0 <= fill_percent <= 100:
        raise ConfigurationError(
            f"fill_percent must be in [0, 100], got {fill_percent}"
        )
    return fill_percent


def validate_smoothing_steps(smoothing_steps: Any) -> int:
    """Check that smoothing_steps is a non-negative integer."""
    smoothing_steps = _require_int("smoothing_steps", smoothing_steps)
    if smoothing_steps < 0:
        raise ConfigurationError(
            f"smoothing_steps must be >= 0, got {smoothing_steps}"
        )
    return smoothing_steps


def validate_cell_size(cell_size: Any) -> float:
    """Check that cell_size is a positive finite number."""
    cell_size = _require_float("cell_size", cell_size)
    if cell_size <= 0:
        raise ConfigurationError(f"cell_size must be positive, got {cell_size}")
    return cell_size


def validate_wall_height(wall_height: Any) -> float:
    """Check that wall_height is a finite number >= 0."""
    wall_height = _require_float("wall_height", wall_height)
    if wall_height < 0:
        raise ConfigurationError(
            f"wall_height must be >= 0, got {wall_height}"
        )
    return wall_height


class GenerationConfig:
    """Validated parameters for one cave generation.

    All values are checked once, in the constructor, so a config that exists
    is always usable and no stage allocates anything for a bad request.

    Args:
        width: Number of field cells along x. Must be > 1.
        height: Number of field cells along z. Must be > 1.
        fill_percent: Chance (0-100) that an interior cell starts as a wall.
        smoothing_steps: Number of cellular-automaton passes.
        seed: String or integer seed. ``None`` or ``""`` falls back to a
            time-derived seed.
        use_random_seed: Ignore ``seed`` and always use a time-derived seed.
        cell_size: Edge length of one grid cell in world units.
        wall_height: Depth of the extruded walls. 0 gives flat walls.

    Example:
        >>> config = GenerationConfig(width=64, height=48, seed="cave")
        >>> config.fill_percent
        45
        >>> config.replace(fill_percent=50).fill_percent
        50
    """

    _FIELDS = (
        "width",
        "height",
        "fill_percent",
        "smoothing_steps",
        "seed",
        "use_random_seed",
        "cell_size",
        "wall_height",
    )

    def __init__(
        self,
        width: int,
        height: int,
        fill_percent: int = 45,
        smoothing_steps: int = 5,
        seed: str | int | None = None,
        use_random_seed: bool = False,
        cell_size: float = 1.0,
        wall_height: float = 5.0,
    ):
        self._width, self._height = validate_dimensions(width, height)
        self._fill_percent = validate_fill_percent(fill_percent)
        self._smoothing_steps = validate_smoothing_steps(smoothing_steps)
        self._cell_size = validate_cell_size(cell_size)
        self._wall_height = validate_wall_height(wall_height)

        if seed is not None and (
            isinstance(seed, bool) or not isinstance(seed, (str, int))
        ):
            raise ConfigurationError(
                f"seed must be a string or integer, got {type(seed).__name__}"
            )
        self._seed = seed
        self._use_random_seed = bool(use_random_seed)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> GenerationConfig:
        """Create a configuration from a mapping of parameter names.

        Raises:
            ConfigurationError: If the mapping has unknown keys or bad values.
        """
        unknown = set(values) - set(cls._FIELDS)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {sorted(unknown)}"
            )
        return cls(**values)

    @property
    def width(self) -> int:
        """Number of field cells along x."""
        return self._width

    @property
    def height(self) -> int:
        """Number of field cells along z."""
        return self._height

    @property
    def fill_percent(self) -> int:
        """Initial wall probability in percent."""
        return self._fill_percent

    @property
    def smoothing_steps(self) -> int:
        """Number of smoothing passes."""
        return self._smoothing_steps

    @property
    def seed(self) -> str | int | None:
        """Seed as given by the caller."""
        return self._seed

    @property
    def use_random_seed(self) -> bool:
        """Return True if a time-derived seed is requested."""
        return self._use_random_seed

    @property
    def is_reproducible(self) -> bool:
        """Return True if two generations with this config are identical."""
        return not self._use_random_seed and self._seed not in (None, "")

    @property
    def cell_size(self) -> float:
        """Edge length of one grid cell."""
        return self._cell_size

    @property
    def wall_height(self) -> float:
        """Downward extent of the wall mesh."""
        return self._wall_height

    def to_dict(self) -> dict[str, Any]:
        """Return the parameters as a plain dictionary."""
        return {name: getattr(self, name) for name in self._FIELDS}

    def replace(self, **changes: Any) -> GenerationConfig:
        """Return a new configuration with some parameters changed."""
        values = self.to_dict()
        values.update(changes)
        return type(self).from_dict(values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenerationConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(tuple(self.to_dict().items()))

    def __repr__(self) -> str:
        return (
            f"GenerationConfig(size={self._width}x{self._height}, "
            f"fill_percent={self._fill_percent}, "
            f"smoothing_steps={self._smoothing_steps}, seed={self._seed!r}, "
            f"cell_size={self._cell_size}, wall_height={self._wall_height})"
        )
