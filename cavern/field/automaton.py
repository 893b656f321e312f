"""Binary cave fields from random fill and cellular-automaton smoothing."""

from __future__ import annotations

import hashlib
import logging
import time

import numpy as np
from scipy import ndimage

from cavern.config import (
    validate_dimensions,
    validate_fill_percent,
    validate_smoothing_steps,
)
from cavern.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

WALL = 1
EMPTY = 0

# Moore neighbourhood without the centre cell
_NEIGHBOUR_KERNEL = np.array(
    [[1, 1, 1], [1, 0, 1], [1, 1, 1]],
    dtype=np.int16,
)

_SEED_MASK = (1 << 64) - 1


class BinaryField:
    """Immutable W x H grid of walls (1) and empty cells (0).

    Values are indexed ``field[x, y]``. Every border cell is a wall; the
    constructor refuses arrays that break this.

    Args:
        values: Array of shape (width, height) holding only 0 and 1.
        seed: Integer seed the field was generated from, if any.

    Raises:
        ConfigurationError: If the array is not a valid binary field.
    """

    def __init__(self, values: np.ndarray, seed: int | None = None):
        array = np.asarray(values)
        if array.ndim != 2:
            raise ConfigurationError(
                f"Field must be a 2D array, got {array.ndim} dimensions"
            )
        validate_dimensions(int(array.shape[0]), int(array.shape[1]))
        if not np.isin(array, (EMPTY, WALL)).all():
            raise ConfigurationError("Field values must be 0 or 1")

        array = array.astype(np.uint8, copy=True)
        border = np.concatenate(
            [array[0, :], array[-1, :], array[:, 0], array[:, -1]]
        )
        if not (border == WALL).all():
            raise ConfigurationError("Field border cells must all be walls")

        array.flags.writeable = False
        self._values = array
        self._seed = seed

    @classmethod
    def from_array(cls, values: np.ndarray) -> BinaryField:
        """Create a field from an existing 0/1 array indexed [x, y]."""
        return cls(values)

    @property
    def width(self) -> int:
        """Number of cells along x."""
        return self._values.shape[0]

    @property
    def height(self) -> int:
        """Number of cells along y."""
        return self._values.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        """Return (width, height)."""
        return self._values.shape

    @property
    def seed(self) -> int | None:
        """Integer seed used for the random fill, or None."""
        return self._seed

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the cell values."""
        return self._values

    @property
    def wall_fraction(self) -> float:
        """Fraction of cells that are walls."""
        return float(self._values.mean())

    def __getitem__(self, index):
        return self._values[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BinaryField):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    def __hash__(self) -> int:
        return hash((self.shape, self._values.tobytes()))

    def __repr__(self) -> str:
        return (
            f"BinaryField(width={self.width}, height={self.height}, "
            f"wall_fraction={self.wall_fraction:.3f}, seed={self._seed})"
        )


def derive_seed(seed: str | int | None, use_random_seed: bool = False) -> int:
    """Turn a user seed into the integer that seeds the generator.

    Strings are hashed with SHA-256 so the same string gives the same field
    on every run and platform. ``use_random_seed``, ``None`` and the empty
    string fall back to the current time; that path is not reproducible.
    """
    if use_random_seed or seed is None or seed == "":
        derived = time.time_ns() & _SEED_MASK
        logger.info("Using time-derived seed %d", derived)
        return derived
    if isinstance(seed, bool) or not isinstance(seed, (str, int)):
        raise ConfigurationError(
            f"seed must be a string or integer, got {type(seed).__name__}"
        )
    if isinstance(seed, int):
        return seed & _SEED_MASK
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def random_fill(
    width: int,
    height: int,
    fill_percent: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Fill a field at random, keeping the border solid.

    Interior cells are visited x outer, y inner. Each draws one integer in
    [0, 100) and becomes a wall if the draw is below ``fill_percent``.
    Border cells consume no draw.

    Returns:
        uint8 array of shape (width, height).
    """
    values = np.ones((width, height), dtype=np.uint8)
    interior_shape = (width - 2, height - 2)
    if interior_shape[0] > 0 and interior_shape[1] > 0:
        # C order over [x, y] is x outer, y inner
        draws = rng.integers(0, 100, size=interior_shape)
        values[1:-1, 1:-1] = draws < fill_percent
    return values


def count_wall_neighbours(values: np.ndarray) -> np.ndarray:
    """Count the walls among each cell's 8 neighbours.

    Neighbours outside the grid count as walls.
    """
    return ndimage.convolve(
        np.asarray(values, dtype=np.int16),
        _NEIGHBOUR_KERNEL,
        mode="constant",
        cval=WALL,
    )


def smooth(values: np.ndarray) -> np.ndarray:
    """Apply one smoothing pass and return a new array.

    More than 4 wall neighbours makes a wall, fewer than 4 makes an empty
    cell, exactly 4 keeps the cell as it was.
    """
    values = np.asarray(values, dtype=np.uint8)
    counts = count_wall_neighbours(values)
    smoothed = values.copy()
    smoothed[counts > 4] = WALL
    smoothed[counts < 4] = EMPTY
    return smoothed


def is_stable(field: BinaryField | np.ndarray) -> bool:
    """Return True if another smoothing pass would change nothing."""
    values = field.values if isinstance(field, BinaryField) else field
    values = np.asarray(values, dtype=np.uint8)
    return np.array_equal(smooth(values), values)


def generate_field(
    width: int,
    height: int,
    fill_percent: int,
    smoothing_steps: int,
    seed: str | int | None = None,
    use_random_seed: bool = False,
) -> BinaryField:
    """Generate a smoothed binary cave field.

    Args:
        width: Number of cells along x. Must be > 1.
        height: Number of cells along y. Must be > 1.
        fill_percent: Initial wall probability (0-100) for interior cells.
        smoothing_steps: Number of smoothing passes (>= 0).
        seed: String or integer seed.
        use_random_seed: Use a time-derived seed instead of ``seed``.

    Returns:
        The generated BinaryField.

    Raises:
        ConfigurationError: If any parameter is out of range.

    Example:
        >>> field = generate_field(32, 32, fill_percent=45, smoothing_steps=5,
        ...                        seed="cave")
        >>> field.shape
        (32, 32)
    """
    width, height = validate_dimensions(width, height)
    fill_percent = validate_fill_percent(fill_percent)
    smoothing_steps = validate_smoothing_steps(smoothing_steps)

    derived = derive_seed(seed, use_random_seed)
    rng = np.random.default_rng(derived)

    values = random_fill(width, height, fill_percent, rng)
    for _ in range(smoothing_steps):
        values = smooth(values)

    field = BinaryField(values, seed=derived)
    logger.debug(
        "Generated %dx%d field (seed=%d, walls=%.3f)",
        width,
        height,
        derived,
        field.wall_fraction,
    )
    return field
