"""Square grid with shared corner and edge-midpoint nodes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from cavern.config import validate_cell_size
from cavern.field.automaton import WALL, BinaryField


class NodeKind(enum.IntEnum):
    """Kind of node stored in the grid arena."""

    CORNER = 0
    ABOVE = 1
    RIGHT = 2


CONFIGURATION_WEIGHTS = {
    "top_left": 8,
    "top_right": 4,
    "bottom_right": 2,
    "bottom_left": 1,
}


def configuration_index(
    top_left: bool,
    top_right: bool,
    bottom_right: bool,
    bottom_left: bool,
) -> int:
    """Return the 4-bit marching-squares index for one cell."""
    return (
        CONFIGURATION_WEIGHTS["top_left"] * bool(top_left)
        + CONFIGURATION_WEIGHTS["top_right"] * bool(top_right)
        + CONFIGURATION_WEIGHTS["bottom_right"] * bool(bottom_right)
        + CONFIGURATION_WEIGHTS["bottom_left"] * bool(bottom_left)
    )


@dataclass(frozen=True)
class Square:
    """One grid cell: four corner nodes and the four edge midpoints.

    All node fields are ids into the owning grid's arena, so two squares
    that share an edge hold the same midpoint id.
    """

    x: int
    y: int
    top_left: int
    top_right: int
    bottom_right: int
    bottom_left: int
    top: int
    right: int
    bottom: int
    left: int
    configuration_index: int

    @property
    def corners(self) -> tuple[int, int, int, int]:
        """Corner node ids (top-left, top-right, bottom-right, bottom-left)."""
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    @property
    def midpoints(self) -> tuple[int, int, int, int]:
        """Midpoint node ids (top, right, bottom, left)."""
        return (self.top, self.right, self.bottom, self.left)


class SquareGrid:
    """Corner nodes, shared midpoint nodes and squares for a binary field.

    Nodes are kept in a flat arena: the id of a node is
    ``kind * width * height + x * height + y``. Each corner owns an ABOVE
    midpoint (half a cell along +z) and a RIGHT midpoint (half a cell along
    +x). The square to the right of a corner reads the same RIGHT node the
    square above reads as its bottom edge, which is what makes the final
    mesh free of duplicate seam vertices.

    The grid is centred on the origin in the x-z plane, with +y up.

    Args:
        field: Binary field; walls become active corners.
        cell_size: Edge length of one cell. Must be positive.

    Raises:
        ConfigurationError: If cell_size is not positive.
    """

    def __init__(self, field: BinaryField, cell_size: float):
        self._cell_size = validate_cell_size(cell_size)
        self._field = field
        self._width, self._height = field.shape

        self._active = field.values == WALL
        self._active.flags.writeable = False

        self._positions = self._build_positions()
        self._positions.flags.writeable = False

        self._configuration_indices = self._build_configuration_indices()
        self._configuration_indices.flags.writeable = False

    def _build_positions(self) -> np.ndarray:
        w, h, s = self._width, self._height, self._cell_size
        xs = -w * s / 2 + np.arange(w) * s + s / 2
        zs = -h * s / 2 + np.arange(h) * s + s / 2

        corners = np.zeros((w, h, 3), dtype=np.float64)
        corners[:, :, 0] = xs[:, np.newaxis]
        corners[:, :, 2] = zs[np.newaxis, :]
        corners = corners.reshape(-1, 3)

        above = corners + np.array([0.0, 0.0, s / 2])
        right = corners + np.array([s / 2, 0.0, 0.0])
        return np.concatenate([corners, above, right])

    def _build_configuration_indices(self) -> np.ndarray:
        a = self._active.astype(np.int8)
        top_left = a[:-1, 1:]
        top_right = a[1:, 1:]
        bottom_right = a[1:, :-1]
        bottom_left = a[:-1, :-1]
        return (
            CONFIGURATION_WEIGHTS["top_left"] * top_left
            + CONFIGURATION_WEIGHTS["top_right"] * top_right
            + CONFIGURATION_WEIGHTS["bottom_right"] * bottom_right
            + CONFIGURATION_WEIGHTS["bottom_left"] * bottom_left
        ).astype(np.int8)

    @property
    def field(self) -> BinaryField:
        """Field the grid was built from."""
        return self._field

    @property
    def cell_size(self) -> float:
        """Edge length of one cell."""
        return self._cell_size

    @property
    def node_shape(self) -> tuple[int, int]:
        """Number of corner nodes along x and z."""
        return (self._width, self._height)

    @property
    def shape(self) -> tuple[int, int]:
        """Number of squares along x and z."""
        return (self._width - 1, self._height - 1)

    @property
    def node_count(self) -> int:
        """Total number of nodes in the arena."""
        return len(self._positions)

    @property
    def positions(self) -> np.ndarray:
        """Node positions, shape (node_count, 3)."""
        return self._positions

    @property
    def active(self) -> np.ndarray:
        """Corner active flags, shape (width, height)."""
        return self._active

    @property
    def configuration_indices(self) -> np.ndarray:
        """Configuration index per square, shape (width - 1, height - 1)."""
        return self._configuration_indices

    def node_id(self, kind: NodeKind, x: int, y: int) -> int:
        """Return the arena id of a node."""
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Node ({x}, {y}) is outside the grid")
        return int(kind) * self._width * self._height + x * self._height + y

    def position(self, node_id: int) -> np.ndarray:
        """Return the position of a node."""
        return self._positions[node_id]

    def square(self, x: int, y: int) -> Square:
        """Return the square whose bottom-left corner is node (x, y)."""
        n_x, n_y = self.shape
        if not (0 <= x < n_x and 0 <= y < n_y):
            raise IndexError(f"Square ({x}, {y}) is outside the grid")

        bottom_left = self.node_id(NodeKind.CORNER, x, y)
        bottom_right = self.node_id(NodeKind.CORNER, x + 1, y)
        top_left = self.node_id(NodeKind.CORNER, x, y + 1)
        top_right = self.node_id(NodeKind.CORNER, x + 1, y + 1)

        return Square(
            x=x,
            y=y,
            top_left=top_left,
            top_right=top_right,
            bottom_right=bottom_right,
            bottom_left=bottom_left,
            top=self.node_id(NodeKind.RIGHT, x, y + 1),
            right=self.node_id(NodeKind.ABOVE, x + 1, y),
            bottom=self.node_id(NodeKind.RIGHT, x, y),
            left=self.node_id(NodeKind.ABOVE, x, y),
            configuration_index=int(self._configuration_indices[x, y]),
        )

    def squares(self) -> Iterator[Square]:
        """Iterate over all squares, x outer and y inner."""
        n_x, n_y = self.shape
        for x in range(n_x):
            for y in range(n_y):
                yield self.square(x, y)

    def __repr__(self) -> str:
        n_x, n_y = self.shape
        return (
            f"SquareGrid(squares={n_x}x{n_y}, nodes={self.node_count}, "
            f"cell_size={self._cell_size})"
        )


def build_grid(field: BinaryField, cell_size: float) -> SquareGrid:
    """Convenience function to build a SquareGrid.

    Args:
        field: Binary field to contour.
        cell_size: Edge length of one cell.

    Returns:
        The constructed grid.
    """
    return SquareGrid(field, cell_size)
