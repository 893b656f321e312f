"""Closed boundary loops over a vertex buffer."""

from __future__ import annotations

from typing import Iterator, Sequence

import numpy as np
from shapely.geometry import LinearRing
from shapely.geometry import Polygon as ShapelyPolygon

from cavern.exceptions import CavernError

# Outlines lie in the x-z plane of the floor
_PLANE_AXES = (0, 2)


class Outline:
    """Ordered closed loop of vertex indices.

    The first index is repeated as the last one, so a loop through ``n``
    distinct vertices holds ``n + 1`` indices and ``n`` edges.

    Args:
        indices: Vertex indices. Must hold at least two entries and end with
            the index it starts with.

    Raises:
        CavernError: If the sequence is not closed.
    """

    def __init__(self, indices: Sequence[int]):
        self._indices = tuple(int(i) for i in indices)
        if len(self._indices) < 2:
            raise CavernError("Outline needs at least two indices")
        if self._indices[0] != self._indices[-1]:
            raise CavernError(
                f"Outline is not closed: starts at {self._indices[0]}, "
                f"ends at {self._indices[-1]}"
            )

    @classmethod
    def from_open(cls, indices: Sequence[int]) -> Outline:
        """Create an outline from an open chain by repeating its first index."""
        indices = list(indices)
        return cls(indices + indices[:1])

    @property
    def indices(self) -> tuple[int, ...]:
        """Vertex indices including the closing duplicate."""
        return self._indices

    @property
    def is_closed(self) -> bool:
        """Return True if the first index equals the last."""
        return self._indices[0] == self._indices[-1]

    @property
    def n_edges(self) -> int:
        """Number of edges in the loop."""
        return len(self._indices) - 1

    def edges(self) -> Iterator[tuple[int, int]]:
        """Iterate over consecutive (start, end) index pairs."""
        return zip(self._indices[:-1], self._indices[1:])

    def coords(self, vertices: np.ndarray) -> np.ndarray:
        """Return the loop as (n + 1, 2) points in the floor plane."""
        return np.asarray(vertices)[list(self._indices)][:, _PLANE_AXES]

    def to_shapely(self, vertices: np.ndarray) -> LinearRing:
        """Return the loop as a shapely LinearRing.

        Raises:
            CavernError: If the loop has fewer than three edges.
        """
        if self.n_edges < 3:
            raise CavernError(
                f"Outline with {self.n_edges} edges has no ring geometry"
            )
        return LinearRing(self.coords(vertices))

    def area(self, vertices: np.ndarray) -> float:
        """Return the area enclosed by the loop, 0 for degenerate loops."""
        if self.n_edges < 3:
            return 0.0
        return float(ShapelyPolygon(self.coords(vertices)).area)

    def is_ccw(self, vertices: np.ndarray) -> bool:
        """Return True if the loop runs counter-clockwise in (x, z)."""
        return bool(self.to_shapely(vertices).is_ccw)

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self) -> Iterator[int]:
        return iter(self._indices)

    def __getitem__(self, index):
        return self._indices[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Outline):
            return self._indices == other._indices
        if isinstance(other, (list, tuple)):
            return self._indices == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._indices)

    def __repr__(self) -> str:
        return f"Outline(n_edges={self.n_edges}, start={self._indices[0]})"
