import numpy as np
import pytest

from cavern.field import BinaryField, generate_field
from cavern.mesh import SquareGrid, triangulate


def field_with_interior(interior):
    """Return a walled field around the given interior block (indexed [x, y])."""
    interior = np.asarray(interior, dtype=np.uint8)
    values = np.ones((interior.shape[0] + 2, interior.shape[1] + 2), dtype=np.uint8)
    values[1:-1, 1:-1] = interior
    return BinaryField(values)


@pytest.fixture
def ring_field():
    """5x5 field: solid border around an empty 3x3 room."""
    return generate_field(5, 5, fill_percent=0, smoothing_steps=0, seed="ring")


@pytest.fixture
def solid_field():
    return generate_field(4, 4, fill_percent=100, smoothing_steps=0, seed="solid")


@pytest.fixture
def cave_field():
    return generate_field(40, 30, fill_percent=47, smoothing_steps=5, seed="cave")


@pytest.fixture
def ring_triangulation(ring_field):
    return triangulate(SquareGrid(ring_field, 1.0))
