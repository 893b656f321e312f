import hashlib

import numpy as np
import pytest

from cavern import ConfigurationError
from cavern.field import (
    BinaryField,
    count_wall_neighbours,
    derive_seed,
    generate_field,
    is_stable,
    random_fill,
    smooth,
)
from cavern.field import automaton


def test_same_seed_gives_identical_fields():
    a = generate_field(48, 32, fill_percent=45, smoothing_steps=4, seed="granite")
    b = generate_field(48, 32, fill_percent=45, smoothing_steps=4, seed="granite")
    assert a == b
    assert a.seed == b.seed


def test_different_seeds_give_different_fields():
    a = generate_field(48, 32, fill_percent=45, smoothing_steps=4, seed="granite")
    b = generate_field(48, 32, fill_percent=45, smoothing_steps=4, seed="basalt")
    assert a != b


@pytest.mark.parametrize("seed", ["a", "b", 0, 12345, "long seed string"])
@pytest.mark.parametrize("steps", [0, 1, 5])
def test_border_is_always_wall(seed, steps):
    field = generate_field(23, 17, fill_percent=40, smoothing_steps=steps, seed=seed)
    values = field.values
    assert (values[0, :] == 1).all()
    assert (values[-1, :] == 1).all()
    assert (values[:, 0] == 1).all()
    assert (values[:, -1] == 1).all()


def test_zero_fill_leaves_interior_empty(ring_field):
    values = ring_field.values
    assert ring_field.shape == (5, 5)
    assert (values[1:-1, 1:-1] == 0).all()
    assert ring_field[2, 2] == 0


def test_full_fill_is_all_walls():
    field = generate_field(9, 6, fill_percent=100, smoothing_steps=3, seed="any")
    assert (field.values == 1).all()


def test_string_seed_is_hashed_with_sha256():
    expected = int.from_bytes(hashlib.sha256(b"cave").digest()[:8], "big")
    assert derive_seed("cave") == expected


def test_integer_seed_is_used_directly():
    assert derive_seed(42) == 42


def test_empty_seed_falls_back_to_time(monkeypatch):
    monkeypatch.setattr(automaton.time, "time_ns", lambda: 987654321)
    assert derive_seed("") == 987654321
    assert derive_seed(None) == 987654321
    assert derive_seed("cave", use_random_seed=True) == 987654321


def test_random_seed_field_is_valid():
    field = generate_field(12, 12, 45, 2, use_random_seed=True)
    assert isinstance(field.seed, int)
    assert (field.values[0, :] == 1).all()


def test_random_fill_draws_interior_x_outer_y_inner():
    values = random_fill(5, 4, 50, np.random.default_rng(7))
    draws = np.random.default_rng(7).integers(0, 100, size=(3, 2))
    assert np.array_equal(values[1:-1, 1:-1], (draws < 50).astype(np.uint8))


def test_count_wall_neighbours_counts_outside_as_wall():
    values = np.ones((3, 3), dtype=np.uint8)
    values[1, 1] = 0
    counts = count_wall_neighbours(values)
    assert counts[1, 1] == 8
    assert counts[0, 0] == 7
    assert counts[1, 0] == 7


@pytest.mark.parametrize("centre", [0, 1])
def test_smooth_keeps_cells_with_exactly_four_wall_neighbours(centre):
    values = np.zeros((5, 5), dtype=np.uint8)
    values[1, 1] = values[1, 2] = values[1, 3] = values[2, 1] = 1
    values[2, 2] = centre
    assert count_wall_neighbours(values)[2, 2] == 4
    assert smooth(values)[2, 2] == centre


def test_smooth_majority_rule():
    values = np.zeros((5, 5), dtype=np.uint8)
    values[1:4, 1] = 1
    values[1, 2] = values[1, 3] = 1
    # (2, 2) sees five walls, (3, 3) sees none in bounds
    smoothed = smooth(values)
    assert smoothed[2, 2] == 1
    assert smoothed[3, 3] == 0


def test_smooth_does_not_modify_input():
    values = np.ones((4, 4), dtype=np.uint8)
    values[1, 1] = 0
    before = values.copy()
    smooth(values)
    assert np.array_equal(values, before)


def test_smoothing_is_idempotent_at_a_fixed_point():
    solid = np.ones((6, 6), dtype=np.uint8)
    assert is_stable(solid)
    assert np.array_equal(smooth(solid), solid)

    holed = solid[:3, :3].copy()
    holed[1, 1] = 0
    assert not is_stable(holed)
    once = smooth(holed)
    assert is_stable(once)
    assert np.array_equal(smooth(once), once)


def test_binary_field_is_read_only(ring_field):
    with pytest.raises(ValueError):
        ring_field.values[2, 2] = 1


@pytest.mark.parametrize(
    "values",
    [
        np.ones((1, 5)),
        np.ones((5,)),
        np.full((4, 4), 2),
        np.pad(np.zeros((2, 2)), 1, constant_values=1).T * 0,
    ],
)
def test_binary_field_rejects_invalid_arrays(values):
    with pytest.raises(ConfigurationError):
        BinaryField(values)


def test_binary_field_rejects_open_border():
    values = np.ones((4, 4), dtype=np.uint8)
    values[0, 2] = 0
    with pytest.raises(ConfigurationError, match="border"):
        BinaryField.from_array(values)


@pytest.mark.parametrize(
    "args",
    [(1, 5, 45, 0), (5, 1, 45, 0), (5, 5, -1, 0), (5, 5, 101, 0), (5, 5, 45, -1)],
)
def test_generate_field_validates_before_allocating(args):
    with pytest.raises(ConfigurationError):
        generate_field(*args, seed="x")
