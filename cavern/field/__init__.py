"""Binary field generation."""

from cavern.field.automaton import (
    EMPTY,
    WALL,
    BinaryField,
    count_wall_neighbours,
    derive_seed,
    generate_field,
    is_stable,
    random_fill,
    smooth,
)

__all__ = [
    "EMPTY",
    "WALL",
    "BinaryField",
    "count_wall_neighbours",
    "derive_seed",
    "generate_field",
    "is_stable",
    "random_fill",
    "smooth",
]
