"""Readers for binary field files."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from cavern.exceptions import CavernError, DataLoadError
from cavern.field.automaton import BinaryField


class FieldReader:
    """Reader for text files holding a 0/1 grid.

    Expected format: one line per row of the field, the first line being
    y = 0, with one value per column (x). Values are separated by
    ``delimiter``; whitespace is used when it is None.

    Args:
        delimiter: Column delimiter. Default: None (any whitespace).
        comments: Prefix of comment lines. Default: '#'.
    """

    def __init__(self, delimiter: str | None = None, comments: str = "#"):
        self.delimiter = delimiter
        self.comments = comments

    def read(self, path: str | Path) -> BinaryField:
        """Read a binary field from file.

        Args:
            path: Path to the text file.

        Returns:
            BinaryField indexed [x, y].

        Raises:
            DataLoadError: If the file cannot be read or is not a valid field.
        """
        path = Path(path)

        if not path.exists():
            raise DataLoadError(f"File not found: {path}")

        delimiter = self.delimiter
        if delimiter is None and path.suffix.lower() == ".csv":
            delimiter = ","

        try:
            rows = np.loadtxt(
                path,
                delimiter=delimiter,
                comments=self.comments,
                dtype=np.int64,
                ndmin=2,
            )
        except Exception as e:
            raise DataLoadError(f"Failed to read field file {path}: {e}") from e

        try:
            # Rows are y, columns are x
            return BinaryField(rows.T)
        except CavernError as e:
            raise DataLoadError(f"Invalid field in {path}: {e}") from e


def read_field(path: str | Path, delimiter: str | None = None) -> BinaryField:
    """Convenience function to read a binary field from a text file.

    Args:
        path: Path to the file.
        delimiter: Column delimiter. None means whitespace, or a comma for
            files ending in ``.csv``.

    Returns:
        BinaryField indexed [x, y].
    """
    reader = FieldReader(delimiter=delimiter)
    return reader.read(path)
