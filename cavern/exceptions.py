"""Custom exceptions for the cavern package."""


class CavernError(Exception):
    """Base exception for cavern package."""

    pass


class ConfigurationError(CavernError, ValueError):
    """Invalid generation parameters."""

    pass


class TriangulationError(CavernError):
    """Internal invariant of the triangulation was violated.

    Raised for configuration indices outside [0, 15] or vertex indices missing
    from the adjacency index. Either one means a construction bug, so callers
    should not try to recover from it.
    """

    pass


class MeshGenerationError(CavernError):
    """Mesh generation failed."""

    pass


class DataLoadError(CavernError):
    """Failed to load data from file."""

    pass


class ExportError(CavernError):
    """Failed to write mesh data to file."""

    pass
