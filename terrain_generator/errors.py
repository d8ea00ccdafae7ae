# terrain_generator/errors.py

"""Exception types raised by the terrain generator."""


class TerrainError(Exception):
    """Base class for all terrain generator errors."""


class InputValidationError(TerrainError, ValueError):
    """
    A single request was rejected before it touched any state: out-of-range
    coordinates, a non-positive radius, an unknown action or a malformed table.
    """


class ExportError(TerrainError, OSError):
    """Writing an export file failed. The in-memory terrain is unaffected."""
