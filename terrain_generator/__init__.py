"""Procedural terrain generation, radial editing and OBJ mesh export."""

from .editor import EditCommand, EditKind, TerrainEditor
from .errors import ExportError, InputValidationError, TerrainError
from .generator import TerrainGenerator
from .heightmap import HeightGrid
from .noise import NoiseField

__version__ = "0.1.0"
__all__ = [
    "EditCommand",
    "EditKind",
    "ExportError",
    "HeightGrid",
    "InputValidationError",
    "NoiseField",
    "TerrainEditor",
    "TerrainError",
    "TerrainGenerator",
]
