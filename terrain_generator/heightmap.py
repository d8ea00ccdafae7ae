# terrain_generator/heightmap.py

"""
================================================================================
HEIGHT GRID
================================================================================
A fixed-size square grid of terrain heights, indexed [x, z].

Data Contract:
---------------
- Inputs (generate): a NoiseField, the grid size, the noise scale and the
  roughness (amplitude) multiplier.
- Outputs: an N x N float64 array of heights.
- Side Effects: Edits mutate the grid in place; each mutation bumps
  `revision` so that derived data (normals) can be invalidated.
- Invariants: The shape never changes after construction. No accessor reads
  or writes outside [0, N-1] on either axis.
================================================================================
"""

import logging
import math
import numbers

import numpy as np

from .errors import InputValidationError
from .noise import NoiseField

logger = logging.getLogger(__name__)


class HeightGrid:
    """Square height field plus bounds helpers used by the editor and exporter."""

    def __init__(self, heights: np.ndarray):
        heights = np.array(heights, dtype=np.float64)
        if heights.ndim != 2 or heights.shape[0] != heights.shape[1] or heights.shape[0] < 1:
            raise InputValidationError(f"Height grid must be a non-empty square 2D array, got shape {heights.shape}")
        self._heights = heights
        self.revision = 0

    @classmethod
    def generate(cls, noise_field: NoiseField, size: int, scale: float, roughness: float) -> "HeightGrid":
        """
        Samples one layer of noise per cell. Cell (x, z) maps to the
        normalized coordinate (x/size - 0.5, z/size - 0.5), is scaled by
        `scale` and the noise value is multiplied by `roughness`.
        """
        if isinstance(size, bool) or not isinstance(size, numbers.Integral) or size < 1:
            raise InputValidationError(f"Grid size must be a positive integer, got {size!r}")

        # Normalized coordinates, centred on the origin.
        coords = np.arange(size) / size - 0.5
        nx, nz = np.meshgrid(coords, coords, indexing='ij')

        heights = noise_field.sample_grid(nx * scale, nz * scale) * roughness
        grid = cls(heights)
        logger.debug(f"Generated {size}x{size} height grid (scale={scale}, roughness={roughness}).")
        return grid

    @property
    def size(self) -> int:
        return self._heights.shape[0]

    @property
    def heights(self) -> np.ndarray:
        """A read-only view of the current heights."""
        view = self._heights.view()
        view.flags.writeable = False
        return view

    def height_at(self, x: int, z: int) -> float:
        self.require_in_bounds(x, z)
        return float(self._heights[x, z])

    def contains(self, x, z) -> bool:
        return 0 <= x < self.size and 0 <= z < self.size

    def require_in_bounds(self, x, z):
        """Raises InputValidationError unless (x, z) is an integer cell inside the grid."""
        for name, value in (("x", x), ("z", z)):
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InputValidationError(f"Coordinate {name} must be an integer, got {value!r}")
        if not self.contains(x, z):
            raise InputValidationError(
                f"Coordinate ({x}, {z}) is out of bounds for a {self.size}x{self.size} grid "
                f"(valid range 0-{self.size - 1})"
            )

    def window(self, cx: int, cz: int, reach: float) -> tuple[slice, slice]:
        """
        Index box around (cx, cz) covering every cell within `reach`,
        clamped to the grid. Cells outside the grid are silently dropped.

        The box is [c - r, c + r] inclusive on both sides, not the half-open
        [c - r, c + r) box, so the cells at exactly +r (e.g. (cx + r, cz))
        are edited too and flatten levels the whole disk.
        """
        r = int(math.ceil(reach))
        x_slice = slice(max(0, cx - r), min(self.size, cx + r + 1))
        z_slice = slice(max(0, cz - r), min(self.size, cz + r + 1))
        return x_slice, z_slice

    def mutable_region(self, x_slice: slice, z_slice: slice) -> np.ndarray:
        """Writable view of a sub-box. Callers must call mark_modified() afterwards."""
        return self._heights[x_slice, z_slice]

    def mark_modified(self):
        self.revision += 1

    def statistics(self) -> dict:
        return {
            'min': float(self._heights.min()),
            'max': float(self._heights.max()),
            'mean': float(self._heights.mean()),
        }
