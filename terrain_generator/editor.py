# terrain_generator/editor.py

"""
================================================================================
TERRAIN EDITOR
================================================================================
Localized radial edits over a HeightGrid: elevate, depress and flatten.

Data Contract:
---------------
- Inputs: EditCommand values (or the equivalent keyword arguments).
- Outputs: The number of cells changed by each edit.
- Side Effects: Mutates the HeightGrid in place and bumps its revision.
- Invariants: Commands are fully validated before the grid is touched, so a
  rejected command leaves the grid unchanged. Only cells inside the grid and
  within `radius` of the centre are modified. Mutation is serialized by a
  lock owned by the editor.
================================================================================
"""

import enum
import logging
import math
import numbers
import threading
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from .errors import InputValidationError
from .heightmap import HeightGrid

logger = logging.getLogger(__name__)


class EditKind(enum.Enum):
    ELEVATE = "elevate"
    DEPRESS = "depress"
    FLATTEN = "flatten"


@dataclass(frozen=True)
class EditCommand:
    """A single edit request. Strength is ignored for FLATTEN."""
    kind: EditKind
    center_x: int
    center_z: int
    radius: float
    strength: float = 1.0


class TerrainEditor:
    """Applies radial edits to a HeightGrid, one writer at a time."""

    def __init__(self, grid: HeightGrid, edit_step: float = DEFAULTS.EDIT_STEP):
        self.grid = grid
        self.edit_step = edit_step
        self._lock = threading.Lock()

    # --- Public API ---
    def elevate(self, cx: int, cz: int, radius: float, strength: float) -> int:
        return self.apply(EditCommand(EditKind.ELEVATE, cx, cz, radius, strength))

    def depress(self, cx: int, cz: int, radius: float, strength: float) -> int:
        return self.apply(EditCommand(EditKind.DEPRESS, cx, cz, radius, strength))

    def flatten(self, cx: int, cz: int, radius: float) -> int:
        return self.apply(EditCommand(EditKind.FLATTEN, cx, cz, radius))

    def apply(self, command: EditCommand) -> int:
        """Validates and applies a command. Returns the number of cells touched."""
        self.validate(command)

        with self._lock:
            if command.kind is EditKind.FLATTEN:
                touched = self._level(command.center_x, command.center_z, command.radius)
            else:
                amount = self.edit_step * command.strength
                if command.kind is EditKind.DEPRESS:
                    amount = -amount
                touched = self._adjust(command.center_x, command.center_z, command.radius, amount)
            self.grid.mark_modified()

        logger.debug(
            f"{command.kind.value} at ({command.center_x}, {command.center_z}) "
            f"radius {command.radius}: {touched} cells affected."
        )
        return touched

    def validate(self, command: EditCommand):
        if not isinstance(command.kind, EditKind):
            raise InputValidationError(f"Unknown edit kind: {command.kind!r}")

        radius = command.radius
        if isinstance(radius, bool) or not isinstance(radius, numbers.Real) or not math.isfinite(radius):
            raise InputValidationError(f"Radius must be a finite number, got {radius!r}")
        if radius <= 0:
            raise InputValidationError(f"Radius must be greater than zero, got {radius}")

        if command.kind is not EditKind.FLATTEN:
            strength = command.strength
            if isinstance(strength, bool) or not isinstance(strength, numbers.Real) or not math.isfinite(strength):
                raise InputValidationError(f"Strength must be a finite number, got {strength!r}")

        self.grid.require_in_bounds(command.center_x, command.center_z)

    def snapshot(self) -> np.ndarray:
        """A copy of the heights taken while no edit is in progress."""
        with self._lock:
            return np.array(self.grid.heights)

    # --- Internal helpers ---
    def _distances(self, cx: int, cz: int, x_slice: slice, z_slice: slice) -> np.ndarray:
        """Euclidean distance from (cx, cz) for every cell of the window."""
        dx = np.arange(x_slice.start, x_slice.stop) - cx
        dz = np.arange(z_slice.start, z_slice.stop) - cz
        dxv, dzv = np.meshgrid(dx, dz, indexing='ij')
        return np.sqrt(dxv**2 + dzv**2)

    def _adjust(self, cx: int, cz: int, radius: float, amount: float) -> int:
        x_slice, z_slice = self.grid.window(cx, cz, radius)
        distance = self._distances(cx, cz, x_slice, z_slice)
        in_range = distance <= radius

        # Linear falloff: full amount at the centre, zero at the radius.
        falloff = 1.0 - distance[in_range] / radius
        region = self.grid.mutable_region(x_slice, z_slice)
        region[in_range] += amount * falloff
        return int(np.count_nonzero(in_range))

    def _level(self, cx: int, cz: int, radius: float) -> int:
        # Read the target before anything is written.
        target_height = self.grid.height_at(cx, cz)

        x_slice, z_slice = self.grid.window(cx, cz, radius)
        in_range = self._distances(cx, cz, x_slice, z_slice) <= radius
        region = self.grid.mutable_region(x_slice, z_slice)
        region[in_range] = target_height
        return int(np.count_nonzero(in_range))
