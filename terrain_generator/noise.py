# terrain_generator/noise.py

"""
================================================================================
SIMPLEX NOISE GENERATION
================================================================================
This module provides 2D simplex noise built from a skewed triangular lattice,
a 256-entry table of evenly spaced unit gradients and a shuffled permutation
table used to hash lattice corners to gradients.

Data Contract:
---------------
- Inputs:
    - perm: A 512-entry permutation table (first half shuffled 0..255,
      second half an identical copy).
    - grads: A (256, 2) table of unit gradient vectors.
    - x, y: Scalar coordinates or NumPy arrays of coordinates.
- Outputs:
    - Noise values in approximately [-1, 1].
- Side Effects: None.
- Invariants: For a fixed pair of tables the output is a pure function of
  the input coordinates, and the field is continuous everywhere.
================================================================================
"""

import logging
import math

import numpy as np
from numba import njit

from . import config as DEFAULTS
from .errors import InputValidationError

logger = logging.getLogger(__name__)

_TABLE_SIZE = DEFAULTS.GRADIENT_TABLE_SIZE
_TABLE_MASK = _TABLE_SIZE - 1
_OUTPUT_SCALE = DEFAULTS.NOISE_OUTPUT_SCALE
_CORNER_RADIUS_SQ = DEFAULTS.SIMPLEX_CORNER_RADIUS_SQ

# Skew and unskew factors for the 2D simplex lattice.
_SQRT3 = math.sqrt(3.0)
F2 = 0.5 * (_SQRT3 - 1.0)
G2 = (3.0 - _SQRT3) / 6.0


def build_gradient_table(size: int = _TABLE_SIZE) -> np.ndarray:
    """Unit vectors at angles 2*pi*i/size, shape (size, 2)."""
    angles = 2.0 * np.pi * np.arange(size) / size
    return np.column_stack((np.cos(angles), np.sin(angles)))


def build_permutation_table(seed=DEFAULTS.DEFAULT_SEED) -> np.ndarray:
    """
    Shuffles the identity permutation of 0..255 and duplicates it so that
    lookups of the form perm[a + perm[b]] never need to wrap.
    A seed of None draws fresh entropy from the OS.
    """
    p = np.arange(_TABLE_SIZE, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    return np.stack([p, p]).flatten()


def validate_permutation_table(table) -> np.ndarray:
    """
    Accepts a 256-entry permutation (duplicated here) or a full 512-entry
    table with identical halves. Returns the 512-entry int64 table.
    """
    p = np.asarray(table)
    if p.ndim != 1 or p.size not in (_TABLE_SIZE, 2 * _TABLE_SIZE):
        raise InputValidationError(
            f"Permutation table must have {_TABLE_SIZE} or {2 * _TABLE_SIZE} entries, got shape {p.shape}"
        )
    if not np.issubdtype(p.dtype, np.integer):
        raise InputValidationError(f"Permutation table must contain integers, got {p.dtype}")

    p = p.astype(np.int64)
    first_half = p[:_TABLE_SIZE]
    if p.size == 2 * _TABLE_SIZE and not np.array_equal(first_half, p[_TABLE_SIZE:]):
        raise InputValidationError("Both halves of a 512-entry permutation table must be identical.")
    if not np.array_equal(np.sort(first_half), np.arange(_TABLE_SIZE)):
        raise InputValidationError(f"Permutation table must be a permutation of 0..{_TABLE_MASK}.")

    return np.stack([first_half, first_half]).flatten()


@njit
def _corner_contribution(grads, gi, dx, dy):
    """Radially attenuated dot product of a corner gradient with its offset."""
    t = _CORNER_RADIUS_SQ - dx * dx - dy * dy
    if t <= 0.0:
        return 0.0
    t *= t
    return t * t * (grads[gi, 0] * dx + grads[gi, 1] * dy)


@njit
def simplex_noise_2d(perm, grads, x, y):
    """
    Evaluate 2D simplex noise at a single point.
    This function is JIT-compiled with Numba.
    """
    # Skew the input into lattice space to find the containing cell.
    s = (x + y) * F2
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))

    # Unskew the cell origin back and take the offset from it.
    t = (i + j) * G2
    x0 = x - (i - t)
    y0 = y - (j - t)

    # Lower or upper triangle of the cell.
    if x0 > y0:
        i1 = 1
        j1 = 0
    else:
        i1 = 0
        j1 = 1

    x1 = x0 - i1 + G2
    y1 = y0 - j1 + G2
    x2 = x0 - 1.0 + 2.0 * G2
    y2 = y0 - 1.0 + 2.0 * G2

    ii = i & _TABLE_MASK
    jj = j & _TABLE_MASK
    gi0 = perm[ii + perm[jj]] % _TABLE_SIZE
    gi1 = perm[ii + i1 + perm[jj + j1]] % _TABLE_SIZE
    gi2 = perm[ii + 1 + perm[jj + 1]] % _TABLE_SIZE

    n0 = _corner_contribution(grads, gi0, x0, y0)
    n1 = _corner_contribution(grads, gi1, x1, y1)
    n2 = _corner_contribution(grads, gi2, x2, y2)

    return _OUTPUT_SCALE * (n0 + n1 + n2)


@njit
def simplex_noise_grid(perm, grads, x, y):
    """
    Evaluate simplex noise over 2D coordinate arrays of equal shape.
    Uses explicit loops, which Numba compiles to efficient machine code.
    """
    rows, cols = x.shape
    result = np.zeros((rows, cols))

    for r in range(rows):
        for c in range(cols):
            result[r, c] = simplex_noise_2d(perm, grads, x[r, c], y[r, c])

    return result


class NoiseField:
    """
    A seamless 2D noise field. Owns its gradient and permutation tables,
    which are read-only once constructed.
    """
    def __init__(self, seed=DEFAULTS.DEFAULT_SEED, permutation_table=None):
        """
        Args:
            seed (int | None): Seed for the permutation shuffle. None gives a
                different field on every construction.
            permutation_table (array-like, optional): A pre-computed table
                (256 or 512 entries). Overrides the seed when provided.
        """
        self.seed = seed
        self._grads = build_gradient_table()

        if permutation_table is not None:
            self._perm = validate_permutation_table(permutation_table)
            logger.debug("NoiseField initialized with injected permutation table.")
        else:
            self._perm = build_permutation_table(seed)
            if seed is None:
                logger.debug("NoiseField initialized without a seed; output is not reproducible.")
            else:
                logger.debug(f"NoiseField initialized with seed {seed}.")

        self._grads.flags.writeable = False
        self._perm.flags.writeable = False

    @property
    def gradients(self) -> np.ndarray:
        return self._grads

    @property
    def permutation_table(self) -> np.ndarray:
        return self._perm

    def sample(self, x: float, y: float) -> float:
        """Noise value at (x, y), approximately in [-1, 1]."""
        return float(simplex_noise_2d(self._perm, self._grads, float(x), float(y)))

    def sample_grid(self, x_coords: np.ndarray, y_coords: np.ndarray) -> np.ndarray:
        """Noise values for every point of two equally shaped 2D coordinate arrays."""
        x = np.ascontiguousarray(x_coords, dtype=np.float64)
        y = np.ascontiguousarray(y_coords, dtype=np.float64)
        if x.shape != y.shape or x.ndim != 2:
            raise InputValidationError(
                f"Coordinate arrays must be 2D and equally shaped, got {x.shape} and {y.shape}"
            )
        return simplex_noise_grid(self._perm, self._grads, x, y)
